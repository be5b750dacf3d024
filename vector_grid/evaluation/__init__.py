"""
Evaluation Package
==================

Seed bank and harness for scoring automated agents by the level they reach.
"""

from vector_grid.evaluation.run_eval import evaluate_agent, load_agent, load_seed_bank

__all__ = ["evaluate_agent", "load_agent", "load_seed_bank"]
