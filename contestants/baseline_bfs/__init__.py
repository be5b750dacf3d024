"""
Baseline BFS Agent Package

A planning agent that walks the shortest open path to the target
using the cells observation. Serves as a benchmark and example.
"""

from .agent import GridAgent, create_agent

__all__ = ["GridAgent", "create_agent"]
