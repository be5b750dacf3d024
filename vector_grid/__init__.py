"""
Vector Grid
===========

Core logic for a procedurally generated grid-navigation puzzle: a token
must reach a target cell before a shrinking time budget runs out.

- grid_core: level generation, difficulty curve, move resolution,
  session clock and the Gymnasium wrapper
- evaluation: seed-bank harness for automated agents

All tunable parameters are in game_config.yaml.
"""
