"""
connectn - Rules engine for configurable connect-N games

This package implements the game state, gravity placement, win detection,
turn control and animated piece drops of a generalized Connect Four with
any board size and winning run length, plus a terminal interface and a
Gymnasium environment on top of it.
"""

# Version number
__version__ = '0.1.0'
