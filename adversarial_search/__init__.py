"""
Adversarial Game Search

Minimax, alpha-beta and Monte Carlo Tree Search over a generic two-player
game interface, with a simplified chess engine as the concrete game.
"""

__version__ = "1.0.0"

# Core modules
from . import core
from . import config
from . import data

__all__ = [
    'core',
    'config',
    'data'
]
