"""
Core Game Search Components

This module contains the building blocks of the engine:
- The abstract two-player game interface
- The chess rules engine and its evaluation function
- Minimax, alpha-beta and Monte Carlo Tree Search
- A headless match driver
"""

from .game import Game
from .chess_board import ChessAction, ChessPiece, ChessPlayer, ChessState, PieceType, PlayerColor, Position
from .chess_game import ChessGame
from .evaluation import evaluate
from .minimax import minimax_search
from .alpha_beta import alpha_beta_search
from .mcts import MCTS, MCTSNode, MCTSStats
from .match import MatchResult, Strategy, create_strategy, play_match

__all__ = [
    # Game interface
    'Game',

    # Chess rules engine
    'ChessAction',
    'ChessGame',
    'ChessPiece',
    'ChessPlayer',
    'ChessState',
    'PieceType',
    'PlayerColor',
    'Position',
    'evaluate',

    # Search
    'minimax_search',
    'alpha_beta_search',
    'MCTS',
    'MCTSNode',
    'MCTSStats',

    # Matches
    'MatchResult',
    'Strategy',
    'create_strategy',
    'play_match'
]
