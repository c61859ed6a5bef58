"""
Alpha-beta pruned minimax.

Same recursion as ``minimax``, with two bounds threaded through every call:

- alpha: the best value the maximizer can already guarantee
- beta:  the best value the minimizer can already guarantee

A max node stops scanning its actions as soon as its running value reaches
beta, and a min node as soon as its value drops to alpha. Pruning only skips
work; with the same action order it picks the same move as plain minimax.
"""

import logging
import math
from typing import Optional, Tuple, TypeVar

from .game import Game

logger = logging.getLogger(__name__)

S = TypeVar('S')
A = TypeVar('A')
P = TypeVar('P')


def alpha_beta_search(game: Game[S, A, P], state: S, depth: int) -> Optional[A]:
    """
    Return the alpha-beta action for the side to move in ``state``.

    Args:
        game: Game providing actions, results and utilities.
        state: Root state. Not modified.
        depth: Number of plies to look ahead.

    Returns:
        The best action, or None if ``state`` is terminal or ``depth`` is 0.
    """
    player = game.to_move(state)
    value, move = _max_value(game, state, -math.inf, math.inf, depth, player)
    logger.debug(f"Alpha-beta depth {depth}: value={value:.3f}, move={move}")
    return move


def _max_value(game: Game[S, A, P], state: S, alpha: float, beta: float, depth: int,
               player: P) -> Tuple[float, Optional[A]]:
    if depth <= 0 or game.is_terminal(state):
        return game.utility(state, player), None

    value, move = -math.inf, None
    for action in game.actions(state):
        child_value, _ = _min_value(game, game.result(state, action), alpha, beta, depth - 1, player)
        if child_value > value:
            value, move = child_value, action
            alpha = max(alpha, value)
        if value >= beta:
            return value, move
    return value, move


def _min_value(game: Game[S, A, P], state: S, alpha: float, beta: float, depth: int,
               player: P) -> Tuple[float, Optional[A]]:
    if depth <= 0 or game.is_terminal(state):
        return game.utility(state, player), None

    value, move = math.inf, None
    for action in game.actions(state):
        child_value, _ = _max_value(game, game.result(state, action), alpha, beta, depth - 1, player)
        if child_value < value:
            value, move = child_value, action
            beta = min(beta, value)
        if value <= alpha:
            return value, move
    return value, move
