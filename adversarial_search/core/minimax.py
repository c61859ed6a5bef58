"""
Depth-limited minimax search.

The searching player maximizes, the opponent minimizes, and every leaf
(depth exhausted or terminal state) is scored with the game's utility from
the perspective of the player to move at the root. Actions are tried in the
order the game returns them and only a strictly better value replaces the
current best, so ties always go to the earlier action.

The remaining depth is passed down as an argument; no counter is shared
between calls.
"""

import logging
import math
from typing import Optional, Tuple, TypeVar

from .game import Game

logger = logging.getLogger(__name__)

S = TypeVar('S')
A = TypeVar('A')
P = TypeVar('P')


def minimax_search(game: Game[S, A, P], state: S, depth: int) -> Optional[A]:
    """
    Return the minimax action for the side to move in ``state``.

    Args:
        game: Game providing actions, results and utilities.
        state: Root state. Not modified.
        depth: Number of plies to look ahead.

    Returns:
        The best action, or None if ``state`` is terminal or ``depth`` is 0.
    """
    player = game.to_move(state)
    value, move = _max_value(game, state, depth, player)
    logger.debug(f"Minimax depth {depth}: value={value:.3f}, move={move}")
    return move


def _max_value(game: Game[S, A, P], state: S, depth: int, player: P) -> Tuple[float, Optional[A]]:
    if depth <= 0 or game.is_terminal(state):
        return game.utility(state, player), None

    value, move = -math.inf, None
    for action in game.actions(state):
        child_value, _ = _min_value(game, game.result(state, action), depth - 1, player)
        if child_value > value:
            value, move = child_value, action
    return value, move


def _min_value(game: Game[S, A, P], state: S, depth: int, player: P) -> Tuple[float, Optional[A]]:
    if depth <= 0 or game.is_terminal(state):
        return game.utility(state, player), None

    value, move = math.inf, None
    for action in game.actions(state):
        child_value, _ = _max_value(game, game.result(state, action), depth - 1, player)
        if child_value < value:
            value, move = child_value, action
    return value, move
