"""
Headless matches between search strategies.

A strategy is anything that maps ``(game, state)`` to an action or None.
``create_strategy`` builds the four named ones from a SearchConfig, and
``play_match`` alternates two strategies from an optional opening line
until the game ends or a ply limit is reached.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from ..config.search_config import SearchConfig
from .alpha_beta import alpha_beta_search
from .chess_board import ChessAction, ChessState, PlayerColor, Position
from .chess_game import ChessGame
from .mcts import MCTS
from .minimax import minimax_search

logger = logging.getLogger(__name__)

STRATEGY_NAMES = ['minimax', 'alphabeta', 'mcts', 'random']


@dataclass
class Strategy:
    """A named move chooser."""
    name: str
    choose: Callable[[ChessGame, ChessState], Optional[ChessAction]]
    mcts: Optional[MCTS] = None


@dataclass
class MatchResult:
    """Outcome of one match."""
    final_state: ChessState
    moves: List[ChessAction] = field(default_factory=list)
    winner: Optional[PlayerColor] = None
    reason: str = ''


def create_strategy(name: str, config: SearchConfig, rng: Optional[random.Random] = None) -> Strategy:
    """
    Build a named strategy.

    Args:
        name: One of ``STRATEGY_NAMES``
        config: Search settings (depth, MCTS budget)
        rng: Random source for the mcts and random strategies

    Raises:
        ValueError: if ``name`` is unknown
    """
    rng = rng if rng is not None else random.Random()

    if name == 'minimax':
        return Strategy(name, lambda game, state: minimax_search(game, state, config.minimax_depth))
    if name == 'alphabeta':
        return Strategy(name, lambda game, state: alpha_beta_search(game, state, config.minimax_depth))
    if name == 'mcts':
        mcts = MCTS(
            time_limit=config.mcts_time_limit,
            max_children=config.mcts_max_children,
            workers=config.mcts_workers,
            rng=rng
        )
        return Strategy(name, mcts.get_best_action, mcts)
    if name == 'random':
        def choose_random(game: ChessGame, state: ChessState) -> Optional[ChessAction]:
            actions = game.actions(state)
            return rng.choice(actions) if actions else None
        return Strategy(name, choose_random)

    raise ValueError(f"Unknown strategy: {name}. Choose from {STRATEGY_NAMES}")


def position_name(position: Position) -> str:
    """Algebraic square name, e.g. (4, 6) -> 'e2'."""
    file, rank = position
    return f"{'abcdefgh'[file]}{8 - rank}"


def format_action(action: ChessAction) -> str:
    origin, destination = action
    return f"{position_name(origin)}{position_name(destination)}"


def terminal_reason(game: ChessGame, state: ChessState) -> Optional[str]:
    """Why ``state`` is terminal, or None if play can continue."""
    if state.player(state.side_to_move).king is None:
        return 'king captured'
    if state.is_repetition():
        return 'repetition'
    if not game.actions(state):
        return 'no legal moves'
    return None


def play_match(
    game: ChessGame,
    strategies: Dict[PlayerColor, Strategy],
    opening: Sequence[ChessAction] = (),
    max_plies: int = 200,
    state: Optional[ChessState] = None
) -> MatchResult:
    """
    Play one game between two strategies.

    Args:
        game: The chess game
        strategies: Strategy for each color
        opening: Actions replayed before the strategies take over
        max_plies: Stop after this many plies in total
        state: Starting position (default: the game's initial state)

    Returns:
        MatchResult with the final state, every move played and the outcome
    """
    state = state if state is not None else game.initial_state()
    moves: List[ChessAction] = []

    for action in opening:
        state = game.result(state, action)
        moves.append(action)
    if opening:
        logger.info(f"Opening replayed: {' '.join(format_action(a) for a in opening)}")

    reason = terminal_reason(game, state)
    while reason is None and state.ply < max_plies:
        color = state.side_to_move
        strategy = strategies[color]

        start_time = time.monotonic()
        action = strategy.choose(game, state)
        elapsed = time.monotonic() - start_time
        if action is None:
            reason = 'no action'
            break

        state = game.result(state, action)
        moves.append(action)
        logger.info(f"Ply {state.ply}: {color.name} ({strategy.name}) plays {format_action(action)} "
                    f"in {elapsed:.2f}s")
        reason = terminal_reason(game, state)

    if reason is None:
        reason = 'ply limit'

    result = MatchResult(state, moves, game.winner(state), reason)
    winner = result.winner.name if result.winner is not None else 'none'
    logger.info(f"Game over after {state.ply} plies: {reason}, winner: {winner}")
    return result
