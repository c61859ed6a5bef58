"""
Positional evaluation for the chess engine.

The utility of a state for one color is a sum of independent terms. Each
term compares that color against its opponent:

    material   King alive x200, Queen x9, Rook x5, Knight/Bishop x3, Pawn x1
    attacked   value x square weight of opponent pieces we can capture, x0.1
    defended   value x square weight of our pieces we protect, x0.1
    mobility   square weights of our destinations plus move count, x0.1

minus a repetition penalty of 500 for every pair of identical board
snapshots in the state's history. The four comparative terms only read the
state, so they can be computed on a thread pool from one cloned snapshot.

Evaluation is sequential unless an executor is passed in. The ``extended``
search preset sets ``parallel_evaluation``, which makes ``play.py`` hand the
game a thread pool.
"""

from concurrent.futures import Executor
from typing import Callable, List, Optional, Tuple

from .chess_board import (
    ChessState,
    PieceType,
    PlayerColor,
    legal_actions,
    piece_reach,
)
from .constants import (
    BISHOP_VALUE,
    KING_VALUE,
    KNIGHT_VALUE,
    PAWN_VALUE,
    POSITION_WEIGHTS,
    QUEEN_VALUE,
    REPETITION_PENALTY,
    ROOK_VALUE,
    TERM_SCALE,
)


def _material(state: ChessState, color: PlayerColor) -> float:
    player = state.player(color)
    return (
        KING_VALUE * (1 if player.king is not None else 0)
        + QUEEN_VALUE * player.count(PieceType.QUEEN)
        + ROOK_VALUE * player.count(PieceType.ROOK)
        + KNIGHT_VALUE * (player.count(PieceType.KNIGHT) + player.count(PieceType.BISHOP))
        + PAWN_VALUE * player.count(PieceType.PAWN)
    )


def material_score(state: ChessState, color: PlayerColor) -> float:
    """Material balance for ``color``; antisymmetric between the two colors."""
    return _material(state, color) - _material(state, color.opponent)


def _attacked_value(state: ChessState, color: PlayerColor) -> float:
    board = state.board
    seen = set()
    total = 0.0
    for _, destination in legal_actions(state, color):
        if destination in seen or not board.is_opponent(destination, color):
            continue
        seen.add(destination)
        total += board.piece_at(destination).value * POSITION_WEIGHTS[destination]
    return total


def attacked_score(state: ChessState, color: PlayerColor) -> float:
    return TERM_SCALE * (_attacked_value(state, color) - _attacked_value(state, color.opponent))


def _defended_value(state: ChessState, color: PlayerColor) -> float:
    board = state.board
    defended = set()
    for piece in state.player(color).pieces():
        defended.update(piece_reach(board, piece))
    return sum(board.piece_at(position).value * POSITION_WEIGHTS[position] for position in defended)


def defended_score(state: ChessState, color: PlayerColor) -> float:
    return TERM_SCALE * (_defended_value(state, color) - _defended_value(state, color.opponent))


def _mobility_value(state: ChessState, color: PlayerColor) -> float:
    actions = legal_actions(state, color)
    return sum(POSITION_WEIGHTS[destination] for _, destination in actions) + len(actions)


def mobility_score(state: ChessState, color: PlayerColor) -> float:
    return TERM_SCALE * (_mobility_value(state, color) - _mobility_value(state, color.opponent))


def repetition_penalty(state: ChessState) -> float:
    return REPETITION_PENALTY * state.repeated_pairs()


EVALUATION_TERMS: Tuple[Callable[[ChessState, PlayerColor], float], ...] = (
    material_score,
    attacked_score,
    defended_score,
    mobility_score,
)


def evaluate(state: ChessState, color: PlayerColor, executor: Optional[Executor] = None) -> float:
    """
    Heuristic value of ``state`` from ``color``'s perspective.

    Args:
        state: Position to evaluate. Not modified.
        color: The side whose perspective the score is from.
        executor: Optional executor; when given, the four comparative terms
                  are submitted to it against a private clone of ``state``.

    Returns:
        Weighted sum of the terms minus the repetition penalty.
    """
    if executor is None:
        values: List[float] = [term(state, color) for term in EVALUATION_TERMS]
    else:
        snapshot = state.clone()
        futures = [executor.submit(term, snapshot, color) for term in EVALUATION_TERMS]
        values = [future.result() for future in futures]

    return float(sum(values) - repetition_penalty(state))
