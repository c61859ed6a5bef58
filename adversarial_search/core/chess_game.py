"""
Chess as a Game: the concrete implementation searched by every strategy.

``ChessGame`` itself holds no per-move state. The side to move, rosters,
check status and repetition history all live in ``ChessState`` values, and
``result`` always returns a fresh state.
"""

import logging
from concurrent.futures import Executor
from typing import Iterable, List, Optional

from .chess_board import (
    ChessAction,
    ChessPlayer,
    ChessState,
    PlayerColor,
    apply_action,
    legal_actions,
    validate_action,
)
from .evaluation import evaluate
from .game import Game

logger = logging.getLogger(__name__)


class ChessGame(Game[ChessState, ChessAction, ChessPlayer]):
    """
    Chess rules engine exposed through the Game interface.

    Rules are simplified: no castling or en passant, pawns always promote to
    a queen, and a state is terminal when the side to move has no king, no
    moves, or the last three recorded snapshots repeat.
    """

    def __init__(self, state: Optional[ChessState] = None, executor: Optional[Executor] = None):
        """
        Args:
            state: Starting position (default: standard initial position).
            executor: Optional executor used to fan out evaluation terms.
        """
        self._initial_state = state if state is not None else ChessState.initial()
        self.executor = executor

    @classmethod
    def create_game(cls) -> 'ChessGame':
        return cls()

    def initial_state(self) -> ChessState:
        return self._initial_state

    def to_move(self, state: ChessState) -> ChessPlayer:
        return state.player(state.side_to_move)

    def actions(self, state: ChessState) -> List[ChessAction]:
        return legal_actions(state, state.side_to_move)

    def result(self, state: ChessState, action: ChessAction) -> ChessState:
        """
        Return the state after ``action``.

        Every action from ``actions()`` is accepted. Anything else is a
        caller error, not a game event, and is refused before the state is
        cloned.

        Raises:
            ValueError: if the action's origin is empty, holds a piece of the
                        wrong color, or either square is off the board.
        """
        validate_action(state, action)
        new_state = state.clone()
        apply_action(new_state, action)
        return new_state

    def is_terminal(self, state: ChessState) -> bool:
        if state.player(state.side_to_move).king is None:
            return True
        if state.is_repetition():
            return True
        return not self.actions(state)

    def utility(self, state: ChessState, player: ChessPlayer) -> float:
        return evaluate(state, player.color, self.executor)

    def winner(self, state: ChessState) -> Optional[PlayerColor]:
        """Color that captured the opposing king, if any."""
        for color in PlayerColor:
            if state.player(color).king is None:
                return color.opponent
        return None

    def play_actions(self, state: ChessState, actions: Iterable[ChessAction]) -> ChessState:
        """Apply a fixed sequence of actions, e.g. an opening line."""
        for action in actions:
            state = self.result(state, action)
            logger.debug(f"Replayed {action} -> ply {state.ply}")
        return state
