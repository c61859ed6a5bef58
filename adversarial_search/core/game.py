"""
Game interface consumed by every search strategy.

Minimax, alpha-beta and MCTS only ever talk to a game through this contract,
so any two-player, zero-sum, perfect-information game that implements it can
be searched without touching the search code.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, TypeVar

S = TypeVar('S')
A = TypeVar('A')
P = TypeVar('P')


class Game(ABC, Generic[S, A, P]):
    """
    Abstract base class for adversarial games.

    Subclasses are parameterized over their state type ``S``, action type
    ``A`` and player type ``P``. States must be treated as immutable values:
    ``result`` always returns a new state.
    """

    @classmethod
    @abstractmethod
    def create_game(cls) -> 'Game[S, A, P]':
        """Build a game instance positioned at its initial state."""
        pass

    @abstractmethod
    def initial_state(self) -> S:
        """Return the state the game starts from."""
        pass

    @abstractmethod
    def to_move(self, state: S) -> P:
        """Return the player whose turn it is in ``state``."""
        pass

    @abstractmethod
    def actions(self, state: S) -> List[A]:
        """
        Return every action available to the side to move.

        The order is part of the contract: searches break ties in favour of
        earlier actions, so it must be deterministic for a given state.
        An empty list means the side to move has no move.
        """
        pass

    @abstractmethod
    def result(self, state: S, action: A) -> S:
        """Return the state reached by playing ``action``; ``state`` is left untouched."""
        pass

    @abstractmethod
    def is_terminal(self, state: S) -> bool:
        """Return True if the game is over in ``state``."""
        pass

    @abstractmethod
    def utility(self, state: S, player: P) -> float:
        """Return the heuristic value of ``state`` from ``player``'s perspective (higher is better)."""
        pass
