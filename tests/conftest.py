"""
Shared pytest fixtures for the search engine tests.

Chess fixtures are function-scoped so every test gets its own game and
states. ``TreeGame`` is a small explicit game tree used to check the
searches against hand-computed values.
"""

from pathlib import Path
import sys
from typing import Dict, List

import pytest

# Ensure the repository root is on sys.path so `import adversarial_search`
# and `import play` work without an editable install.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from adversarial_search.core.chess_board import ChessState
from adversarial_search.core.chess_game import ChessGame
from adversarial_search.core.game import Game


# =============================================================================
# EXPLICIT GAME TREE
# =============================================================================


class TreeGame(Game[str, str, str]):
    """
    Game over an explicit tree of named states.

    States are strings; a child's name is its parent's name plus the action
    letter, so the root is ``''`` and depth is ``len(state)``. MAX moves at
    even depth, MIN at odd depth. ``values`` holds the utility for MAX of any
    state the searches may evaluate; MIN sees the negation.
    """

    def __init__(self, children: Dict[str, List[str]], values: Dict[str, float]):
        self.children = children
        self.values = values
        self.utility_calls = 0

    @classmethod
    def create_game(cls) -> 'TreeGame':
        return textbook_tree()

    def initial_state(self) -> str:
        return ''

    def to_move(self, state: str) -> str:
        return 'MAX' if len(state) % 2 == 0 else 'MIN'

    def actions(self, state: str) -> List[str]:
        return list(self.children.get(state, []))

    def result(self, state: str, action: str) -> str:
        if action not in self.children.get(state, []):
            raise ValueError(f"No action {action!r} from {state!r}")
        return state + action

    def is_terminal(self, state: str) -> bool:
        return not self.children.get(state)

    def utility(self, state: str, player: str) -> float:
        self.utility_calls += 1
        value = self.values[state]
        return value if player == 'MAX' else -value


def textbook_tree() -> TreeGame:
    """
    Two-ply tree with MAX to move at the root.

    Min values are a=3, b=2, c=2, so the root value is 3 via ``a``. With
    this order alpha-beta skips the last two leaves under ``b``.
    """
    children = {
        '': ['a', 'b', 'c'],
        'a': ['a', 'b', 'c'],
        'b': ['a', 'b', 'c'],
        'c': ['a', 'b', 'c'],
    }
    values = {
        'aa': 3, 'ab': 12, 'ac': 8,
        'ba': 2, 'bb': 4, 'bc': 6,
        'ca': 14, 'cb': 5, 'cc': 2,
        # Heuristic values used when the search is cut off at depth 1
        'a': 1, 'b': 7, 'c': 4,
        '': 0,
    }
    return TreeGame(children, values)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def tree_game() -> TreeGame:
    return textbook_tree()


@pytest.fixture
def game() -> ChessGame:
    return ChessGame()


@pytest.fixture
def initial_state() -> ChessState:
    return ChessState.initial()
