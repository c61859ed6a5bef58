"""
Monte Carlo Tree Search over any Game.

The tree persists between calls: after choosing a move the search keeps
only the chosen child's subtree, and the next call resumes from it when the
position it is handed is already in the tree.

Each iteration runs four phases:
1. Selection: descend to the most-visited child while the node holds a full
   set of ``max_children`` children
2. Expansion: attach a child for one uniformly random action of the leaf
3. Simulation: turn the child's utility into a win probability and draw once
4. Backpropagation: add the play (and the win, if any) to every node on the
   path back to the root

A leaf without actions cannot be expanded and back-propagates a loss.

Children are owned by their parent; the parent link is a weak reference so
that dropping the root releases the whole tree. Every node's counters and
child list are guarded by the node's own lock, which lets several worker
threads grow the same tree until the time budget runs out.
"""

import logging
import random
import threading
import time
import weakref

from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

from .game import Game

logger = logging.getLogger(__name__)


class MCTSNode:
    """
    Node in the MCTS tree.

    Each node stores:
    - state: Game state reached by ``action``
    - action: Action taken from the parent (None at a fresh root)
    - play_count: Number of iterations that passed through this node
    - win_count: Number of those iterations that drew a win
    - children: Child nodes in attachment order
    """

    def __init__(self, state: Any, action: Optional[Any] = None, parent: Optional['MCTSNode'] = None):
        self.state = state
        self.action = action
        self._parent = weakref.ref(parent) if parent is not None else None

        self.play_count = 0
        self.win_count = 0

        self.children: List['MCTSNode'] = []
        self.lock = threading.Lock()

    @property
    def parent(self) -> Optional['MCTSNode']:
        return self._parent() if self._parent is not None else None

    def detach(self):
        """Forget the parent; used when this node becomes the root."""
        self._parent = None

    def is_full(self, max_children: int) -> bool:
        with self.lock:
            return len(self.children) >= max_children

    def try_attach(self, child: 'MCTSNode', max_children: int) -> bool:
        """Attach ``child`` unless another worker filled this node first."""
        with self.lock:
            if len(self.children) >= max_children:
                return False
            self.children.append(child)
            return True

    def most_visited_child(self) -> Optional['MCTSNode']:
        """Child with the highest play count; the earliest one wins ties."""
        with self.lock:
            children = list(self.children)
        if not children:
            return None
        return max(children, key=lambda child: child.play_count)

    def update(self, win: bool):
        with self.lock:
            self.play_count += 1
            if win:
                self.win_count += 1

    def win_rate(self) -> float:
        return self.win_count / self.play_count if self.play_count > 0 else 0.0

    def __repr__(self) -> str:
        return f"MCTSNode(action={self.action}, plays={self.play_count}, wins={self.win_count})"


class MCTS:
    """
    Time-budgeted Monte Carlo Tree Search with a persistent, re-rooted tree.
    """

    def __init__(
        self,
        time_limit: float = 1.0,
        max_children: int = 10,
        iterations: Optional[int] = None,
        workers: int = 1,
        rng: Optional[random.Random] = None
    ):
        """
        Args:
            time_limit: Wall-clock budget per move in seconds
            max_children: Children a node needs before selection descends past it
            iterations: Optional cap on iterations per move
            workers: Number of threads growing the tree
            rng: Random source for expansion and simulation
        """
        if max_children < 1:
            raise ValueError(f"max_children must be positive, got {max_children}")
        if workers < 1:
            raise ValueError(f"workers must be positive, got {workers}")

        self.time_limit = time_limit
        self.max_children = max_children
        self.iterations = iterations
        self.workers = workers
        self.rng = rng if rng is not None else random.Random()

        self.root: Optional[MCTSNode] = None
        self._rng_lock = threading.Lock()
        self._budget_lock = threading.Lock()
        self._iterations_started = 0

    def search(self, game: Game, state: Any) -> MCTSNode:
        """
        Grow the tree from ``state`` until the time or iteration budget runs out.

        Args:
            game: Game providing actions, results and utilities
            state: Position to search from

        Returns:
            Root node of the search tree
        """
        root = self._sync_root(state)
        deadline = time.monotonic() + self.time_limit
        self._iterations_started = 0

        if self.workers == 1:
            self._run(game, root, deadline)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                futures = [executor.submit(self._run, game, root, deadline) for _ in range(self.workers)]
                for future in futures:
                    future.result()

        return root

    def get_best_action(self, game: Game, state: Any) -> Optional[Any]:
        """
        Search from ``state`` and return the most-played root action.

        The tree is re-rooted at the chosen child, so its statistics carry
        over to the next call.

        Returns:
            Best action according to MCTS, or None if no child was expanded
        """
        if not game.actions(state):
            return None

        start_time = time.monotonic()
        root = self.search(game, state)
        best = root.most_visited_child()
        if best is None:
            return None

        logger.debug(f"MCTS: {root.play_count} plays in {time.monotonic() - start_time:.2f}s, "
                     f"chose {best.action} ({best.play_count} plays, win rate {best.win_rate():.3f})")
        self._reroot(best)
        return best.action

    def _sync_root(self, state: Any) -> MCTSNode:
        if self.root is not None:
            if self.root.state == state:
                return self.root
            for child in list(self.root.children):
                if child.state == state:
                    logger.debug(f"MCTS: reusing subtree with {child.play_count} plays")
                    self._reroot(child)
                    return child

        self.root = MCTSNode(state)
        return self.root

    def _reroot(self, node: MCTSNode):
        node.detach()
        self.root = node

    def _claim_iteration(self, deadline: float) -> bool:
        if time.monotonic() >= deadline:
            return False
        with self._budget_lock:
            if self.iterations is not None and self._iterations_started >= self.iterations:
                return False
            self._iterations_started += 1
            return True

    def _run(self, game: Game, root: MCTSNode, deadline: float):
        while self._claim_iteration(deadline):
            self._mcts_iteration(game, root)

    def _mcts_iteration(self, game: Game, root: MCTSNode) -> bool:
        """
        Single MCTS iteration.

        Returns:
            False if the iteration was dropped because the leaf filled up
            while its child was being built
        """
        # Phase 1: Selection
        leaf = self._select(root)

        # Phase 2: Expansion
        actions = [] if game.is_terminal(leaf.state) else game.actions(leaf.state)
        if not actions:
            self._backpropagate(leaf, False)
            return True

        with self._rng_lock:
            action = self.rng.choice(actions)
        child = MCTSNode(game.result(leaf.state, action), action, leaf)
        if not leaf.try_attach(child, self.max_children):
            return False

        # Phase 3: Simulation
        win = self._simulate(game, child)

        # Phase 4: Backpropagation
        self._backpropagate(child, win)
        return True

    def _select(self, node: MCTSNode) -> MCTSNode:
        while node.is_full(self.max_children):
            node = node.most_visited_child()
        return node

    def _simulate(self, game: Game, node: MCTSNode) -> bool:
        """Draw a win with probability 50% + 100 * utility, clamped to [0, 100] percent."""
        utility = game.utility(node.state, game.to_move(node.state))
        percent = int(min(max(50.0 + 100.0 * utility, 0.0), 100.0))
        with self._rng_lock:
            return self.rng.randrange(100) < percent

    def _backpropagate(self, node: MCTSNode, win: bool):
        while node is not None:
            node.update(win)
            node = node.parent


class MCTSStats:
    """Utility class for collecting and analyzing MCTS statistics."""

    @staticmethod
    def print_tree_stats(root: MCTSNode, top: int = 5):
        """Log statistics about the MCTS tree."""
        logger.info(f"Root plays: {root.play_count}")
        logger.info(f"Root win rate: {root.win_rate():.3f}")
        logger.info(f"Children: {len(root.children)}, tree size: {MCTSStats.get_tree_size(root)}, "
                    f"depth: {MCTSStats.get_tree_depth(root)}")

        if root.children and top > 0:
            logger.info("Top children:")
            for i, child in enumerate(MCTSStats.top_children(root, top)):
                logger.info(f"  {i+1}. Action: {child.action}, Plays: {child.play_count}, "
                            f"Win rate: {child.win_rate():.3f}")

    @staticmethod
    def top_children(root: MCTSNode, top: int = 5) -> List[MCTSNode]:
        return sorted(root.children, key=lambda child: child.play_count, reverse=True)[:top]

    @staticmethod
    def get_tree_depth(root: MCTSNode) -> int:
        """Get maximum depth of the MCTS tree."""
        if not root.children:
            return 0
        return 1 + max(MCTSStats.get_tree_depth(child) for child in root.children)

    @staticmethod
    def get_tree_size(root: MCTSNode) -> int:
        """Get total number of nodes in the MCTS tree."""
        size = 1
        for child in root.children:
            size += MCTSStats.get_tree_size(child)
        return size
