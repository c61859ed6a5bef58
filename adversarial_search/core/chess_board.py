"""
Chess board model and move rules.

This module holds everything the chess game needs below the Game interface:

- Pieces, the 8x8 board and per-player rosters with their position lookup
- Pseudo-legal move generation per piece type, and the check-restricted
  move list for a player whose king is attacked
- Move application: relocation, capture bookkeeping, promotion, snapshot
  history and check detection

Coordinates are ``(file, rank)`` pairs in [0, 7]. White starts on ranks 6-7
and advances toward rank 0; Black starts on ranks 0-1 and advances toward
rank 7.
"""

from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

import numpy as np

from .constants import (
    BISHOP_VALUE,
    BOARD_SIZE,
    HISTORY_SIZE,
    KING_VALUE,
    KNIGHT_VALUE,
    PAWN_VALUE,
    QUEEN_VALUE,
    ROOK_VALUE,
    SLIDE_RANGE,
    STEP_RANGE,
)

Position = Tuple[int, int]
ChessAction = Tuple[Position, Position]


class PlayerColor(Enum):
    WHITE = 0
    BLACK = 1

    @property
    def opponent(self) -> 'PlayerColor':
        return PlayerColor.BLACK if self is PlayerColor.WHITE else PlayerColor.WHITE

    @property
    def forward(self) -> int:
        """Rank direction pawns of this color advance in."""
        return -1 if self is PlayerColor.WHITE else 1

    @property
    def pawn_rank(self) -> int:
        return BOARD_SIZE - 2 if self is PlayerColor.WHITE else 1

    @property
    def back_rank(self) -> int:
        return BOARD_SIZE - 1 if self is PlayerColor.WHITE else 0

    @property
    def promotion_rank(self) -> int:
        return 0 if self is PlayerColor.WHITE else BOARD_SIZE - 1


class PieceType(Enum):
    KING = 1
    QUEEN = 2
    ROOK = 3
    KNIGHT = 4
    BISHOP = 5
    PAWN = 6

    @property
    def worth(self) -> float:
        return PIECE_VALUES[self]

    @property
    def code(self) -> int:
        """Integer code used in board snapshots."""
        return self.value

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOLS[self]


PIECE_VALUES: Dict[PieceType, float] = {
    PieceType.KING: KING_VALUE,
    PieceType.QUEEN: QUEEN_VALUE,
    PieceType.ROOK: ROOK_VALUE,
    PieceType.KNIGHT: KNIGHT_VALUE,
    PieceType.BISHOP: BISHOP_VALUE,
    PieceType.PAWN: PAWN_VALUE,
}

PIECE_SYMBOLS: Dict[PieceType, str] = {
    PieceType.KING: 'K',
    PieceType.QUEEN: 'Q',
    PieceType.ROOK: 'R',
    PieceType.KNIGHT: 'N',
    PieceType.BISHOP: 'B',
    PieceType.PAWN: 'P',
}
SYMBOL_PIECES: Dict[str, PieceType] = {symbol: piece_type for piece_type, symbol in PIECE_SYMBOLS.items()}

# Rosters are always walked in this order; it fixes the order of actions().
ROSTER_ORDER: Tuple[PieceType, ...] = (
    PieceType.KING,
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.PAWN,
)

_ROYAL_VECTORS = ((1, 0), (1, 1), (1, -1), (-1, 0), (-1, 1), (-1, -1), (0, 1), (0, -1))

MOVE_VECTORS: Dict[PieceType, Tuple[Position, ...]] = {
    PieceType.KING: _ROYAL_VECTORS,
    PieceType.QUEEN: _ROYAL_VECTORS,
    PieceType.ROOK: ((1, 0), (-1, 0), (0, 1), (0, -1)),
    PieceType.KNIGHT: ((1, 2), (1, -2), (-1, 2), (-1, -2), (2, 1), (2, -1), (-2, 1), (-2, -1)),
    PieceType.BISHOP: ((1, 1), (1, -1), (-1, 1), (-1, -1)),
}

MOVE_RANGE: Dict[PieceType, int] = {
    PieceType.KING: STEP_RANGE,
    PieceType.QUEEN: SLIDE_RANGE,
    PieceType.ROOK: SLIDE_RANGE,
    PieceType.KNIGHT: STEP_RANGE,
    PieceType.BISHOP: SLIDE_RANGE,
    PieceType.PAWN: STEP_RANGE,
}

SLIDING_PIECES = frozenset({PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP})

# Pawn capture files, relative to the pawn; the rank step comes from the color.
PAWN_CAPTURE_FILES = (1, -1)

BACK_RANK_LAYOUT = (
    PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN,
    PieceType.KING, PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK,
)


def on_board(position: Position) -> bool:
    file, rank = position
    return 0 <= file < BOARD_SIZE and 0 <= rank < BOARD_SIZE


class ChessPiece:
    """A piece on the board. Its position always matches the cell holding it."""

    __slots__ = ('piece_type', 'position', 'color', 'can_move_special')

    def __init__(self, piece_type: PieceType, position: Position, color: PlayerColor,
                 can_move_special: bool = True):
        self.piece_type = piece_type
        self.position = position
        self.color = color
        self.can_move_special = can_move_special

    @property
    def value(self) -> float:
        return self.piece_type.worth

    @property
    def symbol(self) -> str:
        symbol = self.piece_type.symbol
        return symbol if self.color is PlayerColor.WHITE else symbol.lower()

    def copy(self) -> 'ChessPiece':
        return ChessPiece(self.piece_type, self.position, self.color, self.can_move_special)

    def __repr__(self) -> str:
        return f"ChessPiece({self.color.name} {self.piece_type.name} at {self.position})"


class ChessBoard:
    """8x8 grid of optional pieces, indexed ``[file][rank]``."""

    def __init__(self):
        self.grid: List[List[Optional[ChessPiece]]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    def piece_at(self, position: Position) -> Optional[ChessPiece]:
        file, rank = position
        return self.grid[file][rank]

    def place(self, piece: ChessPiece) -> None:
        file, rank = piece.position
        assert self.grid[file][rank] is None, f"Square {piece.position} already occupied"
        self.grid[file][rank] = piece

    def clear(self, position: Position) -> Optional[ChessPiece]:
        file, rank = position
        piece = self.grid[file][rank]
        self.grid[file][rank] = None
        return piece

    def is_empty(self, position: Position) -> bool:
        return self.piece_at(position) is None

    def is_opponent(self, position: Position, color: PlayerColor) -> bool:
        """True if ``position`` holds a piece of the other color."""
        piece = self.piece_at(position)
        return piece is not None and piece.color is not color

    def is_friendly(self, position: Position, color: PlayerColor) -> bool:
        """True if ``position`` holds a piece of ``color``."""
        piece = self.piece_at(position)
        return piece is not None and piece.color is color

    def pieces(self) -> Iterator[ChessPiece]:
        for column in self.grid:
            for piece in column:
                if piece is not None:
                    yield piece

    def snapshot(self) -> np.ndarray:
        """Signed piece codes per square: positive for White, negative for Black."""
        snapshot = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        for piece in self.pieces():
            sign = 1 if piece.color is PlayerColor.WHITE else -1
            snapshot[piece.position] = sign * piece.piece_type.code
        snapshot.setflags(write=False)
        return snapshot


class ChessPlayer:
    """
    One side of the game: typed rosters plus a position lookup.

    ``lookup`` maps a board position to ``(piece_type, roster_index)``. Roster
    indices are positional, so removing a piece shifts every later piece of
    the same type down by one and the lookup is rewritten accordingly.
    """

    def __init__(self, color: PlayerColor):
        self.color = color
        self.rosters: Dict[PieceType, List[ChessPiece]] = {piece_type: [] for piece_type in ROSTER_ORDER}
        self.lookup: Dict[Position, Tuple[PieceType, int]] = {}
        self.checked_by: Optional[ChessPiece] = None
        self.last_move: Optional[ChessAction] = None

    @property
    def king(self) -> Optional[ChessPiece]:
        kings = self.rosters[PieceType.KING]
        return kings[0] if kings else None

    @property
    def queens(self) -> List[ChessPiece]:
        return self.rosters[PieceType.QUEEN]

    @property
    def rooks(self) -> List[ChessPiece]:
        return self.rosters[PieceType.ROOK]

    @property
    def knights(self) -> List[ChessPiece]:
        return self.rosters[PieceType.KNIGHT]

    @property
    def bishops(self) -> List[ChessPiece]:
        return self.rosters[PieceType.BISHOP]

    @property
    def pawns(self) -> List[ChessPiece]:
        return self.rosters[PieceType.PAWN]

    def count(self, piece_type: PieceType) -> int:
        return len(self.rosters[piece_type])

    def pieces(self) -> Iterator[ChessPiece]:
        for piece_type in ROSTER_ORDER:
            yield from self.rosters[piece_type]

    def piece_at(self, position: Position) -> Optional[ChessPiece]:
        entry = self.lookup.get(position)
        if entry is None:
            return None
        piece_type, index = entry
        return self.rosters[piece_type][index]

    def add_piece(self, piece: ChessPiece) -> None:
        assert piece.color is self.color, f"{piece!r} does not belong to {self.color.name}"
        assert piece.position not in self.lookup, f"Roster already has a piece on {piece.position}"
        if piece.piece_type is PieceType.KING:
            assert not self.rosters[PieceType.KING], f"{self.color.name} already has a king"
        roster = self.rosters[piece.piece_type]
        roster.append(piece)
        self.lookup[piece.position] = (piece.piece_type, len(roster) - 1)

    def remove_piece(self, position: Position) -> ChessPiece:
        """Drop the piece on ``position`` from roster and lookup, re-indexing its siblings."""
        piece_type, index = self.lookup.pop(position)
        roster = self.rosters[piece_type]
        piece = roster.pop(index)
        assert piece.position == position, f"Roster slot {piece_type.name}[{index}] does not hold {position}"
        for shifted in range(index, len(roster)):
            self.lookup[roster[shifted].position] = (piece_type, shifted)
        return piece

    def relocate(self, origin: Position, destination: Position) -> ChessPiece:
        entry = self.lookup.pop(origin)
        piece_type, index = entry
        piece = self.rosters[piece_type][index]
        assert piece.position == origin, f"Roster slot {piece_type.name}[{index}] does not hold {origin}"
        piece.position = destination
        self.lookup[destination] = entry
        return piece

    def promote(self, position: Position, piece_type: PieceType = PieceType.QUEEN) -> ChessPiece:
        piece = self.remove_piece(position)
        piece.piece_type = piece_type
        self.add_piece(piece)
        return piece

    def clone(self) -> 'ChessPlayer':
        """Copy rosters and lookup; ``checked_by`` is re-linked by the owning state."""
        twin = ChessPlayer(self.color)
        for piece_type, roster in self.rosters.items():
            twin.rosters[piece_type] = [piece.copy() for piece in roster]
        twin.lookup = dict(self.lookup)
        twin.last_move = self.last_move
        return twin

    def __repr__(self) -> str:
        counts = ", ".join(f"{t.name.lower()}={len(r)}" for t, r in self.rosters.items())
        return f"ChessPlayer({self.color.name}, {counts})"


class ChessState:
    """
    Complete game position: board, both players, ply counter and history.

    ``history`` is a ring buffer of ``HISTORY_SIZE`` board snapshots; a move
    played at ply ``p`` records the resulting board in slot
    ``(p // 2) % HISTORY_SIZE``. Empty slots are ``None``.

    Two states are equal when their ply and board snapshot are equal.
    """

    def __init__(self, board: ChessBoard, players: Tuple[ChessPlayer, ChessPlayer], ply: int = 0,
                 history: Optional[List[Optional[np.ndarray]]] = None):
        self.board = board
        self.players = players
        self.ply = ply
        self.history = history if history is not None else [None] * HISTORY_SIZE

    @classmethod
    def initial(cls) -> 'ChessState':
        """Standard starting position with White to move."""
        pieces = []
        for color in PlayerColor:
            for file, piece_type in enumerate(BACK_RANK_LAYOUT):
                pieces.append((piece_type, color, (file, color.back_rank)))
            for file in range(BOARD_SIZE):
                pieces.append((PieceType.PAWN, color, (file, color.pawn_rank)))
        return cls.from_pieces(pieces)

    @classmethod
    def from_pieces(cls, pieces: Iterable[Tuple[PieceType, PlayerColor, Position]], ply: int = 0) -> 'ChessState':
        """
        Build a state from ``(piece_type, color, position)`` triples.

        Pawns keep their double-step right only on their starting rank. Check
        status is computed for both sides.
        """
        board = ChessBoard()
        players = (ChessPlayer(PlayerColor.WHITE), ChessPlayer(PlayerColor.BLACK))
        for piece_type, color, position in pieces:
            if not on_board(position):
                raise ValueError(f"Position off the board: {position}")
            special = position[1] == color.pawn_rank if piece_type is PieceType.PAWN else True
            piece = ChessPiece(piece_type, position, color, special)
            if board.piece_at(position) is not None:
                raise ValueError(f"Two pieces placed on {position}")
            board.place(piece)
            players[color.value].add_piece(piece)

        state = cls(board, players, ply)
        for player in players:
            player.checked_by = find_attacker(state, player.color)
        return state

    @classmethod
    def from_diagram(cls, diagram: str, ply: int = 0) -> 'ChessState':
        """
        Build a state from an 8-line diagram, rank 0 first.

        Uppercase letters are White, lowercase Black, ``.`` is empty::

            rnbqkbnr
            pppppppp
            ........
            ........
            ........
            ........
            PPPPPPPP
            RNBQKBNR
        """
        rows = [row.strip() for row in diagram.strip().splitlines() if row.strip()]
        if len(rows) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in rows):
            raise ValueError(f"Diagram must be {BOARD_SIZE} rows of {BOARD_SIZE} squares")

        pieces = []
        for rank, row in enumerate(rows):
            for file, symbol in enumerate(row):
                if symbol == '.':
                    continue
                piece_type = SYMBOL_PIECES.get(symbol.upper())
                if piece_type is None:
                    raise ValueError(f"Unknown piece symbol {symbol!r}")
                color = PlayerColor.WHITE if symbol.isupper() else PlayerColor.BLACK
                pieces.append((piece_type, color, (file, rank)))
        return cls.from_pieces(pieces, ply)

    @property
    def side_to_move(self) -> PlayerColor:
        return PlayerColor.WHITE if self.ply % 2 == 0 else PlayerColor.BLACK

    def player(self, color: PlayerColor) -> ChessPlayer:
        return self.players[color.value]

    def clone(self) -> 'ChessState':
        players = (self.players[0].clone(), self.players[1].clone())
        board = ChessBoard()
        for player in players:
            for piece in player.pieces():
                board.place(piece)
        for original, twin in zip(self.players, players):
            if original.checked_by is not None:
                twin.checked_by = board.piece_at(original.checked_by.position)
        # Snapshots are read-only arrays, so the buffer itself is all that needs copying.
        return ChessState(board, players, self.ply, list(self.history))

    def snapshot(self) -> np.ndarray:
        return self.board.snapshot()

    def record_snapshot(self) -> None:
        """Write the current board into the history slot for the current ply."""
        self.history[(self.ply // 2) % HISTORY_SIZE] = self.snapshot()

    def recent_snapshots(self, count: int = 3) -> List[Optional[np.ndarray]]:
        """The ``count`` most recently written history slots, newest first."""
        if self.ply == 0:
            return []
        latest = (self.ply - 1) // 2
        return [self.history[(latest - offset) % HISTORY_SIZE] for offset in range(count)]

    def is_repetition(self) -> bool:
        recent = self.recent_snapshots(3)
        if len(recent) < 3 or any(snapshot is None for snapshot in recent):
            return False
        return all(np.array_equal(recent[0], snapshot) for snapshot in recent[1:])

    def repeated_pairs(self) -> int:
        """Number of pairs of identical snapshots anywhere in the history buffer."""
        recorded = [snapshot for snapshot in self.history if snapshot is not None]
        pairs = 0
        for i, first in enumerate(recorded):
            for second in recorded[i + 1:]:
                if np.array_equal(first, second):
                    pairs += 1
        return pairs

    def check_invariants(self) -> None:
        """Assert that board, rosters and lookups agree with each other."""
        on_board_count = 0
        for file in range(BOARD_SIZE):
            for rank in range(BOARD_SIZE):
                piece = self.board.grid[file][rank]
                if piece is None:
                    continue
                on_board_count += 1
                assert piece.position == (file, rank), f"{piece!r} stored on {(file, rank)}"
                owner = self.player(piece.color)
                assert owner.piece_at(piece.position) is piece, f"{piece!r} missing from its roster"

        rostered = 0
        for player in self.players:
            assert len(player.rosters[PieceType.KING]) <= 1, f"{player.color.name} has several kings"
            assert len(player.lookup) == sum(len(r) for r in player.rosters.values())
            for position, (piece_type, index) in player.lookup.items():
                piece = player.rosters[piece_type][index]
                assert piece.position == position, f"Lookup for {position} points at {piece!r}"
                assert piece.piece_type is piece_type
                assert self.board.piece_at(position) is piece, f"{piece!r} is not on the board"
                rostered += 1
        assert rostered == on_board_count, "Board and rosters disagree on piece count"

    def key(self) -> Tuple[int, bytes]:
        return self.ply, self.snapshot().tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChessState):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def __str__(self) -> str:
        rows = []
        for rank in range(BOARD_SIZE):
            row = ''
            for file in range(BOARD_SIZE):
                piece = self.board.grid[file][rank]
                row += piece.symbol if piece is not None else '.'
            rows.append(row)
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"ChessState(ply={self.ply}, to_move={self.side_to_move.name})"


# ---------------------------------------------------------------------------
# Move generation
# ---------------------------------------------------------------------------

def is_legal_move(board: ChessBoard, piece: ChessPiece, destination: Position) -> bool:
    """A destination is playable when it is on the board and not held by a friendly piece."""
    return on_board(destination) and not board.is_friendly(destination, piece.color)


def piece_moves(board: ChessBoard, piece: ChessPiece) -> List[Position]:
    """
    Pseudo-legal destinations for ``piece``, in vector order.

    Each vector is walked up to the piece's range; the walk stops before a
    friendly piece, and on (including) an enemy piece.
    """
    if piece.piece_type is PieceType.PAWN:
        return _pawn_moves(board, piece)

    destinations = []
    for step_file, step_rank in MOVE_VECTORS[piece.piece_type]:
        file, rank = piece.position
        for _ in range(MOVE_RANGE[piece.piece_type]):
            file, rank = file + step_file, rank + step_rank
            target = (file, rank)
            if not is_legal_move(board, piece, target):
                break
            destinations.append(target)
            if board.is_opponent(target, piece.color):
                break
    return destinations


def _pawn_moves(board: ChessBoard, piece: ChessPiece) -> List[Position]:
    file, rank = piece.position
    forward = piece.color.forward
    destinations = []

    ahead = (file, rank + forward)
    ahead_free = on_board(ahead) and board.is_empty(ahead)
    if ahead_free:
        destinations.append(ahead)

    for capture_file in PAWN_CAPTURE_FILES:
        target = (file + capture_file, rank + forward)
        if on_board(target) and board.is_opponent(target, piece.color):
            destinations.append(target)

    double = (file, rank + 2 * forward)
    if piece.can_move_special and ahead_free and on_board(double) and board.is_empty(double):
        destinations.append(double)

    return destinations


def piece_reach(board: ChessBoard, piece: ChessPiece) -> List[Position]:
    """Squares holding friendly pieces that ``piece`` protects."""
    file, rank = piece.position
    if piece.piece_type is PieceType.PAWN:
        forward = piece.color.forward
        targets = [(file + capture_file, rank + forward) for capture_file in PAWN_CAPTURE_FILES]
        return [t for t in targets if on_board(t) and board.is_friendly(t, piece.color)]

    defended = []
    for step_file, step_rank in MOVE_VECTORS[piece.piece_type]:
        target_file, target_rank = file, rank
        for _ in range(MOVE_RANGE[piece.piece_type]):
            target_file, target_rank = target_file + step_file, target_rank + step_rank
            target = (target_file, target_rank)
            if not on_board(target):
                break
            occupant = board.piece_at(target)
            if occupant is None:
                continue
            if occupant.color is piece.color:
                defended.append(target)
            break
    return defended


def pseudo_legal_actions(state: ChessState, color: PlayerColor) -> List[ChessAction]:
    actions = []
    for piece in state.player(color).pieces():
        origin = piece.position
        actions.extend((origin, destination) for destination in piece_moves(state.board, piece))
    return actions


def find_attacker(state: ChessState, color: PlayerColor) -> Optional[ChessPiece]:
    """First opponent piece (in roster order) whose pseudo-moves land on ``color``'s king."""
    king = state.player(color).king
    if king is None:
        return None
    for piece in state.player(color.opponent).pieces():
        if king.position in piece_moves(state.board, piece):
            return piece
    return None


def _attack_step(king_position: Position, attacker: ChessPiece) -> Optional[Position]:
    """Unit step from attacker toward king, or None when the attack cannot be blocked."""
    if attacker.piece_type not in SLIDING_PIECES:
        return None
    diff_file = king_position[0] - attacker.position[0]
    diff_rank = king_position[1] - attacker.position[1]
    if diff_file != 0 and diff_rank != 0 and abs(diff_file) != abs(diff_rank):
        return None
    return (diff_file > 0) - (diff_file < 0), (diff_rank > 0) - (diff_rank < 0)


def checked_squares(king_position: Position, attacker: ChessPiece) -> Set[Position]:
    """Squares where a non-king move answers the check: the attacker and any square in between."""
    squares = {attacker.position}
    step = _attack_step(king_position, attacker)
    if step is None:
        return squares
    file, rank = attacker.position
    while True:
        file, rank = file + step[0], rank + step[1]
        if (file, rank) == king_position or not on_board((file, rank)):
            break
        squares.add((file, rank))
    return squares


def attack_line(king_position: Position, attacker: ChessPiece) -> Set[Position]:
    """Squares the king may not step to: the attacker's ray through the king and beyond it."""
    step = _attack_step(king_position, attacker)
    if step is None:
        return set()
    line = set()
    file, rank = attacker.position
    while True:
        file, rank = file + step[0], rank + step[1]
        if not on_board((file, rank)):
            break
        line.add((file, rank))
    return line


def legal_actions(state: ChessState, color: PlayerColor) -> List[ChessAction]:
    """
    Actions for ``color``, restricted to check answers when its king is attacked.

    While checked, the king may go anywhere off the attack line (capturing the
    attacker included), and other pieces may only interpose or capture.
    """
    player = state.player(color)
    attacker = player.checked_by
    king = player.king
    if attacker is None or king is None:
        return pseudo_legal_actions(state, color)

    blocking = checked_squares(king.position, attacker)
    line = attack_line(king.position, attacker)
    actions = []
    for piece in player.pieces():
        for destination in piece_moves(state.board, piece):
            if piece is king:
                if destination not in line:
                    actions.append((piece.position, destination))
            elif destination in blocking:
                actions.append((piece.position, destination))
    return actions


def validate_action(state: ChessState, action: ChessAction) -> ChessPiece:
    """Return the piece ``action`` moves, raising ValueError if the action is malformed."""
    try:
        origin, destination = action
    except (TypeError, ValueError):
        raise ValueError(f"Malformed action: {action!r}")
    if not on_board(origin) or not on_board(destination):
        raise ValueError(f"Action leaves the board: {action!r}")
    piece = state.board.piece_at(origin)
    if piece is None:
        raise ValueError(f"No piece on {origin}")
    if piece.color is not state.side_to_move:
        raise ValueError(f"Piece on {origin} belongs to {piece.color.name}, not the side to move")
    if state.board.is_friendly(destination, piece.color):
        raise ValueError(f"{destination} is occupied by a friendly piece")
    return piece


def apply_action(state: ChessState, action: ChessAction) -> None:
    """
    Play ``action`` on ``state`` in place.

    Callers pass a fresh clone; ``ChessGame.result`` is the pure entry point.
    """
    origin, destination = action
    color = state.side_to_move
    mover = state.player(color)
    opponent = state.player(color.opponent)
    board = state.board

    if board.piece_at(destination) is not None:
        captured = board.clear(destination)
        removed = opponent.remove_piece(destination)
        assert removed is captured, f"Captured {captured!r} but roster held {removed!r}"

    piece = board.clear(origin)
    relocated = mover.relocate(origin, destination)
    assert relocated is piece, f"Moved {piece!r} but roster held {relocated!r}"
    piece.can_move_special = False
    board.place(piece)

    if piece.piece_type is PieceType.PAWN and destination[1] == color.promotion_rank:
        mover.promote(destination)

    mover.last_move = action
    state.record_snapshot()
    mover.checked_by = find_attacker(state, color)
    opponent.checked_by = find_attacker(state, color.opponent)
    state.ply += 1
