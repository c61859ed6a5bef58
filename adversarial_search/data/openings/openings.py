import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import chess
import numpy as np

from ...core.chess_board import ChessAction, Position

logger = logging.getLogger(__name__)


@dataclass
class OpeningTemplate:
    """Template for specific opening lines."""
    name: str
    eco_code: str
    moves: List[str]  # Move sequence in algebraic notation
    style_category: str  # 'tactical', 'positional', 'dynamic'
    frequency_weight: float  # How often to play this opening
    continuation_depth: int  # How many plies to force


def square_to_position(square: chess.Square) -> Position:
    """Map a python-chess square to an engine (file, rank); White starts on rank 7."""
    return chess.square_file(square), 7 - chess.square_rank(square)


class OpeningDatabase:
    """
    Named opening lines organized by style.

    Only lines the engine can replay are listed: no castling, no en passant,
    no under-promotion and no checks.
    """

    def __init__(self):
        self.openings_by_style: Dict[str, List[OpeningTemplate]] = {
            'tactical': self._create_tactical_openings(),
            'positional': self._create_positional_openings(),
            'dynamic': self._create_dynamic_openings()
        }

        # Validate opening moves
        self._validate_all_openings()

    def _create_tactical_openings(self) -> List[OpeningTemplate]:
        """Create tactical opening templates (sharp, aggressive)."""
        return [
            # Sicilian Defence variations (Volume B)
            OpeningTemplate("Sicilian Dragon", "B70",
                            ["e4", "c5", "Nf3", "d6", "d4", "cxd4", "Nxd4", "Nf6", "Nc3", "g6"],
                            "tactical", 0.15, 10),

            OpeningTemplate("Sicilian Najdorf", "B90",
                            ["e4", "c5", "Nf3", "d6", "d4", "cxd4", "Nxd4", "Nf6", "Nc3", "a6"],
                            "tactical", 0.12, 10),

            OpeningTemplate("King's Gambit Accepted", "C33",
                            ["e4", "e5", "f4", "exf4", "Nf3", "g5", "h4", "g4", "Ne5"],
                            "tactical", 0.08, 9),

            OpeningTemplate("Evans Gambit", "C51",
                            ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5", "b4", "Bxb4", "c3", "Ba5", "d4"],
                            "tactical", 0.07, 11),

            OpeningTemplate("Scandinavian Main Line", "B01",
                            ["e4", "d5", "exd5", "Qxd5", "Nc3", "Qa5", "d4", "Nf6", "Nf3", "Bf5"],
                            "tactical", 0.05, 10)
        ]

    def _create_positional_openings(self) -> List[OpeningTemplate]:
        """Create positional opening templates (closed, strategic)."""
        return [
            # Queen's Gambit variations (Volume D)
            OpeningTemplate("Queen's Gambit Declined Tarrasch", "D34",
                            ["d4", "d5", "c4", "e6", "Nc3", "c5", "cxd5", "exd5", "Nf3", "Nc6", "g3"],
                            "positional", 0.10, 11),

            OpeningTemplate("Slav Defence", "D10",
                            ["d4", "d5", "c4", "c6", "Nc3", "Nf6", "e3", "Bf5", "Nf3", "e6", "Nh4"],
                            "positional", 0.12, 11),

            OpeningTemplate("Nimzo-Indian Defence", "E20",
                            ["d4", "Nf6", "c4", "e6", "Nc3", "Bb4", "e3", "c5", "Bd3", "Nc6", "Nf3"],
                            "positional", 0.14, 11),

            OpeningTemplate("English Opening Closed System", "A25",
                            ["c4", "e5", "Nc3", "Nc6", "g3", "g6", "Bg2", "Bg7", "d3", "d6", "Nf3"],
                            "positional", 0.08, 11)
        ]

    def _create_dynamic_openings(self) -> List[OpeningTemplate]:
        """Create dynamic opening templates (flexible, imbalanced)."""
        return [
            OpeningTemplate("Grünfeld Defence Exchange", "D85",
                            ["d4", "Nf6", "c4", "g6", "Nc3", "d5", "cxd5", "Nxd5", "e4", "Nxc3", "bxc3"],
                            "dynamic", 0.14, 11),

            OpeningTemplate("Modern Benoni", "A70",
                            ["d4", "Nf6", "c4", "c5", "d5", "e6", "Nc3", "exd5", "cxd5", "d6", "Nf3"],
                            "dynamic", 0.11, 11)
        ]

    def _validate_all_openings(self):
        """Drop any opening whose move sequence is not legal chess."""
        total_openings = 0
        valid_openings = 0

        for style, openings in self.openings_by_style.items():
            valid = []
            for opening in openings:
                total_openings += 1
                if self._validate_opening_moves(opening.moves):
                    valid.append(opening)
                else:
                    logger.warning(f"Invalid opening: {opening.name} - {opening.moves}")
            self.openings_by_style[style] = valid
            valid_openings += len(valid)

        logger.debug(f"Validated {valid_openings}/{total_openings} openings")

    def _validate_opening_moves(self, moves: List[str]) -> bool:
        """Validate that a sequence of moves is legal."""
        try:
            self._parse_moves(moves)
            return True
        except ValueError:
            return False

    def _parse_moves(self, moves: List[str]) -> List[chess.Move]:
        board = chess.Board()
        parsed = []
        for move_str in moves:
            move = board.parse_san(move_str)
            parsed.append(move)
            board.push(move)
        return parsed

    @property
    def styles(self) -> List[str]:
        return list(self.openings_by_style.keys())

    def all_openings(self) -> List[OpeningTemplate]:
        return [opening for openings in self.openings_by_style.values() for opening in openings]

    def get_opening(self, name: str) -> OpeningTemplate:
        """Look an opening up by its exact name."""
        for opening in self.all_openings():
            if opening.name == name:
                return opening
        raise ValueError(f"Unknown opening: {name}")

    def get_openings_for_style(self, style: str) -> List[OpeningTemplate]:
        """Get all openings for a specific style."""
        if style not in self.openings_by_style:
            raise ValueError(f"Unknown style: {style}")

        return self.openings_by_style[style]

    def sample_opening_for_style(self, style: str,
                                 rng: Optional[np.random.Generator] = None) -> Optional[OpeningTemplate]:
        """Sample a random opening of ``style`` weighted by frequency."""
        return self._sample(self.get_openings_for_style(style), rng)

    def sample_opening(self, rng: Optional[np.random.Generator] = None) -> Optional[OpeningTemplate]:
        """Sample a random opening of any style weighted by frequency."""
        return self._sample(self.all_openings(), rng)

    def _sample(self, openings: List[OpeningTemplate],
                rng: Optional[np.random.Generator]) -> Optional[OpeningTemplate]:
        if not openings:
            return None

        weights = np.array([opening.frequency_weight for opening in openings])
        probabilities = weights / weights.sum()
        if rng is None:
            index = np.random.choice(len(openings), p=probabilities)
        else:
            index = rng.choice(len(openings), p=probabilities)
        return openings[int(index)]

    def opening_actions(self, opening: OpeningTemplate) -> List[ChessAction]:
        """
        Convert the forced part of an opening into engine actions.

        Returns:
            At most ``continuation_depth`` ((file, rank), (file, rank)) pairs
        """
        moves = self._parse_moves(opening.moves[:opening.continuation_depth])
        return [(square_to_position(move.from_square), square_to_position(move.to_square)) for move in moves]


# Factory function to create the opening database
def create_opening_database() -> OpeningDatabase:
    """Factory function to create the opening database."""
    return OpeningDatabase()
