"""
Engine constants: piece values, evaluation weights and board geometry.

Every number the rules engine and evaluation function depend on lives here,
so the evaluation can be read off in one place. None of these are runtime
configurable; search behaviour (depths, time budgets) is configured through
``adversarial_search.config`` instead.
"""

import numpy as np

BOARD_SIZE = 8

# Slide ranges: one step for king/knight/pawn, the whole board for sliders.
STEP_RANGE = 1
SLIDE_RANGE = 8

# ---------------------------------------------------------------------------
# Piece values
# ---------------------------------------------------------------------------
# The king is counted as an alive-indicator in the material term; the same
# value is used when a king is attacked or defended.
KING_VALUE = 200.0
QUEEN_VALUE = 9.0
ROOK_VALUE = 5.0
KNIGHT_VALUE = 3.0
BISHOP_VALUE = 3.0
PAWN_VALUE = 1.0

# ---------------------------------------------------------------------------
# Evaluation weights
# ---------------------------------------------------------------------------
# Attacked, defended and mobility terms are scaled down against material.
TERM_SCALE = 0.1

# Subtracted once per pair of identical snapshots in the history buffer.
REPETITION_PENALTY = 500.0

# Number of board snapshots kept per state for repetition detection.
HISTORY_SIZE = 8

# Positional weight of each square, indexed [file][rank]. Central squares
# count more; the table is symmetric so neither color is favoured.
POSITION_WEIGHTS = np.array([
    [1, 1, 1, 1, 1, 1, 1, 1],
    [1, 2, 2, 2, 2, 2, 2, 1],
    [1, 2, 3, 3, 3, 3, 2, 1],
    [1, 2, 3, 4, 4, 3, 2, 1],
    [1, 2, 3, 4, 4, 3, 2, 1],
    [1, 2, 3, 3, 3, 3, 2, 1],
    [1, 2, 2, 2, 2, 2, 2, 1],
    [1, 1, 1, 1, 1, 1, 1, 1],
], dtype=np.float64)
POSITION_WEIGHTS.setflags(write=False)
