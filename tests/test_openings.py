"""Tests for the opening table."""

import chess
import numpy as np
import pytest

from adversarial_search.data import OpeningTemplate, create_opening_database
from adversarial_search.data.openings.openings import square_to_position


@pytest.fixture(scope="module")
def database():
    return create_opening_database()


class TestOpeningDatabase:
    """Tests for lookup and sampling."""

    def test_styles(self, database):
        assert database.styles == ['tactical', 'positional', 'dynamic']
        for style in database.styles:
            assert database.get_openings_for_style(style)

    def test_all_openings_validate(self, database):
        """Nothing is dropped by SAN validation."""
        assert len(database.all_openings()) == 11

    def test_get_opening_by_name(self, database):
        opening = database.get_opening("Slav Defence")

        assert isinstance(opening, OpeningTemplate)
        assert opening.eco_code == "D10"
        assert opening.style_category == "positional"

    def test_unknown_name_raises(self, database):
        with pytest.raises(ValueError):
            database.get_opening("Bongcloud")

    def test_unknown_style_raises(self, database):
        with pytest.raises(ValueError):
            database.get_openings_for_style("romantic")

    def test_sample_for_style(self, database):
        rng = np.random.default_rng(0)
        for _ in range(20):
            opening = database.sample_opening_for_style("dynamic", rng)
            assert opening in database.get_openings_for_style("dynamic")

    def test_sample_is_reproducible(self, database):
        first = [database.sample_opening(np.random.default_rng(5)).name for _ in range(3)]
        second = [database.sample_opening(np.random.default_rng(5)).name for _ in range(3)]

        assert first == second

    def test_invalid_line_is_dropped(self, database):
        assert not database._validate_opening_moves(["e4", "e4"])
        assert not database._validate_opening_moves(["Ke2", "O-O"])


class TestOpeningActions:
    """Tests for conversion into engine actions."""

    def test_square_mapping(self):
        """White's back rank is engine rank 7."""
        assert square_to_position(chess.E2) == (4, 6)
        assert square_to_position(chess.E4) == (4, 4)
        assert square_to_position(chess.A8) == (0, 0)
        assert square_to_position(chess.H1) == (7, 7)

    def test_first_move(self, database):
        actions = database.opening_actions(database.get_opening("Sicilian Dragon"))

        assert actions[0] == ((4, 6), (4, 4))
        assert actions[1] == ((2, 1), (2, 3))
        assert len(actions) == 10

    def test_every_opening_replays_through_actions(self, game, database):
        """Each forced move is one of the engine's own actions."""
        for opening in database.all_openings():
            state = game.initial_state()
            actions = database.opening_actions(opening)
            assert len(actions) == min(len(opening.moves), opening.continuation_depth)
            for action in actions:
                assert action in game.actions(state), f"{opening.name}: {action} not generated"
                state = game.result(state, action)
                state.check_invariants()
            assert not game.is_terminal(state)
