"""Tests for the match driver and the play.py entrypoint."""

import random

import pytest

from adversarial_search.config import SearchConfig
from adversarial_search.core.chess_board import ChessState, PieceType, PlayerColor
from adversarial_search.core.match import (
    STRATEGY_NAMES,
    create_strategy,
    format_action,
    play_match,
    position_name,
)
from adversarial_search.data import create_opening_database

W, B = PlayerColor.WHITE, PlayerColor.BLACK


def fast_config() -> SearchConfig:
    return SearchConfig(minimax_depth=1, mcts_time_limit=0.05)


class TestStrategies:
    """Tests for the strategy registry."""

    @pytest.mark.parametrize("name", STRATEGY_NAMES)
    def test_every_strategy_picks_a_legal_move(self, game, initial_state, name):
        strategy = create_strategy(name, fast_config(), random.Random(0))

        assert strategy.name == name
        assert strategy.choose(game, initial_state) in game.actions(initial_state)

    def test_only_mcts_keeps_a_tree(self):
        config = fast_config()

        assert create_strategy("mcts", config).mcts is not None
        assert create_strategy("alphabeta", config).mcts is None

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            create_strategy("oracle", fast_config())


class TestNotation:
    def test_position_name(self):
        assert position_name((4, 6)) == "e2"
        assert position_name((0, 0)) == "a8"

    def test_format_action(self):
        assert format_action(((6, 7), (5, 5))) == "g1f3"


class TestPlayMatch:
    """Tests for full games."""

    def test_random_game_stops_at_ply_limit(self, game):
        rng = random.Random(4)
        strategies = {
            W: create_strategy("random", fast_config(), rng),
            B: create_strategy("random", fast_config(), rng),
        }

        result = play_match(game, strategies, max_plies=20)

        assert len(result.moves) == result.final_state.ply
        assert result.final_state.ply <= 20
        if result.reason == "ply limit":
            assert result.final_state.ply == 20
        result.final_state.check_invariants()

    def test_moves_replay_to_final_state(self, game):
        rng = random.Random(9)
        strategies = {
            W: create_strategy("random", fast_config(), rng),
            B: create_strategy("alphabeta", fast_config(), rng),
        }

        result = play_match(game, strategies, max_plies=12)
        replayed = game.play_actions(game.initial_state(), result.moves)

        assert replayed == result.final_state

    def test_opening_is_replayed_first(self, game):
        database = create_opening_database()
        opening = database.opening_actions(database.get_opening("Slav Defence"))
        strategies = {
            W: create_strategy("minimax", fast_config()),
            B: create_strategy("alphabeta", fast_config()),
        }

        result = play_match(game, strategies, opening, max_plies=len(opening) + 2)

        assert result.moves[:len(opening)] == opening
        assert result.final_state.ply == len(opening) + 2

    def test_king_capture_ends_game(self, game):
        state = ChessState.from_pieces([
            (PieceType.KING, W, (7, 7)),
            (PieceType.ROOK, W, (0, 7)),
            (PieceType.KING, B, (0, 0)),
            (PieceType.PAWN, B, (7, 1)),
        ])
        strategies = {
            W: create_strategy("alphabeta", fast_config()),
            B: create_strategy("random", fast_config(), random.Random(0)),
        }

        result = play_match(game, strategies, max_plies=10, state=state)

        assert result.reason == "king captured"
        assert result.winner is W
        assert result.moves == [((0, 7), (0, 0))]

    def test_terminal_start_plays_nothing(self, game):
        state = ChessState.from_pieces([
            (PieceType.ROOK, W, (0, 7)),
            (PieceType.KING, B, (4, 0)),
        ])
        strategies = {color: create_strategy("random", fast_config()) for color in PlayerColor}

        result = play_match(game, strategies, state=state)

        assert result.moves == []
        assert result.reason == "king captured"
        assert result.winner is B


class TestEntrypoint:
    """Smoke tests for play.py."""

    def test_main_runs_short_game(self, capsys):
        from play import MatchEntrypoint

        code = MatchEntrypoint().main([
            "--white", "random", "--black", "alphabeta",
            "--config", "fast", "--max-plies", "4", "--seed", "1",
            "--opening", "Modern Benoni", "--log-level", "WARNING",
        ])

        assert code == 0
        output = capsys.readouterr().out
        assert "Result:" in output
        assert output.count("Moves:") == 1

    def test_main_rejects_unknown_preset(self):
        from play import MatchEntrypoint

        assert MatchEntrypoint().main(["--config", "nonexistent", "--log-level", "ERROR"]) == 1

    def test_main_rejects_unknown_opening(self):
        from play import MatchEntrypoint

        assert MatchEntrypoint().main(["--opening", "Bongcloud", "--log-level", "ERROR"]) == 1
