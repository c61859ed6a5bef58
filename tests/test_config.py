"""Tests for search configuration loading."""

import json

import pytest

from adversarial_search.config import SearchConfig, get_search_config, load_search_config, load_search_configs


def write_presets(path, presets):
    path.write_text(json.dumps(presets))
    return path


VALID_PRESET = {
    "minimax_depth": 3,
    "mcts_time_limit": 2.5,
    "mcts_max_children": 6,
    "mcts_workers": 2,
}


class TestBundledPresets:
    """Tests for the presets shipped with the package."""

    def test_default_config(self):
        config = get_search_config()

        assert config.minimax_depth == 2
        assert config.mcts_time_limit == 1.0
        assert config.mcts_max_children == 10
        assert config.mcts_workers == 1
        assert config.parallel_evaluation is False

    def test_canonical_matches_default(self):
        canonical = load_search_config("canonical")

        assert repr(canonical) == repr(get_search_config())

    def test_extended_has_five_second_budget(self):
        assert load_search_config("extended").mcts_time_limit == 5.0

    def test_only_extended_evaluates_in_parallel(self):
        configs = load_search_configs()

        assert configs["extended"].parallel_evaluation is True
        assert configs["canonical"].parallel_evaluation is False
        assert configs["fast"].parallel_evaluation is False

    def test_all_presets_load(self):
        configs = load_search_configs()

        assert {"canonical", "extended", "fast"} <= set(configs)
        assert all(isinstance(config, SearchConfig) for config in configs.values())


class TestConfigErrors:
    """Tests for invalid configuration files."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_search_configs(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_search_configs(path)

    def test_unknown_preset(self, tmp_path):
        path = write_presets(tmp_path / "presets.json", {"custom": VALID_PRESET})

        with pytest.raises(ValueError, match="Unknown search preset"):
            load_search_config("canonical", path)

    def test_custom_preset(self, tmp_path):
        path = write_presets(tmp_path / "presets.json", {"custom": VALID_PRESET})
        config = load_search_config("custom", path)

        assert config.minimax_depth == 3
        assert config.mcts_time_limit == 2.5
        assert config.mcts_max_children == 6
        assert config.mcts_workers == 2
        assert config.parallel_evaluation is False

    @pytest.mark.parametrize("field", ["minimax_depth", "mcts_time_limit", "mcts_max_children", "mcts_workers"])
    def test_missing_field(self, tmp_path, field):
        preset = {k: v for k, v in VALID_PRESET.items() if k != field}
        path = write_presets(tmp_path / "presets.json", {"custom": preset})

        with pytest.raises(ValueError, match=field):
            load_search_config("custom", path)

    @pytest.mark.parametrize("field, value", [
        ("minimax_depth", -1),
        ("minimax_depth", 1.5),
        ("mcts_time_limit", 0),
        ("mcts_time_limit", "fast"),
        ("mcts_max_children", 0),
        ("mcts_workers", True),
    ])
    def test_invalid_value(self, tmp_path, field, value):
        preset = dict(VALID_PRESET, **{field: value})
        path = write_presets(tmp_path / "presets.json", {"custom": preset})

        with pytest.raises(ValueError):
            load_search_config("custom", path)

    def test_non_object_file(self, tmp_path):
        path = write_presets(tmp_path / "presets.json", ["canonical"])

        with pytest.raises(ValueError):
            load_search_configs(path)
