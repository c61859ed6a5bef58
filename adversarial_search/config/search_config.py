"""
Search configuration for the game-playing strategies.

Presets live in ``search_configs.json`` next to this module. Each preset
must define every field in ``REQUIRED_FIELDS``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "search_configs.json"
DEFAULT_PRESET = "canonical"

REQUIRED_FIELDS = ['minimax_depth', 'mcts_time_limit', 'mcts_max_children', 'mcts_workers']


class SearchConfig:
    """
    Configuration class for the search strategies.

    Attributes:
        minimax_depth (int): Plies searched by minimax and alpha-beta.
        mcts_time_limit (float): MCTS wall-clock budget per move in seconds.
        mcts_max_children (int): Children a node needs before MCTS descends past it.
        mcts_workers (int): Threads growing the MCTS tree.
        parallel_evaluation (bool): Fan the evaluation terms out to a thread pool.
    """

    def __init__(
        self,
        minimax_depth: int = 2,
        mcts_time_limit: float = 1.0,
        mcts_max_children: int = 10,
        mcts_workers: int = 1,
        parallel_evaluation: bool = False
    ):
        self.minimax_depth = minimax_depth
        self.mcts_time_limit = mcts_time_limit
        self.mcts_max_children = mcts_max_children
        self.mcts_workers = mcts_workers
        self.parallel_evaluation = parallel_evaluation

    @classmethod
    def from_dict(cls, name: str, values: Dict[str, Any]) -> 'SearchConfig':
        """
        Build a validated config from one preset entry.

        Raises:
            ValueError: if a required field is missing or has an invalid value
        """
        for field in REQUIRED_FIELDS:
            if field not in values:
                raise ValueError(f"Search config {name} missing required field: {field}")

        depth = values['minimax_depth']
        if not isinstance(depth, int) or isinstance(depth, bool) or depth < 0:
            raise ValueError(f"Search config {name} has invalid minimax depth: {depth}")

        time_limit = values['mcts_time_limit']
        if not isinstance(time_limit, (int, float)) or isinstance(time_limit, bool) or time_limit <= 0:
            raise ValueError(f"Search config {name} has invalid MCTS time limit: {time_limit}")

        for field in ('mcts_max_children', 'mcts_workers'):
            count = values[field]
            if not isinstance(count, int) or isinstance(count, bool) or count <= 0:
                raise ValueError(f"Search config {name} has invalid {field}: {count}")

        return cls(
            minimax_depth=depth,
            mcts_time_limit=float(time_limit),
            mcts_max_children=values['mcts_max_children'],
            mcts_workers=values['mcts_workers'],
            parallel_evaluation=bool(values.get('parallel_evaluation', False)),
        )

    def __repr__(self):
        return (f"SearchConfig(minimax_depth={self.minimax_depth}, "
                f"mcts_time_limit={self.mcts_time_limit}, "
                f"mcts_max_children={self.mcts_max_children}, "
                f"mcts_workers={self.mcts_workers}, "
                f"parallel_evaluation={self.parallel_evaluation})")


def load_search_configs(path: Optional[Union[str, Path]] = None) -> Dict[str, SearchConfig]:
    """
    Load and validate every preset in a configuration file.

    Args:
        path: JSON file of presets (default: the bundled ``search_configs.json``)

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not valid JSON or a preset is invalid
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Search config not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in search config: {e}")

    if not isinstance(raw, dict):
        raise ValueError(f"Search config must map preset names to settings: {config_path}")

    configs = {}
    for name, values in raw.items():
        if not isinstance(values, dict):
            raise ValueError(f"Search config {name} must be an object")
        configs[name] = SearchConfig.from_dict(name, values)

    logger.debug(f"Loaded search presets from {config_path}: {list(configs.keys())}")
    return configs


def load_search_config(name: str = DEFAULT_PRESET, path: Optional[Union[str, Path]] = None) -> SearchConfig:
    """
    Load one named preset.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the preset is unknown or invalid
    """
    configs = load_search_configs(path)
    if name not in configs:
        raise ValueError(f"Unknown search preset '{name}'. Available: {sorted(configs.keys())}")
    return configs[name]


def get_search_config():
    """
    Returns an instance of SearchConfig with default parameters.

    Returns:
        SearchConfig: The canonical configuration (depth 2, 1 s MCTS budget).
    """
    return SearchConfig()
