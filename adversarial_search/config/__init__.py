"""
Configuration Management

This module handles search presets for the game-playing strategies.
"""

from .search_config import SearchConfig, get_search_config, load_search_config, load_search_configs

__all__ = [
    'SearchConfig',
    'get_search_config',
    'load_search_config',
    'load_search_configs',
]
