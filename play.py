#!/usr/bin/env python3
"""
Match Entrypoint for the Adversarial Search Engine

This script runs a headless game between two search strategies and logs
every move.

Usage:
    python play.py --help                                  # Show all options
    python play.py                                         # Alpha-beta vs MCTS, canonical preset
    python play.py --white minimax --black random          # Pick the strategies
    python play.py --config extended                       # 5 s MCTS budget
    python play.py --opening "Slav Defence"                # Replay an opening first
    python play.py --depth 3 --max-plies 80 --seed 7       # Override preset values
"""

import argparse
import logging
import random
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from adversarial_search.config import SearchConfig, load_search_config
from adversarial_search.core import ChessGame, MCTSStats, PlayerColor, create_strategy, play_match
from adversarial_search.core.match import STRATEGY_NAMES, format_action
from adversarial_search.data import create_opening_database

logger = logging.getLogger(__name__)


class MatchEntrypoint:
    """
    Main entrypoint class for running matches.

    Handles command-line arguments, preset loading and opening selection,
    then hands over to ``play_match``.
    """

    def __init__(self):
        self.executor: Optional[ThreadPoolExecutor] = None

    def parse_arguments(self, argv=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            description="Play a headless chess match between two search strategies",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  %(prog)s --white alphabeta --black mcts      # Default pairing
  %(prog)s --config fast --max-plies 40        # Quick smoke game
  %(prog)s --opening random --seed 3           # Weighted random opening
            """
        )

        # Players
        player_group = parser.add_argument_group('Players')
        player_group.add_argument(
            '--white',
            choices=STRATEGY_NAMES,
            default='alphabeta',
            help='Strategy playing White (default: alphabeta)'
        )
        player_group.add_argument(
            '--black',
            choices=STRATEGY_NAMES,
            default='mcts',
            help='Strategy playing Black (default: mcts)'
        )

        # Search configuration
        config_group = parser.add_argument_group('Configuration')
        config_group.add_argument(
            '--config', '-c',
            default='canonical',
            help='Search preset name (default: canonical)'
        )
        config_group.add_argument(
            '--config-file',
            default=None,
            help='JSON file of presets (default: bundled search_configs.json)'
        )
        config_group.add_argument(
            '--depth', '-d',
            type=int,
            default=None,
            help='Override the minimax/alpha-beta depth'
        )
        config_group.add_argument(
            '--time-limit', '-t',
            type=float,
            default=None,
            help='Override the MCTS time budget per move in seconds'
        )

        # Game setup
        game_group = parser.add_argument_group('Game Setup')
        game_group.add_argument(
            '--opening',
            default='none',
            help='Opening name to replay, "random" for a weighted pick, or "none" (default: none)'
        )
        game_group.add_argument(
            '--max-plies',
            type=int,
            default=200,
            help='Stop the game after this many plies (default: 200)'
        )
        game_group.add_argument(
            '--seed',
            type=int,
            default=None,
            help='Seed for the random and MCTS strategies'
        )

        # Logging
        log_group = parser.add_argument_group('Logging')
        log_group.add_argument(
            '--log-level',
            default='INFO',
            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            help='Logging level (default: INFO)'
        )

        return parser.parse_args(argv)

    def load_config(self, args: argparse.Namespace) -> SearchConfig:
        """Load the preset and apply command-line overrides."""
        config = load_search_config(args.config, args.config_file)
        if args.depth is not None:
            if args.depth < 0:
                raise ValueError(f"Depth must be non-negative, got {args.depth}")
            config.minimax_depth = args.depth
        if args.time_limit is not None:
            if args.time_limit <= 0:
                raise ValueError(f"Time limit must be positive, got {args.time_limit}")
            config.mcts_time_limit = args.time_limit
        return config

    def select_opening(self, args: argparse.Namespace):
        """Resolve ``--opening`` to a list of engine actions."""
        if args.opening == 'none':
            return []

        database = create_opening_database()
        if args.opening == 'random':
            rng = np.random.default_rng(args.seed)
            opening = database.sample_opening(rng)
        else:
            opening = database.get_opening(args.opening)

        logger.info(f"Opening: {opening.name} ({opening.eco_code}, {opening.style_category})")
        return database.opening_actions(opening)

    def main(self, argv=None) -> int:
        """Main execution function."""
        args = self.parse_arguments(argv)
        logging.basicConfig(
            level=getattr(logging, args.log_level),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        try:
            config = self.load_config(args)
            opening = self.select_opening(args)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Invalid setup: {e}")
            return 1

        logger.info(f"White: {args.white}, Black: {args.black}, {config}")

        if config.parallel_evaluation:
            self.executor = ThreadPoolExecutor(max_workers=4)

        try:
            game = ChessGame(executor=self.executor)
            rng = random.Random(args.seed)
            strategies = {
                PlayerColor.WHITE: create_strategy(args.white, config, rng),
                PlayerColor.BLACK: create_strategy(args.black, config, rng),
            }
            result = play_match(game, strategies, opening, args.max_plies)
        except KeyboardInterrupt:
            logger.warning("Match interrupted by user")
            return 130
        finally:
            if self.executor is not None:
                self.executor.shutdown()

        for color, strategy in strategies.items():
            if strategy.mcts is not None and strategy.mcts.root is not None:
                logger.info(f"{color.name} MCTS tree after the game:")
                MCTSStats.print_tree_stats(strategy.mcts.root)

        print(f"Result: {result.reason}, winner: "
              f"{result.winner.name if result.winner is not None else 'none'} "
              f"after {result.final_state.ply} plies")
        print("Moves: " + " ".join(format_action(action) for action in result.moves))
        print(result.final_state)
        return 0


def main():
    """Entry point for the match script."""
    entrypoint = MatchEntrypoint()
    sys.exit(entrypoint.main())


if __name__ == "__main__":
    main()
