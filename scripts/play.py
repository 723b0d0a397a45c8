"""
Headless play script for Falling Blocks.

Drives the engine with a random player on a simulated clock, logs every
finished game and prints summary statistics.
"""
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional
import numpy as np
from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from game.engine import EngineConfig, play_random_game
from utils.config import DEFAULT_CONFIG_PATH, get_environment_config, load_config
from utils.logger import GameLogger, MetricsTracker


def play_random(
    num_games: int,
    seed: int,
    config: Optional[Dict[str, Any]] = None,
    log_dir: Optional[str] = None,
    step_ms: float = 50.0,
) -> Dict[str, Dict[str, float]]:
    """
    Play random games and show statistics.

    Args:
        num_games: Number of games to play
        seed: Base random seed (game i uses seed + i)
        config: Loaded config dictionary
        log_dir: Directory for the JSON-lines log (no log when None)
        step_ms: Simulated milliseconds per step

    Returns:
        Summary statistics per metric
    """
    engine_config = EngineConfig.from_dict(config)
    logger = GameLogger(log_dir, name="random_play") if log_dir else None
    tracker = MetricsTracker(window_size=num_games)

    for i in tqdm(range(num_games), desc="Playing"):
        stats = play_random_game(
            seed=seed + i,
            config=engine_config,
            step_ms=step_ms,
            keep_snapshot=logger is not None,
        )
        tracker.add_stats(stats, keys=['score', 'total_lines_cleared', 'pieces_locked', 'steps'])
        if logger:
            logger.log_game(stats, seed=seed + i)

    summaries = tracker.get_all_summaries()

    print("\n" + "=" * 60)
    print("RANDOM PLAYER STATISTICS")
    print("=" * 60)
    print(f"Games: {num_games}")
    print(f"Field: {engine_config.width}x{engine_config.height}")
    for key, summary in summaries.items():
        print(f"  {key}: {summary['mean']:.1f} ± {summary['std']:.1f} "
              f"(min {summary['min']:.0f}, max {summary['max']:.0f})")
    print("=" * 60)

    if logger:
        summary_file = logger.save_summary()
        print(f"Logs saved to {logger.log_file} and {summary_file}")

    return summaries


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Play Falling Blocks headlessly")
    parser.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to configuration file"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=10,
        help="Number of games to play"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (overrides the config file)"
    )
    parser.add_argument(
        "--step-ms",
        type=float,
        default=None,
        help="Simulated milliseconds per step (overrides the config file)"
    )
    parser.add_argument(
        "--no-log",
        action="store_true",
        help="Do not write a JSON-lines log"
    )

    args = parser.parse_args()

    config = load_config(args.config)
    seed = args.seed if args.seed is not None else config.get('seed')
    if seed is None:
        seed = int(np.random.default_rng().integers(2**31))
        print(f"Using random seed {seed}")

    step_ms = args.step_ms if args.step_ms is not None else get_environment_config(config)["step_ms"]
    log_dir = None if args.no_log else (config.get('paths') or {}).get('log_dir', 'logs')

    play_random(
        num_games=args.games,
        seed=seed,
        config=config,
        log_dir=log_dir,
        step_ms=step_ms,
    )


if __name__ == "__main__":
    main()
