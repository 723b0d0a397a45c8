"""
Performance benchmark script for Falling Blocks.

Tests the speed of the game engine and environment.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Dict, Any

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def benchmark_engine(num_games: int = 200, seed: int = 42) -> Dict[str, float]:
    """
    Benchmark the game engine speed with random players.

    Args:
        num_games: Number of games to play
        seed: Random seed

    Returns:
        Dictionary of benchmark results
    """
    from game.engine import play_random_game

    print(f"Benchmarking game engine with {num_games} games...")

    total_steps = 0
    total_locks = 0
    start = time.perf_counter()
    for i in range(num_games):
        stats = play_random_game(seed=seed + i)
        total_steps += stats['steps']
        total_locks += stats['pieces_locked']
    total_time = time.perf_counter() - start

    return {
        'num_games': num_games,
        'total_steps': total_steps,
        'total_time': total_time,
        'steps_per_second': total_steps / total_time,
        'locks_per_second': total_locks / total_time,
        'avg_steps_per_game': total_steps / num_games,
    }


def benchmark_environment(num_steps: int = 50000, seed: int = 42) -> Dict[str, float]:
    """
    Benchmark the RL environment speed.

    Args:
        num_steps: Number of steps to take
        seed: Random seed

    Returns:
        Dictionary of benchmark results
    """
    from environment.falling_blocks_env import FallingBlocksEnv

    print(f"Benchmarking environment with {num_steps} steps...")

    env = FallingBlocksEnv(seed=seed)
    env.reset()
    env.action_space.seed(seed)

    start = time.perf_counter()
    steps = 0
    episodes = 0

    while steps < num_steps:
        _, _, terminated, truncated, _ = env.step(env.action_space.sample())
        steps += 1
        if terminated or truncated:
            episodes += 1
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        'num_steps': num_steps,
        'num_episodes': episodes,
        'total_time': elapsed,
        'steps_per_second': num_steps / elapsed,
    }


def print_results(title: str, results: Dict[str, Any]) -> None:
    """Print benchmark results."""
    print(f"\n{'='*60}")
    print(title)
    print('='*60)
    for key, value in results.items():
        if isinstance(value, float):
            print(f"  {key}: {value:.2f}")
        else:
            print(f"  {key}: {value}")
    print('='*60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Benchmark Falling Blocks")
    parser.add_argument("--engine", action="store_true", help="Benchmark game engine")
    parser.add_argument("--env", action="store_true", help="Benchmark environment")
    parser.add_argument("--all", action="store_true", help="Run all benchmarks")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")

    args = parser.parse_args()

    if not (args.all or args.engine or args.env):
        parser.print_help()
        return

    if args.all or args.engine:
        print_results("GAME ENGINE BENCHMARK", benchmark_engine(seed=args.seed))

    if args.all or args.env:
        print_results("ENVIRONMENT BENCHMARK", benchmark_environment(seed=args.seed))


if __name__ == "__main__":
    main()
