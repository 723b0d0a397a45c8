"""
Game logging.

One JSON line per finished game: seed, statistics and, when recorded, the
final snapshot of the field. Summaries and rolling windows are computed over
the numeric statistics only.
"""
from typing import Dict, Any, Optional, List, Union
from pathlib import Path
from collections import defaultdict, deque
from datetime import datetime
from enum import Enum
import json
import time
import numpy as np


def convert_to_serializable(obj):
    """Convert numpy and enum values to Python types for JSON serialization."""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, Enum):
        return obj.name
    elif isinstance(obj, dict):
        return {k: convert_to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_to_serializable(i) for i in obj]
    return obj


def _numeric(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


class GameLogger:
    """
    Appends finished games to `<log_dir>/<name>_<timestamp>.jsonl`.

    Each record has the keys 'game' (1-based index), 'seed', 'timestamp',
    'elapsed' (seconds since the logger was created), 'stats' and 'final'
    (snapshot dictionary or None).
    """

    def __init__(self, log_dir: Union[str, Path], name: str = "games"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.name = name
        self.start_time = time.time()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"{name}_{timestamp}.jsonl"

        self.games = 0
        self.history: Dict[str, List[float]] = defaultdict(list)

    def log_game(
        self,
        stats: Dict[str, Any],
        seed: Optional[int] = None,
        snapshot: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Write one finished game.

        Args:
            stats: Engine statistics (see GameEngine.get_statistics). A
                'final' entry, as added by play_random_game, is moved to the
                record's 'final' field.
            seed: Seed the game was played with
            snapshot: Final snapshot dictionary (overrides stats['final'])

        Returns:
            The record as written
        """
        stats = dict(stats)
        final = stats.pop('final', None)
        if snapshot is not None:
            final = snapshot

        self.games += 1
        record = convert_to_serializable({
            'game': self.games,
            'seed': seed,
            'timestamp': datetime.now().isoformat(),
            'elapsed': time.time() - self.start_time,
            'stats': stats,
            'final': final,
        })

        for key, value in stats.items():
            if _numeric(value):
                self.history[key].append(float(value))

        with open(self.log_file, 'a') as f:
            f.write(json.dumps(record) + '\n')
        return record

    def save_summary(self) -> Path:
        """Write mean/std/min/max/last of every numeric statistic."""
        summary = {
            'name': self.name,
            'games': self.games,
            'total_time': time.time() - self.start_time,
            'stats': {key: summarize(values) for key, values in self.history.items()},
        }

        summary_file = self.log_dir / f"{self.name}_summary.json"
        with open(summary_file, 'w') as f:
            json.dump(summary, f, indent=2)
        return summary_file


def read_games(log_file: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load the records of a game log."""
    with open(log_file, 'r') as f:
        return [json.loads(line) for line in f if line.strip()]


def summarize(values: List[float]) -> Dict[str, float]:
    if not values:
        return {'mean': 0.0, 'std': 0.0, 'min': 0.0, 'max': 0.0, 'last': 0.0}
    arr = np.asarray(values, dtype=np.float64)
    return {
        'mean': float(arr.mean()),
        'std': float(arr.std()),
        'min': float(arr.min()),
        'max': float(arr.max()),
        'last': float(arr[-1]),
    }


class MetricsTracker:
    """Rolling window over the most recent values of each statistic."""

    def __init__(self, window_size: int = 100):
        self.window_size = window_size
        self.metrics: Dict[str, deque] = {}

    def add(self, name: str, value: float) -> None:
        if name not in self.metrics:
            self.metrics[name] = deque(maxlen=self.window_size)
        self.metrics[name].append(value)

    def add_stats(self, stats: Dict[str, Any], keys: Optional[List[str]] = None) -> None:
        """Add the numeric entries of a statistics dictionary."""
        for key in keys if keys is not None else list(stats):
            if _numeric(stats.get(key)):
                self.add(key, stats[key])

    def get_summary(self, name: str) -> Dict[str, float]:
        return summarize(list(self.metrics.get(name, ())))

    def get_all_summaries(self) -> Dict[str, Dict[str, float]]:
        return {name: self.get_summary(name) for name in self.metrics}

    def reset(self) -> None:
        self.metrics.clear()
