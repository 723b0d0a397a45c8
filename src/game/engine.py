"""
Falling Blocks Game Engine.

This module implements the complete game logic including:
- Game state management (no active piece / falling / game over)
- Piece generation from a seedable random source
- Gravity driven by elapsed time
- Locking, line clearing and scoring
- Game over detection
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple
import time
import numpy as np

from .field import Field
from .piece import Cell, Piece
from .shapes import Kind, random_kind


class GameStatus(Enum):
    """Game status enumeration."""
    NO_ACTIVE_PIECE = "no_active_piece"
    FALLING = "falling"
    GAME_OVER = "game_over"


class Command(Enum):
    """Discrete player commands pushed in by an input source."""
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    ROTATE_CW = "rotate_cw"
    ROTATE_CCW = "rotate_ccw"
    SOFT_DROP = "soft_drop"
    HARD_DROP = "hard_drop"
    QUIT = "quit"


@dataclass
class EngineConfig:
    """Configuration for the game engine."""
    # Field dimensions
    width: int = Field.DEFAULT_WIDTH
    height: int = Field.DEFAULT_HEIGHT

    # Gravity: interval = max(base - score, min)
    base_interval_ms: int = 1000
    min_interval_ms: int = 100

    # Spawn the next piece inside the lock instead of on the following tick
    spawn_on_lock: bool = False

    def __post_init__(self):
        if self.width < 4 or self.height < 4:
            raise ValueError(f"Field must be at least 4x4, got {self.width}x{self.height}")
        if self.min_interval_ms <= 0:
            raise ValueError(f"min_interval_ms must be positive, got {self.min_interval_ms}")
        if self.base_interval_ms < self.min_interval_ms:
            raise ValueError(
                f"base_interval_ms ({self.base_interval_ms}) must not be below "
                f"min_interval_ms ({self.min_interval_ms})"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the nested layout used by config files."""
        return {
            'field': {'width': self.width, 'height': self.height},
            'gravity': {
                'base_interval_ms': self.base_interval_ms,
                'min_interval_ms': self.min_interval_ms,
            },
            'engine': {'spawn_on_lock': self.spawn_on_lock},
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EngineConfig":
        """Create from a config dictionary. Missing sections use defaults."""
        data = data or {}
        field_cfg = data.get('field') or {}
        gravity = data.get('gravity') or {}
        engine = data.get('engine') or {}
        return cls(
            width=int(field_cfg.get('width', Field.DEFAULT_WIDTH)),
            height=int(field_cfg.get('height', Field.DEFAULT_HEIGHT)),
            base_interval_ms=int(gravity.get('base_interval_ms', 1000)),
            min_interval_ms=int(gravity.get('min_interval_ms', 100)),
            spawn_on_lock=bool(engine.get('spawn_on_lock', False)),
        )


@dataclass
class MoveResult:
    """Result of a tick, command or spawn."""
    success: bool
    locked: bool = False
    lines_cleared: int = 0
    score_gained: int = 0
    game_over: bool = False


@dataclass
class GameSnapshot:
    """Read-only view of the game handed to renderers."""
    grid: np.ndarray
    active_kind: Optional[Kind]
    active_cells: Optional[Tuple[Cell, ...]]
    score: int
    terminal: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "grid": self.grid.tolist(),
            "active_kind": self.active_kind.name if self.active_kind is not None else None,
            "active_cells": [list(c) for c in self.active_cells] if self.active_cells else None,
            "score": self.score,
            "terminal": self.terminal,
        }


def monotonic_ms() -> float:
    """Default engine clock in milliseconds."""
    return time.monotonic() * 1000.0


@dataclass
class SimulatedClock:
    """Manually advanced clock for headless play and tests."""
    now_ms: float = 0.0

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> float:
        self.now_ms += ms
        return self.now_ms


class GameEngine:
    """
    Falling blocks game engine.

    Owns the field, the active piece, the score and the gravity timer.
    A single driver calls tick() and apply_command() in order and reads
    get_snapshot() to draw.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize a new game.

        Args:
            config: Engine configuration (default 10x22 field)
            seed: Random seed for reproducibility (ignored when rng is given)
            rng: Random source used to deal pieces
            clock: Callable returning the current time in milliseconds
        """
        self.config = config or EngineConfig()
        self.field = Field(self.config.width, self.config.height)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.clock = clock or monotonic_ms

        # Game state
        self.active = Piece.empty()
        self.status = GameStatus.NO_ACTIVE_PIECE
        self.score = 0

        # Last time seen by tick(), shared by commands and spawns
        self.now = 0.0
        self.last_fall = 0.0

        # Statistics
        self.pieces_spawned = 0
        self.pieces_locked = 0
        self.total_lines_cleared = 0
        self.ticks = 0

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Reset the game to initial state.

        Args:
            seed: New random seed (optional)

        Returns:
            Initial snapshot
        """
        if seed is not None:
            self.rng = np.random.default_rng(seed)

        self.field.reset()
        self.active = Piece.empty()
        self.status = GameStatus.NO_ACTIVE_PIECE
        self.score = 0
        self.now = 0.0
        self.last_fall = 0.0
        self.pieces_spawned = 0
        self.pieces_locked = 0
        self.total_lines_cleared = 0
        self.ticks = 0

        return self.get_snapshot()

    @property
    def spawn_position(self) -> Cell:
        return self.field.width // 2, self.field.height - 1

    def gravity_interval(self) -> int:
        """Milliseconds between gravity steps, shrinking as the score grows."""
        return max(self.config.base_interval_ms - self.score, self.config.min_interval_ms)

    def _try_install(self, candidate: Piece) -> bool:
        # Only path by which the active piece changes position
        if not self.field.can_place(candidate):
            return False
        self.active = candidate
        return True

    def tick(self, now: Optional[float] = None) -> MoveResult:
        """
        Advance the state machine.

        Spawns when no piece is active. Otherwise moves the piece down one
        row once the gravity interval has elapsed, locking it if blocked.

        Args:
            now: Current time in milliseconds (reads the clock if omitted)
        """
        if self.status == GameStatus.GAME_OVER:
            return MoveResult(success=False, game_over=True)

        self.now = self.clock() if now is None else now
        now = self.now
        self.ticks += 1

        if self.status == GameStatus.NO_ACTIVE_PIECE:
            return self.spawn_next(now=now)

        if now - self.last_fall > self.gravity_interval():
            return self._step_down(now)
        return MoveResult(success=False)

    def _step_down(self, now: float) -> MoveResult:
        if self._try_install(self.active.down()):
            self.last_fall = now
            return MoveResult(success=True)
        return self.lock_and_settle(now=now)

    def spawn_next(self, kind: Optional[Kind] = None, now: Optional[float] = None) -> MoveResult:
        """
        Spawn a new piece at the top center of the field.

        Args:
            kind: Kind to spawn (random when omitted)
            now: Time the fall timer restarts from (last tick time if omitted)

        Returns:
            MoveResult; game_over is set when the spawn cells are blocked

        Raises:
            ValueError: If kind is the EMPTY sentinel
        """
        if kind is not None and Kind(kind) == Kind.EMPTY:
            raise ValueError("Cannot spawn the empty piece")
        if self.status == GameStatus.GAME_OVER:
            return MoveResult(success=False, game_over=True)
        if self.status == GameStatus.FALLING:
            return MoveResult(success=False)

        if kind is None:
            kind = random_kind(self.rng)
        x, y = self.spawn_position
        piece = Piece.spawn(kind, x, y)

        if not self.field.can_place(piece):
            self.status = GameStatus.GAME_OVER
            return MoveResult(success=False, game_over=True)

        self.active = piece
        self.status = GameStatus.FALLING
        self.last_fall = self.now if now is None else now
        self.pieces_spawned += 1
        return MoveResult(success=True)

    def lock_and_settle(self, now: Optional[float] = None) -> MoveResult:
        """
        Lock the active piece, clear completed lines and update the score.

        The score grows by the square of the lines cleared in this single
        pass. The next piece arrives on the following tick unless
        spawn_on_lock is configured.
        """
        if self.status != GameStatus.FALLING:
            return MoveResult(success=False, game_over=self.is_game_over())

        self.field.lock(self.active)
        lines = self.field.clear_completed_lines()
        gained = lines * lines

        self.score += gained
        self.pieces_locked += 1
        self.total_lines_cleared += lines
        self.active = Piece.empty()
        self.status = GameStatus.NO_ACTIVE_PIECE

        result = MoveResult(
            success=True,
            locked=True,
            lines_cleared=lines,
            score_gained=gained,
        )
        if self.config.spawn_on_lock:
            result.game_over = self.spawn_next(now=now).game_over
        return result

    def apply_command(self, command: Command, now: Optional[float] = None) -> MoveResult:
        """
        Apply a player command to the active piece.

        Rejected moves and rotations leave the state unchanged. Commands are
        ignored after game over or while no piece is active. Drops restart
        the fall timer at the time of the last tick unless now is given.

        Args:
            command: Command (or its string value)
            now: Current time in milliseconds
        """
        command = Command(command)
        if now is not None:
            self.now = now
        now = self.now
        if self.status != GameStatus.FALLING:
            return MoveResult(success=False, game_over=self.is_game_over())

        if command == Command.MOVE_LEFT:
            return MoveResult(success=self._try_install(self.active.left()))
        if command == Command.MOVE_RIGHT:
            return MoveResult(success=self._try_install(self.active.right()))
        if command == Command.ROTATE_CW:
            return MoveResult(success=self._try_install(self.active.rotate_clockwise()))
        if command == Command.ROTATE_CCW:
            return MoveResult(success=self._try_install(self.active.rotate_counterclockwise()))
        if command == Command.SOFT_DROP:
            return self._step_down(now)
        if command == Command.HARD_DROP:
            while self._try_install(self.active.down()):
                pass
            return self.lock_and_settle(now=now)

        # QUIT is handled by whoever drives the engine
        return MoveResult(success=False)

    def get_snapshot(self) -> GameSnapshot:
        """Get a copy of everything a renderer needs."""
        if self.active.is_empty():
            kind, cells = None, None
        else:
            kind, cells = self.active.kind, self.active.cells
        return GameSnapshot(
            grid=self.field.get_state(),
            active_kind=kind,
            active_cells=cells,
            score=self.score,
            terminal=self.is_game_over(),
        )

    def get_observation(self) -> Dict[str, np.ndarray]:
        """
        Get observation for the neural network.

        Returns:
            Dictionary with:
            - 'board': (height, width) float array of settled cells
            - 'piece': (height, width) float array of the active piece
        """
        piece = np.zeros((self.field.height, self.field.width), dtype=np.float32)
        if not self.active.is_empty():
            for x, y in self.active.cells:
                piece[y, x] = 1.0
        return {
            'board': self.field.to_tensor(),
            'piece': piece,
        }

    def get_statistics(self) -> Dict[str, Any]:
        """Get game statistics."""
        heights = self.field.get_height_map()
        return {
            'score': self.score,
            'pieces_spawned': self.pieces_spawned,
            'pieces_locked': self.pieces_locked,
            'total_lines_cleared': self.total_lines_cleared,
            'ticks': self.ticks,
            'max_height': int(heights.max()),
            'holes': self.field.count_holes(),
            'board_fill_ratio': self.field.total_blocks / (self.field.width * self.field.height),
        }

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self.status == GameStatus.GAME_OVER

    def __repr__(self) -> str:
        return (f"GameEngine(status={self.status.value}, score={self.score}, "
                f"active={self.active!r})")


# Commands a random player picks from; None means "do nothing this step"
RANDOM_PLAYER_COMMANDS = [
    None,
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.ROTATE_CW,
    Command.ROTATE_CCW,
    Command.SOFT_DROP,
    Command.HARD_DROP,
]


def play_random_game(
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
    step_ms: float = 50.0,
    max_steps: int = 100_000,
    verbose: bool = False,
    keep_snapshot: bool = False,
) -> Dict[str, Any]:
    """
    Play a complete game with random commands on a simulated clock.

    Args:
        seed: Random seed
        config: Engine configuration
        step_ms: Simulated milliseconds between steps
        max_steps: Step limit in case the game never ends
        verbose: Whether to print game progress
        keep_snapshot: Add the final snapshot (as a dictionary) under 'final'

    Returns:
        Dictionary with game statistics
    """
    clock = SimulatedClock()
    engine = GameEngine(config=config, seed=seed, clock=clock)

    if verbose:
        print("Starting random game...")

    steps = 0
    while not engine.is_game_over() and steps < max_steps:
        command = RANDOM_PLAYER_COMMANDS[int(engine.rng.integers(len(RANDOM_PLAYER_COMMANDS)))]
        if command is not None:
            result = engine.apply_command(command)
            if verbose and result.lines_cleared > 0:
                print(f"Step {steps}: cleared {result.lines_cleared} lines, "
                      f"+{result.score_gained} points")
        engine.tick(clock.advance(step_ms))
        steps += 1

    stats = engine.get_statistics()
    stats['steps'] = steps
    if keep_snapshot:
        stats['final'] = engine.get_snapshot().to_dict()

    if verbose:
        print("\n" + "=" * 40)
        print("GAME OVER!" if engine.is_game_over() else "STEP LIMIT REACHED")
        print(f"Final Statistics: {stats}")

    return stats
