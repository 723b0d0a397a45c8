"""
Falling Blocks Gymnasium Environment.

This module provides a Gymnasium-compatible environment for training
reinforcement learning agents on the falling blocks engine. Time is
simulated: every step advances the engine clock by a fixed amount.
"""
from typing import Dict, Tuple, Any, Optional
import numpy as np
import gymnasium as gym
from gymnasium import spaces

from game.engine import Command, EngineConfig, GameEngine, MoveResult, SimulatedClock
from utils.config import DEFAULT_ENVIRONMENT, get_environment_config


# Action index -> command; 0 lets gravity act alone
ACTION_COMMANDS = [
    None,
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.ROTATE_CW,
    Command.ROTATE_CCW,
    Command.SOFT_DROP,
    Command.HARD_DROP,
]


class FallingBlocksEnv(gym.Env):
    """
    Gymnasium environment for Falling Blocks.

    Observation Space:
        Dictionary with:
        - 'board': (height, width) float32 array, 0=empty, 1=settled
        - 'piece': (height, width) float32 array, 1=active piece cell

    Action Space:
        Discrete(7) - index into ACTION_COMMANDS
        0=no-op, 1=left, 2=right, 3=rotate cw, 4=rotate ccw,
        5=soft drop, 6=hard drop
    """

    metadata = {"render_modes": []}

    NUM_ACTIONS = len(ACTION_COMMANDS)

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        reward_config: Optional[Dict[str, float]] = None,
        step_ms: float = 50.0,
        seed: Optional[int] = None,
    ):
        """
        Initialize the environment.

        Args:
            config: Engine configuration
            reward_config: Custom reward configuration
            step_ms: Simulated milliseconds per step
            seed: Random seed for reproducibility
        """
        super().__init__()

        self.seed_value = seed
        self.step_ms = step_ms

        self.reward_config = dict(DEFAULT_ENVIRONMENT['reward'])
        if reward_config:
            self.reward_config.update(reward_config)

        self.clock = SimulatedClock()
        self.engine = GameEngine(config=config, seed=seed, clock=self.clock)
        height, width = self.engine.field.height, self.engine.field.width

        self.observation_space = spaces.Dict({
            'board': spaces.Box(low=0.0, high=1.0, shape=(height, width), dtype=np.float32),
            'piece': spaces.Box(low=0.0, high=1.0, shape=(height, width), dtype=np.float32),
        })
        self.action_space = spaces.Discrete(self.NUM_ACTIONS)

        self._prev_holes = 0

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]], seed: Optional[int] = None) -> "FallingBlocksEnv":
        """Build an environment from a loaded config dictionary."""
        env_config = get_environment_config(config)
        if seed is None:
            seed = (config or {}).get('seed')
        return cls(
            config=EngineConfig.from_dict(config),
            reward_config=env_config['reward'],
            step_ms=env_config['step_ms'],
            seed=seed,
        )

    def _get_observation(self) -> Dict[str, np.ndarray]:
        return self.engine.get_observation()

    def _calculate_reward(self, result: MoveResult) -> float:
        """
        Calculate reward for one step.

        Args:
            result: Combined result of the command and the tick

        Returns:
            Reward value
        """
        reward = self.reward_config['survival_bonus']

        if result.locked:
            reward += self.reward_config['lock_bonus']

            current_holes = self.engine.field.count_holes()
            hole_delta = current_holes - self._prev_holes
            if hole_delta > 0:
                reward += hole_delta * self.reward_config['hole_penalty']
            self._prev_holes = current_holes

        if result.score_gained > 0:
            reward += result.score_gained * self.reward_config['line_clear_base']

        if result.game_over:
            reward += self.reward_config['game_over_penalty']

        return reward

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and spawn the first piece.

        Args:
            seed: Random seed
            options: Additional options (unused)

        Returns:
            Tuple of (observation, info)
        """
        super().reset(seed=seed)

        if seed is not None:
            self.seed_value = seed

        self.clock.now_ms = 0.0
        self.engine.reset(seed=self.seed_value)
        self.engine.tick(self.clock())
        self._prev_holes = 0

        return self._get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Apply a command, then advance the clock and tick the engine.

        Args:
            action: Index into ACTION_COMMANDS

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action}, expected 0-{self.NUM_ACTIONS - 1}")

        command = ACTION_COMMANDS[int(action)]
        moved = MoveResult(success=False)
        if command is not None:
            moved = self.engine.apply_command(command)
        ticked = self.engine.tick(self.clock.advance(self.step_ms))

        result = MoveResult(
            success=moved.success or ticked.success,
            locked=moved.locked or ticked.locked,
            lines_cleared=moved.lines_cleared + ticked.lines_cleared,
            score_gained=moved.score_gained + ticked.score_gained,
            game_over=self.engine.is_game_over(),
        )

        reward = self._calculate_reward(result)
        terminated = result.game_over

        return self._get_observation(), reward, terminated, False, self._get_info(result)

    def _get_info(self, result: Optional[MoveResult] = None) -> Dict[str, Any]:
        stats = self.engine.get_statistics()
        info = {
            'score': stats['score'],
            'lines_cleared': stats['total_lines_cleared'],
            'pieces_locked': stats['pieces_locked'],
            'holes': stats['holes'],
            'max_height': stats['max_height'],
            'gravity_interval_ms': self.engine.gravity_interval(),
        }

        if result:
            info['last_step'] = {
                'locked': result.locked,
                'lines_cleared': result.lines_cleared,
                'score_gained': result.score_gained,
            }

        return info

    def close(self) -> None:
        """Clean up resources."""
        pass


# Register environment with Gymnasium
gym.register(
    id='FallingBlocks-v0',
    entry_point='environment.falling_blocks_env:FallingBlocksEnv',
    max_episode_steps=20000,
)
