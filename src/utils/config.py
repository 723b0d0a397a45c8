"""
Configuration loading.
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml

from game.engine import EngineConfig


# Shipped as package data next to this module
DEFAULT_CONFIG_PATH = Path(__file__).resolve().with_name("default.yaml")

# Used for the sections a config file leaves out
DEFAULT_ENVIRONMENT = {
    'step_ms': 50,
    'reward': {
        'line_clear_base': 1.0,
        'lock_bonus': 0.01,
        'hole_penalty': -0.05,
        'survival_bonus': 0.001,
        'game_over_penalty': -1.0,
    },
}


def load_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping, got {type(config).__name__}")
    return config


def load_engine_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> EngineConfig:
    """Load the engine section of a YAML config file."""
    return EngineConfig.from_dict(load_config(config_path))


def get_environment_config(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge the 'environment' section of a config over the defaults.

    Args:
        config: Full config dictionary (may be None)

    Returns:
        Dictionary with 'step_ms' and 'reward'
    """
    section = (config or {}).get('environment') or {}
    reward = dict(DEFAULT_ENVIRONMENT['reward'])
    reward.update(section.get('reward') or {})
    return {
        'step_ms': float(section.get('step_ms', DEFAULT_ENVIRONMENT['step_ms'])),
        'reward': reward,
    }
