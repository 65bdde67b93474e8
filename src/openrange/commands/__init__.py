"""CLI command implementations.

Each command module provides:
- Configuration loading and validation
- Command execution logic
- Integration with core library functions
"""

from openrange.commands.build_features import (config_from_paths,
                                               load_build_features_config,
                                               run_build_features)
from openrange.commands.demo import run_demo

__all__ = [
    "config_from_paths",
    "load_build_features_config",
    "run_build_features",
    "run_demo",
]
