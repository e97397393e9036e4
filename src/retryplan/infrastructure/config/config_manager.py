"""Configuration manager for loading retry policy options from .retryplan.yml"""

import copy
import logging
import os
import random
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml

from retryplan.domain.errors import ConfigurationError
from retryplan.domain.policy import RetryPolicy
from retryplan.infrastructure.strategy_factory import build_policy

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".retryplan.yml"

# Options understood by every strategy
COMMON_OPTIONS = ("max_attempts", "jitter_factor", "max_delay")


def switch_strategy(options: Dict[str, Any], strategy: str) -> Dict[str, Any]:
    """Point options at another strategy, dropping the old strategy's parameters"""
    if options.get("strategy") == strategy:
        return dict(options)
    switched = {k: v for k, v in options.items() if k in COMMON_OPTIONS}
    switched["strategy"] = strategy
    return switched


class ConfigManager:
    """Manages policy options from .retryplan.yml and environment variables

    Configuration priority:
    1. Default values (DEFAULT_CONFIG)
    2. .retryplan.yml file (searched from current directory upward)
    3. Environment variables (RETRYPLAN_*)
    4. CLI arguments (handled by CLI layer)

    The file holds a top-level "policy" mapping, e.g.:

        policy:
          strategy: exponential
          initial_delay: 0.5
          max_attempts: 5
          max_delay: 30
          jitter_factor: 0.1
    """

    DEFAULT_CONFIG = {
        "policy": {
            "strategy": "constant",
            "delay_on_failure": 1.0,
        },
    }

    # environment variable -> (policy option, converter)
    ENV_OVERRIDES = {
        "RETRYPLAN_STRATEGY": ("strategy", str),
        "RETRYPLAN_MAX_ATTEMPTS": ("max_attempts", int),
        "RETRYPLAN_MAX_DELAY": ("max_delay", float),
        "RETRYPLAN_JITTER_FACTOR": ("jitter_factor", float),
    }

    def __init__(self, config_path: Optional[Union[Path, str]] = None):
        """Initialize config manager

        Args:
            config_path: Path to .retryplan.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If the file content or an override is invalid
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        self.config: Dict[str, Any] = self._load_config()

    def _find_config_file(self) -> Optional[Path]:
        """Find .retryplan.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> Dict[str, Any]:
        config = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")
            else:
                if not isinstance(file_config, dict):
                    raise ConfigurationError(
                        f"{self.config_path}: expected a mapping at top level"
                    )
                config = self._merge_config(config, file_config)
                logger.info(f"Loaded configuration from {self.config_path}")

        if not isinstance(config.get("policy"), dict):
            raise ConfigurationError("'policy' section must be a mapping")
        return self._apply_env_overrides(config)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge file configuration over defaults

        A policy section naming a different strategy replaces the default
        policy section instead of merging with it, since strategy options
        are not interchangeable.
        """
        result = base.copy()
        for key, value in override.items():
            if (
                key == "policy"
                and isinstance(value, dict)
                and value.get("strategy", result[key].get("strategy")) != result[key].get("strategy")
            ):
                result[key] = dict(value)
            elif key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        for env_name, (option, convert) in self.ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if not raw:
                continue
            try:
                value = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {env_name}: {raw!r}") from e
            if option == "strategy":
                config["policy"] = switch_strategy(config["policy"], value)
            else:
                config["policy"][option] = value
        return config

    def get_policy_options(self) -> Dict[str, Any]:
        """Get policy options (strategy name plus its parameters)

        Returns:
            Copy of the policy options mapping
        """
        return dict(self.config["policy"])

    def create_policy(
        self,
        overrides: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> RetryPolicy:
        """Create a RetryPolicy from the loaded options

        Args:
            overrides: Options taking precedence over file and environment
            clock: Time source for the policy
            rng: Random source for jitter

        Raises:
            ConfigurationError: If the resulting options are invalid
        """
        options = self.get_policy_options()
        if overrides:
            if "strategy" in overrides:
                options = switch_strategy(options, overrides["strategy"])
            options.update(overrides)
        return build_policy(options, clock=clock, rng=rng)
