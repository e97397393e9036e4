"""Factory for creating backoff strategies and policies"""

import logging
import random
import time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from pydantic import ValidationError

from retryplan.domain.config import (
    ConstantConfig,
    ExponentialConfig,
    FibonacciConfig,
    LILDConfig,
    LIMDConfig,
    MILDConfig,
    MIMDConfig,
    PolicyConfig,
)
from retryplan.domain.errors import ConfigurationError
from retryplan.domain.policy import RetryPolicy
from retryplan.domain.strategies import (
    BackoffStrategy,
    ConstantStrategy,
    ExponentialStrategy,
    FibonacciStrategy,
    LILDStrategy,
    LIMDStrategy,
    MILDStrategy,
    MIMDStrategy,
)

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = "constant"


def format_validation_error(error: ValidationError) -> str:
    """Render a pydantic ValidationError as one line per offending field"""
    lines = []
    for item in error.errors():
        field = ".".join(str(x) for x in item["loc"]) or "<root>"
        lines.append(f"  - {field}: {item['msg']}")
    return "\n".join(lines)


class StrategyFactory:
    """Factory for creating backoff strategy instances"""

    STRATEGIES: Dict[str, Tuple[Type[PolicyConfig], Callable[[Any], BackoffStrategy]]] = {
        "constant": (ConstantConfig, ConstantStrategy),
        "exponential": (ExponentialConfig, ExponentialStrategy),
        "fibonacci": (FibonacciConfig, FibonacciStrategy),
        "lild": (LILDConfig, LILDStrategy),
        "limd": (LIMDConfig, LIMDStrategy),
        "mild": (MILDConfig, MILDStrategy),
        "mimd": (MIMDConfig, MIMDStrategy),
    }

    @classmethod
    def available(cls) -> list:
        """Names of the supported strategies"""
        return list(cls.STRATEGIES.keys())

    @classmethod
    def config_model(cls, strategy_type: str) -> Type[PolicyConfig]:
        """Get the configuration model of a strategy

        Raises:
            ConfigurationError: If strategy type is not supported
        """
        return cls._lookup(strategy_type)[0]

    @classmethod
    def create(cls, strategy_type: str, options: Optional[Mapping[str, Any]] = None) -> BackoffStrategy:
        """Create strategy instance

        Args:
            strategy_type: Type of strategy (constant, exponential, etc.)
            options: Strategy and policy options (max_attempts, jitter_factor, ...)

        Returns:
            BackoffStrategy instance holding its validated configuration

        Raises:
            ConfigurationError: If the strategy type is not supported or the
                options are invalid (unknown key, missing required key, bad value)
        """
        config_class, strategy_class = cls._lookup(strategy_type)
        try:
            config = config_class(**dict(options or {}))
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration for {strategy_type.lower()} strategy:\n"
                + format_validation_error(e)
            ) from e
        logger.debug(f"Creating {strategy_type.lower()} strategy: {config.model_dump()}")
        return strategy_class(config)

    @classmethod
    def _lookup(cls, strategy_type: str) -> Tuple[Type[PolicyConfig], Callable[[Any], BackoffStrategy]]:
        if not isinstance(strategy_type, str) or strategy_type.lower() not in cls.STRATEGIES:
            available = ", ".join(cls.STRATEGIES.keys())
            raise ConfigurationError(
                f"Unknown strategy: {strategy_type}. Available strategies: {available}"
            )
        return cls.STRATEGIES[strategy_type.lower()]


def build_policy(
    options: Mapping[str, Any],
    clock: Callable[[], float] = time.time,
    rng: Optional[random.Random] = None,
) -> RetryPolicy:
    """Build a RetryPolicy from a configuration mapping

    Args:
        options: Mapping of option name to value; the optional "strategy" key
            names the strategy (default: constant), the rest configures it
        clock: Time source used when outcomes are reported without a timestamp
        rng: Random source for jitter

    Returns:
        RetryPolicy in its initial state

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    options = dict(options)
    strategy_type = options.pop("strategy", DEFAULT_STRATEGY)
    strategy = StrategyFactory.create(strategy_type, options)
    return RetryPolicy(strategy, clock=clock, rng=rng)
