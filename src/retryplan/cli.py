"""CLI interface for retryplan"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import yaml

from retryplan.domain.errors import RetryPolicyError
from retryplan.domain.models.outcome import Outcome, OutcomeKind
from retryplan.domain.policy import GIVE_UP, RetryPolicy
from retryplan.infrastructure.config.config_manager import ConfigManager
from retryplan.infrastructure.strategy_factory import StrategyFactory

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_assignments(assignments: Tuple[str, ...]) -> Dict[str, Any]:
    """Parse ``key=value`` pairs, reading values as YAML scalars

    Args:
        assignments: Raw ``key=value`` strings

    Returns:
        Mapping of option name to typed value

    Raises:
        click.BadParameter: If an assignment has no "=" or an empty key
    """
    options: Dict[str, Any] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--set")
        options[key] = yaml.safe_load(raw) if raw.strip() else None
    return options


def report_outcome(policy: RetryPolicy, outcome: Outcome) -> float:
    """Report one outcome to a policy and return its delay"""
    if outcome.kind is OutcomeKind.SUCCESS:
        return policy.success(outcome.timestamp)
    return policy.failure(outcome.timestamp)


def _format_delay(delay: float) -> str:
    if delay == GIVE_UP:
        return "give up"
    return f"{delay:.3f}"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .retryplan.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """retryplan - retry and backoff delay calculator"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
def strategies():
    """List available strategies and their options."""
    for name in StrategyFactory.available():
        model = StrategyFactory.config_model(name)
        required = [field for field, info in model.model_fields.items() if info.is_required()]
        optional = [field for field, info in model.model_fields.items() if not info.is_required()]
        click.echo(name)
        click.echo(f"  required: {', '.join(required) or '-'}")
        click.echo(f"  optional: {', '.join(optional)}")


@cli.command()
@click.argument("outcomes", nargs=-1, required=True)
@click.option(
    "--strategy",
    type=click.Choice(StrategyFactory.available(), case_sensitive=False),
    help="Strategy to use. Overrides config.",
)
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Policy option, e.g. --set delay_on_failure=2. Repeatable. Overrides config.",
)
@click.pass_context
def simulate(ctx, outcomes: Tuple[str, ...], strategy: Optional[str], assignments: Tuple[str, ...]):
    """Replay outcomes through a policy and print the delays.

    OUTCOMES: s (success) or f (failure), optionally with @timestamp,
    e.g. f@1000 f@1002 s@1004
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        parsed = [Outcome.parse(text) for text in outcomes]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="OUTCOMES") from e

    overrides = parse_assignments(assignments)
    if strategy:
        overrides["strategy"] = strategy.lower()

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        policy = config_manager.create_policy(overrides)
        logger.debug(f"Simulating {len(parsed)} outcomes with {type(policy.strategy).__name__}")

        for outcome in parsed:
            delay = report_outcome(policy, outcome)
            click.echo(f"{outcome.kind.value}\t{_format_delay(delay)}")
    except click.ClickException:
        raise
    except RetryPolicyError as e:
        _die(str(e), verbose=verbose, exc=e)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
