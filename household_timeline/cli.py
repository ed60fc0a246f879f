"""Command line driver: run the engine over an exported entity file"""

import json
from dataclasses import asdict
from decimal import Decimal
from enum import Enum
from pathlib import Path

import click

from household_timeline.config import settings
from household_timeline.engine import compute_owner_timeline, run_debt_simulation_request
from household_timeline.infrastructure.observability.logging import setup_logging


def _json_default(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def _dump(payload) -> str:
    return json.dumps(payload, default=_json_default, indent=2)


@click.group()
@click.option("--log-level", default=None, help="Override the configured log level")
def cli(log_level):
    """Household timeline engine."""
    setup_logging(log_level or settings.log_level)


@cli.command("timeline")
@click.argument("entities_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--month", "selected_month", required=True, help="Selected month, YYYY-MM")
def timeline_command(entities_file: Path, selected_month: str) -> None:
    """Print month snapshots and the selected month's events."""
    entities = json.loads(entities_file.read_text())
    result = compute_owner_timeline(entities, selected_month)
    click.echo(
        _dump(
            {
                "selectedMonth": result.selected_month,
                "snapshots": [asdict(snapshot) for snapshot in result.snapshots],
                "events": [asdict(event) for event in result.timeline.events],
            }
        )
    )


@cli.command("debt")
@click.argument("request_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def debt_command(request_file: Path) -> None:
    """Print snowball and avalanche payoff results."""
    results = run_debt_simulation_request(json.loads(request_file.read_text()))
    click.echo(_dump({strategy.value: asdict(result) for strategy, result in results.items()}))


if __name__ == "__main__":
    cli()
