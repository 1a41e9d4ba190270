"""
CLI tool for disc_lib.
Runs pattern set discovery on a transaction file.
"""

import json
import sys
from datetime import timedelta
from pathlib import Path
from typing import List, Union

import click

from disc_lib.api import translate_to_dict
from disc_lib.config_schemas import DEFAULT_SETTINGS, load_settings, validate_settings
from disc_lib.discovery.discover import discover_patternset
from disc_lib.logging_config import configure_structlog, get_logger
from disc_lib.models.dataset import Dataset
from disc_lib.models.result import PatternsetResult

logger = get_logger(__name__)


def load_transactions(path: Union[str, Path]) -> List[List[int]]:
    """
    Read one transaction per line as whitespace-separated item ids.

    Blank lines are empty transactions; lines starting with '#' are skipped.

    Raises:
        ValueError: If a token is not an integer
    """
    transactions = []
    with open(path) as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if line.startswith('#'):
                continue
            try:
                transactions.append([int(tok) for tok in line.split()])
            except ValueError:
                raise ValueError(f"{path}:{lineno}: expected integer item ids, got {line!r}")
    return transactions


@click.group()
@click.option('--log-level', default='WARNING', help='Log level (DEBUG, INFO, WARNING, ...)')
@click.option('--log-file', type=click.Path(dir_okay=False), default=None, help='Also write logs to this file')
def cli(log_level, log_file):
    """disc-patterns - Summarize transaction data with significant patterns."""
    configure_structlog(log_level=log_level.upper(), log_file=log_file)


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False), help='YAML settings file')
@click.option('--min-support', type=int, default=None, help='Minimum candidate support')
@click.option('--alpha', type=float, default=None, help='Significance level')
@click.option('--use-bic/--no-use-bic', default=None, help='BIC instead of MDL structural cost')
@click.option('--max-time', type=float, default=None, help='Time budget in seconds')
@click.option('--json', 'as_json', is_flag=True, default=False, help='Print the result as JSON')
def discover(path, config_path, min_support, alpha, use_bic, max_time, as_json):
    """Discover a significant pattern set in the transactions at PATH."""
    try:
        settings = load_settings(config_path) if config_path else DEFAULT_SETTINGS
        overrides = {
            'min_support': min_support,
            'alpha': alpha,
            'use_bic': use_bic,
            'max_time': timedelta(seconds=max_time) if max_time is not None else None,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if overrides:
            settings = validate_settings({**settings.model_dump(), **overrides})

        data = Dataset.from_transactions(load_transactions(path))
    except Exception as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if data.dim == 0:
        click.echo("Error: no items found in input")
        sys.exit(1)

    result = discover_patternset(PatternsetResult(data=data), settings)

    if as_json:
        click.echo(json.dumps(translate_to_dict(result), indent=2))
        return

    click.echo(f"Transactions: {data.size()}  Items: {data.dim}")
    click.echo(f"Patterns: {len(result.summary)}  Stop: {result.stop_reason.value}")
    click.echo(
        f"Objective: {result.initial_encoding.objective:.4f} -> {result.encoding.objective:.4f}"
    )
    click.echo("-" * 80)
    click.echo(result.summary.to_dataframe().to_string(index=False))


if __name__ == '__main__':
    cli()
