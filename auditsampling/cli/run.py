#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0
from typing import Any, Dict

import click
from rich.console import Console
from rich.table import Table

from auditsampling import runner
from auditsampling.cli.cli import cli


@cli.command()
@click.pass_context
@click.option(
    '--ignore-errors',
    is_flag=True,
    flag_value=True,
    default=None,
    help='Continues with the next step if the previous one errors out',
)
def run(ctx, ignore_errors: bool):
    """Runs the planning, extraction and evaluation steps of the configuration."""
    config = ctx.obj['config']
    console = ctx.obj.get('console') or Console()

    results = runner.run(config=config, ignore_errors=ignore_errors, console=console)

    for stage, result in results.items():
        console.print(_summary_table(stage, _headline(result)))
    console.log("run successfully completed")


def _headline(result) -> Dict[str, Any]:
    if hasattr(result, 'to_dict'):
        return result.to_dict()
    return {
        key: value
        for key, value in vars(result).items()
        if isinstance(value, (int, float, str)) or value is None
    }


def _summary_table(stage: str, values: Dict[str, Any]) -> Table:
    table = Table(title=stage)
    table.add_column('field', style='cyan')
    table.add_column('value')
    for key, value in values.items():
        table.add_row(key, f"{value:,.2f}" if isinstance(value, float) else str(value))
    return table
