#  Author:   Audit Sampling Developers
#
#  License: Apache Software License 2.0

import click
from pyfiglet import Figlet
from rich.console import Console

from auditsampling import __version__
from auditsampling.config import Config, get_config_path


@click.group()
@click.pass_context
@click.version_option(__version__, '--version', '-v')
@click.option(
    '-c',
    '--configuration-path',
    type=click.Path(),
    help='Path to your audit sampling configuration file',
)
def cli(ctx, configuration_path) -> None:
    """CLI root command."""

    # setting up click.context
    ctx.obj = {}

    console = Console()
    console.print(
        f"[cyan]{Figlet(font='slant').renderText('auditsampling')}[/]",
    )

    console.log(f"loading configuration file from {get_config_path(configuration_path).absolute()}")
    ctx.obj['config'] = Config.load(configuration_path)
    ctx.obj['console'] = console


if __name__ == "__main__":
    cli()
