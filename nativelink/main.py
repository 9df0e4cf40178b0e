import click
from .commands import *


@click.group()
@click.option("--path", "-p", default=".", help="Path to the project directory holding nativelink.toml.")
@click.pass_context
def cli(ctx, path):
    """nativelink: pick prebuilt native libraries per target triple at build time."""
    ctx.obj = {"path": path}

cli.add_command(init)
cli.add_command(resolve)
cli.add_command(emit)
cli.add_command(list_overrides)
cli.add_command(add_override)
cli.add_command(remove_override)
cli.add_command(check)
cli.add_command(config)
cli.add_command(log)
cli.add_command(version)

if __name__ == '__main__':
    cli()
