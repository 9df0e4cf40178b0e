import json
import os
import sys

import click

from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..emitter import OUTPUT_FORMATS, render
from ..registry import registry_from_config
from ..strategy import select_strategy
from ..triple import resolve, vocabulary_from_config


def _render_default(outcome, fmt, watch):
    if fmt == "json":
        return json.dumps({
            "target": str(outcome.triple),
            "strategy": outcome.strategy,
            "succeeded": outcome.succeeded,
            "override": False,
            "rerun_if_changed": list(watch),
        }, indent=2, sort_keys=True)
    return "\n".join(f"cargo:rerun-if-changed={path}" for path in watch)


@click.command()
@click.option("--target", "-t", envvar="TARGET", default=None,
              help="Target triple to link for. Defaults to the TARGET environment variable.")
@click.option("--format", "fmt", type=click.Choice(OUTPUT_FORMATS), default="cargo", show_default=True,
              help="How to print the build directives.")
@click.option("--verbose", "-v", is_flag=True, help="Stream the output of the default build command.")
@click.pass_context
@handle_exceptions
def emit(ctx, target, fmt, verbose):
    """Print the link directives for the active target triple.

    Meant to be run from a build script: the prebuilt artifact is used when the
    triple has an override, otherwise the dependency's default build runs.
    """
    path = ctx.obj["path"]
    if not target:
        logger.error("Error: No target triple given. Pass --target or set the TARGET environment variable.")
        sys.exit(1)

    with logger.stdout_to_stderr():
        conf = config_module.read_config(path)
        vocabulary = vocabulary_from_config(conf)
        triple = resolve(target, vocabulary)
        registry_file = os.path.normpath(config_module.config_path(path))
        registry = registry_from_config(conf, vocabulary, source=registry_file)

        strategy = select_strategy(
            registry,
            triple,
            default_command=config_module.default_build_command(conf),
            cwd=path,
            verbose=verbose,
        )
        watch = (registry_file,)
        outcome = strategy.apply(
            triple,
            config_module.store_root(conf, path),
            links=config_module.dependency_name(conf),
            watch=watch,
        )

    if outcome.directives is not None:
        click.echo(render(outcome.directives, fmt))
    else:
        click.echo(_render_default(outcome, fmt, watch))

    if not outcome.succeeded:
        logger.error(f"Build for {triple} failed: no override and the default native build did not succeed.")
        sys.exit(1)
