import click

from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..store import artifact_dir, expected_artifact
from ..triple import COMPONENTS, resolve as resolve_triple, vocabulary_from_config


@click.command()
@click.argument("triple")
@click.option("--library", "-l", default=None, help="Library name used to show the expected artifact path.")
@click.pass_context
@handle_exceptions
def resolve(ctx, triple, library):
    """Parse TRIPLE and show where its artifact belongs in the store."""
    with logger.stdout_to_stderr():
        conf = config_module.load_config(path=ctx.obj["path"])
        target = resolve_triple(triple, vocabulary_from_config(conf))

    for name, value in zip(COMPONENTS, target.components):
        click.echo(f"{name}: {value}")

    library = library or config_module.dependency_name(conf)
    if library:
        click.echo(f"artifact: {expected_artifact(target, library)}")
    else:
        click.echo(f"artifact-dir: {artifact_dir(target)}")
    logger.success(f"Resolved {target}")
