import click

from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..registry import registry_from_config, store_registry
from ..triple import resolve, vocabulary_from_config


@click.command(name="remove-override")
@click.argument("triple")
@click.pass_context
@handle_exceptions
def remove_override(ctx, triple):
    """Remove the override for TRIPLE. The artifact file is left in the store."""
    path = ctx.obj["path"]
    conf = config_module.read_config(path)
    vocabulary = vocabulary_from_config(conf)
    target = resolve(triple, vocabulary)
    registry = registry_from_config(conf, vocabulary).remove(target)
    if store_registry(conf, registry, path=path):
        logger.success(f"Removed override for {target}")
