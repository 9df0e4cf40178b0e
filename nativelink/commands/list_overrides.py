import click

from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..registry import registry_from_config
from ..store import ArtifactStore


@click.command(name="list-overrides")
@click.pass_context
@handle_exceptions
def list_overrides(ctx):
    """List every target triple with a prebuilt artifact override."""
    path = ctx.obj["path"]
    conf = config_module.read_config(path)
    registry = registry_from_config(conf, source=config_module.config_path(path))
    if not len(registry):
        logger.info("No overrides registered yet. Run 'nativelink add-override' to add one.")
        return

    store = ArtifactStore(config_module.store_root(conf, path))
    logger.info(f"Overrides in {registry.source}:")
    for rule in registry:
        line = f"  - {rule.triple} -> {store.path(rule.config.artifact)} ({rule.config.kind} {rule.config.library})"
        if store.exists(rule.config.artifact):
            logger.info(line)
        else:
            logger.warning(f"{line} [missing]")
