import sys

import click

from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..registry import registry_from_config
from ..store import ArtifactStore, expected_artifact


@click.command()
@click.pass_context
@handle_exceptions
def check(ctx):
    """Check that every override points at an artifact present in the store."""
    path = ctx.obj["path"]
    conf = config_module.read_config(path)
    registry = registry_from_config(conf, source=config_module.config_path(path))
    store = ArtifactStore(config_module.store_root(conf, path))
    logger.info(f"Checking {len(registry)} overrides against {store.root}...")

    problems = 0
    referenced = set()
    for rule in registry:
        artifact = rule.config.artifact
        referenced.add(artifact)
        if not store.contains(artifact):
            logger.error(f"  - {rule.triple}: artifact '{artifact}' lies outside the store")
            problems += 1
        elif not store.exists(artifact):
            logger.error(f"  - {rule.triple}: artifact missing at {store.path(artifact)}")
            problems += 1
        else:
            conventional = expected_artifact(rule.triple, rule.config.library, rule.config.kind)
            if artifact != conventional:
                logger.warning(f"  - {rule.triple}: {artifact} does not follow the store layout (expected {conventional})")
            else:
                logger.step_info(f"- {rule.triple}: {artifact}", indent=2)

    for artifact in store.files():
        if artifact not in referenced:
            logger.warning(f"  - {artifact} is not referenced by any override")

    if problems:
        logger.error(f"Found {problems} broken override(s) in {config_module.CONFIG_FILE}.")
        sys.exit(1)
    logger.success("All overrides point at artifacts in the store.")
