import sys

import click

from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..errors import ArtifactMissing
from ..registry import LINK_KINDS, make_rule, registry_from_config, store_registry
from ..store import ArtifactStore, expected_artifact
from ..triple import resolve, vocabulary_from_config


@click.command(name="add-override")
@click.argument("triple")
@click.argument("artifact", required=False)
@click.option("--library", "-l", default=None,
              help="Library name to link. Defaults to the name derived from the artifact file.")
@click.option("--kind", type=click.Choice(LINK_KINDS), default="static", show_default=True, help="Link kind.")
@click.option("--force", is_flag=True, help="Replace an existing override for TRIPLE.")
@click.pass_context
@handle_exceptions
def add_override(ctx, triple, artifact, library, kind, force):
    """Register the prebuilt ARTIFACT for TRIPLE.

    ARTIFACT is relative to the Artifact Store root. When omitted, the path the
    store layout assigns to TRIPLE and the library name is used.
    """
    path = ctx.obj["path"]
    conf = config_module.read_config(path)
    vocabulary = vocabulary_from_config(conf)
    target = resolve(triple, vocabulary)
    registry = registry_from_config(conf, vocabulary)

    if not artifact:
        library = library or config_module.dependency_name(conf)
        if not library:
            logger.error("Error: Give an ARTIFACT path or a --library name to locate it.")
            sys.exit(1)
        artifact = expected_artifact(target, library, kind)
        logger.info(f"Using conventional artifact path {artifact}")

    store = ArtifactStore(config_module.store_root(conf, path))
    if not store.contains(artifact):
        logger.error(f"Error: Artifact path '{artifact}' must be relative to and inside the store at {store.root}.")
        sys.exit(1)
    if not store.exists(artifact):
        raise ArtifactMissing(target, store.path(artifact))

    rule = make_rule(target, artifact, library=library, kind=kind)
    registry = registry.add(rule, replace=force)
    if store_registry(conf, registry, path=path):
        logger.success(f"Added override for {target}: {rule.config.kind} {rule.config.library} from {store.path(artifact)}")
