import os

import click

from .. import config as config_module
from ..cli_logger import logger
from ..decorators import handle_exceptions


@click.command()
@click.option("--dependency", default=config_module.DEFAULT_DEPENDENCY, show_default=True,
              help="Name of the native dependency whose build step is overridden.")
@click.option("--store-root", default=config_module.DEFAULT_STORE_ROOT, show_default=True,
              help="Artifact Store directory, relative to the project.")
@click.option("--force", is_flag=True, help="Overwrite an existing nativelink.toml.")
@click.pass_context
@handle_exceptions
def init(ctx, dependency, store_root, force):
    """Create nativelink.toml and an empty Artifact Store."""
    path = ctx.obj["path"]
    config_file_path = config_module.config_path(path)
    if os.path.exists(config_file_path) and not force:
        logger.warning(f"{config_file_path} already exists. Use --force to overwrite it.")
        return

    conf = config_module.default_config(dependency=dependency, store_root=store_root)
    store_dir = config_module.store_root(conf, path)
    try:
        os.makedirs(store_dir, exist_ok=True)
    except OSError as e:
        logger.error(f"Error creating Artifact Store directory {store_dir}: {e}")
        logger.info("Please check file permissions and ensure the directory is writable.")
        return

    if config_module.save_config(conf, path=path):
        logger.success(f"Created {config_file_path} with Artifact Store at {store_dir}")
        logger.info("Add prebuilt libraries under the store and register them with 'nativelink add-override'.")
