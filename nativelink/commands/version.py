import importlib.metadata

import click

from ..cli_logger import logger


@click.command()
def version():
    """Print the version of nativelink."""
    try:
        ver = importlib.metadata.version("nativelink")
        logger.info(f"nativelink version {ver}")
    except importlib.metadata.PackageNotFoundError:
        logger.error("Error: Could not determine the version of nativelink. Is it installed correctly?")
