import functools
import sys

import click

from .cli_logger import logger
from .errors import NativeLinkError


def handle_exceptions(func):
    """Log errors raised by a CLI command and abort with a non-zero exit status."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.Abort:
            logger.warning("\nCommand aborted by user.")
            sys.exit(1)
        except click.ClickException:
            raise
        except NativeLinkError as e:
            logger.error(f"Error: {e}")
            sys.exit(1)
        except Exception as e:
            logger.error(f"\nAn unexpected error occurred: {e}")
            logger.exception(*sys.exc_info())
            sys.exit(1)
    return wrapper
