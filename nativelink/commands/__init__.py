from .init import init
from .resolve import resolve
from .emit import emit
from .list_overrides import list_overrides
from .add_override import add_override
from .remove_override import remove_override
from .check import check
from .config import config
from .log import log
from .version import version

__all__ = [
    "init",
    "resolve",
    "emit",
    "list_overrides",
    "add_override",
    "remove_override",
    "check",
    "config",
    "log",
    "version",
]
