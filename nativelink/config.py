import os
import shlex

import toml

from .cli_logger import logger
from .errors import RegistryError

CONFIG_FILE = "nativelink.toml"
DEFAULT_STORE_ROOT = "deps"
DEFAULT_DEPENDENCY = "glfw"


def config_path(path="."):
    return os.path.join(path, CONFIG_FILE)


def default_config(dependency=DEFAULT_DEPENDENCY, store_root=DEFAULT_STORE_ROOT):
    return {
        "dependency": {
            "name": dependency,
        },
        "store": {
            "root": store_root,
        },
        "default_build": {
            "command": [],
        },
        "target": {},
    }


def load_config(path="."):
    """Load nativelink.toml, logging and returning an empty dict when it cannot be read."""
    path_to_config = config_path(path)
    logger.info(f"Loading configuration from {path_to_config}")
    if os.path.exists(path_to_config):
        try:
            with open(path_to_config, "r") as f:
                return toml.load(f)
        except toml.TomlDecodeError as e:
            logger.error(f"Error decoding TOML file at {path_to_config}: {e}")
            logger.info("Please check the file's format for syntax errors.")
        except IOError as e:
            logger.error(f"Error reading configuration file at {path_to_config}: {e}")
            logger.info("Please check file permissions.")
    return {}


def read_config(path="."):
    """Load nativelink.toml for a build, raising RegistryError instead of returning {}."""
    path_to_config = config_path(path)
    if not os.path.exists(path_to_config):
        raise RegistryError(f"No {CONFIG_FILE} found at {path_to_config}")
    try:
        with open(path_to_config, "r") as f:
            return toml.load(f)
    except toml.TomlDecodeError as e:
        raise RegistryError(f"Error decoding TOML file at {path_to_config}: {e}") from e
    except IOError as e:
        raise RegistryError(f"Error reading configuration file at {path_to_config}: {e}") from e


def save_config(config, path="."):
    path_to_config = config_path(path)
    logger.info(f"Saving configuration to {path_to_config}")
    try:
        with open(path_to_config, "w") as f:
            toml.dump(config, f)
        return True
    except IOError as e:
        logger.error(f"Error saving configuration to {path_to_config}: {e}")
        logger.info("Please check file permissions and ensure the directory is writable.")
        return False


def section(conf, name):
    """Return the [name] table of conf, raising RegistryError when it is not a table."""
    table = conf.get(name, {}) if conf else {}
    if not isinstance(table, dict):
        raise RegistryError(f"The [{name}] section of {CONFIG_FILE} must be a table")
    return table


def store_root(conf, path="."):
    """Artifact Store root, relative to the current directory unless configured absolute."""
    root = section(conf, "store").get("root", DEFAULT_STORE_ROOT)
    if not isinstance(root, str) or not root:
        raise RegistryError(f"store.root in {CONFIG_FILE} must be a non-empty string")
    return os.path.normpath(os.path.join(path, root))


def dependency_name(conf):
    name = section(conf, "dependency").get("name")
    if name is not None and not isinstance(name, str):
        raise RegistryError(f"dependency.name in {CONFIG_FILE} must be a string")
    return name or None


def default_build_command(conf):
    command = section(conf, "default_build").get("command")
    if not command:
        return []
    if isinstance(command, str):
        return shlex.split(command)
    if not isinstance(command, list):
        raise RegistryError(f"default_build.command in {CONFIG_FILE} must be a string or a list")
    return [str(part) for part in command]
