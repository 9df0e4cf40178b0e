import json
import sys

import click

from .. import config as config_module
from ..cli_logger import logger

NOT_FOUND = f"Error: No {config_module.CONFIG_FILE} found. Please run 'nativelink init' first."


def _load(ctx):
    with logger.stdout_to_stderr():
        conf = config_module.load_config(path=ctx.obj["path"])
    if not conf:
        logger.error(NOT_FOUND)
    return conf


@click.group()
@click.pass_context
def config(ctx):
    """View or edit the nativelink.toml configuration file."""
    pass


@config.command()
@click.pass_context
def view(ctx):
    """Print nativelink.toml as it is on disk."""
    if not _load(ctx):
        return
    config_file_path = config_module.config_path(ctx.obj["path"])
    try:
        with open(config_file_path, "r") as f:
            click.echo(f.read())
    except IOError as e:
        logger.error(f"Error reading {config_module.CONFIG_FILE} at {config_file_path}: {e}")
        logger.info("Please check file permissions.")


@config.command()
@click.pass_context
def edit(ctx):
    """Open nativelink.toml in your default editor."""
    if not _load(ctx):
        return
    config_file_path = config_module.config_path(ctx.obj["path"])
    try:
        click.edit(filename=config_file_path)
    except click.ClickException as e:
        logger.error(f"Click error editing {config_module.CONFIG_FILE}: {e}")
        logger.info("This might indicate an issue with your editor configuration or environment variables.")


@config.command(name="list")
@click.pass_context
def list_values(ctx):
    """Print every configuration key and value as JSON."""
    conf = _load(ctx)
    if not conf:
        return
    click.echo(json.dumps(conf, indent=4))


@config.command()
@click.argument("key")
@click.pass_context
def get(ctx, key):
    """Print the value at a dotted KEY, e.g. store.root."""
    conf = _load(ctx)
    if not conf:
        return
    value = conf
    try:
        for k in key.split("."):
            value = value[k]
    except (KeyError, TypeError):
        logger.error(f"Error: Key '{key}' not found in {config_module.CONFIG_FILE}")
        return
    if isinstance(value, dict):
        click.echo(json.dumps(value, indent=4))
    else:
        click.echo(value)


@config.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_value(ctx, key, value):
    """Set a dotted KEY to VALUE."""
    conf = _load(ctx)
    if not conf:
        return
    keys = key.split(".")
    if keys[0] == "target":
        logger.error("Error: Use 'nativelink add-override' to change target overrides.")
        sys.exit(1)
    d = conf
    for k in keys[:-1]:
        d = d.setdefault(k, {})
    d[keys[-1]] = value
    if config_module.save_config(conf, path=ctx.obj["path"]):
        logger.info(f"Set '{key}' to '{value}'")


@config.command()
@click.argument("key")
@click.pass_context
def unset(ctx, key):
    """Remove a dotted KEY."""
    conf = _load(ctx)
    if not conf:
        return
    keys = key.split(".")
    d = conf
    try:
        for k in keys[:-1]:
            d = d[k]
        del d[keys[-1]]
    except (KeyError, TypeError):
        logger.error(f"Error: Key '{key}' not found in {config_module.CONFIG_FILE}")
        return
    if config_module.save_config(conf, path=ctx.obj["path"]):
        logger.info(f"Unset '{key}'")
