import os

import click
from colorama import Fore, Style

from ..cli_logger import LOG_DIR, get_latest_log_file

LEVEL_COLORS = (
    ("[WARNING]", Fore.YELLOW),
    ("[ERROR]", Fore.RED),
    ("[TRACEBACK]", Fore.RED),
    ("[DEBUG]", Fore.WHITE + Style.DIM),
    ("[SUCCESS]", Fore.GREEN),
)


@click.command()
@click.option("--filename", default=None, help="The name of the log file to display.")
@click.option("--list", "list_files", is_flag=True, help="List all log files.")
def log(filename, list_files):
    """Display a log file (the latest by default) or list all log files."""
    if list_files:
        log_files = sorted(f for f in os.listdir(LOG_DIR) if f.endswith(".log")) if os.path.isdir(LOG_DIR) else []
        if not log_files:
            click.echo("No log files found.")
            return
        click.echo("Available log files:")
        for f in log_files:
            click.echo(f"  {f}")
        return

    log_file = os.path.join(LOG_DIR, filename) if filename else get_latest_log_file()
    if not log_file or not os.path.exists(log_file):
        click.echo("No log files found.")
        return

    click.echo(f"Displaying log file: {log_file}")
    try:
        with open(log_file, "r") as f:
            for line in f:
                color = next((c for tag, c in LEVEL_COLORS if tag in line), Fore.CYAN)
                click.echo(f"{color}{line.rstrip()}{Style.RESET_ALL}")
    except IOError as e:
        click.echo(f"Error reading log file {log_file}: {e}", err=True)
        click.echo("Please check file permissions.", err=True)
