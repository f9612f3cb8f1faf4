#!/usr/bin/env python3
"""Worldview Upload CLI - Main entry point"""

import functools
import sys

import rich_click as click
from click.exceptions import Abort, ClickException
from rich.console import Console
from rich.text import Text

from wvupload.commands.upload import upload
from wvupload.utils import get_program_name

# Configure rich-click help output
click.rich_click.USE_RICH_MARKUP = False
click.rich_click.USE_MARKDOWN = False
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.MAX_WIDTH = 100

# COMMANDS / OPTIONS
click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_ARGUMENT = "bold yellow"

# HEADERS / USAGE
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_METAVAR = "bold yellow"
click.rich_click.STYLE_EPILOG_TEXT = "dim"

error_console = Console(stderr=True)


def handle_cli_errors(func):
    """Decorator to report CLI usage errors as '<prog>: error: <message>'."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            error_console.print(
                Text.assemble((f"{get_program_name()}: error: ", "bold red"), e.format_message()),
                soft_wrap=True,
            )
            error_console.print(
                Text(f"Run '{get_program_name()} --help' for usage information", style="dim")
            )
            sys.exit(e.exit_code)
        except (Abort, KeyboardInterrupt):
            error_console.print(Text("\n⚠️  Operation cancelled by user", style="yellow"))
            sys.exit(130)

    return wrapper


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    upload.main(prog_name=get_program_name(), standalone_mode=False)


if __name__ == "__main__":
    main()
