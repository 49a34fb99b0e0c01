"""Decorators for CLI commands."""

import functools
from typing import Callable

import typer
from loguru import logger

from ..errors import SprigError
from .console import print_container_error, print_error


def handle_errors(func: Callable) -> Callable:
    """Report container and import errors as panels and exit with status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (typer.Exit, typer.BadParameter):
            raise
        except KeyboardInterrupt:
            print_error("Operation cancelled by user", title="Cancelled")
            raise typer.Exit(130)
        except SprigError as e:
            print_container_error(e)
            raise typer.Exit(1)
        except ImportError as e:
            print_error(f"Could not import root configuration: {e}", title="Import Error")
            raise typer.Exit(1)
        except Exception as e:
            logger.exception("Unexpected error")
            print_error(
                f"Unexpected error: {type(e).__name__}: {str(e)}\n"
                f"Run with --verbose for full traceback",
                title="Error"
            )
            raise typer.Exit(1)

    return wrapper
