"""Main CLI application."""

import importlib
from pathlib import Path
from typing import Optional, Type

import typer
from loguru import logger

from ..config import ContainerSettings, load_settings
from ..context import ApplicationContext
from ..logging_utils import configure_logging
from .console import create_bean_table, get_console, print_success
from .decorators import handle_errors

app = typer.Typer(
    name="sprig",
    help="sprig: a minimal IoC container with component scanning",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)


def version_callback(value: bool):
    if value:
        from .. import __version__

        get_console().print(f"[bold cyan]sprig[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version",
    ),
):
    """Build application contexts and inspect their beans."""


def load_config_class(target: str) -> Type:
    """Import a root configuration class given as ``module:ClassName``."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise typer.BadParameter(f"Expected MODULE:CLASS, got {target!r}")

    module = importlib.import_module(module_name)
    try:
        config_class = getattr(module, class_name)
    except AttributeError:
        raise typer.BadParameter(f"Module {module_name!r} has no attribute {class_name!r}") from None
    if not isinstance(config_class, type):
        raise typer.BadParameter(f"{target!r} is not a class")
    return config_class


def _settings(config_file: Optional[Path], verbose: bool) -> ContainerSettings:
    settings = load_settings(config_file)
    configure_logging(settings.log_level, container_level="DEBUG" if verbose else None)
    return settings


@app.command("beans")
@handle_errors
def beans_command(
    target: str = typer.Argument(..., help="Root configuration class as MODULE:CLASS"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings file (YAML)"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
):
    """List the beans registered by a root configuration."""
    settings = _settings(config_file, verbose)
    context = ApplicationContext(load_config_class(target), settings=settings)
    info = context.describe()

    table = create_bean_table(
        f"Beans in {info['base_package'] or '<no component scan>'}",
        info["beans"],
    )

    console = get_console()
    console.print(table)
    console.print(f"{info['bean_count']} bean(s)")


@app.command("get")
@handle_errors
def get_command(
    target: str = typer.Argument(..., help="Root configuration class as MODULE:CLASS"),
    bean_name: str = typer.Argument(..., help="Name of the bean to look up"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings file (YAML)"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
):
    """Look up one bean and print it."""
    settings = _settings(config_file, verbose)
    context = ApplicationContext(load_config_class(target), settings=settings)
    bean = context.get_bean(bean_name)
    get_console().print(repr(bean), markup=False)


@app.command("demo")
@handle_errors
def demo_command(
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Enable debug logging"),
):
    """Run the bundled demo application."""
    from ..demo.config import DemoConfig

    configure_logging("WARNING", container_level="DEBUG" if verbose else None)
    context = ApplicationContext(DemoConfig)
    user_service = context.get_bean("userService")
    logger.debug(f"Resolved userService: {user_service!r}")
    print_success(user_service.test(), title="userService")
