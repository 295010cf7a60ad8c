"""CLI commands using Typer."""

from __future__ import annotations

import fnmatch
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from path_resources.context import AppContext
    from path_resources.resource import PathResource

import typer
from rich.console import Console
from rich.logging import RichHandler

from path_resources import __version__
from path_resources.console import ConsoleOutput, console
from path_resources.context import create_context
from path_resources.errors import IOFailure, PreconditionViolation

app = typer.Typer(
    name="path-resources",
    help="Inspect and manipulate filesystem paths as resources",
    no_args_is_help=True,
)

config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")

output = ConsoleOutput(console)


class _GlobalOptions:
    """Options given before the command name."""

    config_path: Path | None = None
    verbose: bool = False


_options = _GlobalOptions()


def configure_logging(level: str) -> None:
    """Route log records through Rich on stderr.

    Args:
        level: Logging level name.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _get_context(context: AppContext | None) -> AppContext:
    """Return the injected context or build the production one."""
    if context is not None:
        return context
    try:
        ctx = create_context(_options.config_path)
    except (FileNotFoundError, ValueError) as e:
        output.show_error(f"Invalid configuration: {e}")
        raise typer.Exit(1) from e
    configure_logging("DEBUG" if _options.verbose else ctx.settings.log_level)
    return ctx


def _fail(message: str) -> typer.Exit:
    """Print an error and build the exit exception."""
    output.show_error(message)
    return typer.Exit(1)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"path-resources v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Settings file (JSON or YAML)")
    ] = None,
) -> None:
    """Inspect and manipulate filesystem paths as resources."""
    _options.verbose = verbose
    _options.config_path = config


# ============================================================================
# Inspection Commands
# ============================================================================


@app.command("info")
def info(
    path: Annotated[Path, typer.Argument(help="Path to describe")],
    _context=None,
) -> None:
    """Show metadata of a path."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)
    if not resource.exists():
        raise _fail(f"{path} does not exist")
    output.show_resource(resource)


@app.command("ls")
def ls(
    path: Annotated[Path, typer.Argument(help="Directory to list")] = Path("."),
    sort: Annotated[bool, typer.Option("--sort", "-s", help="Sort entries by name")] = False,
    _context=None,
) -> None:
    """List the entries of a directory."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)
    if not resource.is_directory():
        raise _fail(f"{path} is not a directory")
    try:
        children = resource.list_resources()
    except IOFailure as e:
        raise _fail(str(e)) from e
    if sort:
        children.sort(key=lambda child: child.name)
    output.show_listing(resource, children)


@app.command("cat")
def cat(
    path: Annotated[Path, typer.Argument(help="File to print")],
    _context=None,
) -> None:
    """Print the content of a file."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)
    try:
        text = resource.get_contents()
    except IOFailure as e:
        raise _fail(str(e)) from e
    except UnicodeDecodeError as e:
        raise _fail(f"{path} is not valid {ctx.settings.encoding} text") from e
    console.print(text, end="", markup=False, highlight=False, soft_wrap=True)


@app.command("watch")
def watch(
    path: Annotated[Path, typer.Argument(help="Path to monitor")],
    interval: Annotated[
        float, typer.Option("--interval", "-i", min=0.0, help="Seconds between polls")
    ] = 1.0,
    count: Annotated[
        int | None, typer.Option("--count", "-n", min=1, help="Stop after this many polls")
    ] = None,
    pattern: Annotated[
        str | None, typer.Option("--pattern", "-p", help="Only report names matching a glob")
    ] = None,
    _context=None,
) -> None:
    """Report changes under a path until interrupted."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)

    def _matches(changed: PathResource) -> bool:
        return fnmatch.fnmatch(changed.name, pattern)

    resource_filter = _matches if pattern else None

    try:
        monitor = resource.monitor(resource_filter)
    except IOFailure as e:
        raise _fail(str(e)) from e
    monitor.add_listener(output.show_event)
    polls = 0
    try:
        while count is None or polls < count:
            time.sleep(interval)
            monitor.poll()
            polls += 1
    except KeyboardInterrupt:
        pass
    except IOFailure as e:
        raise _fail(str(e)) from e
    finally:
        monitor.cancel()


# ============================================================================
# Tree Commands
# ============================================================================


@app.command("mkdir")
def mkdir(
    path: Annotated[Path, typer.Argument(help="Directory to create")],
    parents: Annotated[
        bool, typer.Option("--parents", "-p", help="Create missing parents too")
    ] = False,
    _context=None,
) -> None:
    """Create a directory."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)
    try:
        created = resource.mkdirs() if parents else resource.mkdir()
    except IOFailure as e:
        raise _fail(str(e)) from e
    if not created:
        raise _fail(f"Cannot create directory {path}")
    output.show_success(f"Created {resource.location}")


@app.command("touch")
def touch(
    path: Annotated[Path, typer.Argument(help="File to create or touch")],
    _context=None,
) -> None:
    """Create an empty file, or update the modification time of an existing one."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)
    try:
        if resource.create_new_file():
            output.show_success(f"Created {resource.location}")
        else:
            resource.set_last_modified(datetime.now(timezone.utc))
            output.show_info(f"Touched {resource.location}")
    except IOFailure as e:
        raise _fail(str(e)) from e


@app.command("write")
def write(
    path: Annotated[Path, typer.Argument(help="File to write")],
    text: Annotated[str, typer.Argument(help="New content")],
    _context=None,
) -> None:
    """Replace the content of a file, creating it and its parents if needed."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)
    try:
        resource.set_contents(text)
    except IOFailure as e:
        raise _fail(str(e)) from e
    output.show_success(f"Wrote {resource.get_size()} bytes to {resource.location}")


@app.command("rm")
def rm(
    path: Annotated[Path, typer.Argument(help="Path to delete")],
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Delete directory contents too")
    ] = False,
    _context=None,
) -> None:
    """Delete a file or directory."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)
    try:
        deleted = resource.delete(recursive=recursive)
    except IOFailure as e:
        raise _fail(str(e)) from e
    if not deleted:
        output.show_warning(f"{path} does not exist")
        raise typer.Exit(1)
    output.show_success(f"Deleted {resource.location}")


@app.command("mv")
def mv(
    path: Annotated[Path, typer.Argument(help="Path to move")],
    target: Annotated[
        str, typer.Argument(help="New name, or a destination path if it contains a separator")
    ],
    _context=None,
) -> None:
    """Rename or move a path without overwriting."""
    ctx = _get_context(_context)
    resource = ctx.factory.create(path)
    destination: str | PathResource = target
    if os.sep in target or (os.altsep and os.altsep in target):
        destination = ctx.factory.create(target)
    old_location = resource.location
    try:
        resource.rename_to(destination)
    except (IOFailure, PreconditionViolation) as e:
        raise _fail(str(e)) from e
    output.show_success(f"Moved {old_location} to {resource.location}")


@app.command("tempfile")
def tempfile(
    _context=None,
) -> None:
    """Create a new empty temp file and print its path."""
    ctx = _get_context(_context)
    try:
        resource = ctx.factory.create_temp()
    except IOFailure as e:
        raise _fail(str(e)) from e
    console.print(str(resource.location), markup=False, highlight=False, soft_wrap=True)


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    _context=None,
) -> None:
    """Show effective configuration."""
    ctx = _get_context(_context)
    output.show_settings(ctx.settings)


if __name__ == "__main__":
    app()
