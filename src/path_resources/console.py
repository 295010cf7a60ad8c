"""Rich output helpers for the command line."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from path_resources.errors import IOFailure
from path_resources.types import ChangeKind, ResourceKind

if TYPE_CHECKING:
    from path_resources.config import ResourceSettings
    from path_resources.resource import PathResource
    from path_resources.types import ResourceEvent


console = Console()

_EVENT_STYLES = {
    ChangeKind.CREATED: "green",
    ChangeKind.DELETED: "red",
    ChangeKind.MODIFIED: "yellow",
}


def _size_text(resource: PathResource) -> str:
    try:
        return str(resource.get_size())
    except IOFailure:
        return "-"


def _modified_text(resource: PathResource) -> str:
    try:
        return resource.get_last_modified().strftime("%Y-%m-%d %H:%M:%S")
    except IOFailure:
        return "-"


class ConsoleOutput:
    """Non-interactive output for path-resources commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize output.

        Args:
            console: Console to print to, a new stdout console if None.
        """
        self.console = console or Console()

    def show_listing(self, resource: PathResource, children: list[PathResource]) -> None:
        """Display directory entries as a table.

        Args:
            resource: The listed directory.
            children: Its entries, in display order.
        """
        if not children:
            self.console.print(f"[yellow]{resource.location} is empty[/yellow]")
            return

        table = Table(title=str(resource.location))
        table.add_column("Name", style="cyan")
        table.add_column("Kind")
        table.add_column("Size", justify="right")
        table.add_column("Modified")

        for child in children:
            kind = child.kind
            name = f"{child.name}/" if kind is ResourceKind.DIRECTORY else child.name
            table.add_row(name, kind.value, _size_text(child), _modified_text(child))

        self.console.print(table)

    def show_resource(self, resource: PathResource) -> None:
        """Display metadata of one resource.

        Args:
            resource: Resource to describe.
        """
        flags = "".join(
            letter if probe() else "-"
            for letter, probe in (
                ("r", resource.is_readable),
                ("w", resource.is_writable),
                ("x", resource.is_executable),
            )
        )
        body = (
            f"Kind: {resource.kind.value}\n"
            f"Size: {_size_text(resource)}\n"
            f"Modified: {_modified_text(resource)}\n"
            f"Access: {flags}"
        )
        self.console.print(Panel(body, title=str(resource.location), border_style="blue"))

    def show_event(self, event: ResourceEvent) -> None:
        """Display one change event."""
        style = _EVENT_STYLES[event.kind]
        self.console.print(
            f"[{style}]{event.kind.value:>8}[/{style}] {event.path}", soft_wrap=True
        )

    def show_settings(self, settings: ResourceSettings) -> None:
        """Display effective settings."""
        self.console.print("\n[bold]Configuration[/bold]")
        for key, value in settings.model_dump().items():
            self.console.print(f"  {key}: {value}")

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        """Show warning message."""
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_info(self, message: str) -> None:
        """Show info message."""
        self.console.print(f"[blue]i[/blue] {message}")
