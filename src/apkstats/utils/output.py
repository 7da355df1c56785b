"""Rich console helpers for terminal output."""

from typing import Any

from rich.console import Console as RichConsole
from rich.table import Table

from apkstats.models.manifest import AndroidManifestData, TriState

TRI_STATE_STYLES: dict[TriState, str] = {
    TriState.TRUE: "green",
    TriState.FALSE: "red",
    TriState.UNKNOWN: "dim",
}


class Console:
    """Wrapper around rich.Console with convenience methods."""

    def __init__(self) -> None:
        self._console = RichConsole()
        self._json_mode = False

    def set_json_mode(self, enabled: bool) -> None:
        """Enable or disable JSON mode (suppresses rich output)."""
        self._json_mode = enabled

    @property
    def json_mode(self) -> bool:
        """Check if JSON mode is enabled."""
        return self._json_mode

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to console (suppressed in JSON mode)."""
        if not self._json_mode:
            self._console.print(*args, **kwargs)

    def print_success(self, message: str) -> None:
        """Print a success message in green."""
        if not self._json_mode:
            self._console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message in red."""
        if not self._json_mode:
            self._console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message in yellow."""
        if not self._json_mode:
            self._console.print(f"[yellow]⚠[/yellow] {message}")


def _format_tri_state(value: TriState) -> str:
    return f"[{TRI_STATE_STYLES[value]}]{value.value}[/{TRI_STATE_STYLES[value]}]"


def _format_optional(value: str | None) -> str:
    if value is None:
        return "[dim]-[/dim]"
    return value or '[dim]""[/dim]'


def manifest_table(manifest: AndroidManifestData) -> Table:
    """Render extracted manifest data as a two-column table."""
    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Package", _format_optional(manifest.package_name))
    table.add_row("Version code", _format_optional(manifest.version_code))
    table.add_row("Install location", _format_optional(manifest.install_location))

    table.add_row("Activities", str(manifest.number_of_activities))
    table.add_row("Services", str(manifest.number_of_services))
    table.add_row("Receivers", str(manifest.number_of_broadcast_receivers))
    table.add_row("Providers", str(manifest.number_of_content_providers))

    table.add_row("Target SDK", _format_optional(manifest.uses_target_sdk_version))
    table.add_row("Min SDK", _format_optional(manifest.uses_min_sdk_version))
    table.add_row("Max SDK", _format_optional(manifest.uses_max_sdk_version))

    table.add_row("Resizeable", _format_tri_state(manifest.supports_screens_resizeable))
    table.add_row("Any density", _format_tri_state(manifest.supports_screens_any_density))
    table.add_row("Small screens", _format_tri_state(manifest.supports_screens_small))
    table.add_row("Normal screens", _format_tri_state(manifest.supports_screens_normal))
    table.add_row("Large screens", _format_tri_state(manifest.supports_screens_large))
    table.add_row("XLarge screens", _format_tri_state(manifest.supports_screens_xlarge))

    for label, values in (
        ("Permissions", manifest.uses_permissions),
        ("Libraries", manifest.uses_libraries),
        ("Features", manifest.uses_features),
    ):
        table.add_row(f"{label} ({len(values)})", "\n".join(values) or "[dim]-[/dim]")

    return table


# Global console instance
console = Console()
