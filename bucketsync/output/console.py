# BucketSync Console Output
# Rich-based console output for user-friendly display

from typing import Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bucketsync.config.schema import CacheControlRule
from bucketsync.sync.diff import DiffResult
from bucketsync.sync.engine import SyncResult
from bucketsync.sync.transfer import resolve_cache_control, resolve_content_type


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync plans and results.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, console: Optional[RichConsole] = None):
        """
        Initialize console.

        Args:
            verbose: Also list unchanged files.
            colored: Enable colored output.
            console: Underlying Rich console (created if None).
        """
        self.verbose = verbose
        self._console = console or RichConsole(no_color=not colored, highlight=False)

    @property
    def rich(self) -> RichConsole:
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {message}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{message}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{message}[/blue]")

    def print_plan(
        self,
        plan: DiffResult,
        *,
        cache_control: list[CacheControlRule] | None = None,
        dry_run: bool = False,
    ) -> None:
        """
        Print the planned uploads and deletes as a table.

        Args:
            plan: Classification to display.
            cache_control: Rules used to show the header each upload gets.
            dry_run: Whether this is a preview (changes the title).
        """
        if not plan.has_changes and not (self.verbose and plan.unchanged):
            self._console.print("[green]Everything is in sync[/green]")
            return

        rules = cache_control or []
        title = "Planned Changes (dry-run)" if dry_run else "Changes to Apply"

        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("", justify="center")
        table.add_column("Path", style="cyan")
        table.add_column("Size", justify="right", style="dim")
        table.add_column("Content-Type", style="dim")
        table.add_column("Cache-Control", style="dim")

        for icon, files in (("[green]+[/green]", plan.new), ("[yellow]↑[/yellow]", plan.modified)):
            for f in files:
                table.add_row(
                    icon,
                    escape(f.path),
                    _format_size(f.size),
                    resolve_content_type(f.path),
                    resolve_cache_control(f.path, rules) or "",
                )

        for key in plan.orphaned:
            table.add_row("[red]×[/red]", f"[red]{escape(key)}[/red]", "", "", "")

        if self.verbose:
            for f in plan.unchanged:
                table.add_row("[dim]=[/dim]", f"[dim]{escape(f.path)}[/dim]", _format_size(f.size), "", "")

        self._console.print()
        self._console.print(table)
        self._console.print()

    def print_sync_result(self, result: SyncResult) -> None:
        """
        Print sync result summary.

        Args:
            result: Sync result to display.
        """
        status_text = "Dry run completed" if result.dry_run else "Sync completed"
        counts = f"{result.added} added, {result.updated} updated, {result.deleted} deleted, {result.unchanged} unchanged"

        self._console.print()
        if result.success:
            self._console.print(
                Panel(
                    f"[green]{status_text}[/green]\n{counts}",
                    title="Summary",
                    border_style="green",
                )
            )
            return

        body = f"[red]{status_text} with errors[/red]\n{counts}\n\n{escape(result.error or '')}"
        for failure in result.failures:
            body += f"\n  • {escape(failure)}"
        self._console.print(Panel(body, title="Summary", border_style="red"))


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024 or unit == "GiB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Also list unchanged files.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
