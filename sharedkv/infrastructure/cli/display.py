import logging
from typing import Any, Optional

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sharedkv.domain.interfaces.user_interface import UserInterface
from sharedkv.domain.models.common import CacheKey, CacheStats, CacheValue

logger = logging.getLogger(__name__)

# Order in which counters are listed in the stats table
STATS_ORDER = ("reads", "misses", "writes", "deletes")


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console (or uses the one given)."""
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_value(self, key: CacheKey, value: CacheValue, **kwargs: Any) -> None:
        """Displays a cached value with its key and type.

        Args:
            key: The caller key.
            value: The decoded value; rendered with repr() so "1" and 1 stay distinct.
        """
        logger.debug(f"display_value called: key={key}, type={type(value).__name__}")
        panel = Panel(
            Text(repr(value), style="white"),
            title=f"[bold green]{escape(key)}[/bold green]",
            subtitle=f"[dim]{type(value).__name__}[/dim]",
            border_style="green",
            box=ROUNDED,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_stats(self, stats: CacheStats, **kwargs: Any) -> None:
        """Displays the operation counters as a table.

        Args:
            stats: Counter snapshot from the facade.
        """
        table = Table(title="Cache statistics", box=SIMPLE, border_style="cyan", padding=(0, 1))
        table.add_column("Counter", style="cyan")
        table.add_column("Value", justify="right", style="bold")
        for name in STATS_ORDER:
            if name in stats:
                table.add_row(name, str(stats[name]))
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message.

        Args:
            info_message: The informational message to display.
        """
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message.

        Args:
            warning_message: The warning message to display.
        """
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)
