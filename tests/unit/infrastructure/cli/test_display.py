from io import StringIO

import pytest
from unittest.mock import MagicMock

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sharedkv.infrastructure.cli.display import ConsoleDisplay


@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object."""
    return MagicMock()


@pytest.fixture
def console_display(mock_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with a mocked console."""
    return ConsoleDisplay(console=mock_console)


def test_display_value_renders_repr(console_display: ConsoleDisplay, mock_console: MagicMock):
    """Strings and numbers stay distinguishable in the output."""
    console_display.display_value("user", "1")
    mock_console.print.assert_called_once()
    args, _ = mock_console.print.call_args
    panel = args[0]
    assert isinstance(panel, Panel)
    assert panel.renderable.plain == "'1'"
    assert "str" in panel.subtitle


def test_display_value_for_false(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_value("flag", False)
    args, _ = mock_console.print.call_args
    assert args[0].renderable.plain == "False"
    assert "bool" in args[0].subtitle


def test_display_stats_lists_counters_in_order(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_stats({"writes": 3, "reads": 1, "misses": 2, "deletes": 0})
    args, _ = mock_console.print.call_args
    table = args[0]
    assert isinstance(table, Table)
    assert table.row_count == 4
    assert list(table.columns[0].cells) == ["reads", "misses", "writes", "deletes"]
    assert list(table.columns[1].cells) == ["1", "2", "3", "0"]


def test_display_error(console_display: ConsoleDisplay, mock_console: MagicMock):
    """Test that display_error prints an error panel."""
    console_display.display_error("Something went wrong")
    args, _ = mock_console.print.call_args
    assert args[0].renderable.plain == "Something went wrong"
    assert "Error" in args[0].title


def test_display_info(console_display: ConsoleDisplay, mock_console: MagicMock):
    """Test that display_info prints an info panel."""
    console_display.display_info("Process completed")
    args, _ = mock_console.print.call_args
    assert args[0].renderable.plain == "Process completed"
    assert "Info" in args[0].title


@pytest.mark.parametrize("key", ["[/oops]", "[red]x"])
def test_display_value_prints_key_literally(key: str):
    output = StringIO()
    ConsoleDisplay(console=Console(file=output, width=80)).display_value(key, "v")
    assert key in output.getvalue()


def test_display_warning(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_warning("Nothing deleted")
    args, _ = mock_console.print.call_args
    assert args[0].renderable.plain == "Nothing deleted"
    assert "Warning" in args[0].title
