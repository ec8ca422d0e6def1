"""Rich Console factory and theme for jobreg output.

Consoles render to a StringIO buffer so every renderer keeps the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

JOBREG_THEME = Theme(
    {
        "jobreg.ok": "bold green",
        "jobreg.error": "bold red",
        "jobreg.warning": "bold yellow",
        "jobreg.op": "bold cyan",
        "jobreg.key": "dim",
        "jobreg.id": "bold blue",
        "jobreg.name": "bold",
        "jobreg.status.good": "green",
        "jobreg.status.retired": "yellow",
        "jobreg.status.gone": "red",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "ACTIVE": "jobreg.status.good",
    "UP": "jobreg.status.good",
    "DEPRECATED": "jobreg.status.retired",
    "OUT_OF_SERVICE": "jobreg.status.retired",
    "INACTIVE": "jobreg.status.gone",
    "TERMINATED": "jobreg.status.gone",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=JOBREG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for an entity status."""
    return _STATUS_STYLES.get(status, "")
