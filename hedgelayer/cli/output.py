"""Terminal rendering helpers.

Command output goes to stdout; prompts, live chat text and errors go
to stderr so ``--json`` output can be piped.
"""

import json
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hedgelayer.models import HedgeBundle

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

EMPTY = "—"


def configure(no_color: bool = False) -> None:
    """Recreate the consoles, e.g. for ``--no-color``."""
    global console, err_console
    console = Console(highlight=False, no_color=no_color)
    err_console = Console(stderr=True, highlight=False, no_color=no_color)


def print_json(data: Any) -> None:
    console.out(json.dumps(data, indent=2, default=str), highlight=False)


def heading(text: str) -> None:
    console.print(f"\n[bold]{escape(text)}[/bold]\n")


def success(text: str) -> None:
    console.print(f"[green]✓[/green] {text}")


def warn(text: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {text}")


def error(text: str) -> None:
    err_console.print(f"[red]✗[/red] {escape(text)}")


def dim(text: str) -> str:
    return f"[dim]{escape(text)}[/dim]"


def bold(text: str) -> str:
    return f"[bold]{escape(text)}[/bold]"


def table(rows: Sequence[Sequence[str]], headers: Optional[Sequence[str]] = None) -> None:
    """Print an aligned table; cells may contain rich markup."""
    grid = Table(
        box=box.SIMPLE_HEAD if headers else None,
        show_header=headers is not None,
        show_edge=False,
        padding=(0, 1),
    )
    width = len(headers) if headers else max((len(r) for r in rows), default=0)
    for i in range(width):
        grid.add_column(headers[i] if headers else "")
    for row in rows:
        grid.add_row(*row)
    console.print(grid)


# ============================================================
# Formatting
# ============================================================

def currency(n: float) -> str:
    return f"${n:,.2f}"


def percent(n: float) -> str:
    return f"{n * 100:.1f}%"


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 1] + "…"


def _parse_iso(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def relative_time(value: str, now: Optional[datetime] = None) -> str:
    """'just now', '5m ago', '3h ago', '2d ago'."""
    then = _parse_iso(value)
    if then is None:
        return EMPTY
    now = now or datetime.now(timezone.utc)
    minutes = int((now - then).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_date(value: str) -> str:
    parsed = _parse_iso(value)
    if parsed is None:
        return EMPTY
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_datetime(value: str) -> str:
    parsed = _parse_iso(value)
    if parsed is None:
        return EMPTY
    return parsed.strftime("%Y-%m-%d %H:%M UTC")


def format_volume(volume: str) -> str:
    try:
        n = float(volume)
    except (TypeError, ValueError):
        return volume
    if n >= 1_000_000:
        return f"${n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"${n / 1_000:.1f}K"
    return f"${n:.0f}"


def format_status(status: str) -> str:
    colors = {"completed": "green", "in_progress": "yellow", "abandoned": "red"}
    color = colors.get(status)
    return f"[{color}]{escape(status)}[/{color}]" if color else escape(status)


# ============================================================
# Hedge bundles
# ============================================================

def display_hedge_bundle(bundle: HedgeBundle) -> None:
    heading("Hedge Bundle")
    table([
        ["Asset Value", currency(bundle.asset_value)],
        ["Total Cost", currency(bundle.total_cost)],
        ["Total Coverage", currency(bundle.total_coverage)],
        ["Efficiency", percent(bundle.hedge_efficiency)],
    ])

    if not bundle.positions:
        return

    console.print("\n[bold]  Positions[/bold]\n")
    rows: List[List[str]] = []
    for p in bundle.positions:
        capped = " [yellow](capped)[/yellow]" if p.was_capped else ""
        rows.append([
            escape(truncate(p.market_question, 40)),
            f"{p.yes_price:.2f}",
            currency(p.estimated_cost),
            currency(p.potential_payout) + capped,
        ])
    table(rows, ["Market", "YES", "Cost", "Payout"])
