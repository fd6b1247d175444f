"""Market browsing commands."""

from typing import Annotated, Optional

import typer
from rich.markup import escape

from hedgelayer.cli import output as out
from hedgelayer.cli.state import get_options

app = typer.Typer(
    name="markets",
    help="Browse Polymarket prediction markets",
    no_args_is_help=True,
)


@app.command("search")
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Search keywords")],
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Max results"),
    ] = 10,
) -> None:
    """Search for markets by keyword."""
    opts = get_options(ctx)

    with opts.client() as client:
        result = client.search_markets(query, limit=limit)

    if opts.json:
        out.print_json(result.raw)
        return

    if not result.markets:
        out.warn(f'No markets found for "{escape(query)}"')
        return

    out.heading(f'Markets matching "{query}" ({result.total} total)')

    rows = []
    for m in result.markets:
        yes_price = m.yes_price
        rows.append([
            escape(out.truncate(m.question, 50)),
            out.percent(yes_price) if yes_price is not None else out.EMPTY,
            out.format_volume(m.volume),
            out.format_date(m.end_date),
            "[red]closed[/red]" if m.closed else "[green]active[/green]",
        ])
    out.table(rows, ["Market", "YES", "Volume", "Ends", "Status"])


@app.command("orderbook")
def orderbook(
    ctx: typer.Context,
    token_id: Annotated[str, typer.Argument(help="CLOB token id")],
    size: Annotated[
        Optional[float],
        typer.Option("--size", "-s", help="Order size for slippage calculation"),
    ] = None,
) -> None:
    """Show orderbook spread and depth for a CLOB token."""
    opts = get_options(ctx)

    with opts.client() as client:
        summary = client.get_orderbook(token_id, size=size)

    if opts.json:
        out.print_json(summary.raw)
        return

    out.heading("Orderbook")

    if summary.spread:
        out.table([
            ["Best Bid", f"{summary.spread.bid:.4f}"],
            ["Best Ask", f"{summary.spread.ask:.4f}"],
            ["Spread", out.percent(summary.spread.spread)],
            ["Ask Depth", out.currency(summary.ask_depth)],
        ])
    else:
        out.warn("No spread data available (empty orderbook)")

    if summary.slippage:
        out.console.print()
        out.table([
            ["Avg Fill Price", f"{summary.slippage.avg_price:.4f}"],
            ["Worst Price", f"{summary.slippage.worst_price:.4f}"],
            ["Slippage", out.percent(summary.slippage.slippage)],
            ["Fillable Size", out.currency(summary.slippage.fillable_size)],
        ])

    for label, levels in (("asks", summary.book.asks), ("bids", summary.book.bids)):
        if not levels:
            continue
        out.console.print(f"\n[dim]  Top 5 {label}:[/dim]")
        out.table([[level.price, level.size] for level in levels[:5]], ["Price", "Size"])
