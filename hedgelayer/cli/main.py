"""CLI entry point.

Provides the ``hl`` application with commands for:
- auth: Login, status and logout
- markets: Search markets and inspect orderbooks
- profile: Show the authenticated user
- assess: Interactive risk assessments
- hedge: One-shot hedge calculation from a risk profile
"""

from typing import Annotated, Optional

import typer

from hedgelayer.cli import output as out
from hedgelayer.cli.commands import assess, auth, markets
from hedgelayer.cli.commands.hedge import EPILOG as HEDGE_EPILOG
from hedgelayer.cli.commands.hedge import hedge
from hedgelayer.cli.commands.profile import profile
from hedgelayer.cli.state import GlobalOptions
from hedgelayer.errors import HedgeLayerError
from hedgelayer.logging import get_logger, setup_logging

logger = get_logger(__name__)

app = typer.Typer(
    name="hl",
    help="Hedge real-world risks with prediction markets",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output raw JSON"),
    ] = False,
    api_url: Annotated[
        Optional[str],
        typer.Option("--api-url", help="Override API base URL"),
    ] = None,
    token: Annotated[
        Optional[str],
        typer.Option("--token", help="Override API token"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log HTTP requests to stderr"),
    ] = False,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable colored output"),
    ] = False,
) -> None:
    """Hedge Layer CLI."""
    out.configure(no_color=no_color)
    setup_logging("DEBUG" if verbose else "WARNING")
    ctx.obj = GlobalOptions(json=json_output, api_url=api_url, token=token, verbose=verbose)


app.add_typer(auth.app, name="auth")
app.add_typer(markets.app, name="markets")
app.add_typer(assess.app, name="assess")
app.command("profile")(profile)
app.command("hedge", epilog=HEDGE_EPILOG)(hedge)


def main() -> None:
    """Run the CLI, turning errors into a message and exit code 1."""
    try:
        app()
    except HedgeLayerError as e:
        out.error(e.message)
        raise SystemExit(1) from e
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        out.error(f"Unexpected error: {e}")
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
