"""Authentication commands."""

from typing import Annotated, Optional

import typer
from rich.prompt import Prompt

from hedgelayer.cli import output as out
from hedgelayer.cli.state import get_options
from hedgelayer.config import (
    DEFAULT_API_URL,
    Config,
    clear_config,
    config_path,
    is_valid_token,
    resolve_token,
    save_config,
)
from hedgelayer.errors import AuthenticationError, HedgeLayerError, InvalidRequestError

SETTINGS_URL = "https://hedgelayer.ai/settings"

app = typer.Typer(
    name="auth",
    help="Manage API authentication",
    no_args_is_help=True,
)


@app.command("login")
def login(
    ctx: typer.Context,
    api_url: Annotated[
        Optional[str],
        typer.Option("--api-url", help="API base URL"),
    ] = None,
) -> None:
    """Authenticate with a Hedge Layer API token."""
    opts = get_options(ctx)

    out.heading("Hedge Layer CLI: Login")
    out.err_console.print(f"Create an API token at [bold]{SETTINGS_URL}[/bold] → API Tokens\n")

    token = Prompt.ask("Paste your API token", console=out.err_console).strip()
    if not is_valid_token(token):
        raise InvalidRequestError(
            'Invalid token format. Tokens start with "hl_" and are 43 characters.',
            param="token",
        )

    url = (opts.api_url or api_url or DEFAULT_API_URL).rstrip("/")

    out.err_console.print("\nValidating token...", end="")
    with opts.client(token=token, api_url=url) as client:
        try:
            profile = client.get_profile()
        except HedgeLayerError as e:
            out.err_console.print()
            raise AuthenticationError("Token validation failed. Check your token and try again.") from e
    out.err_console.print(" done\n")

    path = save_config(Config(api_url=url, token=token))

    out.success(f"Logged in as {out.bold(profile.display_name)}")
    out.err_console.print(f"  Config saved to {out.dim(str(path))}")


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Show current authentication status."""
    opts = get_options(ctx)

    if not resolve_token(opts.token):
        out.warn("Not logged in. Run [bold]hl auth login[/bold] to authenticate.")
        raise typer.Exit(code=1)

    with opts.client() as client:
        try:
            profile = client.get_profile()
        except HedgeLayerError as e:
            raise AuthenticationError(
                "Token is invalid or expired. Run `hl auth login` to re-authenticate."
            ) from e

        if opts.json:
            out.print_json({
                "authenticated": True,
                "handle": profile.handle,
                "user_id": profile.user_id,
                "api_url": client.base_url,
            })
            return

        out.heading("Auth Status")
        out.table([
            ["Handle", out.bold(profile.handle or "(none)")],
            ["User ID", profile.user_id],
            ["API URL", client.base_url],
            ["Config", str(config_path())],
        ])


@app.command("logout")
def logout() -> None:
    """Remove stored API token."""
    clear_config()
    out.success(f"Logged out. Token removed from {out.dim(str(config_path()))}")
