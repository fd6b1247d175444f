"""Profile command."""

import typer

from hedgelayer.cli import output as out
from hedgelayer.cli.state import get_options


def profile(ctx: typer.Context) -> None:
    """Show your user profile."""
    opts = get_options(ctx)

    with opts.client() as client:
        client.require_auth()
        user = client.get_profile()

    if opts.json:
        out.print_json(user.raw)
        return

    out.heading("Profile")
    out.table([
        ["Handle", out.bold(user.handle or "(none)")],
        ["User ID", user.user_id],
        ["Created", out.format_date(user.created_at)],
    ])
