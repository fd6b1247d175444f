"""One-shot hedge calculation from a risk profile."""

import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

from hedgelayer.cli import output as out
from hedgelayer.cli.commands.assess import show_bundle
from hedgelayer.cli.state import get_options
from hedgelayer.errors import HedgeLayerError, InvalidRequestError
from hedgelayer.models import ChatMessage, RiskProfile
from hedgelayer.streaming import StreamProtocol

EPILOG = """
Example risk profile JSON:

    {"location": "33109", "assetType": "residential",
     "riskTypes": ["hurricane", "flood"], "assetValue": 500000}

Usage:

    hl hedge profile.json            Read from file

    echo '{"location":...}' | hl hedge -    Read from stdin
"""


def read_input(file: Optional[str]) -> str:
    """Read a file, or stdin when no file or ``-`` is given."""
    if not file or file == "-":
        return sys.stdin.read()
    try:
        return Path(file).read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidRequestError(f"Cannot read file: {file}: {e}", param="file") from e


def load_risk_profile(raw: str) -> RiskProfile:
    """
    Raises:
        InvalidRequestError: If the JSON is invalid or misses required fields.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidRequestError("Invalid JSON input. Expected a RiskProfile object.") from e
    profile = RiskProfile.from_dict(data)
    profile.validate()
    return profile


def hedge(
    ctx: typer.Context,
    file: Annotated[
        Optional[str],
        typer.Argument(help="Risk profile JSON file, or - for stdin"),
    ] = None,
    protocol: Annotated[
        StreamProtocol,
        typer.Option("--protocol", help="Wire protocol of the chat stream"),
    ] = StreamProtocol.DATA,
) -> None:
    """Calculate hedge positions from a risk profile JSON."""
    opts = get_options(ctx)
    profile = load_risk_profile(read_input(file))

    with opts.client() as client:
        try:
            with out.err_console.status("Searching markets and calculating hedge..."):
                result = client.chat([ChatMessage.user(profile.to_prompt())], protocol=protocol)
        except HedgeLayerError as e:
            out.error(f"Hedge calculation failed: {e.message}")
            raise typer.Exit(code=1)

    if result.hedge_bundle:
        show_bundle(result.hedge_bundle, opts.json)
    else:
        out.warn("No hedge bundle was produced. Try the interactive assessment: [bold]hl assess[/bold]")
