"""Global CLI options shared by every command."""

from dataclasses import dataclass
from typing import Optional

import typer

from hedgelayer.client import HedgeLayer


@dataclass
class GlobalOptions:
    """Options given before the command name (``hl --json markets ...``)."""
    json: bool = False
    api_url: Optional[str] = None
    token: Optional[str] = None
    verbose: bool = False

    def client(self, token: Optional[str] = None, api_url: Optional[str] = None) -> HedgeLayer:
        """Client honouring ``--token`` / ``--api-url`` overrides."""
        return HedgeLayer(token=token or self.token, base_url=api_url or self.api_url)


def get_options(ctx: typer.Context) -> GlobalOptions:
    return ctx.find_object(GlobalOptions) or GlobalOptions()
