"""Risk assessment commands."""

import json
from typing import Annotated, Any, List, Optional

import typer
from rich.markup import escape
from rich.prompt import Prompt

from hedgelayer.cli import output as out
from hedgelayer.cli.state import get_options
from hedgelayer.errors import HedgeLayerError
from hedgelayer.models import ChatMessage, HedgeBundle
from hedgelayer.streaming import StreamCallbacks, StreamProtocol

QUIT_COMMAND = "/quit"
RESULT_PREVIEW_CHARS = 200

app = typer.Typer(
    name="assess",
    help="AI-powered risk assessment (runs start when no subcommand is given)",
)


def live_callbacks(verbose: bool = False) -> StreamCallbacks:
    """Callbacks that render a chat turn on stderr as it streams."""

    def on_text(text: str) -> None:
        out.err_console.out(text, end="", highlight=False)

    def on_tool_call(name: str, arguments: Any) -> None:
        out.err_console.print(out.dim(f"\n  [tool: {name}]"))
        if verbose:
            out.err_console.print(out.dim(f"  {json.dumps(arguments, default=str)}"))

    def on_tool_result(name: str, result: Any) -> None:
        if verbose:
            preview = json.dumps(result, default=str)[:RESULT_PREVIEW_CHARS]
            out.err_console.print(out.dim(f"  [result: {name}] {preview}"))

    return StreamCallbacks(on_text=on_text, on_tool_call=on_tool_call, on_tool_result=on_tool_result)


def show_bundle(bundle: dict, as_json: bool) -> None:
    if as_json:
        out.print_json(bundle)
    else:
        out.display_hedge_bundle(HedgeBundle.from_dict(bundle))


@app.command("start")
def start(
    ctx: typer.Context,
    protocol: Annotated[
        StreamProtocol,
        typer.Option("--protocol", help="Wire protocol of the chat stream"),
    ] = StreamProtocol.UI_MESSAGE,
) -> None:
    """Start an interactive risk assessment chat.

    The chat ends when the agent produces a hedge bundle or when you
    type /quit.
    """
    opts = get_options(ctx)

    with opts.client() as client:
        client.require_auth()
        assessment_id = client.create_assessment()

        out.heading("Risk Assessment")
        out.err_console.print(
            out.dim(f"  Describe the risks you want to hedge. Type {QUIT_COMMAND} to exit.") + "\n"
        )

        messages: List[ChatMessage] = []
        callbacks = live_callbacks(opts.verbose)

        while True:
            try:
                user_input = Prompt.ask("[cyan]You[/cyan]", console=out.err_console)
            except EOFError:
                break
            if not user_input.strip():
                continue
            if user_input.strip() == QUIT_COMMAND:
                break

            messages.append(ChatMessage.user(user_input))
            out.err_console.print("\n[dim]Assistant:[/dim] ", end="")

            try:
                result = client.chat(
                    messages,
                    assessment_id=assessment_id,
                    callbacks=callbacks,
                    protocol=protocol,
                )
            except HedgeLayerError as e:
                out.err_console.print()
                out.error(f"Chat error: {e.message}")
                continue

            out.err_console.print("\n")

            if result.assistant_text:
                messages.append(ChatMessage.assistant(result.assistant_text))

            if result.hedge_bundle:
                show_bundle(result.hedge_bundle, opts.json)
                break


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """Start an interactive assessment when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        start(ctx)


@app.command("list")
def list_assessments(
    ctx: typer.Context,
    status: Annotated[
        Optional[str],
        typer.Option("--status", "-s", help="Filter by status"),
    ] = None,
) -> None:
    """List past assessments."""
    opts = get_options(ctx)

    with opts.client() as client:
        client.require_auth()
        assessments = client.list_assessments(status=status)

    if opts.json:
        out.print_json([a.raw for a in assessments])
        return

    if not assessments:
        out.warn("No assessments found.")
        return

    out.heading(f"Assessments ({len(assessments)})")

    rows = []
    for a in assessments:
        location = a.risk_profile.location if a.risk_profile else out.EMPTY
        cost = out.currency(a.hedge_bundle.total_cost) if a.hedge_bundle else out.EMPTY
        rows.append([
            a.short_id,
            out.format_status(a.status),
            escape(location),
            cost,
            out.relative_time(a.created_at),
        ])
    out.table(rows, ["ID", "Status", "Location", "Cost", "Created"])


@app.command("show")
def show(
    ctx: typer.Context,
    assessment_id: Annotated[str, typer.Argument(help="Assessment id")],
) -> None:
    """Show assessment details."""
    opts = get_options(ctx)

    with opts.client() as client:
        client.require_auth()
        assessment = client.get_assessment(assessment_id)

    if opts.json:
        out.print_json(assessment.raw)
        return

    out.console.print(f"\n[bold]Assessment[/bold] {out.dim(assessment.short_id)}\n")
    out.table([
        ["Status", out.format_status(assessment.status)],
        ["Created", out.format_datetime(assessment.created_at)],
        ["Updated", out.format_datetime(assessment.updated_at)],
    ])

    if assessment.risk_profile:
        rp = assessment.risk_profile
        out.console.print()
        out.table([
            ["Location", escape(rp.location)],
            ["Asset Type", escape(rp.asset_type)],
            ["Asset Value", out.currency(rp.asset_value)],
            ["Risk Types", escape(", ".join(rp.risk_types))],
        ])

    if assessment.hedge_bundle:
        out.display_hedge_bundle(assessment.hedge_bundle)


@app.command("delete")
def delete(
    ctx: typer.Context,
    assessment_id: Annotated[str, typer.Argument(help="Assessment id")],
) -> None:
    """Delete an assessment."""
    opts = get_options(ctx)

    with opts.client() as client:
        client.require_auth()
        client.delete_assessment(assessment_id)

    out.success("Assessment deleted.")
