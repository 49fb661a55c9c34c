"""Search for objects carrying a sticker."""

from typing import Annotated

import typer

from mpd_wire import sticker
from mpd_wire.app_context import use_context
from mpd_wire.bootstrap import connect
from mpd_wire.errors import MpdError


def find(
    ctx: typer.Context,
    name: str,
    base_uri: str | None = typer.Argument(default=None, help="Directory to search below; omit to search everything"),
    *,
    type_: Annotated[str, typer.Option("--type", "-t", help="Object type.")] = "song",
    op: Annotated[str | None, typer.Option("--op", help="Value comparison: =, <, >, eq, gt, lt, contains, starts_with.")] = None,
    value: Annotated[str | None, typer.Option("--value", help="Value to compare against (requires --op).")] = None,
) -> None:
    """Find objects with a sticker, optionally filtered by value."""
    app = use_context(ctx)
    try:
        with connect(app.cfg) as conn:
            matches = sticker.find(conn, type_, base_uri, name, op=op, value=value)
    except MpdError as e:
        app.out.print_error_and_exit(e.kind, str(e))
    app.out.print_matches(matches)
