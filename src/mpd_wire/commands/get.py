"""Print a sticker value."""

from typing import Annotated

import typer

from mpd_wire import sticker
from mpd_wire.app_context import use_context
from mpd_wire.bootstrap import connect
from mpd_wire.errors import MpdError


def get(
    ctx: typer.Context,
    uri: str,
    name: str,
    *,
    type_: Annotated[str, typer.Option("--type", "-t", help="Object type.")] = "song",
) -> None:
    """Print the value of one sticker."""
    app = use_context(ctx)
    try:
        with connect(app.cfg) as conn:
            value = sticker.get(conn, type_, uri, name)
    except MpdError as e:
        app.out.print_error_and_exit(e.kind, str(e))
    app.out.print_sticker_value(uri, name, value)
