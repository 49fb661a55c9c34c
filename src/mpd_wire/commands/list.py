"""List the stickers of an object."""

from typing import Annotated

import typer

from mpd_wire import sticker
from mpd_wire.app_context import use_context
from mpd_wire.bootstrap import connect
from mpd_wire.errors import MpdError


def list_(
    ctx: typer.Context,
    uri: str,
    *,
    type_: Annotated[str, typer.Option("--type", "-t", help="Object type.")] = "song",
) -> None:
    """List all stickers of an object."""
    app = use_context(ctx)
    try:
        with connect(app.cfg) as conn:
            stickers = sticker.list_all(conn, type_, uri)
    except MpdError as e:
        app.out.print_error_and_exit(e.kind, str(e))
    app.out.print_stickers(uri, stickers)
