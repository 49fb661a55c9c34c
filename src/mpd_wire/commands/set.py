"""Add or replace a sticker."""

from typing import Annotated

import typer

from mpd_wire import sticker
from mpd_wire.app_context import use_context
from mpd_wire.bootstrap import connect
from mpd_wire.errors import MpdError


def set_(
    ctx: typer.Context,
    uri: str,
    name: str,
    value: str,
    *,
    type_: Annotated[str, typer.Option("--type", "-t", help="Object type.")] = "song",
) -> None:
    """Add or replace a sticker value on an object."""
    app = use_context(ctx)
    try:
        with connect(app.cfg) as conn:
            sticker.run_set(conn, type_, uri, name, value)
    except MpdError as e:
        app.out.print_error_and_exit(e.kind, str(e))
    app.out.print_sticker_set(uri, name)
