"""Delete a sticker."""

from typing import Annotated

import typer

from mpd_wire import sticker
from mpd_wire.app_context import use_context
from mpd_wire.bootstrap import connect
from mpd_wire.errors import MpdError


def delete(
    ctx: typer.Context,
    uri: str,
    name: str | None = typer.Argument(default=None, help="Sticker name; omit to delete all stickers of the object"),
    *,
    type_: Annotated[str, typer.Option("--type", "-t", help="Object type.")] = "song",
) -> None:
    """Delete a sticker, or all stickers of an object."""
    app = use_context(ctx)
    try:
        with connect(app.cfg) as conn:
            sticker.run_delete(conn, type_, uri, name)
    except MpdError as e:
        app.out.print_error_and_exit(e.kind, str(e))
    app.out.print_sticker_deleted(uri, name)
