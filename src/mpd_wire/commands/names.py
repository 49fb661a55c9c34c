"""List known sticker names."""

import typer

from mpd_wire import sticker
from mpd_wire.app_context import use_context
from mpd_wire.bootstrap import connect
from mpd_wire.errors import MpdError


def names(ctx: typer.Context) -> None:
    """List every sticker name in the database (MPD 0.24+)."""
    app = use_context(ctx)
    try:
        with connect(app.cfg) as conn:
            result = sticker.names(conn)
    except MpdError as e:
        app.out.print_error_and_exit(e.kind, str(e))
    app.out.print_names(result)
