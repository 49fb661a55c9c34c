"""CLI entry point for mpd-sticker."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus

from mpd_wire.app_context import AppContext
from mpd_wire.commands.delete import delete
from mpd_wire.commands.find import find
from mpd_wire.commands.get import get
from mpd_wire.commands.list import list_
from mpd_wire.commands.names import names
from mpd_wire.commands.set import set_
from mpd_wire.config import Config
from mpd_wire.log import setup_logging
from mpd_wire.output import Output

app = TyperPlus(package_name="mpd-wire")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
    host: Annotated[str | None, typer.Option("--host", help="MPD host or Unix socket path (default: $MPD_HOST).")] = None,
    port: Annotated[int | None, typer.Option("--port", help="MPD port (default: $MPD_PORT or 6600).")] = None,
) -> None:
    """Read and write MPD stickers from the terminal."""
    cfg = Config.build(data_dir, host=host, port=port)
    setup_logging(cfg.log_path)
    ctx.obj = AppContext(out=Output(json_mode=json_output), cfg=cfg)


# Changes
app.command("set")(set_)
app.command(aliases=["rm"])(delete)

# Queries
app.command(aliases=["g"])(get)
app.command("list", aliases=["l"])(list_)
app.command(aliases=["f"])(find)
app.command()(names)
