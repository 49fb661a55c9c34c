"""Client engine for the Music Player Daemon text protocol, with sticker commands."""

from mpd_wire.bootstrap import connect as connect
from mpd_wire.config import Config as Config
from mpd_wire.connection import Connection as Connection
from mpd_wire.errors import ConnectionClosedError as ConnectionClosedError
from mpd_wire.errors import InvalidArgumentError as InvalidArgumentError
from mpd_wire.errors import IoError as IoError
from mpd_wire.errors import MpdError as MpdError
from mpd_wire.errors import ProtocolViolationError as ProtocolViolationError
from mpd_wire.errors import ResponseTimeoutError as ResponseTimeoutError
from mpd_wire.errors import ServerError as ServerError
from mpd_wire.errors import ServerErrorCode as ServerErrorCode
from mpd_wire.errors import StateError as StateError
from mpd_wire.protocol import Command as Command
from mpd_wire.protocol import Pair as Pair
from mpd_wire.protocol import ResponseState as ResponseState
