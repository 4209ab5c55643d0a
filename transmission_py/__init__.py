"""
transmission_py - Python bindings for the libtransmission BitTorrent engine

This package wraps libtransmission's C API with ctypes: session lifecycle,
adding torrents from files or magnet links, controlling and inspecting them,
and creating new .torrent files.
"""

import logging

from .session import Session
from .config import ClientConfig
from .torrent import Torrent
from .builder import TorrentBuilder
from .constructor import parse_torrent_file
from .info import TorrentInfo, TorrentFile, TorrentPiece, TrackerInfo
from .stats import TorrentStats
from .exceptions import (
    TransmissionError,
    TransmissionIOError,
    TransmissionParseError,
    DuplicateTorrentError,
    TorrentStatError,
    MakeMetaUrlError,
    MakeMetaCancelledError,
    ConfigError,
    SessionActiveError,
    SessionClosedError,
    TorrentRemovedError,
)
from .enums import (
    ErrorKind,
    TorrentState,
    Priority,
    RatioLimitMode,
    Completeness,
    LogLevel,
)
from .callbacks import VerifyDoneCallback, CompletenessCallback, ProgressCallback

__version__ = "1.0.0"
__author__ = "transmission_py contributors"
__license__ = "MIT"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Session',
    'ClientConfig',
    'Torrent',
    'TorrentBuilder',
    'parse_torrent_file',
    'TorrentInfo',
    'TorrentFile',
    'TorrentPiece',
    'TrackerInfo',
    'TorrentStats',
    # Exceptions
    'TransmissionError',
    'TransmissionIOError',
    'TransmissionParseError',
    'DuplicateTorrentError',
    'TorrentStatError',
    'MakeMetaUrlError',
    'MakeMetaCancelledError',
    'ConfigError',
    'SessionActiveError',
    'SessionClosedError',
    'TorrentRemovedError',
    # Enums
    'ErrorKind',
    'TorrentState',
    'Priority',
    'RatioLimitMode',
    'Completeness',
    'LogLevel',
    # Callback types
    'VerifyDoneCallback',
    'CompletenessCallback',
    'ProgressCallback',
]
