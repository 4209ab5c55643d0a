"""
Enumerations and constants for transmission_py.

Everything down to ``LogLevel`` mirrors a libtransmission C enum value for
value; ``Priority``, ``ErrorKind`` and ``TorrentState`` are the public types
the native values are translated into.
"""

from enum import IntEnum


class ParseResult(IntEnum):
    """Result codes of ``tr_torrentParse`` and ``tr_torrentNew``."""
    OK = 0
    ERR = 1
    DUPLICATE = 2


class StatErrorType(IntEnum):
    """``tr_stat_errtype``: the error field of a torrent's stats."""
    OK = 0
    TRACKER_WARNING = 1
    TRACKER_ERROR = 2
    LOCAL_ERROR = 3


class MakeMetaResult(IntEnum):
    """``tr_metainfo_builder_err``: the result of a metainfo build."""
    OK = 0
    URL = 1
    CANCELLED = 2
    IO_READ = 3
    IO_WRITE = 4


class TorrentActivity(IntEnum):
    """``tr_torrent_activity``."""
    STOPPED = 0
    CHECK_WAIT = 1
    CHECK = 2
    DOWNLOAD_WAIT = 3
    DOWNLOAD = 4
    SEED_WAIT = 5
    SEED = 6


class RatioLimitMode(IntEnum):
    """``tr_ratiolimit``."""
    GLOBAL = 0
    SINGLE = 1
    UNLIMITED = 2


class CtorMode(IntEnum):
    """``tr_ctorMode``: whether a constructor option overrides the session default."""
    FALLBACK = 0
    FORCE = 1


class Completeness(IntEnum):
    """``tr_completeness``, reported by the completeness callback."""
    LEECH = 0
    SEED = 1
    PARTIAL_SEED = 2


class LogLevel(IntEnum):
    """Native message levels (the ``message-level`` setting)."""
    NONE = 0
    ERROR = 1
    INFO = 2
    DEBUG = 3
    FIREHOSE = 4


class Priority(IntEnum):
    """
    Queue priority of a torrent or of files inside it.

    Priority does not change download speed directly; it changes how the
    engine orders work against other torrents/files.
    """
    LOW = -1
    NORMAL = 0
    HIGH = 1

    @classmethod
    def from_native(cls, value: int) -> "Priority":
        """Convert any native ``int8`` priority; the sign decides."""
        if value < 0:
            return cls.LOW
        if value > 0:
            return cls.HIGH
        return cls.NORMAL


class ErrorKind(IntEnum):
    """
    The closed error taxonomy every native error code is translated into.

    ``NO_ERROR`` means the native code indicated success; it is never raised.
    """
    NO_ERROR = 0
    UNKNOWN = 1
    IO_ERROR = 2
    PARSE_ERR = 3
    PARSE_DUPLICATE = 4
    STAT_LOCAL = 5
    STAT_TRACKER = 6
    STAT_TRACKER_WARN = 7
    MAKE_META_URL = 8
    MAKE_META_CANCELLED = 9


class TorrentState(IntEnum):
    """What a torrent is doing, as seen in a stats snapshot."""
    UNKNOWN = -1
    STOPPED = 0
    CHECKING_WAIT = 1
    CHECKING = 2
    DOWNLOADING_WAIT = 3
    DOWNLOADING = 4
    SEEDING_WAIT = 5
    SEEDING = 6
