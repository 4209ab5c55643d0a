"""
Exception classes and native error translation for transmission_py.

Every status code libtransmission hands back goes through one of the mapping
tables below before it leaves the binding. ``check_error`` is the single place
that decides whether a translated ``ErrorKind`` is a success or an exception.
"""

from typing import Dict, Optional, Type

from .enums import ErrorKind, MakeMetaResult, ParseResult, StatErrorType


class TransmissionError(Exception):
    """Base exception class for transmission_py errors."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.UNKNOWN):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self):
        return f"{self.message} (error kind: {self.kind.name})"


class TransmissionIOError(TransmissionError, OSError):
    """A file or directory could not be read or written."""

    def __init__(self, message: str = "I/O error", path: Optional[str] = None,
                 errno: Optional[int] = None):
        super().__init__(message, ErrorKind.IO_ERROR)
        self.path = path
        self.native_errno = errno


class TransmissionParseError(TransmissionError):
    """The metainfo file or magnet link could not be parsed."""

    def __init__(self, message: str = "Parse error"):
        super().__init__(message, ErrorKind.PARSE_ERR)


class DuplicateTorrentError(TransmissionError):
    """The torrent is already known to the session."""

    def __init__(self, message: str = "Duplicate torrent",
                 duplicate_id: Optional[int] = None):
        super().__init__(message, ErrorKind.PARSE_DUPLICATE)
        self.duplicate_id = duplicate_id


class TorrentStatError(TransmissionError):
    """A live torrent reports a local error or a tracker error/warning."""

    def __init__(self, message: str = "Torrent error",
                 kind: ErrorKind = ErrorKind.STAT_LOCAL):
        super().__init__(message, kind)


class MakeMetaUrlError(TransmissionError):
    """A tracker URL was rejected while creating a torrent."""

    def __init__(self, message: str = "Invalid tracker URL", url: Optional[str] = None):
        super().__init__(message, ErrorKind.MAKE_META_URL)
        self.url = url


class MakeMetaCancelledError(TransmissionError):
    """Torrent creation was cancelled before it finished."""

    def __init__(self, message: str = "Torrent creation cancelled"):
        super().__init__(message, ErrorKind.MAKE_META_CANCELLED)


class ConfigError(TransmissionError, ValueError):
    """The client configuration is missing a field or holds an invalid value."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, ErrorKind.UNKNOWN)


class SessionActiveError(TransmissionError):
    """A session is already open in this process."""

    def __init__(self, message: str = "A session is already initialized"):
        super().__init__(message, ErrorKind.UNKNOWN)


class SessionClosedError(TransmissionError):
    """An operation was attempted on a closed session."""

    def __init__(self, message: str = "Session is closed"):
        super().__init__(message, ErrorKind.UNKNOWN)


class TorrentRemovedError(TransmissionError):
    """An operation was attempted on a torrent that has been removed."""

    def __init__(self, message: str = "Torrent has been removed"):
        super().__init__(message, ErrorKind.UNKNOWN)


# One table per native error domain. Codes missing from a table are UNKNOWN.
_STAT_ERRORS: Dict[int, ErrorKind] = {
    StatErrorType.OK: ErrorKind.NO_ERROR,
    StatErrorType.LOCAL_ERROR: ErrorKind.STAT_LOCAL,
    StatErrorType.TRACKER_ERROR: ErrorKind.STAT_TRACKER,
    StatErrorType.TRACKER_WARNING: ErrorKind.STAT_TRACKER_WARN,
}

_BUILDER_ERRORS: Dict[int, ErrorKind] = {
    MakeMetaResult.OK: ErrorKind.NO_ERROR,
    MakeMetaResult.URL: ErrorKind.MAKE_META_URL,
    MakeMetaResult.CANCELLED: ErrorKind.MAKE_META_CANCELLED,
    MakeMetaResult.IO_READ: ErrorKind.IO_ERROR,
    MakeMetaResult.IO_WRITE: ErrorKind.IO_ERROR,
}

_PARSE_ERRORS: Dict[int, ErrorKind] = {
    ParseResult.OK: ErrorKind.NO_ERROR,
    ParseResult.ERR: ErrorKind.PARSE_ERR,
    ParseResult.DUPLICATE: ErrorKind.PARSE_DUPLICATE,
}

_EXCEPTIONS: Dict[ErrorKind, Type[TransmissionError]] = {
    ErrorKind.IO_ERROR: TransmissionIOError,
    ErrorKind.PARSE_ERR: TransmissionParseError,
    ErrorKind.PARSE_DUPLICATE: DuplicateTorrentError,
    ErrorKind.MAKE_META_URL: MakeMetaUrlError,
    ErrorKind.MAKE_META_CANCELLED: MakeMetaCancelledError,
}


def from_stat_error(code: int) -> ErrorKind:
    """Translate a ``tr_stat_errtype`` value."""
    return _STAT_ERRORS.get(code, ErrorKind.UNKNOWN)


def from_builder_result(code: int) -> ErrorKind:
    """Translate a ``tr_metainfo_builder_err`` value."""
    return _BUILDER_ERRORS.get(code, ErrorKind.UNKNOWN)


def from_parse_result(code: int) -> ErrorKind:
    """Translate a ``tr_parse_result`` value or the raw int set by ``tr_torrentNew``."""
    return _PARSE_ERRORS.get(code, ErrorKind.UNKNOWN)


def check_error(kind: ErrorKind, operation: str = "Operation", **details) -> None:
    """
    Raise the exception for ``kind``, or return if it is ``NO_ERROR``.

    ``details`` are passed to the exception class (e.g. ``duplicate_id`` for
    duplicates, ``path``/``errno`` for I/O errors, ``url`` for URL errors).
    """
    if kind == ErrorKind.NO_ERROR:
        return

    message = f"{operation} failed"

    if kind in (ErrorKind.STAT_LOCAL, ErrorKind.STAT_TRACKER, ErrorKind.STAT_TRACKER_WARN):
        raise TorrentStatError(message, kind)

    exc_class = _EXCEPTIONS.get(kind)
    if exc_class is None:
        raise TransmissionError(message, kind)
    raise exc_class(message, **details)
