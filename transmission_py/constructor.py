"""
Turning a .torrent file or magnet link into a native torrent.

libtransmission builds torrents in two phases: a ``tr_ctor`` collects the
metainfo source and options, then ``tr_torrentNew`` (or ``tr_torrentParse``)
consumes it. The constructor must be freed on every path, whatever the
result of the second phase.
"""

import logging
from ctypes import c_int, pointer
from pathlib import Path
from typing import Optional, Union

from .config import canonical_dir
from .ctypes_wrapper import TrInfo, get_libtransmission
from .enums import CtorMode, ErrorKind, ParseResult
from .exceptions import (
    TransmissionError, TransmissionIOError, TransmissionParseError,
    check_error, from_parse_result
)
from .info import TorrentInfo

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def canonical_file(path: PathLike) -> Path:
    """Absolute form of an existing file, or ``TransmissionIOError``."""
    try:
        resolved = Path(path).expanduser().resolve(strict=True)
    except (FileNotFoundError, RuntimeError) as e:
        raise TransmissionIOError(f"Torrent file {path} does not exist", path=str(path)) from e
    if not resolved.is_file():
        raise TransmissionIOError(f"Torrent file {path} is not a file", path=str(path))
    return resolved


class TorrentConstructor:
    """
    Owner of one native ``tr_ctor``.

    Use as a context manager; the constructor is released on exit. Exactly
    one metainfo source may be set.

    Args:
        session_ptr: Native session pointer, or ``None`` to parse without a session
    """

    def __init__(self, session_ptr: Optional[int] = None):
        self._lib = get_libtransmission()
        self._handle = self._lib.lib.tr_ctorNew(session_ptr)
        if not self._handle:
            raise TransmissionError("Failed to create torrent constructor")
        self._source: Optional[str] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.free()

    def free(self) -> None:
        """Release the native constructor. Safe to call more than once."""
        if self._handle:
            self._lib.lib.tr_ctorFree(self._handle)
            self._handle = None

    def _check_usable(self, source: Optional[str] = None) -> None:
        if not self._handle:
            raise TransmissionError("Torrent constructor has already been released")
        if source is not None and self._source is not None:
            raise ValueError(f"Metainfo source already set from {self._source}")

    def set_metainfo_from_file(self, path: PathLike) -> None:
        """
        Use a .torrent file as the metainfo source.

        Raises:
            TransmissionIOError: If the file does not exist
            TransmissionParseError: If the engine cannot read the metainfo
        """
        self._check_usable("file")
        path = canonical_file(path)
        result = self._lib.lib.tr_ctorSetMetainfoFromFile(
            self._handle, str(path).encode('utf-8')
        )
        if result != 0:
            raise TransmissionParseError(f"Reading metainfo from {path} failed")
        self._source = "file"

    def set_metainfo_from_magnet(self, uri: str) -> None:
        """
        Use a magnet link as the metainfo source.

        Raises:
            TransmissionParseError: If the engine rejects the link
        """
        self._check_usable("magnet")
        result = self._lib.lib.tr_ctorSetMetainfoFromMagnetLink(
            self._handle, uri.encode('utf-8')
        )
        if result != 0:
            raise TransmissionParseError(f"Parsing magnet link {uri} failed")
        self._source = "magnet"

    def set_paused(self, paused: bool) -> None:
        """Override the session's "start added torrents" setting."""
        self._check_usable()
        self._lib.lib.tr_ctorSetPaused(self._handle, CtorMode.FORCE, bool(paused))

    def set_download_dir(self, download_dir: PathLike) -> None:
        """Override the session's download directory for this torrent."""
        self._check_usable()
        download_dir = canonical_dir(download_dir, "Download directory")
        self._lib.lib.tr_ctorSetDownloadDir(
            self._handle, CtorMode.FORCE, str(download_dir).encode('utf-8')
        )

    def instantiate(self) -> int:
        """
        Create the native torrent in the constructor's session.

        Returns:
            The native torrent pointer

        Raises:
            TransmissionParseError: If the metainfo is invalid
            DuplicateTorrentError: If the session already has this torrent
            TransmissionError: For anything else
        """
        self._check_usable()
        if self._source is None:
            raise ValueError("No metainfo source set")

        error = c_int(ParseResult.OK)
        duplicate_id = c_int(0)
        tor = self._lib.lib.tr_torrentNew(self._handle, pointer(error), pointer(duplicate_id))

        kind = from_parse_result(error.value)
        if kind == ErrorKind.PARSE_DUPLICATE:
            check_error(kind, f"Adding torrent (duplicate of torrent {duplicate_id.value})",
                        duplicate_id=duplicate_id.value)
        check_error(kind, "Adding torrent")
        if not tor:
            raise TransmissionError("Adding torrent failed: no torrent returned")

        logger.debug("Created native torrent from %s", self._source)
        return tor

    def parse(self) -> TorrentInfo:
        """
        Parse the metainfo without adding it to any session.

        Raises:
            TransmissionParseError: If the metainfo is invalid
        """
        self._check_usable()
        if self._source is None:
            raise ValueError("No metainfo source set")

        info = TrInfo()
        try:
            # The engine may fill ``info`` even when it reports an error
            result = self._lib.lib.tr_torrentParse(self._handle, pointer(info))
            kind = from_parse_result(result)
            if kind == ErrorKind.PARSE_DUPLICATE:
                # Only reported when parsing against a session; the metainfo itself is valid
                kind = ErrorKind.NO_ERROR
            check_error(kind, "Parsing torrent")
            return TorrentInfo.from_native(info)
        finally:
            self._lib.lib.tr_metainfoFree(pointer(info))


def parse_torrent_file(path: PathLike) -> TorrentInfo:
    """
    Read the metainfo of a .torrent file without a session.

    Raises:
        TransmissionIOError: If the file does not exist
        TransmissionParseError: If the file is not valid metainfo
    """
    with TorrentConstructor() as ctor:
        ctor.set_metainfo_from_file(path)
        return ctor.parse()
