"""
Creating .torrent files with libtransmission's metainfo builder.
"""

import logging
import threading
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .callbacks import ProgressCallback
from .constructor import parse_torrent_file
from .ctypes_wrapper import TrTrackerInfo, c_string, get_libtransmission
from .enums import ErrorKind
from .exceptions import (
    TransmissionError, TransmissionIOError, check_error, from_builder_result
)
from .info import TorrentInfo

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Bounds of the backoff used while waiting for the builder thread
_MIN_POLL_INTERVAL = 0.001
_MAX_POLL_INTERVAL = 0.1


class TorrentBuilder:
    """
    Create a new torrent, builder style.

    Example:
        path = (TorrentBuilder()
                .set_file("hello.txt")
                .add_tracker("udp://tracker.example.org:1337")
                .set_comment("Test torrent")
                .build())

    ``build()`` blocks until the engine has hashed every piece. It can be
    interrupted from another thread with ``cancel()``.
    """

    def __init__(self):
        self._file: Optional[Path] = None
        self._output_file: Optional[Path] = None
        self._trackers: List[Tuple[str, Optional[int]]] = []
        self._comment = ""
        self._is_private = False
        self._piece_size: Optional[int] = None
        self._progress_callback: ProgressCallback = None
        self._cancelled = threading.Event()

    def set_file(self, path: PathLike) -> "TorrentBuilder":
        """
        Set the file or folder the torrent is serving. It must exist.

        Raises:
            TransmissionIOError: If the path does not exist
        """
        try:
            self._file = Path(path).expanduser().resolve(strict=True)
        except (FileNotFoundError, RuntimeError) as e:
            raise TransmissionIOError(f"{path} does not exist", path=str(path)) from e
        return self

    def set_output_file(self, path: PathLike) -> "TorrentBuilder":
        """Set the full path of the .torrent file to create."""
        self._output_file = Path(path)
        return self

    def add_tracker(self, url: str, tier: Optional[int] = None) -> "TorrentBuilder":
        """Add a tracker. Without ``tier`` the tracker gets a tier of its own."""
        self._trackers.append((url, tier))
        return self

    def set_trackers(self, urls: List[str]) -> "TorrentBuilder":
        """Set all the trackers, replacing existing ones."""
        self._trackers = [(url, None) for url in urls]
        return self

    def set_comment(self, comment: str) -> "TorrentBuilder":
        self._comment = comment
        return self

    def set_private(self, is_private: bool = True) -> "TorrentBuilder":
        self._is_private = is_private
        return self

    def set_piece_size(self, size: int) -> "TorrentBuilder":
        """
        Use ``size`` bytes per piece instead of the engine's choice.

        Raises:
            ValueError: If ``size`` is not a power of two
        """
        if size <= 0 or size & (size - 1):
            raise ValueError(f"Piece size must be a power of two, got {size}")
        self._piece_size = size
        return self

    def set_progress_callback(self, callback: ProgressCallback) -> "TorrentBuilder":
        """Called with ``(pieces_hashed, piece_count)`` while building."""
        self._progress_callback = callback
        return self

    @property
    def output_path(self) -> Path:
        """Where ``build()`` writes the torrent: the output file or ``<source>.torrent``."""
        if self._output_file is not None:
            return self._output_file
        if self._file is None:
            raise ValueError("No file set")
        return self._file.with_name(self._file.name + ".torrent")

    def cancel(self) -> None:
        """Abort a running ``build()``; it raises ``MakeMetaCancelledError``."""
        self._cancelled.set()

    def _native_trackers(self):
        if not self._trackers:
            return None, 0

        array = (TrTrackerInfo * len(self._trackers))()
        next_tier = 0
        for i, (url, tier) in enumerate(self._trackers):
            if tier is None:
                tier = next_tier
            next_tier = max(next_tier, tier + 1)
            array[i].tier = tier
            array[i].announce = url.encode('utf-8')
            array[i].scrape = None
            array[i].id = i
        return array, len(self._trackers)

    def build(self, timeout: Optional[float] = None) -> str:
        """
        Create the .torrent file.

        Args:
            timeout: Seconds to wait before cancelling the build

        Returns:
            Path of the created .torrent file

        Raises:
            TransmissionIOError: If the source could not be read or the output written
            MakeMetaUrlError: If a tracker URL was rejected
            MakeMetaCancelledError: If the build was cancelled or timed out
        """
        if self._file is None:
            raise ValueError("No file set")

        lib = get_libtransmission()
        output = self.output_path
        trackers, tracker_count = self._native_trackers()
        self._cancelled.clear()

        builder = lib.lib.tr_metaInfoBuilderCreate(str(self._file).encode('utf-8'))
        if not builder:
            raise TransmissionIOError(f"Could not read {self._file}", path=str(self._file))

        try:
            if self._piece_size is not None:
                if not lib.supports_piece_size:
                    raise TransmissionError("This libtransmission cannot set the piece size")
                if not lib.lib.tr_metaInfoBuilderSetPieceSize(builder, self._piece_size):
                    raise ValueError(f"Piece size {self._piece_size} rejected")

            logger.debug("Building %s from %s (%d trackers)", output, self._file, tracker_count)
            lib.lib.tr_makeMetaInfo(
                builder,
                str(output).encode('utf-8'),
                trackers,
                tracker_count,
                self._comment.encode('utf-8'),
                bool(self._is_private),
            )
            self._wait(builder.contents, timeout)

            state = builder.contents
            kind = from_builder_result(state.result)
            errfile = c_string(state.errfile)
            errno = state.my_errno
            piece_count = state.pieceCount
        finally:
            lib.lib.tr_metaInfoBuilderFree(builder)

        details = {}
        if kind == ErrorKind.IO_ERROR:
            details = {"path": errfile or None, "errno": errno or None}
        elif kind == ErrorKind.MAKE_META_URL:
            details = {"url": errfile or None}
        check_error(kind, f"Creating torrent from {self._file}", **details)

        self._report_progress(piece_count, piece_count)
        logger.info("Created %s", output)
        return str(output)

    def build_info(self, timeout: Optional[float] = None) -> TorrentInfo:
        """Create the .torrent file and return its parsed metainfo."""
        return parse_torrent_file(self.build(timeout))

    def _wait(self, state, timeout: Optional[float]) -> None:
        """Poll the builder until it is done, backing off between polls."""
        deadline = None if timeout is None else time.monotonic() + timeout
        interval = _MIN_POLL_INTERVAL
        last_piece = None
        try:
            while not state.isDone:
                if not state.abortFlag:
                    if self._cancelled.is_set():
                        logger.info("Cancelling torrent creation of %s", self._file)
                        state.abortFlag = True
                    elif deadline is not None and time.monotonic() >= deadline:
                        logger.warning("Torrent creation of %s timed out after %ss",
                                       self._file, timeout)
                        state.abortFlag = True

                if state.pieceIndex != last_piece:
                    last_piece = state.pieceIndex
                    self._report_progress(last_piece, state.pieceCount)

                time.sleep(interval)
                interval = min(interval * 2, _MAX_POLL_INTERVAL)
        except BaseException:
            # The builder thread still uses the builder; it may only be freed once done
            state.abortFlag = True
            while not state.isDone:
                time.sleep(_MIN_POLL_INTERVAL)
            raise

    def _report_progress(self, done: int, total: int) -> None:
        if not self._progress_callback:
            return
        try:
            self._progress_callback(done, total)
        except Exception:
            logger.exception("Error in progress callback")
