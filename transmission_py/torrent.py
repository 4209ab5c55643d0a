"""
Handle to a torrent living in a libtransmission session.
"""

import logging
import threading
from contextlib import contextmanager
from ctypes import c_uint32
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union

from .callbacks import (
    CompletenessCallback, CompletenessCallbackType,
    VerifyDoneCallback, VerifyDoneCallbackType
)
from .config import canonical_dir
from .enums import Completeness, Priority, RatioLimitMode
from .exceptions import TorrentRemovedError
from .info import TorrentFile, TorrentInfo
from .stats import TorrentStats

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)


class Torrent:
    """
    A torrent added to a ``Session``.

    Obtained from ``Session.add_torrent_file`` / ``Session.add_torrent_magnet``,
    never constructed directly. All holders of a ``Torrent`` share the same
    native torrent; calls on it are serialized. ``start``, ``stop`` and
    ``verify`` only issue requests: poll ``stats()`` to see the result.

    After ``remove()`` every operation raises ``TorrentRemovedError``; after
    the session is closed every operation raises ``SessionClosedError``.

    Callbacks run on an engine thread. A call into the session from a
    callback that runs while the session is closing raises
    ``SessionClosedError``; hand results to another thread (an ``Event`` or a
    ``queue.Queue``) when they need more than the callback arguments.
    """

    def __init__(self, session: "Session", handle: int):
        self._session = session
        self._lib = session._lib
        self._handle = handle
        self._lock = threading.Lock()
        self._removed = False

        # Keep C callbacks referenced while the engine may call them
        self._c_callbacks = {}

        self._id = self._lib.lib.tr_torrentId(handle)

    def __repr__(self):
        state = "removed" if self._removed else "active"
        return f"<Torrent id={self._id} {state}>"

    @contextmanager
    def _native(self):
        """Yield the native pointer while holding the session (shared) and torrent locks."""
        with self._session._use_native():
            with self._lock:
                if self._removed:
                    raise TorrentRemovedError(f"Torrent {self._id} has been removed")
                yield self._handle

    @property
    def id(self) -> int:
        """The session-unique ID of the torrent."""
        return self._id

    @property
    def name(self) -> str:
        with self._native() as tor:
            name = self._lib.lib.tr_torrentName(tor)
        return name.decode('utf-8', errors='replace') if name else ""

    @property
    def removed(self) -> bool:
        return self._removed

    def start(self) -> None:
        """Start or resume the torrent."""
        with self._native() as tor:
            self._lib.lib.tr_torrentStart(tor)
        logger.debug("Requested start of torrent %d", self._id)

    def stop(self) -> None:
        """Stop (pause) the torrent."""
        with self._native() as tor:
            self._lib.lib.tr_torrentStop(tor)
        logger.debug("Requested stop of torrent %d", self._id)

    def verify(self, callback: VerifyDoneCallback = None) -> None:
        """
        Request a recheck of the downloaded data.

        Args:
            callback: Called with ``aborted`` once the check ends. Runs on an
                engine thread.
        """
        with self._native() as tor:
            # NULL function pointer when there is no callback
            c_callback = VerifyDoneCallbackType()
            if callback:
                c_callback = self._create_verify_callback(callback)
                self._c_callbacks['verify'] = c_callback
            self._lib.lib.tr_torrentVerify(tor, c_callback, None)
        logger.debug("Requested verification of torrent %d", self._id)

    def remove(self, with_data: bool = False) -> None:
        """
        Remove the torrent from the session. Consumes the handle.

        Args:
            with_data: Also delete the downloaded data
        """
        with self._native() as tor:
            self._lib.lib.tr_torrentRemove(tor, bool(with_data), None)
            self._removed = True
            self._handle = None
        self._session._forget(self._id)
        logger.info("Removed torrent %d%s", self._id, " and its data" if with_data else "")

    def stats(self) -> TorrentStats:
        """
        Snapshot of the torrent's current stats.

        Cheap enough for polling. The native call refreshes a cache inside
        the torrent, so it is serialized like a mutation.
        """
        with self._native() as tor:
            stat = self._lib.lib.tr_torrentStatCached(tor)
            return TorrentStats.from_native(stat.contents)

    def info(self) -> TorrentInfo:
        """Snapshot of the torrent's static metadata (files, pieces, trackers)."""
        with self._native() as tor:
            return self._info(tor)

    def _info(self, tor) -> TorrentInfo:
        return TorrentInfo.from_native(self._lib.lib.tr_torrentInfo(tor).contents)

    def to_dict(self) -> Dict[str, Any]:
        """Info and stats of the torrent as plain data."""
        return {"info": self.info().to_dict(), "stats": self.stats().to_dict()}

    # Configuration
    def set_ratio_limit(self, limit: float) -> None:
        """Seed until ``limit`` is reached, overriding the session's ratio setting."""
        with self._native() as tor:
            self._lib.lib.tr_torrentSetRatioMode(tor, RatioLimitMode.SINGLE)
            self._lib.lib.tr_torrentSetRatioLimit(tor, float(limit))

    def set_ratio_mode(self, mode: RatioLimitMode) -> None:
        with self._native() as tor:
            self._lib.lib.tr_torrentSetRatioMode(tor, RatioLimitMode(mode))

    def set_download_dir(self, download_dir: Union[str, Path]) -> None:
        """Set where the torrent's data lives. The directory must exist."""
        download_dir = canonical_dir(download_dir, "Download directory")
        with self._native() as tor:
            self._lib.lib.tr_torrentSetDownloadDir(tor, str(download_dir).encode('utf-8'))

    @property
    def priority(self) -> Priority:
        with self._native() as tor:
            return Priority.from_native(self._lib.lib.tr_torrentGetPriority(tor))

    def set_priority(self, priority: Priority) -> None:
        """Set the queue priority of the torrent."""
        with self._native() as tor:
            self._lib.lib.tr_torrentSetPriority(tor, Priority(priority))

    # Files
    def get_file_index(self, file: TorrentFile) -> Optional[int]:
        """Index of the file matching ``file`` by name and length, or ``None``."""
        with self._native() as tor:
            return self._resolve(self._info(tor).files, [file])[0].get(file)

    @staticmethod
    def _resolve(files, selectors):
        indices = {}
        unresolved = []
        for selector in selectors:
            index = next((i for i, f in enumerate(files) if f.matches(selector)), None)
            if index is None:
                unresolved.append(selector)
            else:
                indices[selector] = index
        return indices, unresolved

    def _set_files(self, selectors: Iterable[TorrentFile], apply) -> List[TorrentFile]:
        selectors = list(selectors)
        with self._native() as tor:
            indices, unresolved = self._resolve(self._info(tor).files, selectors)
            if indices:
                apply(tor, sorted(set(indices.values())))
        if unresolved:
            logger.warning("Torrent %d has no file matching %s", self._id,
                           ", ".join(f"{f.name} ({f.length} bytes)" for f in unresolved))
        return unresolved

    def set_files_download(self, files: Iterable[TorrentFile], download: bool) -> List[TorrentFile]:
        """
        Choose whether the given files are downloaded.

        Files are matched by name and length. Selectors that match no file
        in the torrent are skipped and returned.

        Returns:
            The selectors that could not be resolved
        """
        return self._set_files(
            files, lambda tor, ids: self._set_file_dls(tor, ids, download)
        )

    def set_files_priority(self, files: Iterable[TorrentFile], priority: Priority) -> List[TorrentFile]:
        """
        Set the priority of the given files. Same matching rules as
        ``set_files_download``.

        Returns:
            The selectors that could not be resolved
        """
        priority = Priority(priority)
        return self._set_files(
            files, lambda tor, ids: self._set_file_priorities(tor, ids, priority)
        )

    def set_files_download_by_index(self, indices: Iterable[int], download: bool) -> None:
        """
        Raises:
            ValueError: If an index is outside the torrent's file list
        """
        with self._native() as tor:
            ids = self._checked_indices(tor, indices)
            self._set_file_dls(tor, ids, download)

    def set_files_priority_by_index(self, indices: Iterable[int], priority: Priority) -> None:
        """
        Raises:
            ValueError: If an index is outside the torrent's file list
        """
        priority = Priority(priority)
        with self._native() as tor:
            ids = self._checked_indices(tor, indices)
            self._set_file_priorities(tor, ids, priority)

    def _checked_indices(self, tor, indices: Iterable[int]) -> List[int]:
        ids = sorted(set(int(i) for i in indices))
        file_count = self._lib.lib.tr_torrentInfo(tor).contents.fileCount
        bad = [i for i in ids if not 0 <= i < file_count]
        if bad:
            raise ValueError(f"Torrent {self._id} has {file_count} files, no index {bad}")
        return ids

    def _set_file_dls(self, tor, ids: List[int], download: bool) -> None:
        array = (c_uint32 * len(ids))(*ids)
        self._lib.lib.tr_torrentSetFileDLs(tor, array, len(ids), bool(download))

    def _set_file_priorities(self, tor, ids: List[int], priority: Priority) -> None:
        array = (c_uint32 * len(ids))(*ids)
        self._lib.lib.tr_torrentSetFilePriorities(tor, array, len(ids), priority)

    # Callback management
    def _create_verify_callback(self, callback):
        """Create a C callback wrapper for verify completion."""
        def c_callback(tor_ptr, aborted, user_data):
            try:
                callback(bool(aborted))
            except Exception:
                logger.exception("Error in verify callback of torrent %d", self._id)
        return VerifyDoneCallbackType(c_callback)

    def _create_completeness_callback(self, callback):
        """Create a C callback wrapper for completeness changes."""
        def c_callback(tor_ptr, completeness, was_running, user_data):
            try:
                callback(Completeness(completeness), bool(was_running))
            except Exception:
                logger.exception("Error in completeness callback of torrent %d", self._id)
        return CompletenessCallbackType(c_callback)

    def set_completeness_callback(self, callback: CompletenessCallback) -> None:
        """
        Set callback for when the torrent becomes complete, partially seeding
        or incomplete again. ``None`` clears it. Runs on an engine thread.
        """
        with self._native() as tor:
            if callback:
                c_callback = self._create_completeness_callback(callback)
                self._c_callbacks['completeness'] = c_callback
                self._lib.lib.tr_torrentSetCompletenessCallback(tor, c_callback, None)
            else:
                self._lib.lib.tr_torrentClearCompletenessCallback(tor)
                self._c_callbacks.pop('completeness', None)
