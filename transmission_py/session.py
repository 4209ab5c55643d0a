"""
Core Session implementation for transmission_py.
"""

import logging
import threading
import warnings
import weakref
from contextlib import contextmanager
from ctypes import pointer
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config import ClientConfig
from .constructor import TorrentConstructor
from .ctypes_wrapper import TR_BAD_SIZE, TrVariant, get_libtransmission
from .exceptions import SessionActiveError, SessionClosedError, TransmissionError
from .sync import LockClosedError, ReadWriteLock
from .torrent import Torrent

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# libtransmission supports a single session per process
_active_lock = threading.Lock()
_active = False


def _claim_process_session() -> None:
    global _active
    with _active_lock:
        if _active:
            raise SessionActiveError(
                "A session is already initialized in this process; close it first"
            )
        _active = True


def _release_process_session() -> None:
    global _active
    with _active_lock:
        _active = False


class _NativeSession:
    """The native session pointer and the lock guarding it."""

    def __init__(self, lib, handle: int):
        self.lib = lib
        self.handle = handle
        self.lock = ReadWriteLock()

    def release(self) -> bool:
        """Close the native session. Returns False if it was already closed."""
        with self.lock.write(closing=True):
            if self.handle is None:
                return False
            handle, self.handle = self.handle, None
            self.lib.lib.tr_sessionClose(handle)
        _release_process_session()
        return True


def _release_leaked(native: _NativeSession) -> None:
    """Finalizer for sessions that were never closed."""
    if native.handle is None:
        return
    logger.error("Session was garbage collected without close(); closing it now")
    warnings.warn("transmission_py Session was never closed", ResourceWarning)
    native.release()


class Session:
    """
    Python wrapper for a libtransmission session.

    There can be one open session per process. The session owns every
    torrent added to it; closing the session invalidates all its ``Torrent``
    objects. ``close()`` may be called any number of times; every other
    operation on a closed session raises ``SessionClosedError``.

    Example:
        config = ClientConfig(app_name="myapp", config_dir=cfg, download_dir=dl)
        with Session.initialize(config) as session:
            torrent = session.add_torrent_file("alpine.torrent")
            torrent.start()
            while torrent.stats().percent_complete < 1.0:
                time.sleep(1)
    """

    def __init__(self, config: ClientConfig):
        """
        Initialize a new session.

        Args:
            config: Session configuration

        Raises:
            ConfigError: If a required option is missing or invalid
            TransmissionIOError: If a configured directory does not exist
            SessionActiveError: If another session is open in this process
            TransmissionError: If the native session could not be created
        """
        self._config = config.resolve()
        _claim_process_session()
        try:
            self._lib = get_libtransmission()
            handle = self._init_native(self._config)
        except BaseException:
            _release_process_session()
            raise

        self._native = _NativeSession(self._lib, handle)
        self._torrents: Dict[int, Torrent] = {}
        self._torrents_lock = threading.Lock()

        # Leak detector: releases the session if it is never closed
        self._finalizer = weakref.finalize(self, _release_leaked, self._native)
        logger.info("Initialized session %s (config dir %s)",
                    self._config.app_name, self._config.config_dir)

    @classmethod
    def initialize(cls, config: ClientConfig) -> "Session":
        """Alias of ``Session(config)``."""
        return cls(config)

    def _init_native(self, config: ClientConfig) -> int:
        """Load settings from the config dir, apply ``config`` on top and start the session."""
        lib = self._lib.lib
        config_dir = str(config.config_dir).encode('utf-8')
        app_name = config.app_name.encode('utf-8')

        settings = TrVariant()
        lib.tr_variantInitDict(pointer(settings), 0)
        try:
            if not lib.tr_sessionLoadSettings(pointer(settings), config_dir, app_name):
                logger.warning("Could not load settings from %s; using defaults",
                               config.config_dir)

            for key, value in config.to_settings().items():
                quark = lib.tr_quark_new(key.encode('utf-8'), TR_BAD_SIZE)
                if isinstance(value, bool):
                    lib.tr_variantDictAddBool(pointer(settings), quark, value)
                elif isinstance(value, int):
                    lib.tr_variantDictAddInt(pointer(settings), quark, value)
                else:
                    lib.tr_variantDictAddStr(pointer(settings), quark, str(value).encode('utf-8'))

            handle = lib.tr_sessionInit(config_dir, False, pointer(settings))
        finally:
            lib.tr_variantFree(pointer(settings))

        if not handle:
            raise TransmissionError("Failed to initialize session")
        return handle

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __repr__(self):
        state = "closed" if self.closed else "open"
        return f"<Session {self._config.app_name!r} {state}>"

    @property
    def config(self) -> ClientConfig:
        """The resolved configuration the session was created with."""
        return self._config

    @property
    def closed(self) -> bool:
        return self._native.handle is None

    @contextmanager
    def _use_native(self):
        """Shared access to the native session, for calls that do not change it."""
        lock = self._native.lock
        try:
            lock.acquire_read()
        except LockClosedError:
            raise SessionClosedError() from None
        try:
            if self._native.handle is None:
                raise SessionClosedError()
            yield self._native.handle
        finally:
            lock.release_read()

    @contextmanager
    def _mutate_native(self):
        """Exclusive access to the native session."""
        lock = self._native.lock
        try:
            lock.acquire_write()
        except LockClosedError:
            raise SessionClosedError() from None
        try:
            if self._native.handle is None:
                raise SessionClosedError()
            yield self._native.handle
        finally:
            lock.release_write()

    def close(self) -> None:
        """
        Close the session and every torrent in it.

        Calls already running on the session finish first; calls that are
        still waiting, or that start before the engine has shut down, raise
        ``SessionClosedError``. Closing an already closed session does nothing.
        """
        if not self._native.release():
            return
        with self._torrents_lock:
            self._torrents.clear()
        logger.info("Closed session %s", self._config.app_name)

    # Adding torrents
    def _add(self, source: str, set_source, paused: Optional[bool],
             download_dir: Optional[PathLike]) -> Torrent:
        with self._mutate_native() as session:
            with TorrentConstructor(session) as ctor:
                set_source(ctor)
                if paused is not None:
                    ctor.set_paused(paused)
                if download_dir is not None:
                    ctor.set_download_dir(download_dir)
                handle = ctor.instantiate()

            torrent = Torrent(self, handle)
            with self._torrents_lock:
                self._torrents[torrent.id] = torrent

        logger.info("Added torrent %d from %s", torrent.id, source)
        return torrent

    def add_torrent_file(self, path: PathLike, paused: Optional[bool] = None,
                         download_dir: Optional[PathLike] = None) -> Torrent:
        """
        Add a torrent from a .torrent file.

        Args:
            path: Path to the .torrent file
            paused: Override whether the torrent starts right away
            download_dir: Override the session's download directory

        Raises:
            TransmissionIOError: If the file or download directory does not exist
            TransmissionParseError: If the file is not valid metainfo
            DuplicateTorrentError: If the torrent is already in the session
            SessionClosedError: If the session has been closed
        """
        return self._add(str(path), lambda ctor: ctor.set_metainfo_from_file(path),
                         paused, download_dir)

    def add_torrent_magnet(self, uri: str, paused: Optional[bool] = None,
                           download_dir: Optional[PathLike] = None) -> Torrent:
        """
        Add a torrent from a magnet link.

        Raises:
            TransmissionParseError: If the link is not a valid magnet link
            DuplicateTorrentError: If the torrent is already in the session
            SessionClosedError: If the session has been closed
        """
        return self._add(uri, lambda ctor: ctor.set_metainfo_from_magnet(uri),
                         paused, download_dir)

    # Registry
    def torrents(self) -> List[Torrent]:
        """The torrents added through this session and not removed."""
        with self._use_native():
            with self._torrents_lock:
                return list(self._torrents.values())

    def get_torrent(self, torrent_id: int) -> Optional[Torrent]:
        with self._use_native():
            with self._torrents_lock:
                return self._torrents.get(torrent_id)

    def _forget(self, torrent_id: int) -> None:
        with self._torrents_lock:
            self._torrents.pop(torrent_id, None)
