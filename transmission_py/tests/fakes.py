"""
In-process stand-in for libtransmission used by the unit tests.

Implements the part of the C API that transmission_py binds, with the same
calling conventions (ctypes structures, pointers and out-params). Torrent
files are small JSON documents instead of bencoded metainfo.
"""

import ctypes
import functools
import hashlib
import itertools
import json
import os
import tempfile
import threading
import time
import types
import unittest
from collections import Counter
from ctypes import POINTER, addressof, c_char_p, c_uint8, pointer
from pathlib import Path
from urllib.parse import parse_qs, urlparse

from transmission_py import ClientConfig, Session
from transmission_py.ctypes_wrapper import (
    LibtransmissionCtypes, SHA_DIGEST_LENGTH, TrFile, TrInfo, TrMetainfoBuilder,
    TrMetainfoBuilderFile, TrPiece, TrStat, TrTrackerInfo
)
from transmission_py.enums import (
    Completeness, MakeMetaResult, ParseResult, TorrentActivity
)

DEFAULT_PIECE_SIZE = 32 * 1024
TRACKER_SCHEMES = ("http", "https", "udp")
CREATOR = "fake-transmission/1.0"


def metainfo_hash(meta) -> bytes:
    key = {k: meta[k] for k in ("name", "files", "piece_size", "private")}
    return hashlib.sha1(json.dumps(key, sort_keys=True).encode('utf-8')).digest()


def write_metainfo(path, name, files, piece_size=DEFAULT_PIECE_SIZE, trackers=(),
                   comment="", private=False, webseeds=(), date_created=None):
    """
    Write a .torrent file the fake library understands.

    Args:
        files: ``(name, length)`` pairs
        trackers: ``(tier, announce_url)`` pairs
    """
    meta = {
        "name": name,
        "files": [{"name": n, "length": length} for n, length in files],
        "piece_size": piece_size,
        "trackers": [{"tier": tier, "announce": url} for tier, url in trackers],
        "webseeds": list(webseeds),
        "comment": comment,
        "creator": CREATOR,
        "private": private,
        "date_created": int(time.time()) if date_created is None else date_created,
    }
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(meta, f)
    return str(path)


def read_metainfo(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            meta = json.load(f)
    except (OSError, ValueError):
        return None
    if not isinstance(meta, dict) or not all(k in meta for k in ("name", "files", "piece_size")):
        return None
    meta.setdefault("trackers", [])
    meta.setdefault("webseeds", [])
    meta.setdefault("comment", "")
    meta.setdefault("creator", "")
    meta.setdefault("private", False)
    meta.setdefault("date_created", 0)
    return meta


def magnet_metainfo(uri: str):
    parsed = urlparse(uri)
    if parsed.scheme != "magnet":
        return None
    params = parse_qs(parsed.query)
    topics = [xt for xt in params.get("xt", []) if xt.startswith("urn:btih:")]
    if not topics:
        return None
    info_hash = topics[0][len("urn:btih:"):]
    try:
        digest = bytes.fromhex(info_hash)
    except ValueError:
        return None
    if len(digest) != SHA_DIGEST_LENGTH:
        return None
    return {
        "name": params.get("dn", [info_hash])[0],
        "files": [],
        "piece_size": 0,
        "trackers": [{"tier": i, "announce": url} for i, url in enumerate(params.get("tr", []))],
        "webseeds": [],
        "comment": "",
        "creator": "",
        "private": False,
        "date_created": 0,
        "hash": digest,
    }


def build_info(meta, torrent_path=""):
    """A ``TrInfo`` for ``meta`` plus the objects its pointers refer to."""
    info = TrInfo()
    keep = [info]

    def c_bytes(value: str) -> bytes:
        data = value.encode('utf-8')
        keep.append(data)
        return data

    piece_size = meta["piece_size"]
    files = meta["files"]
    offset = 0
    if files:
        file_array = (TrFile * len(files))()
        keep.append(file_array)
        for i, entry in enumerate(files):
            native = file_array[i]
            native.name = c_bytes(entry["name"])
            native.length = entry["length"]
            native.offset = offset
            native.firstPiece = offset // piece_size
            native.lastPiece = (offset + max(entry["length"], 1) - 1) // piece_size
            offset += entry["length"]
        info.files = ctypes.cast(file_array, POINTER(TrFile))
    info.fileCount = len(files)
    info.totalSize = offset

    piece_count = -(-offset // piece_size) if piece_size else 0
    if piece_count:
        piece_array = (TrPiece * piece_count)()
        keep.append(piece_array)
        for i in range(piece_count):
            digest = hashlib.sha1(f"{meta['name']}:{i}".encode('utf-8')).digest()
            piece_array[i].hash = (c_uint8 * SHA_DIGEST_LENGTH)(*digest)
        info.pieces = ctypes.cast(piece_array, POINTER(TrPiece))
    info.pieceCount = piece_count
    info.pieceSize = piece_size

    trackers = meta["trackers"]
    if trackers:
        tracker_array = (TrTrackerInfo * len(trackers))()
        keep.append(tracker_array)
        for i, tracker in enumerate(trackers):
            tracker_array[i].tier = tracker["tier"]
            tracker_array[i].announce = c_bytes(tracker["announce"])
            tracker_array[i].scrape = c_bytes(tracker["announce"].replace("announce", "scrape"))
            tracker_array[i].id = i
        info.trackers = ctypes.cast(tracker_array, POINTER(TrTrackerInfo))
    info.trackerCount = len(trackers)

    webseeds = meta["webseeds"]
    if webseeds:
        webseed_array = (c_char_p * len(webseeds))(*[c_bytes(url) for url in webseeds])
        keep.append(webseed_array)
        info.webseeds = ctypes.cast(webseed_array, POINTER(c_char_p))
    info.webseedCount = len(webseeds)

    digest = meta.get("hash") or metainfo_hash(meta)
    info.name = c_bytes(meta["name"])
    info.originalName = c_bytes(meta["name"])
    info.torrent = c_bytes(torrent_path)
    info.comment = c_bytes(meta["comment"])
    info.creator = c_bytes(meta["creator"])
    info.dateCreated = meta["date_created"]
    info.hash = (c_uint8 * SHA_DIGEST_LENGTH)(*digest)
    info.hashString = digest.hex().encode('ascii')
    info.isPrivate = bool(meta["private"])
    info.isFolder = len(files) > 1
    return info, keep


class _SignatureRecorder:
    """Stands in for a ``CDLL`` while ``LibtransmissionCtypes`` declares its signatures."""

    def __init__(self):
        self.functions = {}

    def __getattr__(self, name):
        if name.startswith('__'):
            raise AttributeError(name)
        return self.functions.setdefault(name, types.SimpleNamespace(argtypes=None, restype=None))


def declared_argtypes():
    """The argtypes ``LibtransmissionCtypes`` sets on each bound function."""
    recorder = _SignatureRecorder()
    LibtransmissionCtypes._setup_function_signatures(
        types.SimpleNamespace(lib=recorder, supports_piece_size=True)
    )
    return {name: function.argtypes for name, function in recorder.functions.items()}


DECLARED_ARGTYPES = declared_argtypes()


def check_arguments(name, args):
    """Convert ``args`` the way a ``CDLL`` function with declared argtypes does."""
    argtypes = DECLARED_ARGTYPES.get(name)
    if argtypes is None:
        raise AttributeError(f"{name} has no declared signature")
    if len(args) != len(argtypes):
        raise TypeError(f"{name} takes {len(argtypes)} arguments ({len(args)} given)")
    for position, (argtype, value) in enumerate(zip(argtypes, args), 1):
        try:
            argtype.from_param(value)
        except (TypeError, ValueError) as e:
            raise ctypes.ArgumentError(f"argument {position}: {type(e).__name__}: {e}")


def _recorded(func):
    name = func.__name__

    @functools.wraps(func)
    def wrapper(self, *args):
        check_arguments(name, args)
        with self._calls_lock:
            self.calls[name] += 1
        return func(self, *args)
    return wrapper


class FakeSession:
    def __init__(self, handle, config_dir, settings):
        self.handle = handle
        self.config_dir = config_dir
        self.settings = settings
        self.closed = False


class FakeTorrent:
    def __init__(self, handle, torrent_id, session, meta, source, paused, download_dir):
        self.handle = handle
        self.id = torrent_id
        self.session = session
        self.meta = meta
        self.hash = meta.get("hash") or metainfo_hash(meta)
        self.info, self._keep = build_info(meta, source if source != "magnet" else "")
        self.download_dir = download_dir
        self.priority = 0
        self.ratio_mode = 0
        self.ratio_limit = 2.0
        self.completeness_callback = None
        self.removed = False
        self.deleted_data = False

        self.stat = TrStat()
        self.stat.id = torrent_id
        self.stat.activity = TorrentActivity.STOPPED if paused else TorrentActivity.DOWNLOAD
        self.stat.metadataPercentComplete = 1.0 if meta["files"] else 0.0
        self.stat.sizeWhenDone = self.info.totalSize
        self.stat.leftUntilDone = self.info.totalSize
        self.stat.addedDate = int(time.time())
        self.stat.seedRatioPercentDone = 0.0


class _FakeNativeLib:
    """The ``tr_*`` functions, as attributes of a ``CDLL`` would be."""

    def __init__(self):
        self._calls_lock = threading.Lock()
        self._lock = threading.RLock()
        self.calls = Counter()
        self._handles = itertools.count(0x1000, 0x10)
        self._torrent_ids = itertools.count(1)

        self.quarks = {}
        self.variants = {}
        self.sessions = {}
        self.ctors = {}
        self.torrents = {}
        self.parsed = {}
        self.builders = {}

        # Knobs for tests
        self.load_settings_ok = True
        self.fail_session_init = False
        self.verify_aborted = False
        # Fill the tr_info and still report ERR, as an unusable piece size does
        self.parse_fails_after_fill = False
        # Called from tr_sessionClose, like engine callbacks delivered during shutdown
        self.session_close_hook = None
        self.builder_piece_delay = 0.0
        self.freed_running_builder = False

    def _new_handle(self) -> int:
        return next(self._handles)

    # Settings dictionaries
    @_recorded
    def tr_quark_new(self, key, size):
        with self._lock:
            return self.quarks.setdefault(key.decode('utf-8'), 1000 + len(self.quarks))

    def _quark_name(self, quark):
        return next(name for name, value in self.quarks.items() if value == quark)

    @_recorded
    def tr_variantInitDict(self, variant, reserve):
        self.variants[addressof(variant.contents)] = {}

    @_recorded
    def tr_variantDictAddStr(self, variant, quark, value):
        self.variants[addressof(variant.contents)][self._quark_name(quark)] = value.decode('utf-8')

    @_recorded
    def tr_variantDictAddBool(self, variant, quark, value):
        self.variants[addressof(variant.contents)][self._quark_name(quark)] = bool(value)

    @_recorded
    def tr_variantDictAddInt(self, variant, quark, value):
        self.variants[addressof(variant.contents)][self._quark_name(quark)] = int(value)

    @_recorded
    def tr_variantFree(self, variant):
        self.variants.pop(addressof(variant.contents), None)

    # Session lifecycle
    @_recorded
    def tr_sessionLoadSettings(self, variant, config_dir, app_name):
        if not self.load_settings_ok:
            return False
        path = os.path.join(config_dir.decode('utf-8'), "settings.json")
        if os.path.exists(path):
            with open(path, 'r', encoding='utf-8') as f:
                self.variants[addressof(variant.contents)].update(json.load(f))
        return True

    @_recorded
    def tr_sessionInit(self, config_dir, message_queueing, variant):
        if self.fail_session_init:
            return None
        handle = self._new_handle()
        settings = dict(self.variants[addressof(variant.contents)])
        self.sessions[handle] = FakeSession(handle, config_dir.decode('utf-8'), settings)
        return handle

    @_recorded
    def tr_sessionClose(self, handle):
        if self.session_close_hook is not None:
            self.session_close_hook()
        with self._lock:
            session = self.sessions[handle]
            session.closed = True
            for torrent in self.torrents.values():
                if torrent.session is session:
                    torrent.removed = True

    # Torrent constructors
    @_recorded
    def tr_ctorNew(self, session):
        handle = self._new_handle()
        self.ctors[handle] = {
            "session": session, "meta": None, "source": None,
            "paused": False, "download_dir": None, "freed": False,
        }
        return handle

    @_recorded
    def tr_ctorFree(self, handle):
        self.ctors[handle]["freed"] = True

    @_recorded
    def tr_ctorSetMetainfoFromFile(self, handle, path):
        meta = read_metainfo(path.decode('utf-8'))
        if meta is None:
            return 1
        self.ctors[handle].update(meta=meta, source=path.decode('utf-8'))
        return 0

    @_recorded
    def tr_ctorSetMetainfoFromMagnetLink(self, handle, uri):
        meta = magnet_metainfo(uri.decode('utf-8'))
        if meta is None:
            return 1
        self.ctors[handle].update(meta=meta, source="magnet")
        return 0

    @_recorded
    def tr_ctorSetPaused(self, handle, mode, paused):
        self.ctors[handle]["paused"] = bool(paused)

    @_recorded
    def tr_ctorSetDownloadDir(self, handle, mode, download_dir):
        self.ctors[handle]["download_dir"] = download_dir.decode('utf-8')

    def _find_duplicate(self, session, meta):
        digest = meta.get("hash") or metainfo_hash(meta)
        for torrent in self.torrents.values():
            if torrent.session is session and not torrent.removed and torrent.hash == digest:
                return torrent
        return None

    @_recorded
    def tr_torrentParse(self, handle, info_ptr):
        ctor = self.ctors[handle]
        meta = ctor["meta"]
        if meta is None:
            return ParseResult.ERR

        info, keep = build_info(meta, ctor["source"] if ctor["source"] != "magnet" else "")
        ctypes.memmove(addressof(info_ptr.contents), addressof(info), ctypes.sizeof(TrInfo))
        self.parsed[addressof(info_ptr.contents)] = keep
        if self.parse_fails_after_fill:
            return ParseResult.ERR

        session = self.sessions.get(ctor["session"])
        if session is not None and self._find_duplicate(session, meta):
            return ParseResult.DUPLICATE
        return ParseResult.OK

    @_recorded
    def tr_metainfoFree(self, info_ptr):
        self.parsed.pop(addressof(info_ptr.contents), None)
        ctypes.memset(addressof(info_ptr.contents), 0, ctypes.sizeof(TrInfo))

    @_recorded
    def tr_torrentNew(self, handle, error_ptr, duplicate_ptr):
        with self._lock:
            ctor = self.ctors[handle]
            meta = ctor["meta"]
            if meta is None:
                error_ptr[0] = ParseResult.ERR
                return None

            session = self.sessions[ctor["session"]]
            duplicate = self._find_duplicate(session, meta)
            if duplicate is not None:
                error_ptr[0] = ParseResult.DUPLICATE
                duplicate_ptr[0] = duplicate.id
                return None

            download_dir = ctor["download_dir"] or session.settings.get("download-dir")
            tor = FakeTorrent(self._new_handle(), next(self._torrent_ids), session, meta,
                              ctor["source"], ctor["paused"], download_dir)
            self.torrents[tor.handle] = tor
            return tor.handle

    # Torrent control
    @_recorded
    def tr_torrentStart(self, handle):
        tor = self.torrents[handle]
        done = tor.stat.percentDone >= 1.0
        tor.stat.activity = TorrentActivity.SEED if done else TorrentActivity.DOWNLOAD
        tor.stat.startDate = int(time.time())

    @_recorded
    def tr_torrentStop(self, handle):
        self.torrents[handle].stat.activity = TorrentActivity.STOPPED

    @_recorded
    def tr_torrentRemove(self, handle, delete_data, delete_func):
        tor = self.torrents[handle]
        tor.removed = True
        tor.deleted_data = bool(delete_data)

    @_recorded
    def tr_torrentVerify(self, handle, callback, user_data):
        tor = self.torrents[handle]
        tor.stat.activity = TorrentActivity.CHECK
        aborted = self.verify_aborted

        def check():
            tor.stat.activity = TorrentActivity.STOPPED
            tor.stat.recheckProgress = 1.0
            if callback:
                callback(handle, aborted, None)

        threading.Thread(target=check, daemon=True).start()

    # Torrent queries
    @_recorded
    def tr_torrentId(self, handle):
        return self.torrents[handle].id

    @_recorded
    def tr_torrentName(self, handle):
        return self.torrents[handle].info.name

    @_recorded
    def tr_torrentStatCached(self, handle):
        return pointer(self.torrents[handle].stat)

    @_recorded
    def tr_torrentInfo(self, handle):
        return pointer(self.torrents[handle].info)

    # Torrent configuration
    @_recorded
    def tr_torrentSetRatioMode(self, handle, mode):
        self.torrents[handle].ratio_mode = int(mode)

    @_recorded
    def tr_torrentSetRatioLimit(self, handle, limit):
        self.torrents[handle].ratio_limit = limit

    @_recorded
    def tr_torrentSetDownloadDir(self, handle, download_dir):
        self.torrents[handle].download_dir = download_dir.decode('utf-8')

    @_recorded
    def tr_torrentSetPriority(self, handle, priority):
        self.torrents[handle].priority = int(priority)

    @_recorded
    def tr_torrentGetPriority(self, handle):
        return self.torrents[handle].priority

    @_recorded
    def tr_torrentSetFileDLs(self, handle, files, count, download):
        info = self.torrents[handle].info
        for i in range(count):
            info.files[files[i]].dnd = not download

    @_recorded
    def tr_torrentSetFilePriorities(self, handle, files, count, priority):
        info = self.torrents[handle].info
        for i in range(count):
            info.files[files[i]].priority = int(priority)

    @_recorded
    def tr_torrentSetCompletenessCallback(self, handle, callback, user_data):
        self.torrents[handle].completeness_callback = callback

    @_recorded
    def tr_torrentClearCompletenessCallback(self, handle):
        self.torrents[handle].completeness_callback = None

    # Metainfo builder
    @_recorded
    def tr_metaInfoBuilderCreate(self, top):
        top_path = top.decode('utf-8')
        if not os.path.exists(top_path):
            return None

        if os.path.isdir(top_path):
            entries = []
            for root, _, names in os.walk(top_path):
                for name in sorted(names):
                    full = os.path.join(root, name)
                    entries.append((full, os.path.getsize(full)))
        else:
            entries = [(top_path, os.path.getsize(top_path))]

        builder = TrMetainfoBuilder()
        file_array = (TrMetainfoBuilderFile * max(len(entries), 1))()
        for i, (name, size) in enumerate(entries):
            file_array[i].filename = name.encode('utf-8')
            file_array[i].size = size
        builder.top = top
        builder.files = ctypes.cast(file_array, POINTER(TrMetainfoBuilderFile))
        builder.fileCount = len(entries)
        builder.totalSize = sum(size for _, size in entries)
        builder.isFolder = os.path.isdir(top_path)
        self._set_piece_size(builder, DEFAULT_PIECE_SIZE)

        self.builders[addressof(builder)] = {
            "builder": builder, "files": file_array, "thread": None,
        }
        return pointer(builder)

    @staticmethod
    def _set_piece_size(builder, size):
        builder.pieceSize = size
        builder.pieceCount = -(-builder.totalSize // size)

    @_recorded
    def tr_metaInfoBuilderSetPieceSize(self, builder_ptr, size):
        if size <= 0 or size & (size - 1):
            return False
        self._set_piece_size(builder_ptr.contents, size)
        return True

    @_recorded
    def tr_makeMetaInfo(self, builder_ptr, output_file, trackers, tracker_count,
                        comment, is_private):
        builder = builder_ptr.contents
        record = self.builders[addressof(builder)]
        tracker_list = [
            (trackers[i].tier, trackers[i].announce.decode('utf-8'))
            for i in range(tracker_count)
        ]
        builder.outputFile = output_file
        builder.comment = comment
        builder.trackerCount = tracker_count
        builder.isPrivate = bool(is_private)
        builder.abortFlag = False
        builder.isDone = False
        builder.result = MakeMetaResult.OK
        builder.pieceIndex = 0

        thread = threading.Thread(
            target=self._make_meta,
            args=(builder, output_file.decode('utf-8'), tracker_list,
                  comment.decode('utf-8') if comment else "", bool(is_private)),
            daemon=True,
        )
        record["thread"] = thread
        thread.start()

    def _make_meta(self, builder, output_file, trackers, comment, is_private):
        for _, url in trackers:
            parsed = urlparse(url)
            if parsed.scheme not in TRACKER_SCHEMES or not parsed.netloc:
                builder.errfile = url.encode('utf-8')
                builder.result = MakeMetaResult.URL
                builder.isDone = True
                return

        for i in range(builder.pieceCount):
            if builder.abortFlag:
                break
            builder.pieceIndex = i
            if self.builder_piece_delay:
                time.sleep(self.builder_piece_delay)

        if builder.abortFlag:
            builder.result = MakeMetaResult.CANCELLED
            builder.isDone = True
            return
        builder.pieceIndex = builder.pieceCount

        top = builder.top.decode('utf-8')
        top_name = os.path.basename(top.rstrip(os.sep))
        files = []
        for i in range(builder.fileCount):
            entry = builder.files[i]
            name = entry.filename.decode('utf-8')
            if builder.isFolder:
                name = os.path.join(top_name, os.path.relpath(name, top))
            else:
                name = top_name
            files.append((name, entry.size))

        try:
            write_metainfo(output_file, top_name, files, piece_size=builder.pieceSize,
                           trackers=trackers, comment=comment, private=is_private)
        except OSError as e:
            builder.errfile = output_file.encode('utf-8')
            builder.my_errno = e.errno or 0
            builder.result = MakeMetaResult.IO_WRITE
        builder.isDone = True

    @_recorded
    def tr_metaInfoBuilderFree(self, builder_ptr):
        record = self.builders.pop(addressof(builder_ptr.contents))
        thread = record["thread"]
        if thread is not None and thread.is_alive():
            self.freed_running_builder = True


class FakeLibtransmission:
    """Drop-in for ``LibtransmissionCtypes`` backed by ``_FakeNativeLib``."""

    def __init__(self, piece_size_supported: bool = True):
        self.lib = _FakeNativeLib()
        self._piece_size_supported = piece_size_supported

    @property
    def supports_piece_size(self) -> bool:
        return self._piece_size_supported

    @property
    def calls(self) -> Counter:
        return self.lib.calls

    def torrent(self, torrent_id: int) -> FakeTorrent:
        return next(t for t in self.lib.torrents.values() if t.id == torrent_id)

    def only_session(self) -> FakeSession:
        sessions = list(self.lib.sessions.values())
        assert len(sessions) == 1, sessions
        return sessions[0]

    def set_stat_error(self, torrent_id: int, code: int, message: str) -> None:
        stat = self.torrent(torrent_id).stat
        stat.error = code
        stat.errorString = message.encode('utf-8')

    def complete(self, torrent_id: int) -> None:
        """Pretend the torrent finished downloading and fire its completeness callback."""
        tor = self.torrent(torrent_id)
        was_running = tor.stat.activity != TorrentActivity.STOPPED
        tor.stat.percentComplete = 1.0
        tor.stat.percentDone = 1.0
        tor.stat.leftUntilDone = 0
        tor.stat.doneDate = int(time.time())
        tor.stat.finished = True
        if was_running:
            tor.stat.activity = TorrentActivity.SEED
        if tor.completeness_callback:
            tor.completeness_callback(tor.handle, Completeness.SEED, was_running, None)


def install(testcase, lib=None) -> FakeLibtransmission:
    """Make ``get_libtransmission()`` return a fake for the duration of ``testcase``."""
    from unittest.mock import patch

    lib = lib or FakeLibtransmission()
    patcher = patch('transmission_py.ctypes_wrapper._libtransmission', lib)
    patcher.start()
    testcase.addCleanup(patcher.stop)
    return lib


class FakeLibTestCase(unittest.TestCase):
    """Base class for tests running against the fake library in temporary directories."""

    def setUp(self):
        self.lib = install(self)
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp = Path(tmp.name)
        self.config_dir = self.tmp / "config"
        self.download_dir = self.tmp / "downloads"
        self.config_dir.mkdir()
        self.download_dir.mkdir()

    def make_config(self, **overrides) -> ClientConfig:
        options = dict(app_name="transmission_py-tests", config_dir=self.config_dir,
                       download_dir=self.download_dir)
        options.update(overrides)
        return ClientConfig(**options)

    def make_session(self, **overrides) -> Session:
        session = Session(self.make_config(**overrides))
        self.addCleanup(session.close)
        return session

    def make_torrent_file(self, name="alpine.iso", files=None, **kwargs) -> str:
        files = files if files is not None else [(name, 3 * DEFAULT_PIECE_SIZE + 100)]
        return write_metainfo(self.tmp / f"{name}.torrent", name, files, **kwargs)
