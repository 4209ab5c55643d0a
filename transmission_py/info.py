"""
Static torrent metadata, copied out of libtransmission's ``tr_info``.

Everything here is an owned Python value: the native arrays a ``tr_info``
points into are freed together with the torrent (or by ``tr_metainfoFree``),
so nothing may keep a reference to them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .ctypes_wrapper import TrFile, TrInfo, TrPiece, TrTrackerInfo, c_string, from_time_t
from .enums import Priority


@dataclass(frozen=True)
class TorrentFile:
    """
    A file that is part of a torrent.

    Also used as a file selector: only ``name`` and ``length`` are compared
    when resolving a selector against a torrent's file list.
    """
    name: str
    length: int
    priority: Priority = Priority.NORMAL
    #: "do not download"
    dnd: bool = False
    is_renamed: bool = False
    first_piece: int = 0
    last_piece: int = 0
    offset: int = 0

    @property
    def wanted(self) -> bool:
        return not self.dnd

    def matches(self, other: "TorrentFile") -> bool:
        """True if ``other`` names the same file (same name and length)."""
        return self.name == other.name and self.length == other.length

    @classmethod
    def from_native(cls, native: TrFile) -> "TorrentFile":
        return cls(
            name=c_string(native.name),
            length=native.length,
            priority=Priority.from_native(native.priority),
            dnd=bool(native.dnd),
            is_renamed=bool(native.is_renamed),
            first_piece=native.firstPiece,
            last_piece=native.lastPiece,
            offset=native.offset,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "length": self.length,
            "priority": self.priority.name,
            "dnd": self.dnd,
            "is_renamed": self.is_renamed,
            "first_piece": self.first_piece,
            "last_piece": self.last_piece,
            "offset": self.offset,
        }


@dataclass(frozen=True)
class TorrentPiece:
    #: Last time the piece was checked, ``None`` if never
    time_checked: Optional[datetime]
    hash: bytes
    priority: Priority
    dnd: bool

    @classmethod
    def from_native(cls, native: TrPiece) -> "TorrentPiece":
        return cls(
            time_checked=from_time_t(native.timeChecked),
            hash=bytes(native.hash),
            priority=Priority.from_native(native.priority),
            dnd=bool(native.dnd),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time_checked": self.time_checked.isoformat() if self.time_checked else None,
            "hash": self.hash.hex(),
            "priority": self.priority.name,
            "dnd": self.dnd,
        }


@dataclass(frozen=True)
class TrackerInfo:
    tier: int
    announce: str
    scrape: str
    id: int

    @classmethod
    def from_native(cls, native: TrTrackerInfo) -> "TrackerInfo":
        return cls(
            tier=native.tier,
            announce=c_string(native.announce),
            scrape=c_string(native.scrape),
            id=native.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"tier": self.tier, "announce": self.announce,
                "scrape": self.scrape, "id": self.id}


@dataclass(frozen=True)
class TorrentInfo:
    """
    Snapshot of a torrent's static metadata.

    Available as soon as the metainfo has been parsed; the torrent does not
    need to have been added to a session.
    """
    #: Total download size in bytes
    total_size: int
    original_name: str
    name: str
    #: Path of the .torrent file libtransmission keeps, if any
    torrent: str
    webseeds: Tuple[str, ...]
    comment: str
    creator: str
    files: Tuple[TorrentFile, ...]
    #: Left out of ``to_dict()`` because of its size
    pieces: Tuple[TorrentPiece, ...]
    trackers: Tuple[TrackerInfo, ...]
    date_created: Optional[datetime]
    piece_size: int
    piece_count: int
    hash: bytes
    hash_string: str
    is_private: bool
    is_folder: bool

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def tracker_count(self) -> int:
        return len(self.trackers)

    @property
    def webseed_count(self) -> int:
        return len(self.webseeds)

    @classmethod
    def from_native(cls, info: TrInfo) -> "TorrentInfo":
        """Deep-copy a ``tr_info`` into owned values."""
        webseeds = tuple(
            c_string(info.webseeds[i]) for i in range(info.webseedCount)
        ) if info.webseeds else ()
        files = tuple(
            TorrentFile.from_native(info.files[i]) for i in range(info.fileCount)
        ) if info.files else ()
        pieces = tuple(
            TorrentPiece.from_native(info.pieces[i]) for i in range(info.pieceCount)
        ) if info.pieces else ()
        trackers = tuple(
            TrackerInfo.from_native(info.trackers[i]) for i in range(info.trackerCount)
        ) if info.trackers else ()

        return cls(
            total_size=info.totalSize,
            original_name=c_string(info.originalName),
            name=c_string(info.name),
            torrent=c_string(info.torrent),
            webseeds=webseeds,
            comment=c_string(info.comment),
            creator=c_string(info.creator),
            files=files,
            pieces=pieces,
            trackers=trackers,
            date_created=from_time_t(info.dateCreated),
            piece_size=info.pieceSize,
            piece_count=info.pieceCount,
            hash=bytes(info.hash),
            hash_string=c_string(info.hashString),
            is_private=bool(info.isPrivate),
            is_folder=bool(info.isFolder),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_size": self.total_size,
            "original_name": self.original_name,
            "name": self.name,
            "torrent": self.torrent,
            "webseeds": list(self.webseeds),
            "comment": self.comment,
            "creator": self.creator,
            "files": [f.to_dict() for f in self.files],
            "trackers": [t.to_dict() for t in self.trackers],
            "date_created": self.date_created.isoformat() if self.date_created else None,
            "tracker_count": self.tracker_count,
            "webseed_count": self.webseed_count,
            "file_count": self.file_count,
            "piece_size": self.piece_size,
            "piece_count": self.piece_count,
            "hash": self.hash.hex(),
            "hash_string": self.hash_string,
            "is_private": self.is_private,
            "is_folder": self.is_folder,
        }
