"""
Dynamic torrent state, copied out of libtransmission's ``tr_stat``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .ctypes_wrapper import TrStat, c_string, from_time_t
from .enums import ErrorKind, TorrentActivity, TorrentState
from .exceptions import check_error, from_stat_error

_STATES = {
    TorrentActivity.STOPPED: TorrentState.STOPPED,
    TorrentActivity.CHECK_WAIT: TorrentState.CHECKING_WAIT,
    TorrentActivity.CHECK: TorrentState.CHECKING,
    TorrentActivity.DOWNLOAD_WAIT: TorrentState.DOWNLOADING_WAIT,
    TorrentActivity.DOWNLOAD: TorrentState.DOWNLOADING,
    TorrentActivity.SEED_WAIT: TorrentState.SEEDING_WAIT,
    TorrentActivity.SEED: TorrentState.SEEDING,
}


def state_from_activity(activity: int) -> TorrentState:
    """Translate a ``tr_torrent_activity`` value."""
    return _STATES.get(activity, TorrentState.UNKNOWN)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class TorrentStats:
    """
    Point-in-time stats of a torrent that has been added to a session.

    The snapshot is not updated; call ``Torrent.stats()`` again to refresh.
    All ``percent_*`` and progress values are fractions in [0.0, 1.0].
    Speeds are in KB/s.
    """
    id: int
    #: What the engine calls the torrent's "activity"
    state: TorrentState
    #: ``ErrorKind.NO_ERROR`` or one of the ``STAT_*`` kinds
    error: ErrorKind
    error_string: str
    recheck_progress: float
    percent_complete: float
    metadata_percent_complete: float
    #: Differs from ``percent_complete`` when only some files are wanted
    percent_done: float
    #: 1.0 when complete or when there is no ratio limit
    seed_ratio_percent_done: float
    raw_upload_speed_kbps: float
    raw_download_speed_kbps: float
    piece_upload_speed_kbps: float
    piece_download_speed_kbps: float
    #: Seconds until done, negative when unknown or not applicable
    eta: int
    eta_idle: int
    peers_connected: int
    #: Connected peers per discovery source (incoming, LPD, tracker, DHT, PEX, resume, LTEP)
    peers_from: Tuple[int, ...]
    peers_sending_to_us: int
    peers_getting_from_us: int
    webseeds_sending_to_us: int
    size_when_done: int
    left_until_done: int
    desired_available: int
    corrupt_ever: int
    uploaded_ever: int
    downloaded_ever: int
    have_valid: int
    have_unchecked: int
    manual_announce_time: Optional[datetime]
    ratio: float
    added_date: Optional[datetime]
    done_date: Optional[datetime]
    start_date: Optional[datetime]
    activity_date: Optional[datetime]
    idle_secs: int
    seconds_downloading: int
    seconds_seeding: int
    finished: bool
    queue_position: int
    is_stalled: bool

    @property
    def has_error(self) -> bool:
        return self.error != ErrorKind.NO_ERROR

    def raise_for_error(self) -> None:
        """Raise ``TorrentStatError`` if the snapshot carries an error or warning."""
        operation = f"Torrent {self.id}: {self.error_string}" if self.error_string else f"Torrent {self.id}"
        check_error(self.error, operation)

    @classmethod
    def from_native(cls, stat: TrStat) -> "TorrentStats":
        """Copy a ``tr_stat`` into owned values."""
        return cls(
            id=stat.id,
            state=state_from_activity(stat.activity),
            error=from_stat_error(stat.error),
            error_string=c_string(stat.errorString),
            recheck_progress=stat.recheckProgress,
            percent_complete=stat.percentComplete,
            metadata_percent_complete=stat.metadataPercentComplete,
            percent_done=stat.percentDone,
            seed_ratio_percent_done=stat.seedRatioPercentDone,
            raw_upload_speed_kbps=stat.rawUploadSpeed_KBps,
            raw_download_speed_kbps=stat.rawDownloadSpeed_KBps,
            piece_upload_speed_kbps=stat.pieceUploadSpeed_KBps,
            piece_download_speed_kbps=stat.pieceDownloadSpeed_KBps,
            eta=stat.eta,
            eta_idle=stat.etaIdle,
            peers_connected=stat.peersConnected,
            peers_from=tuple(stat.peersFrom),
            peers_sending_to_us=stat.peersSendingToUs,
            peers_getting_from_us=stat.peersGettingFromUs,
            webseeds_sending_to_us=stat.webseedsSendingToUs,
            size_when_done=stat.sizeWhenDone,
            left_until_done=stat.leftUntilDone,
            desired_available=stat.desiredAvailable,
            corrupt_ever=stat.corruptEver,
            uploaded_ever=stat.uploadedEver,
            downloaded_ever=stat.downloadedEver,
            have_valid=stat.haveValid,
            have_unchecked=stat.haveUnchecked,
            manual_announce_time=from_time_t(stat.manualAnnounceTime),
            ratio=stat.ratio,
            added_date=from_time_t(stat.addedDate),
            done_date=from_time_t(stat.doneDate),
            start_date=from_time_t(stat.startDate),
            activity_date=from_time_t(stat.activityDate),
            idle_secs=stat.idleSecs,
            seconds_downloading=stat.secondsDownloading,
            seconds_seeding=stat.secondsSeeding,
            finished=bool(stat.finished),
            queue_position=stat.queuePosition,
            is_stalled=bool(stat.isStalled),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if isinstance(value, (TorrentState, ErrorKind)):
                value = value.name
            elif isinstance(value, datetime):
                value = _isoformat(value)
            elif isinstance(value, tuple):
                value = list(value)
            data[name] = value
        return data
