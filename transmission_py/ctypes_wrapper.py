"""
Low-level ctypes wrapper for the libtransmission C API.

Struct layouts follow libtransmission's public headers (``transmission.h``,
``makemeta.h``, ``variant.h``) for the 2.9x/3.x series.
"""

import os
import platform
from datetime import datetime, timezone
from ctypes import (
    CDLL, POINTER, Structure, c_void_p, c_char_p, c_char, c_int, c_int8,
    c_int64, c_uint8, c_uint32, c_uint64, c_size_t, c_float, c_double, c_bool
)

from .callbacks import VerifyDoneCallbackType, CompletenessCallbackType

SHA_DIGEST_LENGTH = 20
TR_PEER_FROM__MAX = 7
TR_BAD_SIZE = c_size_t(-1).value

c_time_t = c_int64
tr_file_index_t = c_uint32
tr_piece_index_t = c_uint32
tr_priority_t = c_int8
tr_quark = c_size_t


class LibtransmissionNotFoundError(Exception):
    """Raised when the libtransmission shared library cannot be found."""
    pass


class TrVariant(Structure):
    """``tr_variant``; only ever manipulated through the ``tr_variant*`` API."""
    _fields_ = [("_opaque", c_uint8 * 64)]


class TrFile(Structure):
    _fields_ = [
        ("length", c_uint64),
        ("name", c_char_p),
        ("priority", tr_priority_t),
        ("dnd", c_int8),
        ("is_renamed", c_int8),
        ("firstPiece", tr_piece_index_t),
        ("lastPiece", tr_piece_index_t),
        ("offset", c_uint64),
    ]


class TrPiece(Structure):
    _fields_ = [
        ("timeChecked", c_time_t),
        ("hash", c_uint8 * SHA_DIGEST_LENGTH),
        ("priority", tr_priority_t),
        ("dnd", c_int8),
    ]


class TrTrackerInfo(Structure):
    _fields_ = [
        ("tier", c_int),
        ("announce", c_char_p),
        ("scrape", c_char_p),
        ("id", c_uint32),
    ]


class TrInfo(Structure):
    _fields_ = [
        ("totalSize", c_uint64),
        ("originalName", c_char_p),
        ("name", c_char_p),
        ("torrent", c_char_p),
        ("webseeds", POINTER(c_char_p)),
        ("comment", c_char_p),
        ("creator", c_char_p),
        ("files", POINTER(TrFile)),
        ("pieces", POINTER(TrPiece)),
        ("trackers", POINTER(TrTrackerInfo)),
        ("dateCreated", c_time_t),
        ("trackerCount", c_uint32),
        ("webseedCount", c_uint32),
        ("fileCount", tr_file_index_t),
        ("pieceSize", c_uint32),
        ("pieceCount", tr_piece_index_t),
        ("hash", c_uint8 * SHA_DIGEST_LENGTH),
        ("hashString", c_char * (2 * SHA_DIGEST_LENGTH + 1)),
        ("isPrivate", c_bool),
        ("isFolder", c_bool),
    ]


class TrStat(Structure):
    _fields_ = [
        ("id", c_int),
        ("activity", c_int),
        ("error", c_int),
        ("errorString", c_char * 512),
        ("recheckProgress", c_float),
        ("percentComplete", c_float),
        ("metadataPercentComplete", c_float),
        ("percentDone", c_float),
        ("seedRatioPercentDone", c_float),
        ("rawUploadSpeed_KBps", c_float),
        ("rawDownloadSpeed_KBps", c_float),
        ("pieceUploadSpeed_KBps", c_float),
        ("pieceDownloadSpeed_KBps", c_float),
        ("eta", c_int),
        ("etaIdle", c_int),
        ("peersConnected", c_int),
        ("peersFrom", c_int * TR_PEER_FROM__MAX),
        ("peersSendingToUs", c_int),
        ("peersGettingFromUs", c_int),
        ("webseedsSendingToUs", c_int),
        ("sizeWhenDone", c_uint64),
        ("leftUntilDone", c_uint64),
        ("desiredAvailable", c_uint64),
        ("corruptEver", c_uint64),
        ("uploadedEver", c_uint64),
        ("downloadedEver", c_uint64),
        ("haveValid", c_uint64),
        ("haveUnchecked", c_uint64),
        ("manualAnnounceTime", c_time_t),
        ("ratio", c_float),
        ("addedDate", c_time_t),
        ("doneDate", c_time_t),
        ("startDate", c_time_t),
        ("activityDate", c_time_t),
        ("idleSecs", c_int),
        ("secondsDownloading", c_int),
        ("secondsSeeding", c_int),
        ("finished", c_bool),
        ("queuePosition", c_int),
        ("isStalled", c_bool),
    ]


class TrMetainfoBuilderFile(Structure):
    _fields_ = [
        ("filename", c_char_p),
        ("size", c_uint64),
    ]


class TrMetainfoBuilder(Structure):
    _fields_ = [
        ("top", c_char_p),
        ("files", POINTER(TrMetainfoBuilderFile)),
        ("totalSize", c_uint64),
        ("fileCount", c_uint32),
        ("pieceSize", c_uint32),
        ("pieceCount", c_uint32),
        ("isFolder", c_bool),
        # copied from the tr_makeMetaInfo() arguments
        ("trackers", POINTER(TrTrackerInfo)),
        ("trackerCount", c_int),
        ("comment", c_char_p),
        ("outputFile", c_char_p),
        ("isPrivate", c_bool),
        # updated by the builder thread while it works
        ("pieceIndex", c_uint32),
        ("abortFlag", c_bool),
        ("isDone", c_bool),
        ("result", c_int),
        ("errfile", c_char * 2048),
        ("my_errno", c_int),
        ("nextBuilder", c_void_p),
    ]


def find_libtransmission_library() -> str:
    """Find the libtransmission shared library."""
    override = os.environ.get('TRANSMISSION_LIBRARY')
    if override:
        return override

    system = platform.system().lower()

    # Common library names
    if system == 'windows':
        lib_names = ['transmission.dll', 'libtransmission.dll']
    elif system == 'darwin':
        lib_names = ['libtransmission.dylib', 'libtransmission.so']
    else:  # Linux and others
        lib_names = ['libtransmission.so', 'libtransmission.so.3', 'libtransmission.so.2']

    # Search paths
    search_paths = [
        '.',
        './build/libtransmission',
        '/usr/local/lib',
        '/usr/lib',
        os.path.join(os.path.dirname(__file__), 'lib'),
    ]

    # Add system paths
    if 'LD_LIBRARY_PATH' in os.environ:
        search_paths.extend(os.environ['LD_LIBRARY_PATH'].split(':'))

    if system == 'windows' and 'PATH' in os.environ:
        search_paths.extend(os.environ['PATH'].split(';'))

    for path in search_paths:
        for lib_name in lib_names:
            lib_path = os.path.join(path, lib_name)
            if os.path.exists(lib_path):
                return lib_path

    # If not found, try loading by name (system will search)
    for lib_name in lib_names:
        try:
            CDLL(lib_name)
            return lib_name
        except OSError:
            continue

    raise LibtransmissionNotFoundError(
        f"Could not find libtransmission shared library. Searched for: {lib_names} "
        f"in paths: {search_paths}"
    )


class LibtransmissionCtypes:
    """Low-level ctypes wrapper for the libtransmission C API."""

    def __init__(self, lib_path: str = None):
        lib_path = lib_path or find_libtransmission_library()
        try:
            self.lib = CDLL(lib_path)
        except OSError as e:
            raise LibtransmissionNotFoundError(
                f"Failed to load libtransmission library at {lib_path}: {e}"
            )

        self._setup_function_signatures()

    @property
    def supports_piece_size(self) -> bool:
        """Whether this build exports ``tr_metaInfoBuilderSetPieceSize``."""
        return hasattr(self.lib, 'tr_metaInfoBuilderSetPieceSize')

    def _setup_function_signatures(self):
        """Set up function signatures for type safety."""

        # Settings dictionaries
        self.lib.tr_quark_new.argtypes = [c_void_p, c_size_t]
        self.lib.tr_quark_new.restype = tr_quark

        self.lib.tr_variantInitDict.argtypes = [POINTER(TrVariant), c_size_t]
        self.lib.tr_variantInitDict.restype = None

        self.lib.tr_variantDictAddStr.argtypes = [POINTER(TrVariant), tr_quark, c_char_p]
        self.lib.tr_variantDictAddStr.restype = c_void_p

        self.lib.tr_variantDictAddBool.argtypes = [POINTER(TrVariant), tr_quark, c_bool]
        self.lib.tr_variantDictAddBool.restype = c_void_p

        self.lib.tr_variantDictAddInt.argtypes = [POINTER(TrVariant), tr_quark, c_int64]
        self.lib.tr_variantDictAddInt.restype = c_void_p

        self.lib.tr_variantFree.argtypes = [POINTER(TrVariant)]
        self.lib.tr_variantFree.restype = None

        # Session lifecycle
        self.lib.tr_sessionLoadSettings.argtypes = [POINTER(TrVariant), c_char_p, c_char_p]
        self.lib.tr_sessionLoadSettings.restype = c_bool

        self.lib.tr_sessionInit.argtypes = [c_char_p, c_bool, POINTER(TrVariant)]
        self.lib.tr_sessionInit.restype = c_void_p

        self.lib.tr_sessionClose.argtypes = [c_void_p]
        self.lib.tr_sessionClose.restype = None

        # Torrent constructors
        self.lib.tr_ctorNew.argtypes = [c_void_p]
        self.lib.tr_ctorNew.restype = c_void_p

        self.lib.tr_ctorFree.argtypes = [c_void_p]
        self.lib.tr_ctorFree.restype = None

        self.lib.tr_ctorSetMetainfoFromFile.argtypes = [c_void_p, c_char_p]
        self.lib.tr_ctorSetMetainfoFromFile.restype = c_int

        self.lib.tr_ctorSetMetainfoFromMagnetLink.argtypes = [c_void_p, c_char_p]
        self.lib.tr_ctorSetMetainfoFromMagnetLink.restype = c_int

        self.lib.tr_ctorSetPaused.argtypes = [c_void_p, c_int, c_bool]
        self.lib.tr_ctorSetPaused.restype = None

        self.lib.tr_ctorSetDownloadDir.argtypes = [c_void_p, c_int, c_char_p]
        self.lib.tr_ctorSetDownloadDir.restype = None

        self.lib.tr_torrentParse.argtypes = [c_void_p, POINTER(TrInfo)]
        self.lib.tr_torrentParse.restype = c_int

        self.lib.tr_metainfoFree.argtypes = [POINTER(TrInfo)]
        self.lib.tr_metainfoFree.restype = None

        self.lib.tr_torrentNew.argtypes = [c_void_p, POINTER(c_int), POINTER(c_int)]
        self.lib.tr_torrentNew.restype = c_void_p

        # Torrent control
        self.lib.tr_torrentStart.argtypes = [c_void_p]
        self.lib.tr_torrentStart.restype = None

        self.lib.tr_torrentStop.argtypes = [c_void_p]
        self.lib.tr_torrentStop.restype = None

        self.lib.tr_torrentRemove.argtypes = [c_void_p, c_bool, c_void_p]
        self.lib.tr_torrentRemove.restype = None

        self.lib.tr_torrentVerify.argtypes = [c_void_p, VerifyDoneCallbackType, c_void_p]
        self.lib.tr_torrentVerify.restype = None

        # Torrent queries
        self.lib.tr_torrentId.argtypes = [c_void_p]
        self.lib.tr_torrentId.restype = c_int

        self.lib.tr_torrentName.argtypes = [c_void_p]
        self.lib.tr_torrentName.restype = c_char_p

        self.lib.tr_torrentStatCached.argtypes = [c_void_p]
        self.lib.tr_torrentStatCached.restype = POINTER(TrStat)

        self.lib.tr_torrentInfo.argtypes = [c_void_p]
        self.lib.tr_torrentInfo.restype = POINTER(TrInfo)

        # Torrent configuration
        self.lib.tr_torrentSetRatioMode.argtypes = [c_void_p, c_int]
        self.lib.tr_torrentSetRatioMode.restype = None

        self.lib.tr_torrentSetRatioLimit.argtypes = [c_void_p, c_double]
        self.lib.tr_torrentSetRatioLimit.restype = None

        self.lib.tr_torrentSetDownloadDir.argtypes = [c_void_p, c_char_p]
        self.lib.tr_torrentSetDownloadDir.restype = None

        self.lib.tr_torrentSetPriority.argtypes = [c_void_p, tr_priority_t]
        self.lib.tr_torrentSetPriority.restype = None

        self.lib.tr_torrentGetPriority.argtypes = [c_void_p]
        self.lib.tr_torrentGetPriority.restype = tr_priority_t

        self.lib.tr_torrentSetFileDLs.argtypes = [
            c_void_p, POINTER(tr_file_index_t), tr_file_index_t, c_bool
        ]
        self.lib.tr_torrentSetFileDLs.restype = None

        self.lib.tr_torrentSetFilePriorities.argtypes = [
            c_void_p, POINTER(tr_file_index_t), tr_file_index_t, tr_priority_t
        ]
        self.lib.tr_torrentSetFilePriorities.restype = None

        # Torrent callbacks
        self.lib.tr_torrentSetCompletenessCallback.argtypes = [
            c_void_p, CompletenessCallbackType, c_void_p
        ]
        self.lib.tr_torrentSetCompletenessCallback.restype = None

        self.lib.tr_torrentClearCompletenessCallback.argtypes = [c_void_p]
        self.lib.tr_torrentClearCompletenessCallback.restype = None

        # Metainfo builder
        self.lib.tr_metaInfoBuilderCreate.argtypes = [c_char_p]
        self.lib.tr_metaInfoBuilderCreate.restype = POINTER(TrMetainfoBuilder)

        self.lib.tr_metaInfoBuilderFree.argtypes = [POINTER(TrMetainfoBuilder)]
        self.lib.tr_metaInfoBuilderFree.restype = None

        self.lib.tr_makeMetaInfo.argtypes = [
            POINTER(TrMetainfoBuilder), c_char_p, POINTER(TrTrackerInfo), c_int,
            c_char_p, c_bool
        ]
        self.lib.tr_makeMetaInfo.restype = None

        # Only exported by 3.x builds
        if self.supports_piece_size:
            self.lib.tr_metaInfoBuilderSetPieceSize.argtypes = [
                POINTER(TrMetainfoBuilder), c_uint32
            ]
            self.lib.tr_metaInfoBuilderSetPieceSize.restype = c_bool


# Global instance
_libtransmission = None

def get_libtransmission() -> LibtransmissionCtypes:
    """Get the global libtransmission ctypes instance."""
    global _libtransmission
    if _libtransmission is None:
        _libtransmission = LibtransmissionCtypes()
    return _libtransmission


def c_string(value) -> str:
    """Decode a C string (``bytes`` or ``None``) into an owned ``str``."""
    if not value:
        return ""
    return value.decode('utf-8', errors='replace')


def from_time_t(value: int):
    """Convert a ``time_t`` into an aware UTC datetime; ``0`` (never) becomes ``None``."""
    if value <= 0:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)
