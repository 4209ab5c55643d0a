"""
Callback type definitions for transmission_py.
"""

from typing import Callable, Optional
from ctypes import CFUNCTYPE, c_void_p, c_int, c_bool

from .enums import Completeness

# C callback function types
# void (*tr_verify_done_func)(tr_torrent*, bool aborted, void* user_data)
VerifyDoneCallbackType = CFUNCTYPE(None, c_void_p, c_bool, c_void_p)
# void (*tr_torrent_completeness_func)(tr_torrent*, tr_completeness, bool wasRunning, void*)
CompletenessCallbackType = CFUNCTYPE(None, c_void_p, c_int, c_bool, c_void_p)

# Python callback type hints
VerifyDoneCallback = Optional[Callable[[bool], None]]
CompletenessCallback = Optional[Callable[[Completeness, bool], None]]
ProgressCallback = Optional[Callable[[int, int], None]]
