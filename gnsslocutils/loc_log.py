"""Name lookups and time strings used in location log messages."""

from __future__ import annotations

import time
from typing import Iterable, Optional, Tuple

from gnsslocutils.loc_target import GnssTarget, SscType, get_target_gnss_type
from gnsslocutils.msg_q import MsgQueueStatus

NameTable = Iterable[Tuple[str, int]]

UNKNOWN_STR = "UNKNOWN"

BOOL_STR = ("False", "True")
VOID_RET = "None"
FROM_AFW = "===>"
TO_MODEM = "--->"
FROM_MODEM = "<---"
TO_AFW = "<==="
EXIT_TAG = "Exiting"
ENTRY_TAG = "Entering"

MSG_Q_STATUS_NAMES: Tuple[Tuple[str, int], ...] = tuple(
    ("eMSG_Q_" + status.name, int(status)) for status in MsgQueueStatus
)

TARGET_NAMES: Tuple[Tuple[str, int], ...] = tuple(
    ("GNSS_" + gnss.name, int(gnss)) for gnss in GnssTarget
)


def get_name_from_mask(table: NameTable, mask: int) -> str:
    """Return the first name whose value shares a bit with ``mask``."""
    for name, value in table:
        if value & mask:
            return name
    return UNKNOWN_STR


def get_name_from_val(table: NameTable, value: int) -> str:
    """Return the first name whose value equals ``value``."""
    for name, candidate in table:
        if candidate == value:
            return name
    return UNKNOWN_STR


def get_msg_q_status(status: int) -> str:
    """Return the name of a message queue status code."""
    return get_name_from_val(MSG_Q_STATUS_NAMES, int(status))


def succ_fail_string(is_succ: object) -> str:
    """Return "successful" or "failed"."""
    return "successful" if is_succ else "failed"


def get_target_name(target: int) -> str:
    """Describe a target code, e.g. " GNSS_MDM with SSC"."""
    index = get_target_gnss_type(target)
    if index < 0 or index >= len(TARGET_NAMES):
        index = len(TARGET_NAMES) - 1
    name = get_name_from_val(TARGET_NAMES, index)
    if (target & SscType.HAS_SSC) == SscType.HAS_SSC:
        return f" {name} with SSC"
    return f" {name}  without SSC"


def get_time(now: Optional[float] = None) -> str:
    """Format ``now`` (epoch seconds, default current time) as local HH:MM:SS.mmm."""
    if now is None:
        total_us = time.time_ns() // 1000
    else:
        total_us = round(now * 1_000_000)
    seconds, usec = divmod(total_us, 1_000_000)
    hms = time.strftime("%H:%M:%S", time.localtime(seconds))
    return f"{hms}.{usec // 1000:03d}"