"""Detection of the GNSS hardware configuration of the running target."""

from __future__ import annotations

import enum
import os
import time
from pathlib import Path
from typing import Callable, Optional, Union

from gnsslocutils.log_util import LogLevel, loc_logger

PropertyGetter = Callable[[str], Optional[str]]
PathLike = Union[str, "os.PathLike[str]"]

LINE_LEN = 100
QCA1530_DETECT_TIMEOUT = 30
QCA1530_PROPERTY = "persist.qca1530"
QCA1530_DETECT_PRESENT = "yes"
QCA1530_DETECT_PROGRESS = "detect"

APQ8064_ID_1 = "109"
APQ8064_ID_2 = "153"
MPQ8064_ID_1 = "130"
MSM8930_ID_1 = "142"
MSM8930_ID_2 = "116"
APQ8030_ID_1 = "157"
APQ8074_ID_1 = "184"

STR_LIQUID = "Liquid"
STR_SURF = "Surf"
STR_MTP = "MTP"
STR_APQ = "apq"

_HW_PLATFORM = "sys/devices/soc0/hw_platform"
_SOC_ID = "sys/devices/soc0/soc_id"
_HW_PLATFORM_DEP = "sys/devices/system/soc/soc0/hw_platform"
_SOC_ID_DEP = "sys/devices/system/soc/soc0/id"
_MDM = "dev/mdm"


class GnssTarget(enum.IntEnum):
    """Kind of GNSS engine on the target."""

    NONE = 0
    MSM = 1
    GSS = 2
    MDM = 3
    QCA1530 = 4
    UNKNOWN = 5


class SscType(enum.IntEnum):
    """Whether the target has a sensor subsystem core."""

    NO_SSC = 0
    HAS_SSC = 1


def target_set(gnss: int, ssc: int) -> int:
    """Combine a GNSS type and SSC flag into a target code."""
    return (int(gnss) << 1) | int(ssc)


def get_target_gnss_type(target: int) -> int:
    """Extract the GNSS type from a target code."""
    return int(target) >> 1


TARGET_DEFAULT = target_set(GnssTarget.MSM, SscType.HAS_SSC)
TARGET_MDM = target_set(GnssTarget.MDM, SscType.HAS_SSC)
TARGET_APQ_SA = target_set(GnssTarget.GSS, SscType.NO_SSC)
TARGET_MPQ = target_set(GnssTarget.NONE, SscType.NO_SSC)
TARGET_MSM_NO_SSC = target_set(GnssTarget.MSM, SscType.NO_SSC)
TARGET_QCA1530 = target_set(GnssTarget.QCA1530, SscType.NO_SSC)
TARGET_UNKNOWN = target_set(GnssTarget.UNKNOWN, SscType.NO_SSC)
# Returned when a modem platform is found but the modem node cannot be read.
TARGET_INVALID = 0xFFFFFFFF


def read_a_line(path: PathLike) -> str:
    """Return the first line of ``path``, at most ``LINE_LEN - 1`` characters.

    The line keeps its end-of-line character. Raises OSError if the file
    cannot be opened.
    """
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        line = handle.readline(LINE_LEN - 1)
    loc_logger.log(LogLevel.DEBUG, f"cat {path}: {line}")
    return line


def _no_property(name: str) -> Optional[str]:
    return None


def is_qca1530(
    get_property: PropertyGetter = _no_property,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Return True if the QCA1530 SoC is configured.

    ``get_property`` returns a property's value, or None if it is not
    accessible. While the value is "detect" the check waits a second and
    retries, up to ``QCA1530_DETECT_TIMEOUT`` times.
    """
    result = False
    for _ in range(QCA1530_DETECT_TIMEOUT):
        value = get_property(QCA1530_PROPERTY)
        if value is None:
            loc_logger.log(
                LogLevel.VERBOSE,
                f"qca1530: property {QCA1530_PROPERTY} is not accessible",
            )
            break
        loc_logger.log(
            LogLevel.VERBOSE, f"qca1530: property {QCA1530_PROPERTY} is set to {value}"
        )
        if value == QCA1530_DETECT_PRESENT:
            result = True
            break
        if value == QCA1530_DETECT_PROGRESS:
            loc_logger.log(LogLevel.VERBOSE, "qca1530: SoC detection is in progress.")
            sleep(1)
            continue
        break
    loc_logger.log(
        LogLevel.DEBUG, f"qca1530: detected={'true' if result else 'false'}"
    )
    return result


def _matches(line: str, token: str) -> bool:
    """True when ``line`` is ``token`` followed by end of string or line."""
    return line.startswith(token) and line[len(token) : len(token) + 1] in (
        "",
        "\n",
        "\r",
    )


def _read_or_empty(primary: Path, fallback: Path) -> str:
    path = primary if primary.exists() else fallback
    try:
        return read_a_line(path)
    except OSError as exc:
        loc_logger.log(LogLevel.ERROR, f"open failed: {path}: {exc.strerror}")
        return ""


def detect_target(
    get_property: PropertyGetter = _no_property,
    root: PathLike = "/",
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Work out the target code from system properties and SoC files under ``root``."""
    if is_qca1530(get_property, sleep):
        target = TARGET_QCA1530
    else:
        base = Path(root)
        baseband = get_property("ro.baseband") or ""
        hw_platform = _read_or_empty(base / _HW_PLATFORM, base / _HW_PLATFORM_DEP)
        soc_id = _read_or_empty(base / _SOC_ID, base / _SOC_ID_DEP)

        if baseband.startswith(STR_APQ):
            target = TARGET_MPQ if _matches(soc_id, MPQ8064_ID_1) else TARGET_APQ_SA
        elif any(_matches(hw_platform, s) for s in (STR_LIQUID, STR_SURF, STR_MTP)):
            try:
                read_a_line(base / _MDM)
            except OSError as exc:
                loc_logger.log(
                    LogLevel.ERROR, f"open failed: {base / _MDM}: {exc.strerror}"
                )
                target = TARGET_INVALID
            else:
                target = TARGET_MDM
        elif _matches(soc_id, MSM8930_ID_1) or _matches(soc_id, MSM8930_ID_2):
            target = TARGET_MSM_NO_SSC
        else:
            target = TARGET_UNKNOWN
    loc_logger.log(LogLevel.DEBUG, f"HAL: detect_target returned {target}")
    return target