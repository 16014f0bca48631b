"""Device identity: build properties from the SoC id and the WLAN MAC address."""

from __future__ import annotations

import os
import re
from typing import MutableMapping, Optional, Union

from gnsslocutils.log_util import LogLevel, loc_logger

PathLike = Union[str, "os.PathLike[str]"]

RAW_ID_PATH = "/sys/devices/system/soc/soc0/raw_id"
BUF_SIZE = 64
ANDROID_TARGET = "msm8226"
LTE_RAW_ID = 2328
MAC_ADDR_SIZE = 6

_ULONG_MAX = 2**32 - 1
_LEADING = re.compile(r"[ \t\n\v\f\r]*([+-]?)")
_HEX = re.compile(r"0[xX]([0-9a-fA-F]+)")
_OCT = re.compile(r"0[0-7]*")
_DEC = re.compile(r"[0-9]+")


def _strtoul(text: str) -> int:
    """Parse an unsigned number with automatic base, as a C library would."""
    lead = _LEADING.match(text)
    sign = lead.group(1)
    rest = text[lead.end():]
    match = _HEX.match(rest)
    if match:
        value = int(match.group(1), 16)
    elif rest.startswith("0"):
        value = int(_OCT.match(rest).group(), 8)
    else:
        match = _DEC.match(rest)
        if not match:
            return 0
        value = int(match.group())
    value = min(value, _ULONG_MAX)
    if sign == "-":
        value = (-value) % (_ULONG_MAX + 1)
    return value


def read_raw_id(path: PathLike = RAW_ID_PATH) -> Optional[int]:
    """Read the SoC raw id from ``path``; None if the file cannot be opened."""
    try:
        with open(path, "rb") as handle:
            data = handle.read(BUF_SIZE - 1)
    except OSError:
        loc_logger.log(LogLevel.ERROR, f"failed to open '{path}'")
        return None
    return _strtoul(data.decode("latin-1"))


def init_msm_properties(
    properties: MutableMapping[str, str], raw_id_path: PathLike = RAW_ID_PATH
) -> bool:
    """Set the product properties of the device in ``properties``.

    Nothing is changed unless ``ro.board.platform`` names the expected
    platform. Returns True when the properties were set.
    """
    platform = properties.get("ro.board.platform")
    if not platform or platform != ANDROID_TARGET:
        return False

    raw_id = read_raw_id(raw_id_path)

    properties["ro.product.device"] = "dior"
    properties["ro.build.product"] = "dior"
    properties["ro.build.description"] = "dior-user 4.4.4 KTU84P 5.9.16 release-keys"
    properties["ro.build.fingerprint"] = (
        "Xiaomi/dior/dior:4.4.4/KTU84P/5.9.16:user/release-keys"
    )
    if raw_id == LTE_RAW_ID:
        properties["ro.product.model"] = "HM NOTE 1LTE"
    else:
        properties["ro.product.model"] = "HM NOTE 1LTE TD"
    return True


def format_mac(address: bytes) -> str:
    """Format address bytes as lower-case, colon-separated hex."""
    return ":".join(f"{octet:02x}" for octet in bytes(address))


def wlan_address_from_nv(buf: bytes) -> bytes:
    """Return the WLAN MAC address stored byte-reversed in ``buf``."""
    raw = bytes(buf)
    if len(raw) < MAC_ADDR_SIZE:
        raise ValueError(f"need {MAC_ADDR_SIZE} bytes, got {len(raw)}")
    address = raw[:MAC_ADDR_SIZE][::-1]
    loc_logger.log(LogLevel.INFO, f"Found MAC address: {format_mac(address)}")
    return address