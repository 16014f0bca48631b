"""Reading of ``NAME = value`` configuration files into parameter tables."""

from __future__ import annotations

import enum
import os
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from gnsslocutils.log_util import LogLevel, logger_init, loc_logger

PathLike = Union[str, "os.PathLike[str]"]

LOC_MAX_PARAM_NAME = 48
LOC_MAX_PARAM_STRING = 80
LOC_MAX_PARAM_LINE = 80

# Characters that C's isspace() accepts in the "C" locale.
_C_SPACE = " \t\n\v\f\r"

_ATOI_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_STRTOL16_RE = re.compile(
    r"[ \t\n\v\f\r]*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)"
)
_ATOF_RE = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?"
    r"|\.\d+(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class ParamType(str, enum.Enum):
    """Kind of value a configuration parameter holds."""

    NUMBER = "n"
    STRING = "s"
    FLOAT = "f"


@dataclass
class ConfigParam:
    """One entry of a configuration table; ``value`` is filled from the file."""

    name: str
    type: ParamType
    value: Any = None
    is_set: bool = False


@dataclass
class ParsedValue:
    """A name and its value read from one configuration line."""

    name: str
    str_value: str
    int_value: int = 0
    double_value: float = 0.0


def _wrap_int32(number: int) -> int:
    return (number + 2**31) % 2**32 - 2**31


def _atoi(text: str) -> int:
    match = _ATOI_RE.match(text)
    return _wrap_int32(int(match.group(1))) if match else 0


def _strtol16(text: str) -> int:
    match = _STRTOL16_RE.match(text)
    if not match:
        return 0
    number = int(match.group(2), 16)
    if match.group(1) == "-":
        number = -number
    return max(_INT32_MIN, min(_INT32_MAX, number))


def _atof(text: str) -> float:
    match = _ATOF_RE.match(text)
    return float(match.group(1)) if match else 0.0


def trim_space(text: str) -> str:
    """Remove leading and trailing whitespace.

    A string made only of whitespace is returned unchanged.
    """
    stripped = text.lstrip(_C_SPACE)
    if not stripped:
        return text
    return stripped.rstrip(_C_SPACE)


def parse_line(line: str) -> Optional[ParsedValue]:
    """Split a ``NAME = value`` line; return None when it has no two operands.

    Runs of ``=`` separate fields; anything after the second field is ignored.
    A value starting with ``0x`` is read as hexadecimal into ``int_value``,
    otherwise both ``int_value`` and ``double_value`` are read as decimal.
    """
    tokens = [token for token in line.split("=") if token]
    if len(tokens) < 2:
        return None
    parsed = ParsedValue(name=trim_space(tokens[0]), str_value=trim_space(tokens[1]))
    text = parsed.str_value
    if text[:1] == "0" and text[1:2].lower() == "x":
        parsed.int_value = _strtol16(text[2:])
    else:
        parsed.double_value = _atof(text)
        parsed.int_value = _atoi(text)
    return parsed


def set_config_entry(entry: Optional[ConfigParam], value: Optional[ParsedValue]) -> bool:
    """Store ``value`` in ``entry`` if their names match; return True if stored."""
    if entry is None or value is None:
        loc_logger.log(LogLevel.ERROR, "set_config_entry: INVALID config entry or parameter")
        return False
    if entry.name != value.name:
        return False
    if entry.type == ParamType.STRING:
        if value.str_value == "NULL":
            entry.value = ""
        else:
            entry.value = value.str_value[:LOC_MAX_PARAM_STRING]
        loc_logger.log(LogLevel.DEBUG, f"set_config_entry: PARAM {entry.name} = {entry.value}")
    elif entry.type == ParamType.NUMBER:
        entry.value = value.int_value
        loc_logger.log(LogLevel.DEBUG, f"set_config_entry: PARAM {entry.name} = {entry.value}")
    elif entry.type == ParamType.FLOAT:
        entry.value = value.double_value
        loc_logger.log(LogLevel.DEBUG, f"set_config_entry: PARAM {entry.name} = {entry.value:f}")
    else:
        loc_logger.log(
            LogLevel.ERROR,
            f"set_config_entry: PARAM {entry.name} parameter type must be n, f, or s",
        )
        return False
    entry.is_set = True
    return True


_DEBUG_LEVEL = ConfigParam("DEBUG_LEVEL", ParamType.NUMBER, 0xFF)
_TIMESTAMP = ConfigParam("TIMESTAMP", ParamType.NUMBER, 0)
_PARAMETER_TABLE = (_DEBUG_LEVEL, _TIMESTAMP)


def _init_logger() -> None:
    logger_init(_DEBUG_LEVEL.value & 0xFF, _TIMESTAMP.value & 0xFF)


def _chunks(handle: Iterable[str]) -> Iterable[str]:
    """Yield lines as a fixed-size line reader would, splitting long ones."""
    limit = LOC_MAX_PARAM_LINE - 1
    for raw in handle:
        while raw:
            yield raw[:limit]
            raw = raw[limit:]


def read_conf(path: PathLike, table: Optional[Iterable[ConfigParam]] = None) -> None:
    """Read ``path`` and fill matching entries of ``table``.

    Every entry's ``is_set`` is cleared first. The shared logger's debug
    level and timestamp switch are also read from the file and applied.
    A missing file leaves ``table`` untouched.
    """
    entries = list(table) if table is not None else []
    try:
        handle = open(path, "r", encoding="latin-1", newline="")
    except OSError:
        loc_logger.log(LogLevel.WARNING, f"read_conf: no {path} file found")
        _init_logger()
        return
    loc_logger.log(LogLevel.DEBUG, f"read_conf: using {path}")
    for entry in entries:
        entry.is_set = False
    with handle:
        for line in _chunks(handle):
            parsed = parse_line(line)
            if parsed is None:
                continue
            for entry in entries:
                set_config_entry(entry, parsed)
            for entry in _PARAMETER_TABLE:
                set_config_entry(entry, parsed)
    _init_logger()