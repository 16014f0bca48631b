"""NMEA 0183 sentences built from position reports."""

from __future__ import annotations

import enum
import math
import struct
import time
from dataclasses import dataclass
from functools import reduce
from typing import Callable, List, Optional, Sequence

from gnsslocutils.log_util import LogLevel, loc_logger

NMEA_SENTENCE_MAX_LENGTH = 200

GPS_PRN_START = 1
GPS_PRN_END = 32
GLONASS_PRN_START = 65
GLONASS_PRN_END = 96

Sender = Callable[[str], None]

BLANK_GSA = "$GPGSA,A,1,,,,,,,,,,,,,,,"
BLANK_VTG = "$GPVTG,,T,,M,,N,,K,N"
BLANK_RMC = "$GPRMC,,V,,,,,,,,,,N"
BLANK_GGA = "$GPGGA,,,,,,0,,,,,,,,"
_BLANK_BODIES = (BLANK_GSA, BLANK_VTG, BLANK_RMC, BLANK_GGA)

_KNOTS_PER_MPS = 3600.0 / 1852.0
_KMH_PER_MPS = 3.6


class PositionMode(enum.IntEnum):
    """How the engine computes a fix."""

    STANDALONE = 0
    MS_BASED = 1
    MS_ASSISTED = 2


@dataclass
class NmeaState:
    """Values carried from satellite reports to the next position report."""

    sv_used_mask: int = 0
    pdop: float = 0.0
    hdop: float = 0.0
    vdop: float = 0.0
    position_mode: PositionMode = PositionMode.STANDALONE

    @property
    def has_cached_dop(self) -> bool:
        return self.pdop > 0 and self.hdop > 0 and self.vdop > 0

    def clear_dop(self) -> None:
        self.pdop = 0.0
        self.hdop = 0.0
        self.vdop = 0.0


@dataclass
class GpsLocation:
    """A position report; fields left as None are not available."""

    timestamp: int = 0
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    speed: Optional[float] = None
    bearing: Optional[float] = None

    @property
    def has_lat_long(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass
class LocationExtended:
    """Extra position data; fields left as None are not available."""

    altitude_mean_sea_level: Optional[float] = None
    pdop: Optional[float] = None
    hdop: Optional[float] = None
    vdop: Optional[float] = None
    magnetic_deviation: Optional[float] = None

    @property
    def has_dop(self) -> bool:
        return None not in (self.pdop, self.hdop, self.vdop)


class _FormatError(Exception):
    """A sentence grew past the maximum sentence length."""


def _f32(value: float) -> float:
    """Round ``value`` to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


class _Sentence:
    """Accumulates the body of one sentence within the length limit."""

    def __init__(self) -> None:
        self._parts: List[str] = []
        self._remaining = NMEA_SENTENCE_MAX_LENGTH

    def add(self, text: str, checked: bool = True) -> None:
        if len(text) >= self._remaining:
            if checked:
                raise _FormatError(text)
            text = text[: self._remaining - 1]
        self._parts.append(text)
        self._remaining -= len(text)

    @property
    def text(self) -> str:
        return "".join(self._parts)


def put_checksum(sentence: str) -> str:
    """Append ``*XX\\r\\n`` where XX is the XOR of every character after the first."""
    checksum = reduce(lambda acc, ch: acc ^ ch, sentence[1:].encode("latin-1"), 0)
    return f"{sentence}*{checksum & 0xFF:02X}\r\n"


def blank_fix_sentences() -> List[str]:
    """Return the GSA, VTG, RMC and GGA sentences reporting no fix."""
    return [put_checksum(body) for body in _BLANK_BODIES]


def _utc_fields(timestamp_ms: int) -> time.struct_time:
    seconds = abs(int(timestamp_ms)) // 1000
    if timestamp_ms < 0:
        seconds = -seconds
    return time.gmtime(seconds)


def _used_prns(mask: int) -> List[int]:
    used = []
    mask &= 0xFFFFFFFF
    prn = 1
    while mask and len(used) < 32:
        if mask & 1:
            used.append(prn)
        mask >>= 1
        prn += 1
    return used


def _lat_lon_text(location: GpsLocation) -> str:
    if not location.has_lat_long:
        return ",,,,"
    latitude = float(location.latitude)
    longitude = float(location.longitude)
    if latitude > 0:
        lat_hemisphere = "N"
    else:
        lat_hemisphere = "S"
        latitude = -latitude
    if longitude < 0:
        lon_hemisphere = "W"
        longitude = -longitude
    else:
        lon_hemisphere = "E"
    lat_minutes = math.fmod(latitude * 60.0, 60.0)
    lon_minutes = math.fmod(longitude * 60.0, 60.0)
    lat_degrees = int(math.floor(latitude)) & 0xFF
    lon_degrees = int(math.floor(longitude)) & 0xFF
    return (
        f"{lat_degrees:02d}{lat_minutes:09.6f},{lat_hemisphere},"
        f"{lon_degrees:03d}{lon_minutes:09.6f},{lon_hemisphere},"
    )


def _mode_char(location: GpsLocation, state: NmeaState) -> str:
    if not location.has_lat_long:
        return "N"
    if state.position_mode == PositionMode.STANDALONE:
        return "A"
    return "D"


def _dop_triplet(state: NmeaState, extended: LocationExtended) -> Optional[Sequence[float]]:
    if extended.has_dop:
        return (_f32(extended.pdop), _f32(extended.hdop), _f32(extended.vdop))
    if state.has_cached_dop:
        return (state.pdop, state.hdop, state.vdop)
    return None


def _speed_knots(speed: float) -> float:
    return _f32(_f32(speed) * _KNOTS_PER_MPS)


def _build_fix(
    state: NmeaState,
    location: GpsLocation,
    extended: LocationExtended,
    emit: Callable[[str], None],
) -> None:
    utc = _utc_fields(location.timestamp)
    clock = f"{utc.tm_hour:02d}{utc.tm_min:02d}{utc.tm_sec:02d}"
    date = f"{utc.tm_mday:02d}{utc.tm_mon:02d}{utc.tm_year % 100:02d}"
    dop = _dop_triplet(state, extended)
    mode = _mode_char(location, state)

    # $GPGSA
    used = _used_prns(state.sv_used_mask)
    state.sv_used_mask = 0
    used_count = len(used)
    if used_count == 0:
        fix_type = "1"
    elif used_count <= 3:
        fix_type = "2"
    else:
        fix_type = "3"
    gsa = _Sentence()
    gsa.add(f"$GPGSA,A,{fix_type},")
    for index in range(12):
        gsa.add(f"{used[index]:02d}," if index < used_count else ",")
    if dop is not None:
        gsa.add(f"{dop[0]:.1f},{dop[1]:.1f},{dop[2]:.1f}", checked=False)
    else:
        gsa.add(",,", checked=False)
    emit(gsa.text)

    # $GPVTG; the magnetic track is reported equal to the true bearing.
    vtg = _Sentence()
    if location.bearing is not None:
        bearing = _f32(location.bearing)
        vtg.add(f"$GPVTG,{bearing:.1f},T,{bearing:.1f},M,")
    else:
        vtg.add("$GPVTG,,T,,M,")
    if location.speed is not None:
        knots = _speed_knots(location.speed)
        kmh = _f32(_f32(location.speed) * _KMH_PER_MPS)
        vtg.add(f"{knots:.1f},N,{kmh:.1f},K,")
    else:
        vtg.add(",N,,K,")
    vtg.add(mode, checked=False)
    emit(vtg.text)

    # $GPRMC
    rmc = _Sentence()
    rmc.add(f"$GPRMC,{clock},A,")
    rmc.add(_lat_lon_text(location))
    if location.speed is not None:
        rmc.add(f"{_speed_knots(location.speed):.1f},")
    else:
        rmc.add(",")
    if location.bearing is not None:
        rmc.add(f"{_f32(location.bearing):.1f},")
    else:
        rmc.add(",")
    rmc.add(f"{date},")
    if extended.magnetic_deviation is not None:
        variation = _f32(extended.magnetic_deviation)
        if variation < 0.0:
            direction = "W"
            variation = -variation
        else:
            direction = "E"
        rmc.add(f"{variation:.1f},{direction},")
    else:
        rmc.add(",,")
    rmc.add(mode, checked=False)
    emit(rmc.text)

    # $GPGGA
    gga = _Sentence()
    gga.add(f"$GPGGA,{clock},")
    gga.add(_lat_lon_text(location))
    if not location.has_lat_long:
        quality = "0"
    elif state.position_mode == PositionMode.STANDALONE:
        quality = "1"
    else:
        quality = "2"
    if dop is not None:
        gga.add(f"{quality},{used_count:02d},{dop[1]:.1f},")
    else:
        gga.add(f"{quality},{used_count:02d},,")
    msl = extended.altitude_mean_sea_level
    if msl is not None:
        gga.add(f"{msl:.1f},M,")
    else:
        gga.add(",,")
    if location.altitude is not None and msl is not None:
        gga.add(f"{location.altitude - msl:.1f},M,,", checked=False)
    else:
        gga.add(",,,", checked=False)
    emit(gga.text)


def generate_pos(
    state: NmeaState,
    location: GpsLocation,
    extended: Optional[LocationExtended] = None,
    generate_nmea: bool = True,
    send: Optional[Sender] = None,
) -> List[str]:
    """Build GSA, VTG, RMC and GGA sentences for a position report.

    Each finished sentence is passed to ``send`` and collected into the
    returned list. A non-final fix (``generate_nmea`` false) yields the blank
    sentences. The cached DOP values in ``state`` are cleared afterwards,
    unless a sentence outgrows the length limit, in which case generation
    stops there.
    """
    if extended is None:
        extended = LocationExtended()
    sent: List[str] = []

    def deliver(sentence: str) -> None:
        loc_logger.log(LogLevel.DEBUG, f"NMEA <{sentence}")
        if send is not None:
            send(sentence)
        sent.append(sentence)

    if generate_nmea:
        try:
            _build_fix(state, location, extended, lambda body: deliver(put_checksum(body)))
        except _FormatError:
            loc_logger.log(LogLevel.ERROR, "NMEA Error in string formatting")
            return sent
    else:
        for sentence in blank_fix_sentences():
            deliver(sentence)
    state.clear_dop()
    return sent