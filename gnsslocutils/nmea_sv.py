"""NMEA 0183 GSV sentences built from satellite status reports."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from gnsslocutils.log_util import LogLevel, loc_logger
from gnsslocutils.nmea import (
    GLONASS_PRN_END,
    GLONASS_PRN_START,
    GPS_PRN_END,
    GPS_PRN_START,
    NMEA_SENTENCE_MAX_LENGTH,
    LocationExtended,
    NmeaState,
    blank_fix_sentences,
    put_checksum,
)

Sender = Callable[[str], None]

SVS_PER_SENTENCE = 4


@dataclass
class SvInfo:
    """One satellite in view."""

    prn: int
    snr: float = 0.0
    elevation: float = 0.0
    azimuth: float = 0.0


@dataclass
class SvStatus:
    """Satellites in view and the bit mask (bit n-1 for PRN n) of those used in the fix."""

    sv_list: List[SvInfo] = field(default_factory=list)
    used_in_fix_mask: int = 0
    ephemeris_mask: int = 0
    almanac_mask: int = 0

    @property
    def num_svs(self) -> int:
        return len(self.sv_list)


class _FormatError(Exception):
    """A sentence grew past the maximum sentence length."""


class _Body:
    """Accumulates a sentence body within the length limit."""

    def __init__(self) -> None:
        self._parts: List[str] = []
        self._remaining = NMEA_SENTENCE_MAX_LENGTH

    def add(self, text: str) -> None:
        if len(text) >= self._remaining:
            raise _FormatError(text)
        self._parts.append(text)
        self._remaining -= len(text)

    @property
    def text(self) -> str:
        return "".join(self._parts)


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _round_half(value: float) -> int:
    """Convert a float to int the way ``(int)(0.5 + value)`` does."""
    return int(0.5 + value)


def _gsv_sentences(talker: str, svs: Sequence[SvInfo]) -> List[str]:
    """Build the GSV sentence bodies for ``svs`` under ``talker``."""
    count = len(svs)
    if count == 0:
        return [f"${talker}GSV,1,1,0,"]
    chunks = [svs[i : i + SVS_PER_SENTENCE] for i in range(0, count, SVS_PER_SENTENCE)]
    bodies = []
    for number, chunk in enumerate(chunks, start=1):
        body = _Body()
        body.add(f"${talker}GSV,{len(chunks)},{number},{count:02d}")
        for sv in chunk:
            body.add(
                f",{sv.prn:02d},{_round_half(sv.elevation):02d},"
                f"{_round_half(sv.azimuth):03d},"
            )
            if sv.snr > 0:
                body.add(f"{_round_half(sv.snr):02d}")
        bodies.append(body.text)
    return bodies


def generate_sv(
    state: NmeaState,
    sv_status: SvStatus,
    extended: Optional[LocationExtended] = None,
    send: Optional[Sender] = None,
) -> List[str]:
    """Build GPGSV and GLGSV sentences for a satellite report.

    Satellites that are neither GPS nor GLONASS are left out. When no
    satellite is used in the fix the blank fix sentences follow; otherwise
    the used mask and the DOP values are cached in ``state`` for the next
    position report. Each sentence is passed to ``send`` and returned.
    """
    if extended is None:
        extended = LocationExtended()
    sent: List[str] = []

    def deliver(sentence: str) -> None:
        loc_logger.log(LogLevel.DEBUG, f"NMEA <{sentence}")
        if send is not None:
            send(sentence)
        sent.append(sentence)

    gps = [sv for sv in sv_status.sv_list if GPS_PRN_START <= sv.prn <= GPS_PRN_END]
    glonass = [
        sv for sv in sv_status.sv_list if GLONASS_PRN_START <= sv.prn <= GLONASS_PRN_END
    ]

    for talker, svs in (("GP", gps), ("GL", glonass)):
        try:
            bodies = _gsv_sentences(talker, svs)
        except _FormatError:
            loc_logger.log(LogLevel.ERROR, "NMEA Error in string formatting")
            return sent
        for body in bodies:
            deliver(put_checksum(body))

    if sv_status.used_in_fix_mask == 0:
        for sentence in blank_fix_sentences():
            deliver(sentence)
    else:
        state.sv_used_mask = sv_status.used_in_fix_mask
        if extended.has_dop:
            state.pdop = _f32(extended.pdop)
            state.hdop = _f32(extended.hdop)
            state.vdop = _f32(extended.vdop)
        else:
            state.clear_dop()
    return sent