"""Control of the LCD, button and RGB indicator LEDs through sysfs files."""

from __future__ import annotations

import enum
import os
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Tuple, Union

from gnsslocutils.log_util import LogLevel, loc_logger

PathLike = Union[str, "os.PathLike[str]"]

LED_DUTY_STEPS = 60
LED_RAMP_MS = 500

LIGHT_ID_BACKLIGHT = "backlight"
LIGHT_ID_BUTTONS = "buttons"
LIGHT_ID_NOTIFICATIONS = "notifications"
LIGHT_ID_BATTERY = "battery"
LIGHT_ID_ATTENTION = "attention"

LCD_FILE = "sys/class/leds/lcd-backlight/brightness"
BUTTONS_FILE = "sys/class/leds/button-backlight/brightness"
_COLORS = ("red", "green", "blue")


def _led(color: str, node: str) -> str:
    return f"sys/class/leds/{color}/{node}"


class FlashMode(enum.IntEnum):
    """How a light flashes."""

    NONE = 0
    TIMED = 1
    HARDWARE = 2


@dataclass(frozen=True)
class LightState:
    """Requested state of a light; ``color`` is 0xAARRGGBB."""

    color: int = 0
    flash_mode: FlashMode = FlashMode.NONE
    flash_on_ms: int = 0
    flash_off_ms: int = 0


def is_lit(state: LightState) -> bool:
    """True when any of the RGB components is non-zero."""
    return bool(state.color & 0x00FFFFFF)


def rgb_to_brightness(state: LightState) -> int:
    """Perceived brightness (0-255) of the state's RGB color."""
    color = state.color & 0x00FFFFFF
    red = (color >> 16) & 0xFF
    green = (color >> 8) & 0xFF
    blue = color & 0xFF
    return (77 * red + 150 * green + 29 * blue) >> 8


def duty_pattern(on_ms: int, off_ms: int) -> Tuple[str, int]:
    """Return the LED duty-cycle string and the step length in ms for a blink.

    The string holds ``LED_DUTY_STEPS`` comma-separated percentages ramping
    up over the on period and down over the off period, ending in a newline.
    """
    on_ms = max(on_ms, LED_RAMP_MS)
    off_ms = max(off_ms, LED_RAMP_MS)
    step_ms = (on_ms + off_ms) // LED_DUTY_STEPS
    on_steps = on_ms // step_ms
    ramp_up = [min((100 * n * step_ms) // LED_RAMP_MS, 100) for n in range(1, on_steps)]
    ramp_down = [
        100 - min((100 * n * step_ms) // LED_RAMP_MS, 100)
        for n in range(LED_DUTY_STEPS - on_steps)
    ]
    values = ["0", *map(str, ramp_up), *map(str, ramp_down)]
    return ",".join(values) + "\n", step_ms


class LightsDevice:
    """The lights of the device, written through files under ``root``."""

    def __init__(self, root: PathLike = "/") -> None:
        self.root = Path(root)
        self._lock = threading.Lock()
        self._notification = LightState()
        self._battery = LightState()
        self._attention = 0
        self._warned = False

    def _write_string(self, relative: str, text: str) -> None:
        path = self.root / relative
        try:
            fd = os.open(path, os.O_RDWR)
        except OSError as exc:
            if not self._warned:
                loc_logger.log(
                    LogLevel.ERROR, f"write_string failed to open {path} ({exc.strerror})"
                )
                self._warned = True
            raise
        try:
            os.write(fd, text.encode("ascii"))
        finally:
            os.close(fd)

    def _write_int(self, relative: str, value: int) -> None:
        self._write_string(relative, f"{value}\n")

    def _try_write(self, relative: str, text: str) -> None:
        try:
            self._write_string(relative, text)
        except OSError:
            pass

    def _set_speaker_light_locked(self, state: LightState) -> None:
        if state.flash_mode == FlashMode.TIMED:
            on_ms, off_ms = state.flash_on_ms, state.flash_off_ms
        else:
            on_ms = off_ms = 0
        color = state.color
        levels = ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)
        for name, level in zip(_COLORS, levels):
            self._try_write(_led(name, "brightness"), f"{level}\n")
        if on_ms > 0 and off_ms > 0:
            duty, step_ms = duty_pattern(on_ms, off_ms)
            for name, level in zip(_COLORS, levels):
                if level:
                    self._try_write(_led(name, "duty_pcts"), duty)
                    self._try_write(_led(name, "ramp_step_ms"), f"{step_ms}\n")
                    self._try_write(_led(name, "blink"), "1\n")

    def _handle_speaker_battery_locked(self) -> None:
        # The attention light carries only a color, taken from its on-time.
        attention = LightState(color=self._attention)
        if is_lit(attention):
            self._set_speaker_light_locked(attention)
        elif is_lit(self._notification):
            self._set_speaker_light_locked(self._notification)
        else:
            self._set_speaker_light_locked(self._battery)

    def set_backlight(self, state: LightState) -> None:
        """Set the LCD backlight brightness from the state's color."""
        with self._lock:
            self._write_int(LCD_FILE, rgb_to_brightness(state))

    def set_buttons(self, state: LightState) -> None:
        """Set the button backlight brightness from the state's color."""
        with self._lock:
            self._write_int(BUTTONS_FILE, rgb_to_brightness(state))

    def set_notifications(self, state: LightState) -> None:
        """Record the notification state and refresh the indicator LED."""
        with self._lock:
            self._notification = replace(state)
            self._handle_speaker_battery_locked()

    def set_attention(self, state: LightState) -> None:
        """Record the attention request and refresh the indicator LED.

        A hardware flash request stores its on-time as the attention color; a
        request without flashing clears it; other modes leave it unchanged.
        """
        with self._lock:
            if state.flash_mode == FlashMode.HARDWARE:
                self._attention = state.flash_on_ms
            elif state.flash_mode == FlashMode.NONE:
                self._attention = 0
            self._handle_speaker_battery_locked()

    def set_battery(self, state: LightState) -> None:
        """Record the battery state and refresh the indicator LED."""
        with self._lock:
            self._battery = replace(state)
            self._handle_speaker_battery_locked()

    def open(self, name: str) -> Callable[[LightState], None]:
        """Return the setter for the light called ``name``."""
        setters = {
            LIGHT_ID_BACKLIGHT: self.set_backlight,
            LIGHT_ID_BUTTONS: self.set_buttons,
            LIGHT_ID_NOTIFICATIONS: self.set_notifications,
            LIGHT_ID_BATTERY: self.set_battery,
            LIGHT_ID_ATTENTION: self.set_attention,
        }
        try:
            return setters[name]
        except KeyError:
            raise ValueError(f"unknown light: {name!r}") from None