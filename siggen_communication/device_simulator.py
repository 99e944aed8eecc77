#!/usr/bin/env python3
"""
device_simulator.py

This module implements the DeviceSimulator class which emulates the signal
generator's HTTP surface for testing and offline use. It keeps an internal
state so that set commands affect subsequent status reads, and it answers
with the same kind of short plain-text replies as the real firmware.

Features:
  - Every fixed endpoint: setFreqency, setStep, setPulseWidth, setBitDepth, setUP/setDOWN,
    setSquare/setSine/setTriangle, loadPreset/savePreset, reboot, status, frequency, wave,
    LastMessage, and the root page carrying preset titles.
  - Direct commands as used by the console: f<freq>, s<step>, p<pulse>, b<bits>, u, d,
    n<N> <name> (rename preset), c<N> (clear preset) and the '!' no-op.
  - Configurable response delay and error probability.

Interface:
  Implements connect(), disconnect() and fetch(path), matching the real transports.

Usage Example:
    simulator = DeviceSimulator(config={"response_delay": 0.05})
    simulator.connect()
    print(simulator.fetch("setFreqency?frequency=2.34m").text)
"""

import html
import math
import random
import time
import logging
from typing import Dict, Any, Optional, Tuple
from urllib.parse import parse_qs, unquote

from siggen_communication.config import PRESET_SLOT_COUNT
from siggen_communication.models import DeviceResponse

WAVEFORMS = {"setSquare": "Square", "setSine": "Sine", "setTriangle": "Triangle"}
FREQUENCY_RANGE = (1.0, 40_000_000.0)
SUFFIXES = {"k": 1_000.0, "m": 1_000_000.0}


def parse_frequency(text: str) -> float:
    """
    Parses "2.34m", "1k" or "440" into Hz.

    Raises:
        ValueError: If the text is not a finite number with an optional k/m suffix.
    """
    text = text.strip().lower()
    multiplier = 1.0
    if text and text[-1] in SUFFIXES:
        multiplier = SUFFIXES[text[-1]]
        text = text[:-1]
    hz = float(text) * multiplier
    if not math.isfinite(hz):
        raise ValueError(f"Not a finite value: {text}")
    return hz


def format_frequency(hz: float) -> str:
    if hz >= 1_000_000:
        return f"{hz / 1_000_000:g} MHz"
    if hz >= 1_000:
        return f"{hz / 1_000:g} kHz"
    return f"{hz:g} Hz"


class DeviceSimulator:
    """
    Simulates the signal generator for testing without hardware.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, logger: Optional[logging.Logger] = None):
        self.config = config or {
            "response_delay": 0.05,
            "error_probability": 0.0,
            "version": "2.0",
        }
        self.state = {
            "frequency": 1000.0,
            "step": 100.0,
            "pulse": 50,
            "bits": 8,
            "wave": "Square",
        }
        self.presets: Dict[int, Dict[str, Any]] = {n: {"name": "", "settings": None}
                                                   for n in range(1, PRESET_SLOT_COUNT + 1)}
        self.last_message = ""
        self.connected = False
        self.logger = logger or logging.getLogger("DeviceSimulator")

    def connect(self) -> bool:
        self.connected = True
        self.logger.info("Simulated device connected.")
        return True

    def disconnect(self) -> bool:
        self.connected = False
        self.logger.info("Simulated device disconnected.")
        return True

    def fetch(self, path: str) -> DeviceResponse:
        if not self.connected:
            error_msg = "Simulated device not connected."
            self.logger.error(error_msg)
            return DeviceResponse(path=path, text="", success=False, error_message=error_msg)

        time.sleep(self.config.get("response_delay", 0.0))
        self.logger.debug(f"Simulated request received: {path}")

        # Simulate a server error if random chance triggers it.
        if random.random() < self.config.get("error_probability", 0.0):
            return DeviceResponse(path=path, text="", success=False, status_code=500, error_message="HTTP 500")

        name, _, query = path.lstrip("/").partition("?")
        params = {key: values[0] for key, values in parse_qs(query, keep_blank_values=True).items()}
        try:
            text = self._handle(name, params)
        except KeyError:
            return DeviceResponse(path=path, text="Not found", success=False, status_code=404,
                                  error_message="HTTP 404")
        self.logger.debug(f"Simulated response: {text!r}")
        return DeviceResponse(path=path, text=text, success=True, status_code=200)

    # Request routing

    def _handle(self, name: str, params: Dict[str, str]) -> str:
        if name == "":
            return self._root_page()
        if name == "status":
            return self._status()
        if name == "frequency":
            return format_frequency(self.state["frequency"])
        if name == "wave":
            return self.state["wave"]
        if name == "LastMessage":
            return self.last_message
        if name == "reboot":
            return self._remember("Rebooting..")
        if name in WAVEFORMS:
            self.state["wave"] = WAVEFORMS[name]
            return self._remember(f"Waveform set to {self.state['wave']}")
        if name == "setUP":
            return self._remember(self._step(+1))
        if name == "setDOWN":
            return self._remember(self._step(-1))
        if name == "setFreqency":
            return self._remember(self._set_frequency(params.get("frequency", "")))
        if name == "setStep":
            return self._remember(self._set_step(params.get("step", "")))
        if name == "setPulseWidth":
            return self._remember(self._set_pulse(params.get("pulse", "")))
        if name == "setBitDepth":
            return self._remember(self._set_bits(params.get("bits", "")))
        if name == "loadPreset":
            return self._remember(self._load_preset(params.get("preset", "")))
        if name == "savePreset":
            return self._remember(self._save_preset(params.get("preset", "")))
        return self._direct(unquote(name))

    def _direct(self, command: str) -> str:
        """
        Direct commands answer with the message on the first line; the rest of the
        reply is only meant for someone typing the URL into a browser.
        """
        if command == "!":
            return ""
        letter, argument = command[:1], command[1:]
        if letter == "f":
            message = self._set_frequency(argument)
        elif letter == "s":
            message = self._set_step(argument)
        elif letter == "p":
            message = self._set_pulse(argument)
        elif letter == "b":
            message = self._set_bits(argument)
        elif command == "u":
            message = self._step(+1)
        elif command == "d":
            message = self._step(-1)
        elif letter == "n":
            message = self._rename_preset(argument)
        elif letter == "c":
            message = self._clear_preset(argument)
        else:
            raise KeyError(command)
        self._remember(message)
        return f"{message}\n<a href=\"/\">back to the control page</a>"

    def _remember(self, message: str) -> str:
        self.last_message = message
        return message

    # Settings

    def _set_frequency(self, value: str) -> str:
        try:
            hz = parse_frequency(value)
        except ValueError:
            return f"Invalid frequency: {value}"
        low, high = FREQUENCY_RANGE
        if not low <= hz <= high:
            return f"Frequency out of range ({format_frequency(low)} - {format_frequency(high)})"
        self.state["frequency"] = hz
        return f"Frequency set to {format_frequency(hz)}"

    def _set_step(self, value: str) -> str:
        try:
            self.state["step"] = parse_frequency(value)
        except ValueError:
            return f"Invalid step size: {value}"
        return f"Step size set to {format_frequency(self.state['step'])}"

    def _set_pulse(self, value: str) -> str:
        try:
            pulse = int(value.rstrip("%"))
        except ValueError:
            return f"Invalid pulse width: {value}"
        if not 0 <= pulse <= 100:
            return "Pulse width must be between 0 and 100%"
        self.state["pulse"] = pulse
        return f"Pulse width set to {pulse}%"

    def _set_bits(self, value: str) -> str:
        try:
            bits = int(value)
        except ValueError:
            return f"Invalid bit depth: {value}"
        if not 1 <= bits <= 10:
            return "Resolution must be between 1 and 10 bits"
        self.state["bits"] = bits
        return f"Resolution set to {bits} bits"

    def _step(self, direction: int) -> str:
        low, high = FREQUENCY_RANGE
        hz = self.state["frequency"] + direction * self.state["step"]
        self.state["frequency"] = min(max(hz, low), high)
        return f"Frequency: {format_frequency(self.state['frequency'])}"

    # Presets

    def _preset_number(self, value: str) -> Optional[int]:
        try:
            number = int(value)
        except ValueError:
            return None
        return number if number in self.presets else None

    def _load_preset(self, value: str) -> str:
        number = self._preset_number(value)
        if number is None:
            return f"No such preset: {value}"
        preset = self.presets[number]
        if preset["settings"] is None:
            return f"Preset {number} is empty"
        self.state.update(preset["settings"])
        return f"Loaded preset {number} {preset['name']}".rstrip()

    def _save_preset(self, value: str) -> str:
        number = self._preset_number(value)
        if number is None:
            return f"No such preset: {value}"
        self.presets[number]["settings"] = dict(self.state)
        return f"Saved current settings to preset {number}"

    def _split_preset_argument(self, argument: str) -> Tuple[Optional[int], str]:
        number, _, name = argument.strip().partition(" ")
        return self._preset_number(number), name.strip()

    def _rename_preset(self, argument: str) -> str:
        number, name = self._split_preset_argument(argument)
        if number is None or not name:
            return "Usage: n<preset> <name>"
        self.presets[number]["name"] = name
        return f"Set name of preset [{number}] to \"{name}\""

    def _clear_preset(self, argument: str) -> str:
        number, _ = self._split_preset_argument(argument)
        if number is None:
            return f"No such preset: {argument}"
        self.presets[number] = {"name": "", "settings": None}
        return f"Clearing preset {number}"

    # Read-only views

    def _status(self) -> str:
        rows = [
            ("Wave:", self.state["wave"]),
            ("Frequency:", format_frequency(self.state["frequency"])),
            ("Step:", format_frequency(self.state["step"])),
            ("Pulse Width:", f"{self.state['pulse']}%"),
            ("Resolution:", f"{self.state['bits']} bits"),
        ]
        return "".join(f"{label}\t{value}\n" for label, value in rows)

    def _preset_title(self, number: int) -> str:
        # The firmware leaves the template token in place for unnamed presets
        name = self.presets[number]["name"]
        return html.escape(name, quote=True) if name else "{" + str(number) + "}"

    def _root_page(self) -> str:
        buttons = "\n".join(
            f'<div id="preset_{n}" title="{self._preset_title(n)}" '
            f'onclick="loadPreset({n})" class="preset-button">{n}</div>'
            for n in self.presets
        )
        return (f"<html><head><title>ESP32 Signal Generator</title></head><body>"
                f"<span id=\"version\">v{self.config.get('version', '2.0')}</span>\n"
                f"<div id=\"presets\">\n{buttons}\n</div></body></html>")
