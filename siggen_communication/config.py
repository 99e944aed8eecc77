import logging
from logging.handlers import RotatingFileHandler
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

import serial

from siggen_communication.param_types import Verb, EndpointDefinition

# Maps each verb to the device endpoint it is bound to.
ENDPOINTS: Dict[Verb, EndpointDefinition] = {
    Verb.SET_FREQUENCY: EndpointDefinition(Verb.SET_FREQUENCY, "setFreqency", "frequency", "frequency",
                                           "Set frequency in Hz, kHz (k) or MHz (m), e.g. 2.34m"),
    Verb.SET_STEP: EndpointDefinition(Verb.SET_STEP, "setStep", "step", "step",
                                      "Set the UP/DOWN step size, e.g. 1k"),
    Verb.SET_PULSE_WIDTH: EndpointDefinition(Verb.SET_PULSE_WIDTH, "setPulseWidth", "pulse", "pulse",
                                             "Set pulse width percent (0-100)"),
    Verb.SET_BIT_DEPTH: EndpointDefinition(Verb.SET_BIT_DEPTH, "setBitDepth", "bits", "bits",
                                           "Set square wave resolution bit depth (1-10)"),
    Verb.STEP_UP: EndpointDefinition(Verb.STEP_UP, "setUP", description="Move frequency UP one step"),
    Verb.STEP_DOWN: EndpointDefinition(Verb.STEP_DOWN, "setDOWN", description="Move frequency DOWN one step"),
    Verb.SET_SQUARE: EndpointDefinition(Verb.SET_SQUARE, "setSquare", description="Select square wave"),
    Verb.SET_SINE: EndpointDefinition(Verb.SET_SINE, "setSine", description="Select sine wave"),
    Verb.SET_TRIANGLE: EndpointDefinition(Verb.SET_TRIANGLE, "setTriangle", description="Select triangle wave"),
    Verb.LOAD_PRESET: EndpointDefinition(Verb.LOAD_PRESET, "loadPreset", "preset",
                                         description="Load a preset (1-9)"),
    Verb.SAVE_PRESET: EndpointDefinition(Verb.SAVE_PRESET, "savePreset", "preset",
                                         description="Save current settings into a preset (1-9)"),
    Verb.REBOOT: EndpointDefinition(Verb.REBOOT, "reboot", description="Reboot the device"),
    Verb.CONSOLE: EndpointDefinition(Verb.CONSOLE, None, control="console",
                                     description="Free-form console command"),
}

# Read-only endpoints used by the reconciler
STATUS_PATH = "status"
LAST_MESSAGE_PATH = "LastMessage"
ROOT_PATH = ""
LIVE_FIELD_PATHS = {
    "frequency": "frequency",
    "waveform": "wave",
}

# Sent in place of an empty command
NOOP_COMMAND = "!"

# Status block separators and their presentational replacements
STATUS_FIELD_SEPARATOR = "\t"
STATUS_GROUP_SEPARATOR = "\n"
STATUS_FIELD_MARKUP = "<div>"
STATUS_GROUP_MARKUP = "</div>"

# Opportunistic preset label patching
RENAME_MARKER = "Set name of preset"
CLEAR_MARKER = "Clearing"

PRESET_SLOT_COUNT = 9
REBOOT_RELOAD_MS = 3000
REBOOT_MESSAGE = "Rebooting..<br>(auto-reload in 3s)"
TIMEOUT_MESSAGE = "Timed out waiting for device"

DEFAULT_BASE_URL = "http://192.168.4.1"
DEFAULT_REQUEST_TIMEOUT_MS = 5000
DEFAULT_HTTP_TIMEOUT = 4.0
DEFAULT_BAUDRATE = 115200
BAUD_RATES = [9600, 19200, 38400, 57600, 115200]

# The full control page and the trimmed-down console page behave differently
CLIENT_PROFILES: Dict[str, Dict[str, Any]] = {
    "full": {
        "title": "ESP32 Signal Generator",
        "window": (800, 700),
        "update_delay_ms": 777,
        "first_line_only": False,
        "patch_presets": True,
        "status_follow_up": True,
        # LastMessage is followed by a status refresh after this many update delays
        "follow_up_factor": 3,
    },
    "console": {
        "title": "Web Console for ESP32 Signal Generator",
        "window": (700, 450),
        "update_delay_ms": 250,
        "first_line_only": True,
        "patch_presets": False,
        "status_follow_up": False,
        "follow_up_factor": 0,
    },
}

SERIAL_SETTINGS = {
    "bytesize": serial.EIGHTBITS,
    "parity": serial.PARITY_NONE,
    "stopbits": serial.STOPBITS_ONE,
    "timeout": 1.0,
    "write_timeout": 1.0,
}


@dataclass
class ClientSettings:
    """
    Runtime settings for one client session.
    """
    base_url: str = DEFAULT_BASE_URL
    profile: str = "full"
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    slot_count: int = PRESET_SLOT_COUNT
    serial_port: Optional[str] = None
    baudrate: int = DEFAULT_BAUDRATE
    simulate: bool = False

    def __post_init__(self):
        if self.profile not in CLIENT_PROFILES:
            raise ValueError(f"Unsupported client profile: {self.profile}")
        if self.request_timeout_ms <= 0:
            raise ValueError("Request timeout must be positive")

    @property
    def profile_params(self) -> Dict[str, Any]:
        return CLIENT_PROFILES[self.profile]

    @property
    def update_delay_ms(self) -> int:
        return self.profile_params["update_delay_ms"]


def setup_logging(name: str, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configures logging for the application.
    We will dynamically adjust the level to DEBUG or INFO to show/hide debug messages.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)

    # Removes old handlers if any
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(console_handler)

    if log_dir is not None:
        file_handler = RotatingFileHandler(log_dir / f"{name}.log", maxBytes=512 * 1024, backupCount=3)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
