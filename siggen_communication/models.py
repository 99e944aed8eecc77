"""
models.py

Defines the data models shared by the dispatcher, the reconciler and the GUI.
Utilizes dataclasses to keep the client state explicit and inspectable.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union

from siggen_communication.param_types import Verb, ReplyState


@dataclass
class DeviceResponse:
    """
    The outcome of a single GET exchange with the device.
    """
    path: str                            # Relative path that was requested
    text: str                            # Response body, untouched
    success: bool                        # True only for HTTP 200 (or a serial reply)
    status_code: Optional[int] = None    # HTTP status, None on transport failure
    error_message: Optional[str] = None  # Error message if any


@dataclass
class PendingReply:
    """
    The outstanding network exchange for one command.
    """
    sequence: int
    path: str
    verb: Verb
    control: Optional[str] = None
    state: ReplyState = ReplyState.ISSUED
    response: Optional[DeviceResponse] = None
    watchdog: Optional[Any] = None

    def complete(self, response: DeviceResponse) -> None:
        self.response = response
        self.state = ReplyState.COMPLETED if response.success else ReplyState.FAILED

    def abandon(self) -> None:
        self.state = ReplyState.ABANDONED

    @property
    def is_open(self) -> bool:
        return self.state is ReplyState.ISSUED


@dataclass
class LiveField:
    """
    A displayed value kept in sync with the device through explicit refreshes.
    """
    name: str
    value: str = ""


@dataclass
class PresetSlot:
    """
    One numbered preset with its human-readable label.
    """
    number: int
    label: str = ""


@dataclass
class InputControl:
    """
    An editable field whose content becomes a command argument.
    """
    name: str
    text: str = ""
    busy: bool = False
    error: Optional[str] = None
    focus_requested: bool = False
    owner: int = 0                  # Sequence of the exchange holding the control


@dataclass
class OutputLog:
    """
    The ticker region: holds only the most recent message.
    """
    text: str = ""
    sequence: int = 0


@dataclass(frozen=True)
class RenamePreset:
    slot: int
    label: str


@dataclass(frozen=True)
class ClearPreset:
    slot: int


@dataclass(frozen=True)
class OtherNotice:
    pass


PresetNotice = Union[RenamePreset, ClearPreset, OtherNotice]


@dataclass
class ClientState:
    """
    Everything the client shows on screen. Owned and mutated by ClientController only.
    """
    output_log: OutputLog = field(default_factory=OutputLog)
    live_fields: Dict[str, LiveField] = field(default_factory=dict)
    preset_slots: Dict[int, PresetSlot] = field(default_factory=dict)
    controls: Dict[str, InputControl] = field(default_factory=dict)
    last_error: Optional[str] = None
