"""
controller.py

Implements the ClientController class, the single owner of everything the
client shows: the output ticker, the live fields, the preset labels and the
input controls. Every mutation passes through here, which makes this the one
place the "latest command wins" rule is enforced.
"""

import logging
from typing import Callable, List, Optional, Tuple

from siggen_communication.config import PRESET_SLOT_COUNT, LIVE_FIELD_PATHS
from siggen_communication.models import (
    ClientState, OutputLog, LiveField, PresetSlot, InputControl,
    PresetNotice, RenamePreset, ClearPreset
)
from siggen_communication.communicator.exchange import TimerHandle

Listener = Callable[[str], None]

CONTROL_NAMES = ("frequency", "step", "pulse", "bits", "console")


class ClientController:
    """
    Holds client state and the dispatch sequence counter.

    Listeners are called with a topic string after each change:
    "output", "live", "presets", "controls", "error" or "reload".
    """

    def __init__(self, slot_count: int = PRESET_SLOT_COUNT, logger: Optional[logging.Logger] = None):
        self.slot_count = slot_count
        self.logger = logger or logging.getLogger(__name__)
        self.state = ClientState()
        self.latest_sequence = 0
        self._pending_refreshes: List[Tuple[int, TimerHandle]] = []
        self._listeners: List[Listener] = []
        self._init_state()

    def _init_state(self) -> None:
        self.state.output_log = OutputLog()
        self.state.live_fields = {name: LiveField(name) for name in LIVE_FIELD_PATHS}
        self.state.preset_slots = {n: PresetSlot(n) for n in range(1, self.slot_count + 1)}
        self.state.controls = {name: InputControl(name) for name in CONTROL_NAMES}
        self.state.last_error = None

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, topic: str) -> None:
        for listener in self._listeners:
            listener(topic)

    # Sequencing

    def next_sequence(self) -> int:
        """
        Starts a new dispatch. Any refresh still waiting on behalf of an older
        command is cancelled outright.

        Returns:
            The new, highest sequence number.
        """
        self.latest_sequence += 1
        for sequence, handle in self._pending_refreshes:
            if sequence < self.latest_sequence:
                handle.cancel()
        self._pending_refreshes = [
            (sequence, handle) for sequence, handle in self._pending_refreshes
            if handle.active and sequence >= self.latest_sequence
        ]
        return self.latest_sequence

    def is_current(self, sequence: int) -> bool:
        return sequence == self.latest_sequence

    def track_refresh(self, sequence: int, handle: TimerHandle) -> None:
        self._pending_refreshes.append((sequence, handle))

    @property
    def pending_refreshes(self) -> int:
        return sum(1 for _, handle in self._pending_refreshes if handle.active)

    # Rendering

    def post_message(self, text: str, sequence: int) -> bool:
        """
        Overwrites the output ticker, unless a newer command has been issued since.

        Returns:
            True if the message was rendered.
        """
        if not self.is_current(sequence):
            self.logger.debug(f"Discarding message from superseded command #{sequence}")
            return False
        self.state.output_log = OutputLog(text=text, sequence=sequence)
        self._notify("output")
        return True

    def set_live_field(self, name: str, value: str, sequence: int) -> bool:
        if not self.is_current(sequence):
            self.logger.debug(f"Discarding {name} value from superseded command #{sequence}")
            return False
        self.state.live_fields[name].value = value
        self._notify("live")
        return True

    def set_preset_label(self, slot: int, label: str) -> bool:
        preset = self.state.preset_slots.get(slot)
        if preset is None:
            return False
        preset.label = label
        self._notify("presets")
        return True

    def apply_notice(self, notice: PresetNotice) -> bool:
        """
        Applies a parsed rename/clear notice to the preset labels.
        Out-of-range slots and unrelated text leave every label untouched.
        """
        if isinstance(notice, RenamePreset):
            if 1 <= notice.slot <= self.slot_count:
                self.logger.debug(f"Preset {notice.slot} renamed to {notice.label!r}")
                return self.set_preset_label(notice.slot, notice.label)
        elif isinstance(notice, ClearPreset):
            if 1 <= notice.slot <= self.slot_count:
                self.logger.debug(f"Preset {notice.slot} cleared")
                return self.set_preset_label(notice.slot, "")
        return False

    # Input controls

    def begin_control(self, name: str, sequence: int, text: str = "") -> None:
        control = self.state.controls[name]
        control.owner = sequence
        control.text = text
        control.busy = True
        control.error = None
        control.focus_requested = False
        self._notify("controls")

    def release_control(self, name: str, sequence: int, success: bool, error: Optional[str] = None) -> bool:
        """
        Returns a control to an editable state. A successful exchange clears and
        refocuses it; a failed one keeps the typed text and shows the error.
        Only the exchange that last took the control may release it.

        Returns:
            True if the control was released.
        """
        control = self.state.controls[name]
        if control.owner != sequence:
            self.logger.debug(f"Control {name} now belongs to #{control.owner}, ignoring #{sequence}")
            return False
        control.busy = False
        if success:
            control.text = ""
            control.error = None
            control.focus_requested = True
        else:
            control.error = error
        self._notify("controls")
        return True

    def acknowledge_focus(self, name: str) -> None:
        self.state.controls[name].focus_requested = False

    def report_error(self, message: Optional[str]) -> None:
        self.state.last_error = message
        self._notify("error")

    def reset(self) -> None:
        """
        Drops all client state, as a page reload would.
        """
        for _, handle in self._pending_refreshes:
            handle.cancel()
        self._pending_refreshes = []
        self.latest_sequence += 1
        self._init_state()
        self._notify("reload")
