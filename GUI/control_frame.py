"""
GUI/control_frame.py

This module defines the ControlFrame class with the signal generator's fixed
controls: the UP/DOWN step buttons, the status (?) button, the four value
inputs and the waveform selectors.
"""

import tkinter as tk
from tkinter import ttk
from typing import Callable, Dict

from siggen_communication.config import ENDPOINTS
from siggen_communication.models import InputControl
from siggen_communication.param_types import Verb

# Value inputs in display order: control name, label, verb
VALUE_INPUTS = [
    ("frequency", "Frequency", Verb.SET_FREQUENCY),
    ("step", "Step Size", Verb.SET_STEP),
    ("pulse", "Pulse Width (%)", Verb.SET_PULSE_WIDTH),
    ("bits", "Resolution (1-10)", Verb.SET_BIT_DEPTH),
]

WAVE_BUTTONS = [
    ("⊓", Verb.SET_SQUARE),
    ("∿", Verb.SET_SINE),
    ("△", Verb.SET_TRIANGLE),
]


def apply_control_state(entry: ttk.Entry, control: InputControl, error_var: tk.StringVar) -> bool:
    """
    Mirrors an InputControl onto its entry widget.

    Returns:
        True if a pending focus request was honoured.
    """
    entry.configure(state="readonly" if control.busy else "normal")
    error_var.set(control.error or "")
    if control.focus_requested:
        entry.delete(0, tk.END)
        entry.focus_set()
        return True
    return False


class ControlFrame(ttk.LabelFrame):
    """
    Frame for the fixed signal generator commands.
    """

    def __init__(self, parent: tk.Widget, dispatch_callback: Callable, status_callback: Callable) -> None:
        """
        Initialize the ControlFrame.

        Args:
            parent: The parent Tkinter widget.
            dispatch_callback: Called with (verb, argument) for every command.
            status_callback: Called when the "?" button is pressed.
        """
        super().__init__(parent, text="Controls")
        self.dispatch_callback = dispatch_callback
        self.status_callback = status_callback
        self.entries: Dict[str, ttk.Entry] = {}
        self.error_vars: Dict[str, tk.StringVar] = {}
        self._create_widgets()

    def _create_widgets(self) -> None:
        step_frame = ttk.Frame(self)
        step_frame.pack(fill=tk.X, padx=5, pady=5)
        self.down_button = ttk.Button(step_frame, text="DOWN",
                                      command=lambda: self.dispatch_callback(Verb.STEP_DOWN, None))
        self.down_button.pack(side=tk.LEFT, padx=5, fill=tk.X, expand=True)
        self.status_button = ttk.Button(step_frame, text="?", width=4, command=self.status_callback)
        self.status_button.pack(side=tk.LEFT, padx=5)
        self.up_button = ttk.Button(step_frame, text="UP",
                                    command=lambda: self.dispatch_callback(Verb.STEP_UP, None))
        self.up_button.pack(side=tk.LEFT, padx=5, fill=tk.X, expand=True)

        for name, label, verb in VALUE_INPUTS:
            row = ttk.Frame(self)
            row.pack(fill=tk.X, padx=5, pady=2)
            ttk.Label(row, text=f"{label}:", width=18).pack(side=tk.LEFT, padx=5)
            entry = ttk.Entry(row, width=30)
            entry.pack(side=tk.LEFT, padx=5, fill=tk.X, expand=True)
            entry.bind("<Return>", lambda event, n=name, v=verb: self._submit(n, v))
            ttk.Button(row, text="set", width=6,
                       command=lambda n=name, v=verb: self._submit(n, v)).pack(side=tk.LEFT, padx=5)
            error_var = tk.StringVar()
            ttk.Label(row, textvariable=error_var, foreground="red", width=24).pack(side=tk.LEFT, padx=5)
            self.entries[name] = entry
            self.error_vars[name] = error_var

        wave_frame = ttk.Frame(self)
        wave_frame.pack(fill=tk.X, padx=5, pady=5)
        for text, verb in WAVE_BUTTONS:
            ttk.Button(wave_frame, text=text,
                       command=lambda v=verb: self.dispatch_callback(v, None)).pack(
                side=tk.LEFT, padx=5, fill=tk.X, expand=True)

        self.desc_var = tk.StringVar()
        ttk.Label(self, textvariable=self.desc_var, wraplength=500).pack(fill=tk.X, padx=5, pady=5)
        for name, _, verb in VALUE_INPUTS:
            self.entries[name].bind("<FocusIn>", lambda event, v=verb: self.desc_var.set(ENDPOINTS[v].description))

    def _submit(self, name: str, verb: Verb) -> None:
        """
        Sends the entry's raw text; the device does all validation.
        """
        if str(self.entries[name].cget("state")) == "readonly":
            return
        self.dispatch_callback(verb, self.entries[name].get())

    def sync_controls(self, controls: Dict[str, InputControl], acknowledge: Callable[[str], None]) -> None:
        for name, entry in self.entries.items():
            if apply_control_state(entry, controls[name], self.error_vars[name]):
                acknowledge(name)

    def set_enabled(self, enabled: bool) -> None:
        """
        Enables or disables all widgets in the frame.
        Called when the connection state changes.
        """
        state = "normal" if enabled else "disabled"
        for widget in self.winfo_children():
            for child in widget.winfo_children():
                if isinstance(child, (ttk.Button, ttk.Entry)):
                    child.configure(state=state)
