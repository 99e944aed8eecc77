"""
GUI/live_values_frame.py

Shows the device's current frequency and waveform. Clicking either value
re-reads just that field.
"""

import tkinter as tk
from tkinter import ttk
from typing import Callable, Dict

from siggen_communication.models import LiveField

FIELD_CAPTIONS = {"frequency": "Frequency", "waveform": "Wave"}


class LiveValuesFrame(ttk.Frame):
    def __init__(self, parent: tk.Widget, refresh_callback: Callable[[str], None]) -> None:
        super().__init__(parent)
        self.value_vars: Dict[str, tk.StringVar] = {}
        for name, caption in FIELD_CAPTIONS.items():
            var = tk.StringVar(value=f"{caption}: ")
            label = ttk.Label(self, textvariable=var, font=("TkDefaultFont", 14, "bold"), cursor="hand2")
            label.pack(side=tk.LEFT, padx=10, expand=True)
            label.bind("<Button-1>", lambda event, n=name: refresh_callback(n))
            self.value_vars[name] = var

    def update_values(self, fields: Dict[str, LiveField]) -> None:
        for name, field in fields.items():
            self.value_vars[name].set(f"{FIELD_CAPTIONS[name]}: {field.value}")
