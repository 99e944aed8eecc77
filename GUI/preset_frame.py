"""
GUI/preset_frame.py

Provides the PresetFrame class: one button per preset slot. A click loads the
preset, Ctrl+click saves the current settings into it. Hovering shows the
preset's label.
"""

import tkinter as tk
from tkinter import ttk
from typing import Callable, Dict

from siggen_communication.models import PresetSlot

CONTROL_MASK = 0x0004


class PresetFrame(ttk.LabelFrame):
    """
    Frame for loading and saving presets.
    """

    def __init__(self, parent: tk.Widget, slot_count: int, preset_callback: Callable[[int, bool], None]) -> None:
        """
        Initialize the PresetFrame.

        Args:
            parent: The parent Tkinter widget.
            slot_count: Number of preset buttons.
            preset_callback: Called with (slot, save).
        """
        super().__init__(parent, text="Presets (Ctrl+Click to save)")
        self.preset_callback = preset_callback
        self.buttons: Dict[int, ttk.Button] = {}
        self.labels: Dict[int, str] = {}
        self.hover_var = tk.StringVar()

        row = ttk.Frame(self)
        row.pack(fill=tk.X, padx=5, pady=5)
        for slot in range(1, slot_count + 1):
            button = ttk.Button(row, text=str(slot), width=3)
            button.pack(side=tk.LEFT, padx=2, fill=tk.X, expand=True)
            button.bind("<ButtonRelease-1>", lambda event, s=slot: self._on_click(event, s))
            button.bind("<Enter>", lambda event, s=slot: self.hover_var.set(self.labels.get(s, "")))
            button.bind("<Leave>", lambda event: self.hover_var.set(""))
            self.buttons[slot] = button
        ttk.Label(self, textvariable=self.hover_var).pack(fill=tk.X, padx=5)

    def _on_click(self, event, slot: int) -> None:
        save = bool(event.state & CONTROL_MASK)
        self.preset_callback(slot, save)

    def update_labels(self, slots: Dict[int, PresetSlot]) -> None:
        for number, slot in slots.items():
            self.labels[number] = slot.label
