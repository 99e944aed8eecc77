"""
GUI/console_frame.py

Defines the ConsoleFrame class: a free-form command line that sends whatever
the user types straight to the device, just like its serial console.
"""

import tkinter as tk
from tkinter import ttk
from typing import Callable

from siggen_communication.models import InputControl
from GUI.control_frame import apply_control_state


class ConsoleFrame(ttk.LabelFrame):
    """
    Frame for the direct command console, with command history.
    """

    def __init__(self, parent: tk.Widget, command_callback: Callable[[str], None]) -> None:
        """
        Initialize the ConsoleFrame.

        Args:
            parent: Parent widget.
            command_callback: Called with the raw console text.
        """
        super().__init__(parent, text="Console")
        self.command_callback = command_callback
        self.cmd_history: list[str] = []
        self.history_index = -1
        self.error_var = tk.StringVar()

        row = ttk.Frame(self)
        row.pack(fill=tk.X, padx=5, pady=5)
        self.console_entry = ttk.Entry(row, width=50)
        self.console_entry.pack(side=tk.LEFT, padx=5, fill=tk.X, expand=True)
        self.console_entry.bind("<Return>", self.send_command)
        self.console_entry.bind("<Up>", self.history_up)
        self.console_entry.bind("<Down>", self.history_down)
        self.send_button = ttk.Button(row, text="Send", command=self.send_command)
        self.send_button.pack(side=tk.LEFT, padx=5)
        ttk.Label(self, textvariable=self.error_var, foreground="red").pack(fill=tk.X, padx=5)

    def send_command(self, event=None) -> None:
        """
        Sends the console text as typed. Blank input is sent too, as the no-op command.
        The entry only clears once the device has answered.
        """
        if str(self.console_entry.cget("state")) == "readonly":
            return
        cmd = self.console_entry.get()
        self.command_callback(cmd)
        if cmd and (not self.cmd_history or self.cmd_history[-1] != cmd):
            self.cmd_history.append(cmd)
        self.history_index = len(self.cmd_history)

    def history_up(self, event) -> None:
        """
        Recalls the previous command from history.
        """
        if self.cmd_history and self.history_index > 0:
            self.history_index -= 1
            self.console_entry.delete(0, tk.END)
            self.console_entry.insert(0, self.cmd_history[self.history_index])

    def history_down(self, event) -> None:
        """
        Recalls the next command from history.
        """
        if self.history_index < len(self.cmd_history) - 1:
            self.history_index += 1
            self.console_entry.delete(0, tk.END)
            self.console_entry.insert(0, self.cmd_history[self.history_index])

    def sync_control(self, control: InputControl, acknowledge: Callable[[str], None]) -> None:
        if apply_control_state(self.console_entry, control, self.error_var):
            acknowledge(control.name)

    def focus(self) -> None:
        self.console_entry.focus_set()
