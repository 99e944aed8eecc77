"""
GUI/output_frame.py

Implements the OutputFrame class which shows the device ticker (the most
recent response, overwritten each time) above the application's own log.
"""

import tkinter as tk
from tkinter import ttk

from siggen_communication.communicator.response_handler import ResponseHandler


class OutputFrame(ttk.LabelFrame):
    """
    Frame for the device output ticker and the application log.
    """

    def __init__(self, parent: tk.Widget, log_height: int = 10) -> None:
        """
        Initialize the OutputFrame.

        Args:
            parent: Parent Tkinter widget.
            log_height: Height of the application log in lines (0 hides it).
        """
        super().__init__(parent, text="Output")
        self.messages: list[str] = []
        self.show_debug = True

        self.ticker_text = tk.Text(self, height=6, width=80, wrap=tk.WORD, foreground="#38ab45")
        self.ticker_text.pack(fill=tk.X, padx=5, pady=5)
        self.ticker_text.config(state=tk.DISABLED)

        self.output_text = tk.Text(self, height=log_height, width=80, wrap=tk.WORD)
        if log_height:
            self.output_text.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)
            scrollbar = ttk.Scrollbar(self.output_text, orient="vertical", command=self.output_text.yview)
            scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
            self.output_text.config(yscrollcommand=scrollbar.set)

    def show_message(self, message: str) -> None:
        """
        Replaces the ticker content with the rendered device message.
        """
        self.ticker_text.config(state=tk.NORMAL)
        self.ticker_text.delete(1.0, tk.END)
        self.ticker_text.insert(tk.END, ResponseHandler.markup_to_text(message))
        self.ticker_text.config(state=tk.DISABLED)

    def append_log(self, message: str) -> None:
        """
        Appends a new message to the log.
        """
        self.messages.append(message)
        if self.show_debug or "DEBUG" not in message:
            self.output_text.insert(tk.END, message + "\n")
            self.output_text.see(tk.END)

    def clear(self) -> None:
        """
        Clears all messages from storage and display.
        """
        self.messages.clear()
        self.output_text.delete(1.0, tk.END)

    def filter_debug_messages(self, show_debug: bool) -> None:
        """
        Filters out debug messages if not wanted.
        """
        self.show_debug = show_debug
        self.output_text.delete(1.0, tk.END)
        for msg in self.messages:
            if show_debug or "DEBUG" not in msg:
                self.output_text.insert(tk.END, msg + "\n")
        self.output_text.see(tk.END)
