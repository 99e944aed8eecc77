"""
GUI/connection_frame.py

Defines the ConnectionFrame class which lets the user pick the device address
(or serial port for the console), connect or disconnect, and reboot the device.
"""

import tkinter as tk
from dataclasses import replace
from tkinter import ttk
from typing import Callable, Optional

from siggen_communication.config import ClientSettings, BAUD_RATES
from siggen_communication.communicator.serial_console import SerialConsoleHandler


class ConnectionFrame(ttk.LabelFrame):
    """
    Frame for the device link settings.
    """

    def __init__(self, parent: tk.Widget, settings: ClientSettings, connect_callback: Callable,
                 reboot_callback: Optional[Callable] = None) -> None:
        """
        Initialize ConnectionFrame.

        Args:
            parent: Parent widget.
            settings: Initial client settings.
            connect_callback: Called when Connect/Disconnect is pressed.
            reboot_callback: Called when Reboot is pressed; None hides the button.
        """
        super().__init__(parent, text="Connection")
        self.settings = settings
        self.host_var = tk.StringVar(value=settings.base_url)
        self.port_var = tk.StringVar(value=settings.serial_port or "")
        self.baud_var = tk.StringVar(value=str(settings.baudrate))
        self.error_var = tk.StringVar()

        row = ttk.Frame(self)
        row.pack(fill=tk.X, padx=5, pady=5)
        if settings.serial_port:
            ttk.Label(row, text="Port:").pack(side=tk.LEFT, padx=5)
            self.port_combo = ttk.Combobox(row, textvariable=self.port_var, width=15,
                                           values=SerialConsoleHandler.list_ports())
            self.port_combo.pack(side=tk.LEFT, padx=5)
            ttk.Label(row, text="Baud:").pack(side=tk.LEFT, padx=2)
            ttk.Combobox(row, textvariable=self.baud_var, width=7,
                         values=[str(rate) for rate in BAUD_RATES]).pack(side=tk.LEFT, padx=2)
        elif settings.simulate:
            ttk.Label(row, text="Simulated device").pack(side=tk.LEFT, padx=5)
        else:
            ttk.Label(row, text="Device:").pack(side=tk.LEFT, padx=5)
            ttk.Entry(row, textvariable=self.host_var, width=30).pack(side=tk.LEFT, padx=5)

        self.connect_button = ttk.Button(row, text="Connect", command=connect_callback)
        self.connect_button.pack(side=tk.LEFT, padx=5)
        if reboot_callback:
            self.reboot_button = ttk.Button(row, text="Reboot", command=reboot_callback, state="disabled")
            self.reboot_button.pack(side=tk.RIGHT, padx=5)
        else:
            self.reboot_button = None
        ttk.Label(self, textvariable=self.error_var, foreground="red").pack(fill=tk.X, padx=5)

    def get_current_settings(self) -> ClientSettings:
        """
        Returns the client settings with the link fields taken from the widgets.

        Raises:
            ValueError: If the baud rate is not a number.
        """
        serial_port = None
        if self.settings.serial_port:
            serial_port = self.port_var.get().strip() or None
        return replace(
            self.settings,
            base_url=self.host_var.get().strip() or self.settings.base_url,
            serial_port=serial_port,
            baudrate=int(self.baud_var.get())
        )

    def set_connected(self, connected: bool) -> None:
        self.connect_button.config(text="Disconnect" if connected else "Connect")
        if self.reboot_button:
            self.reboot_button.config(state="normal" if connected else "disabled")

    def show_error(self, message: Optional[str]) -> None:
        self.error_var.set(message or "")
