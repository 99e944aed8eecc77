#!/usr/bin/env python3
"""
GUI/main_app.py

This module contains the SignalGeneratorApplication class that builds the main
window, connects to the signal generator and keeps every frame in step with the
client's state.
"""

import logging
import tkinter as tk
from tkinter import ttk
from typing import Optional

from siggen_communication.config import ClientSettings, setup_logging
from siggen_communication.param_types import Verb
from siggen_communication.communicator.client import SignalGeneratorClient
from siggen_communication.communicator.exchange import TkScheduler
from siggen_communication.communicator.transport_factory import get_transport

from GUI.connection_frame import ConnectionFrame
from GUI.console_frame import ConsoleFrame
from GUI.control_frame import ControlFrame
from GUI.live_values_frame import LiveValuesFrame
from GUI.output_frame import OutputFrame
from GUI.preset_frame import PresetFrame


class SignalGeneratorApplication:
    """
    The main application class for the signal generator remote control.
    Shows the full control page or, for the console profile, only the console.
    """

    def __init__(self, root: tk.Tk, settings: Optional[ClientSettings] = None,
                 logger: Optional[logging.Logger] = None) -> None:
        self.root = root
        self.settings = settings or ClientSettings()
        self.logger = logger or setup_logging("SignalGeneratorApplication")
        self.root.title(self.settings.profile_params["title"])
        width, height = self.settings.profile_params["window"]
        self.root.geometry(f"{width}x{height}")

        self.scheduler = TkScheduler(root)
        self.client: Optional[SignalGeneratorClient] = None

        self._create_gui()

    @property
    def is_full_page(self) -> bool:
        return self.settings.profile == "full"

    def _create_gui(self) -> None:
        """
        Builds and packs all frames. The console profile gets only the
        connection, console and output frames.
        """
        self.connection_frame = ConnectionFrame(
            self.root, self.settings, self.connect_disconnect,
            reboot_callback=self.reboot if self.is_full_page else None
        )
        self.connection_frame.pack(fill=tk.X, padx=5, pady=5)

        self.live_frame: Optional[LiveValuesFrame] = None
        self.control_frame: Optional[ControlFrame] = None
        self.preset_frame: Optional[PresetFrame] = None
        if self.is_full_page:
            self.live_frame = LiveValuesFrame(self.root, self.refresh_field)
            self.live_frame.pack(fill=tk.X, padx=5, pady=5)

            self.control_frame = ControlFrame(self.root, self.send_command, self.refresh_status)
            self.control_frame.pack(fill=tk.X, padx=5, pady=5)
            self.control_frame.set_enabled(False)

            self.preset_frame = PresetFrame(self.root, self.settings.slot_count, self.load_preset)
            self.preset_frame.pack(fill=tk.X, padx=5, pady=5)

        self.console_frame = ConsoleFrame(self.root, self.send_console)
        self.console_frame.pack(fill=tk.X, padx=5, pady=5)

        self.output_frame = OutputFrame(self.root, log_height=8 if self.is_full_page else 12)
        self.output_frame.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        debug_row = ttk.Frame(self.root)
        debug_row.pack(fill=tk.X, padx=5)
        self.show_debug_var = tk.BooleanVar(value=self.logger.isEnabledFor(logging.DEBUG))
        ttk.Checkbutton(debug_row, text="Show Debug", variable=self.show_debug_var,
                        command=lambda: self.set_show_debug(self.show_debug_var.get())).pack(side=tk.LEFT, padx=5)
        ttk.Button(debug_row, text="Clear Log", command=self.output_frame.clear).pack(side=tk.LEFT, padx=5)

        self.root.after(50, self.update_gui)

    def connect_disconnect(self) -> None:
        """
        Connects to the signal generator if not connected; otherwise disconnects.
        """
        if self.client is None:
            try:
                settings = self.connection_frame.get_current_settings()
                transport = get_transport(settings, self.logger)
                client = SignalGeneratorClient(transport, self.scheduler, settings, logger=self.logger)
                if client.connect():
                    self.client = client
                    self.settings = settings
                    client.controller.subscribe(self._on_state_change)
                    self.connection_frame.set_connected(True)
                    self.connection_frame.show_error(None)
                    if self.control_frame:
                        self.control_frame.set_enabled(True)
                    self.log_message("Connection established.")
                    client.start()
                    self.console_frame.focus()
                else:
                    self.log_message("Failed to connect.", level="ERROR")
                    self.connection_frame.show_error("Failed to connect")
            except ValueError as e:
                self.log_message(f"Connection error: {e}", level="ERROR")
                self.connection_frame.show_error(str(e))
        else:
            self.client.disconnect()
            self.client = None
            self.connection_frame.set_connected(False)
            if self.control_frame:
                self.control_frame.set_enabled(False)
            self.log_message("Disconnected.")

    def update_gui(self) -> None:
        """
        Periodically delivers finished exchanges to the client on the UI thread.
        """
        if self.client:
            self.client.pump()
        self.root.after(50, self.update_gui)

    def _on_state_change(self, topic: str) -> None:
        """
        Mirrors one part of the controller state onto the frames.
        """
        if self.client is None:
            return
        controller = self.client.controller
        state = controller.state
        if topic in ("output", "reload"):
            self.output_frame.show_message(state.output_log.text)
            if state.output_log.text:
                self.log_message(f"<: {state.output_log.text}", level="DEBUG")
        if topic in ("live", "reload") and self.live_frame:
            self.live_frame.update_values(state.live_fields)
        if topic in ("presets", "reload") and self.preset_frame:
            self.preset_frame.update_labels(state.preset_slots)
        if topic in ("controls", "reload"):
            if self.control_frame:
                self.control_frame.sync_controls(state.controls, controller.acknowledge_focus)
            self.console_frame.sync_control(state.controls["console"], controller.acknowledge_focus)
        if topic in ("error", "reload"):
            self.connection_frame.show_error(state.last_error)
            if state.last_error:
                self.log_message(state.last_error, level="ERROR")
        if topic == "reload":
            self.log_message("Device state reloaded.")

    def send_command(self, verb: Verb, argument: Optional[str] = None) -> None:
        if not self.client:
            self.log_message("Not connected")
            return
        self.log_message(f">: {verb.name} {argument or ''}".rstrip(), level="DEBUG")
        self.client.dispatcher.dispatch(verb, argument)

    def send_console(self, text: str) -> None:
        if not self.client:
            self.log_message("Not connected")
            return
        self.log_message(f">: {text}", level="DEBUG")
        self.client.dispatcher.send_console(text)

    def load_preset(self, slot: int, save: bool) -> None:
        if not self.client:
            self.log_message("Not connected")
            return
        self.log_message(f"{'Saving' if save else 'Loading'} preset {slot}")
        self.client.dispatcher.load_preset(slot, save)

    def reboot(self) -> None:
        self.send_command(Verb.REBOOT)

    def refresh_status(self) -> None:
        if self.client:
            self.client.reconciler.refresh_status()

    def refresh_field(self, name: str) -> None:
        if self.client:
            self.client.reconciler.refresh_field(name)

    def log_message(self, message: str, level: str = "INFO") -> None:
        """
        Logs a message using the app logger and appends it to the output frame.
        """
        from datetime import datetime
        now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        if level.upper() == "ERROR":
            self.logger.error(message)
        elif level.upper() == "DEBUG":
            self.logger.debug(message)
            if not self.logger.isEnabledFor(logging.DEBUG):
                return
        else:
            self.logger.info(message)
        self.output_frame.append_log(f"[{now}] [{level}] {message}")

    def set_show_debug(self, enabled: bool) -> None:
        """
        Adjusts the logger level based on the debug checkbox.
        """
        self.logger.setLevel(logging.DEBUG if enabled else logging.INFO)
        self.output_frame.filter_debug_messages(enabled)
        self.log_message(f"Show Debug: {'ON' if enabled else 'OFF'}")

    def on_closing(self) -> None:
        """
        Performs cleanup on application exit.
        """
        if self.client:
            self.client.disconnect()
            self.client = None


def on_closing(root: tk.Tk, app: SignalGeneratorApplication) -> None:
    """
    Handles shutdown by calling the app's on_closing method and destroying the root.
    """
    try:
        app.on_closing()
    except Exception as e:
        logging.error(f"Error during shutdown: {str(e)}", exc_info=True)
    finally:
        root.destroy()
