"""
serial_console.py

Implements the SerialConsoleHandler class, which carries console commands over
the device's USB serial port instead of HTTP. It exposes the same fetch()
contract as the HTTP handler so the console works unchanged on either link.
"""

import logging
import threading
import time
from typing import Optional, List

import serial
from serial.tools import list_ports

from siggen_communication.config import SERIAL_SETTINGS, DEFAULT_BAUDRATE, LAST_MESSAGE_PATH
from siggen_communication.models import DeviceResponse
from siggen_communication.communicator.response_handler import restore_percent


class SerialConsoleHandler:
    """
    Serial transport for the free-form command console.
    """

    def __init__(self, port: str, baudrate: int = DEFAULT_BAUDRATE,
                 logger: Optional[logging.Logger] = None, quiet_time: float = 0.05):
        """
        Initializes the serial console handler.

        Args:
            port: The serial port identifier (e.g., "COM3" or "/dev/ttyUSB0").
            baudrate: Line speed of the device console.
            logger: Optional logger instance.
            quiet_time: Seconds of silence that mark the end of a reply.
        """
        self.port = port
        self.logger = logger or logging.getLogger(__name__)
        self.ser: Optional[serial.Serial] = None
        self.quiet_time = quiet_time
        self.current_settings = dict(SERIAL_SETTINGS, baudrate=baudrate)
        self.last_message = ""
        # Worker threads may overlap; the port carries one exchange at a time
        self._lock = threading.Lock()

    def connect(self) -> bool:
        """
        Opens the serial port with the current settings.

        Returns:
            True if connection is successful, False otherwise.
        """
        try:
            self.ser = serial.Serial(port=self.port, **self.current_settings)
            self.logger.info(f"Connected to signal generator console on {self.port}")
            return True
        except serial.SerialException as e:
            self.logger.error(f"Connection failed: {str(e)}")
            return False

    def disconnect(self) -> bool:
        """
        Safely closes the serial connection.

        Returns:
            True if disconnected successfully, False otherwise.
        """
        if self.ser and self.ser.is_open:
            self.ser.close()
            self.logger.info(f"Disconnected from {self.port}")
            return True
        return False

    def fetch(self, path: str) -> DeviceResponse:
        """
        Sends one console command line and collects the reply.

        A LastMessage poll is answered from the most recent reply, since the serial
        console prints its result directly instead of storing it.

        Args:
            path: The request target as the dispatcher built it.

        Returns:
            A DeviceResponse carrying the decoded reply text.
        """
        with self._lock:
            if path == LAST_MESSAGE_PATH:
                return DeviceResponse(path=path, text=self.last_message, success=True)

            if not self.ser or not self.ser.is_open:
                self.logger.error(f"Command {path} failed: not connected")
                return DeviceResponse(path=path, text="", success=False, error_message="Not connected")

            # There is no request line here, so the escaping is undone
            command = restore_percent(path.lstrip('/'))
            try:
                self.ser.reset_input_buffer()
                self.logger.debug(f"Sending command: {command}")
                self.ser.write((command + "\n").encode("utf-8"))
                self.ser.flush()
                raw = self.read_response()
            except serial.SerialException as e:
                self.logger.error(f"Command {command} failed: {str(e)}")
                return DeviceResponse(path=path, text="", success=False, error_message=str(e))

            if raw is None:
                self.logger.error(f"No response to {command}")
                return DeviceResponse(path=path, text="", success=False, error_message="No response received")

            text = raw.decode("utf-8", errors="replace").replace("\r\n", "\n").strip("\n")
            self.logger.debug(f"Received response: {text!r}")
            self.last_message = text
            return DeviceResponse(path=path, text=text, success=True)

    def read_response(self) -> Optional[bytes]:
        """
        Reads response bytes until the line goes quiet or the timeout expires.

        Returns:
            The response bytes if available, otherwise None.
        """
        response = bytearray()
        start_time = time.time()
        last_data = start_time
        while (time.time() - start_time) < self.current_settings['timeout']:
            waiting = self.ser.in_waiting
            if waiting:
                response.extend(self.ser.read(waiting))
                last_data = time.time()
            elif response and (time.time() - last_data) >= self.quiet_time:
                break
            time.sleep(0.01)
        return bytes(response) if response else None

    @staticmethod
    def list_ports() -> List[str]:
        """
        Lists available serial ports.

        Returns:
            A list of available port names.
        """
        return [p.device for p in list_ports.comports()]
