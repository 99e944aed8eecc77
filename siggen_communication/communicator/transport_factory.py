"""
transport_factory.py

Provides a factory function to instantiate the right transport for the
client settings. This keeps link-specific logic out of the dispatcher and
reconciler, which only ever call fetch(path).
"""

import logging
from typing import Optional

from siggen_communication.config import ClientSettings
from siggen_communication.communicator.base_communication import HttpCommunicationHandler
from siggen_communication.communicator.serial_console import SerialConsoleHandler
from siggen_communication.device_simulator import DeviceSimulator


def get_transport(settings: ClientSettings, logger: Optional[logging.Logger] = None):
    """
    Returns an unconnected transport for the given settings.

    Args:
        settings: The client settings.
        logger: Optional logger handed to the transport.

    Returns:
        A DeviceSimulator, SerialConsoleHandler or HttpCommunicationHandler.

    Raises:
        ValueError: If a serial port is requested for the full control profile.
    """
    if settings.simulate:
        return DeviceSimulator(logger=logger)
    if settings.serial_port:
        if settings.profile != "console":
            raise ValueError("The serial link only carries the console; use the console profile")
        return SerialConsoleHandler(settings.serial_port, baudrate=settings.baudrate, logger=logger)
    return HttpCommunicationHandler(settings.base_url, timeout=settings.http_timeout, logger=logger)
