"""
base_communication.py

Implements the HttpCommunicationHandler class that provides the one-shot GET
exchange the whole client is built on. Handles session setup, request
construction, status checking and error handling.
"""

import logging
from typing import Optional

import requests

from siggen_communication.config import DEFAULT_HTTP_TIMEOUT
from siggen_communication.models import DeviceResponse


class HttpCommunicationHandler:
    """
    Sends relative GET requests to the signal generator and returns plain-text replies.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_HTTP_TIMEOUT,
                 logger: Optional[logging.Logger] = None, session: Optional[requests.Session] = None):
        """
        Initializes the communication handler.

        Args:
            base_url: Device address, with or without scheme (e.g. "192.168.4.1").
            timeout: Seconds before requests gives up on a connect or read.
            logger: Optional logger instance.
            session: Optional pre-built session (mainly for tests).
        """
        if '://' not in base_url:
            base_url = f"http://{base_url}"
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.session: Optional[requests.Session] = session

    def connect(self) -> bool:
        """
        Opens the HTTP session. Nothing is sent until the first request.

        Returns:
            True once the session is ready.
        """
        if self.session is None:
            self.session = requests.Session()
        self.logger.info(f"Using signal generator at {self.base_url}")
        return True

    def disconnect(self) -> bool:
        """
        Closes the HTTP session.

        Returns:
            True if a session was closed, False otherwise.
        """
        if self.session is None:
            return False
        self.session.close()
        self.session = None
        self.logger.info(f"Disconnected from {self.base_url}")
        return True

    def build_url(self, path: str) -> str:
        """
        Joins a relative path (which may already carry a query) onto the base URL.
        The path is used as-is; any escaping has happened before it gets here.
        """
        return f"{self.base_url}/{path.lstrip('/')}"

    def fetch(self, path: str) -> DeviceResponse:
        """
        Issues one GET request and wraps the outcome.

        Args:
            path: Relative request target, e.g. "setFreqency?frequency=2.34m".

        Returns:
            A DeviceResponse; success is True only for HTTP 200.
        """
        if self.session is None:
            self.logger.error(f"Request for {path} failed: not connected")
            return DeviceResponse(path=path, text="", success=False, error_message="Not connected")

        url = self.build_url(path)
        try:
            self.logger.debug(f"GET {url}")
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request for {path} failed: {e}")
            return DeviceResponse(path=path, text="", success=False, error_message=str(e))

        if response.status_code != 200:
            self.logger.warning(f"Request for {path} returned HTTP {response.status_code}")
            return DeviceResponse(
                path=path,
                text=response.text,
                success=False,
                status_code=response.status_code,
                error_message=f"HTTP {response.status_code}"
            )

        self.logger.debug(f"Received response: {response.text!r}")
        return DeviceResponse(path=path, text=response.text, success=True, status_code=200)
