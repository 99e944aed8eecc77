"""
status_reconciler.py

Implements the StatusReconciler class, which re-reads authoritative device
state and hands it to the controller: the consolidated status block, the two
live fields, the last asynchronous message and the preset labels.
"""

import logging
from typing import Callable, Optional

from siggen_communication.config import (
    STATUS_PATH, LAST_MESSAGE_PATH, ROOT_PATH, LIVE_FIELD_PATHS
)
from siggen_communication.models import DeviceResponse


class StatusReconciler:
    """
    Fetches device truth after commands and renders it through the controller.
    """

    def __init__(self, controller, runner, response_handler, patch_presets: bool = True,
                 logger: Optional[logging.Logger] = None):
        """
        Initializes the reconciler.

        Args:
            controller: The ClientController owning the client state.
            runner: Exchange runner with submit(path, on_done).
            response_handler: ResponseHandler used to translate and parse text.
            patch_presets: Whether LastMessage text is scanned for preset notices.
            logger: Optional logger instance.
        """
        self.controller = controller
        self.runner = runner
        self.response_handler = response_handler
        self.patch_presets = patch_presets
        self.logger = logger or logging.getLogger(__name__)

    def _sequence(self, sequence: Optional[int]) -> int:
        return self.controller.latest_sequence if sequence is None else sequence

    def refresh_status(self, sequence: Optional[int] = None) -> None:
        """
        Fetches the status block, shows it, then refreshes both live fields.

        Args:
            sequence: The command this refresh belongs to; defaults to the latest.
        """
        sequence = self._sequence(sequence)
        self.runner.submit(STATUS_PATH, lambda response: self._on_status(sequence, response))

    def _on_status(self, sequence: int, response: DeviceResponse) -> None:
        if not response.success:
            self.logger.warning(f"Status refresh failed: {response.error_message}")
            return
        if not self.controller.post_message(self.response_handler.translate_status(response.text), sequence):
            return
        for name in LIVE_FIELD_PATHS:
            self.refresh_field(name, sequence)

    def refresh_field(self, name: str, sequence: Optional[int] = None) -> None:
        """
        Fetches one live value and writes it verbatim.

        Args:
            name: "frequency" or "waveform".
            sequence: The command this refresh belongs to; defaults to the latest.
        """
        if name not in LIVE_FIELD_PATHS:
            raise ValueError(f"Unknown live field: {name}")
        sequence = self._sequence(sequence)
        self.runner.submit(LIVE_FIELD_PATHS[name], lambda response: self._on_field(name, sequence, response))

    def _on_field(self, name: str, sequence: int, response: DeviceResponse) -> None:
        if not response.success:
            self.logger.warning(f"Refresh of {name} failed: {response.error_message}")
            return
        self.controller.set_live_field(name, response.text, sequence)

    def refresh_last_message(self, sequence: Optional[int] = None,
                             on_message: Optional[Callable[[int], None]] = None) -> None:
        """
        Fetches the device's last asynchronous message and shows it if non-empty.

        Args:
            sequence: The command this refresh belongs to; defaults to the latest.
            on_message: Called with the sequence number once a message was rendered.
        """
        sequence = self._sequence(sequence)
        self.runner.submit(LAST_MESSAGE_PATH,
                           lambda response: self._on_last_message(sequence, response, on_message))

    def _on_last_message(self, sequence: int, response: DeviceResponse,
                         on_message: Optional[Callable[[int], None]]) -> None:
        if not response.success:
            self.logger.warning(f"LastMessage poll failed: {response.error_message}")
            return
        if not response.text:
            return
        if self.patch_presets:
            self.apply_preset_notice(response.text)
        if self.controller.post_message(response.text, sequence) and on_message:
            on_message(sequence)

    def apply_preset_notice(self, text: str) -> bool:
        """
        Patches a preset label straight from rename/clear text, saving a round trip.
        """
        return self.controller.apply_notice(self.response_handler.parse_preset_notice(text))

    def load_preset_labels(self) -> None:
        """
        Reads every preset label from the root page the device renders them into.
        """
        self.runner.submit(ROOT_PATH, self._on_root_page)

    def _on_root_page(self, response: DeviceResponse) -> None:
        if not response.success:
            self.logger.warning(f"Could not load preset labels: {response.error_message}")
            return
        titles = self.response_handler.parse_preset_titles(response.text)
        for slot, label in titles.items():
            self.controller.set_preset_label(slot, label)
        self.logger.debug(f"Loaded {len(titles)} preset label(s)")
