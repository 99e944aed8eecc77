"""
client.py

Implements the SignalGeneratorClient class that wires the controller,
dispatcher and reconciler around one transport, one exchange runner and one
scheduler. The GUI talks to this object only.
"""

import logging
from typing import Optional

from siggen_communication.config import ClientSettings
from siggen_communication.communicator.controller import ClientController
from siggen_communication.communicator.command_dispatcher import CommandDispatcher
from siggen_communication.communicator.status_reconciler import StatusReconciler
from siggen_communication.communicator.response_handler import ResponseHandler
from siggen_communication.communicator.exchange import ExchangeRunner


class SignalGeneratorClient:
    """
    One control session with one signal generator.
    """

    def __init__(self, transport, scheduler, settings: Optional[ClientSettings] = None,
                 runner=None, logger: Optional[logging.Logger] = None):
        """
        Initializes the client.

        Args:
            transport: Object with connect(), disconnect() and fetch(path).
            scheduler: Scheduler with call_later(delay_ms, callback).
            settings: Client settings; defaults to the full control profile.
            runner: Exchange runner; defaults to a threaded ExchangeRunner over the transport.
            logger: Optional logger for debugging.
        """
        self.settings = settings or ClientSettings()
        self.logger = logger or logging.getLogger(__name__)
        self.transport = transport
        self.scheduler = scheduler
        self.runner = runner or ExchangeRunner(transport, self.logger)
        profile = self.settings.profile_params

        self.response_handler = ResponseHandler(self.settings.slot_count, profile["first_line_only"])
        self.controller = ClientController(self.settings.slot_count, self.logger)
        self.reconciler = StatusReconciler(self.controller, self.runner, self.response_handler,
                                           patch_presets=profile["patch_presets"], logger=self.logger)
        self.dispatcher = CommandDispatcher(self.controller, self.runner, self.scheduler, self.reconciler,
                                            self.response_handler, self.settings,
                                            reload_callback=self.reload, logger=self.logger)
        self.logger.debug(f"Initialized {self.settings.profile} client")

    @property
    def is_full_page(self) -> bool:
        return self.settings.profile == "full"

    def connect(self) -> bool:
        return self.transport.connect()

    def disconnect(self) -> None:
        self.dispatcher.cancel_pending()
        self.transport.disconnect()

    def start(self) -> None:
        """
        Initial load: preset labels and status for the full page, nothing for the console.
        """
        if self.is_full_page:
            self.reconciler.load_preset_labels()
            self.reconciler.refresh_status()

    def reload(self) -> None:
        """
        Starts over with fresh state, as reloading the page does after a reboot.
        """
        self.logger.info("Reloading client state")
        self.controller.reset()
        self.start()

    def pump(self) -> int:
        return self.runner.pump()
