#!/usr/bin/env python3
"""
command_dispatcher.py

This module contains the CommandDispatcher class which is responsible for:
  - Turning a user gesture (button press, field submit, console line) into exactly one GET request.
  - Escaping the user's text for the request line ('%' is the only character touched).
  - Deciding what happens when the reply arrives: post it to the output ticker, release the
    input control, and schedule exactly one follow-up refresh.
  - Abandoning exchanges that outlive the request timeout so no control is left hanging.

Usage Example:
    dispatcher.dispatch(Verb.SET_FREQUENCY, "2.34m")   # GET setFreqency?frequency=2.34m
    dispatcher.send_console("p50")                     # GET /p50
"""

import logging
from typing import Callable, Optional

from siggen_communication.config import (
    ENDPOINTS, NOOP_COMMAND, REBOOT_RELOAD_MS, REBOOT_MESSAGE, TIMEOUT_MESSAGE, ClientSettings
)
from siggen_communication.models import DeviceResponse, PendingReply
from siggen_communication.param_types import Verb, EndpointDefinition
from siggen_communication.communicator.response_handler import escape_percent

PRESET_PREFIXES = {
    Verb.LOAD_PRESET: "Loading Preset:<br>",
    Verb.SAVE_PRESET: "Saving Preset:<br>",
}


def build_request_path(definition: EndpointDefinition, argument: Optional[str] = None) -> str:
    """
    Builds the relative request target for a verb.

    Args:
        definition: The endpoint the verb is bound to.
        argument: Raw user text, passed through unvalidated.

    Returns:
        "<path>?<param>=<escaped argument>", the bare path, or the no-op command
        when a required argument is empty.
    """
    if not definition.takes_argument:
        return definition.path
    if not argument:
        return NOOP_COMMAND
    return f"{definition.path}?{definition.param}={escape_percent(argument)}"


def build_console_path(text: str) -> str:
    """
    The console sends the user's text itself as the relative path.
    """
    return escape_percent(text) or NOOP_COMMAND


class CommandDispatcher:
    """
    Sends commands and routes their replies.
    """

    def __init__(self, controller, runner, scheduler, reconciler, response_handler,
                 settings: ClientSettings, reload_callback: Optional[Callable[[], None]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initializes the dispatcher.

        Args:
            controller: The ClientController owning the client state.
            runner: Exchange runner with submit(path, on_done).
            scheduler: Scheduler with call_later(delay_ms, callback) -> TimerHandle.
            reconciler: StatusReconciler used for follow-up refreshes.
            response_handler: ResponseHandler for console formatting and preset notices.
            settings: Client settings (profile, delays, timeout).
            reload_callback: Called when the client must reload after a reboot.
            logger: Optional logger instance.
        """
        self.controller = controller
        self.runner = runner
        self.scheduler = scheduler
        self.reconciler = reconciler
        self.response_handler = response_handler
        self.settings = settings
        self.reload_callback = reload_callback
        self.logger = logger or logging.getLogger(__name__)
        self.profile = settings.profile_params
        self.reload_handle = None

    # Public gestures

    def dispatch(self, verb: Verb, argument: Optional[str] = None) -> PendingReply:
        """
        Sends one command for a fixed verb.

        Args:
            verb: Any verb except CONSOLE.
            argument: Raw user text for verbs that take one.

        Returns:
            The PendingReply tracking the exchange.
        """
        if verb is Verb.CONSOLE:
            return self.send_console(argument or "")
        definition = ENDPOINTS[verb]
        path = build_request_path(definition, argument)
        if verb is Verb.REBOOT:
            sequence = self.controller.next_sequence()
            self.controller.post_message(REBOOT_MESSAGE, sequence)
            return self._send(definition, path, sequence, argument)
        return self._send(definition, path, self.controller.next_sequence(), argument)

    def send_console(self, text: str) -> PendingReply:
        """
        Sends free-form console text as a relative path.
        """
        definition = ENDPOINTS[Verb.CONSOLE]
        return self._send(definition, build_console_path(text), self.controller.next_sequence(), text)

    def load_preset(self, slot: int, save: bool = False) -> PendingReply:
        return self.dispatch(Verb.SAVE_PRESET if save else Verb.LOAD_PRESET, str(slot))

    # Exchange handling

    def _send(self, definition: EndpointDefinition, path: str, sequence: int,
              argument: Optional[str]) -> PendingReply:
        reply = PendingReply(sequence=sequence, path=path, verb=definition.verb, control=definition.control)
        if reply.control:
            self.controller.begin_control(reply.control, sequence, argument or "")
        self.logger.debug(f"Sending command #{sequence}: {path}")
        reply.watchdog = self.scheduler.call_later(self.settings.request_timeout_ms,
                                                   lambda: self._abandon(reply))
        self.runner.submit(path, lambda response: self._on_reply(reply, response))
        return reply

    def _abandon(self, reply: PendingReply) -> None:
        if not reply.is_open:
            return
        reply.abandon()
        self.logger.error(f"No reply to {reply.path} after {self.settings.request_timeout_ms} ms, giving up")
        if reply.control:
            self.controller.release_control(reply.control, reply.sequence, success=False,
                                            error=TIMEOUT_MESSAGE)
        self.controller.report_error(TIMEOUT_MESSAGE)

    def _on_reply(self, reply: PendingReply, response: DeviceResponse) -> None:
        if not reply.is_open:
            self.logger.debug(f"Ignoring late reply to {reply.path}")
            return
        reply.watchdog.cancel()
        reply.complete(response)

        if not response.success:
            self.logger.error(f"Command {reply.path} failed: {response.error_message}")
            if reply.control:
                self.controller.release_control(reply.control, reply.sequence, success=False,
                                                error=response.error_message)
            self.controller.report_error(response.error_message)
            return

        self.controller.report_error(None)
        if reply.control:
            self.controller.release_control(reply.control, reply.sequence, success=True)

        if self.profile["patch_presets"]:
            self.reconciler.apply_preset_notice(response.text)

        # The device restarts whatever was sent after the reboot
        if reply.verb is Verb.REBOOT:
            self._schedule_reload()
            return

        if not self.controller.is_current(reply.sequence):
            self.logger.debug(f"Command #{reply.sequence} superseded, skipping render and refresh")
            return

        if reply.verb is Verb.CONSOLE:
            self._on_console_reply(reply, response)
        else:
            self.controller.post_message(PRESET_PREFIXES.get(reply.verb, "") + response.text, reply.sequence)
            self._schedule_refresh(reply.sequence, self.settings.update_delay_ms, self.reconciler.refresh_status)

    def _on_console_reply(self, reply: PendingReply, response: DeviceResponse) -> None:
        if response.text != "":
            self.controller.post_message(self.response_handler.format_console_reply(response.text),
                                         reply.sequence)
        on_message = self._schedule_status_follow_up if self.profile["status_follow_up"] else None
        self._schedule_refresh(
            reply.sequence,
            self.settings.update_delay_ms,
            lambda sequence: self.reconciler.refresh_last_message(sequence, on_message)
        )

    def _schedule_status_follow_up(self, sequence: int) -> None:
        delay = self.settings.update_delay_ms * self.profile["follow_up_factor"]
        self._schedule_refresh(sequence, delay, self.reconciler.refresh_status)

    def _schedule_refresh(self, sequence: int, delay_ms: int, action: Callable[[int], None]) -> None:
        handle = self.scheduler.call_later(delay_ms, lambda: action(sequence))
        self.controller.track_refresh(sequence, handle)

    def _schedule_reload(self) -> None:
        # At most one reload is ever pending
        self.cancel_pending()
        self.logger.info(f"Device is restarting, reloading in {REBOOT_RELOAD_MS} ms")
        self.reload_handle = self.scheduler.call_later(REBOOT_RELOAD_MS, self._reload)

    def _reload(self) -> None:
        self.reload_handle = None
        if self.reload_callback:
            self.reload_callback()

    def cancel_pending(self) -> None:
        if self.reload_handle:
            self.reload_handle.cancel()
            self.reload_handle = None
