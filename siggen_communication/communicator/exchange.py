"""
exchange.py

Bridges blocking device exchanges onto the single-threaded GUI loop.

  - ExchangeRunner runs each fetch on a short-lived worker thread and queues the
    completion; pump() delivers completions on the loop thread.
  - TkScheduler wraps root.after so every deferred task returns a TimerHandle
    that can be cancelled before it fires.
"""

import logging
import queue
import threading
from typing import Callable, Optional

from siggen_communication.models import DeviceResponse

Completion = Callable[[DeviceResponse], None]


class TimerHandle:
    """
    A deferred task that can be invalidated before it runs.
    """

    def __init__(self, cancel_callback: Optional[Callable[[], None]] = None):
        self._cancel_callback = cancel_callback
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._cancel_callback:
            self._cancel_callback()

    def fire(self, callback: Callable[[], None]) -> None:
        """
        Runs the callback once, unless the handle was cancelled first.
        """
        if not self.active:
            return
        self.active = False
        callback()


class TkScheduler:
    """
    Scheduler backed by the Tk event loop.
    """

    def __init__(self, root):
        self.root = root

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        after_id = self.root.after(delay_ms, lambda: handle.fire(callback))
        handle._cancel_callback = lambda: self.root.after_cancel(after_id)
        return handle


class ExchangeRunner:
    """
    Runs transport fetches off the GUI thread and hands results back to it.
    """

    def __init__(self, transport, logger: Optional[logging.Logger] = None):
        """
        Initializes the runner.

        Args:
            transport: Any object with fetch(path) -> DeviceResponse.
            logger: Optional logger instance.
        """
        self.transport = transport
        self.logger = logger or logging.getLogger(__name__)
        self.completions: "queue.Queue[tuple]" = queue.Queue()

    def submit(self, path: str, on_done: Completion) -> None:
        thread = threading.Thread(target=self._run, args=(path, on_done), daemon=True)
        thread.start()

    def _run(self, path: str, on_done: Completion) -> None:
        try:
            response = self.transport.fetch(path)
        except Exception as e:
            self.logger.error(f"Exchange for {path} crashed: {str(e)}", exc_info=True)
            response = DeviceResponse(path=path, text="", success=False, error_message=str(e))
        self.completions.put((on_done, response))

    def pump(self) -> int:
        """
        Delivers every finished exchange. Must be called from the GUI thread.

        Returns:
            The number of completions delivered.
        """
        delivered = 0
        while True:
            try:
                on_done, response = self.completions.get_nowait()
            except queue.Empty:
                break
            on_done(response)
            delivered += 1
        return delivered
