"""
Test doubles that put time and exchange completion under the test's control.
"""

from unittest.mock import Mock

from siggen_communication.config import ClientSettings
from siggen_communication.communicator.client import SignalGeneratorClient
from siggen_communication.communicator.exchange import TimerHandle
from siggen_communication.models import DeviceResponse


class ManualScheduler:
    """Scheduler whose clock only moves when advance() is called."""

    def __init__(self):
        self.now = 0
        self._timers = []
        self._count = 0

    def call_later(self, delay_ms, callback):
        handle = TimerHandle()
        self._count += 1
        self._timers.append((self.now + delay_ms, self._count, handle, callback))
        return handle

    def advance(self, ms):
        target = self.now + ms
        while True:
            due = [t for t in self._timers if t[0] <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t[0], t[1]))
            self._timers.remove(timer)
            self.now = timer[0]
            timer[2].fire(timer[3])
        self.now = target

    @property
    def active(self):
        return [t for t in self._timers if t[2].active]


class ManualRunner:
    """Exchange runner that holds every request until the test answers it."""

    def __init__(self):
        self.requests = []

    def submit(self, path, on_done):
        self.requests.append((path, on_done))

    @property
    def paths(self):
        return [path for path, _ in self.requests]

    def reply(self, path, text="", success=True, status_code=200, error_message=None):
        for index, (pending_path, on_done) in enumerate(self.requests):
            if pending_path == path:
                del self.requests[index]
                on_done(DeviceResponse(path=path, text=text, success=success,
                                       status_code=status_code, error_message=error_message))
                return
        raise AssertionError(f"No pending request for {path!r}, have {self.paths}")

    def fail(self, path, error_message="HTTP 500", status_code=500):
        self.reply(path, success=False, status_code=status_code, error_message=error_message)

    def pump(self):
        return 0


class FakeSerial:
    """Just enough of serial.Serial for the console handler."""

    def __init__(self, reply=b""):
        self.is_open = True
        self.written = []
        self._reply = reply
        self._buffer = b""

    @property
    def in_waiting(self):
        return len(self._buffer)

    def read(self, size):
        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def write(self, data):
        self.written.append(data)
        self._buffer = self._reply
        return len(data)

    def reset_input_buffer(self):
        self._buffer = b""

    def flush(self):
        pass

    def close(self):
        self.is_open = False


def make_client(profile="full", **kwargs):
    """A client wired to a manual scheduler and runner."""
    scheduler = ManualScheduler()
    runner = ManualRunner()
    settings = ClientSettings(profile=profile, **kwargs)
    client = SignalGeneratorClient(Mock(), scheduler, settings, runner=runner)
    return client, scheduler, runner
