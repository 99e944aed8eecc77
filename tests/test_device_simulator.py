"""
Test the simulated signal generator, alone and behind a full client
"""

import unittest

from siggen_communication.device_simulator import DeviceSimulator, parse_frequency, format_frequency
from siggen_communication.param_types import Verb
from siggen_communication.communicator.response_handler import ResponseHandler
from siggen_communication.communicator.client import SignalGeneratorClient
from siggen_communication.config import ClientSettings
from tests.helpers import ManualScheduler


class TestFrequencyText(unittest.TestCase):

    def test_parse(self):
        self.assertEqual(parse_frequency("440"), 440.0)
        self.assertEqual(parse_frequency("1k"), 1000.0)
        self.assertEqual(parse_frequency("2.34m"), 2_340_000.0)
        with self.assertRaises(ValueError):
            parse_frequency("fast")
        for text in ("nan", "inf", "-inf", "1e400"):
            with self.subTest(text=text), self.assertRaises(ValueError):
                parse_frequency(text)

    def test_format(self):
        self.assertEqual(format_frequency(440), "440 Hz")
        self.assertEqual(format_frequency(1500), "1.5 kHz")
        self.assertEqual(format_frequency(2_340_000), "2.34 MHz")


class TestDeviceSimulator(unittest.TestCase):

    def setUp(self):
        self.sim = DeviceSimulator(config={"response_delay": 0.0, "error_probability": 0.0})
        self.sim.connect()

    def fetch_text(self, path):
        response = self.sim.fetch(path)
        self.assertTrue(response.success, response.error_message)
        return response.text

    def test_set_frequency(self):
        self.assertEqual(self.fetch_text("setFreqency?frequency=2.34m"), "Frequency set to 2.34 MHz")
        self.assertEqual(self.fetch_text("frequency"), "2.34 MHz")
        self.assertEqual(self.fetch_text("LastMessage"), "Frequency set to 2.34 MHz")

    def test_escaped_percent(self):
        self.assertEqual(self.fetch_text("setPulseWidth?pulse=50%25"), "Pulse width set to 50%")
        self.assertEqual(self.fetch_text("p75%25").split("\n")[0], "Pulse width set to 75%")

    def test_invalid_values_are_reported_not_rejected(self):
        self.assertEqual(self.fetch_text("setBitDepth?bits=11"), "Resolution must be between 1 and 10 bits")
        self.assertEqual(self.fetch_text("setFreqency?frequency=abc"), "Invalid frequency: abc")

    def test_non_finite_values_leave_frequency_alone(self):
        self.assertEqual(self.fetch_text("setStep?step=inf"), "Invalid step size: inf")
        self.assertEqual(self.fetch_text("setFreqency?frequency=nan"), "Invalid frequency: nan")
        self.assertEqual(self.fetch_text("setUP"), "Frequency: 1.1 kHz")

    def test_waveform_and_steps(self):
        self.fetch_text("setSine")
        self.assertEqual(self.fetch_text("wave"), "Sine")
        self.fetch_text("setStep?step=500")
        self.assertEqual(self.fetch_text("setUP"), "Frequency: 1.5 kHz")
        self.assertEqual(self.fetch_text("d"), "Frequency: 1 kHz\n<a href=\"/\">back to the control page</a>")

    def test_noop(self):
        self.assertEqual(self.fetch_text("!"), "")

    def test_status_block(self):
        status = self.fetch_text("status")
        self.assertTrue(status.startswith("Wave:\tSquare\n"))
        self.assertIn("Frequency:\t1 kHz\n", status)

    def test_rename_and_clear(self):
        reply = self.fetch_text("n1 Lab bench")
        self.assertTrue(reply.startswith('Set name of preset [1] to "Lab bench"\n'))
        titles = ResponseHandler().parse_preset_titles(self.fetch_text(""))
        self.assertEqual(titles[1], "Lab bench")
        self.assertEqual(titles[2], "")

        self.assertTrue(self.fetch_text("c1").startswith("Clearing preset 1"))
        self.assertEqual(ResponseHandler().parse_preset_titles(self.fetch_text(""))[1], "")

    def test_save_and_load_preset(self):
        self.fetch_text("setTriangle")
        self.assertEqual(self.fetch_text("savePreset?preset=2"), "Saved current settings to preset 2")
        self.fetch_text("setSquare")
        self.assertEqual(self.fetch_text("loadPreset?preset=2"), "Loaded preset 2")
        self.assertEqual(self.fetch_text("wave"), "Triangle")
        self.assertEqual(self.fetch_text("loadPreset?preset=3"), "Preset 3 is empty")

    def test_unknown_command(self):
        response = self.sim.fetch("zzz")
        self.assertFalse(response.success)
        self.assertEqual(response.status_code, 404)

    def test_not_connected(self):
        self.sim.disconnect()
        self.assertFalse(self.sim.fetch("status").success)

    def test_error_probability(self):
        sim = DeviceSimulator(config={"response_delay": 0.0, "error_probability": 1.0})
        sim.connect()
        response = sim.fetch("status")
        self.assertFalse(response.success)
        self.assertEqual(response.status_code, 500)


class FetchRunner:
    """Runs each exchange immediately against the transport."""

    def __init__(self, transport):
        self.transport = transport

    def submit(self, path, on_done):
        on_done(self.transport.fetch(path))

    def pump(self):
        return 0


class TestClientAgainstSimulator(unittest.TestCase):

    def setUp(self):
        self.sim = DeviceSimulator(config={"response_delay": 0.0})
        self.scheduler = ManualScheduler()
        self.client = SignalGeneratorClient(self.sim, self.scheduler, ClientSettings(simulate=True),
                                            runner=FetchRunner(self.sim))
        self.client.connect()
        self.state = self.client.controller.state

    def test_frequency_then_status(self):
        self.client.dispatcher.dispatch(Verb.SET_FREQUENCY, "2.34m")
        self.assertEqual(self.state.output_log.text, "Frequency set to 2.34 MHz")
        self.scheduler.advance(777)
        self.assertIn("<div>2.34 MHz</div>", self.state.output_log.text)
        self.assertEqual(self.state.live_fields["frequency"].value, "2.34 MHz")
        self.assertEqual(self.state.live_fields["waveform"].value, "Square")

    def test_rename_from_console_shows_on_preset(self):
        self.client.start()
        self.client.dispatcher.send_console("n4 Sweep")
        self.assertEqual(self.state.preset_slots[4].label, "Sweep")
        self.client.reload()
        self.assertEqual(self.state.preset_slots[4].label, "Sweep")


if __name__ == "__main__":
    unittest.main()
