"""
Test the command console on both the full control page and the console-only page
"""

import unittest

from siggen_communication.param_types import Verb
from tests.helpers import make_client

RENAME_REPLY = 'Set name of preset [1] to "Lab"\n<a href="/">back to the control page</a>'


class TestFullPageConsole(unittest.TestCase):
    """Console replies on the full page show everything and end in a status refresh"""

    def setUp(self):
        self.client, self.scheduler, self.runner = make_client()
        self.controller = self.client.controller
        self.dispatcher = self.client.dispatcher

    def test_blank_line_sends_noop(self):
        self.dispatcher.send_console("")
        self.assertEqual(self.runner.paths, ["!"])

    def test_console_verb_routes_to_console(self):
        self.dispatcher.dispatch(Verb.CONSOLE, "u")
        self.assertEqual(self.runner.paths, ["u"])
        self.assertTrue(self.controller.state.controls["console"].busy)

    def test_reply_then_last_message_then_status(self):
        self.dispatcher.send_console("n1 Lab")
        self.assertEqual(self.runner.paths, ["n1 Lab"])
        self.runner.reply("n1 Lab", RENAME_REPLY)
        self.assertEqual(self.controller.state.output_log.text, RENAME_REPLY)
        self.assertEqual(self.controller.state.preset_slots[1].label, "Lab")
        self.assertTrue(self.controller.state.controls["console"].focus_requested)

        self.scheduler.advance(777)
        self.assertEqual(self.runner.paths, ["LastMessage"])
        self.runner.reply("LastMessage", 'Set name of preset [1] to "Lab"')
        self.assertEqual(self.controller.state.output_log.text, 'Set name of preset [1] to "Lab"')

        self.scheduler.advance(777 * 3 - 1)
        self.assertEqual(self.runner.paths, [])
        self.scheduler.advance(1)
        self.assertEqual(self.runner.paths, ["status"])

    def test_empty_reply_keeps_output_and_still_polls(self):
        self.dispatcher.send_console("f1k")
        self.runner.reply("f1k", "Frequency set to 1 kHz")
        self.dispatcher.send_console("")
        self.runner.reply("!", "")
        self.assertEqual(self.controller.state.output_log.text, "Frequency set to 1 kHz")
        self.scheduler.advance(777)
        self.assertEqual(self.runner.paths, ["LastMessage"])

    def test_empty_last_message_skips_status(self):
        self.dispatcher.send_console("!")
        self.runner.reply("!", "")
        self.scheduler.advance(777)
        self.runner.reply("LastMessage", "")
        self.scheduler.advance(10000)
        self.assertEqual(self.runner.paths, [])

    def test_clear_notice_from_last_message(self):
        self.controller.set_preset_label(4, "Old")
        self.dispatcher.send_console("c4")
        self.runner.reply("c4", "Clearing preset 4")
        self.assertEqual(self.controller.state.preset_slots[4].label, "")


class TestConsolePage(unittest.TestCase):
    """The console-only page keeps the first line and never refreshes status"""

    def setUp(self):
        self.client, self.scheduler, self.runner = make_client(profile="console")
        self.controller = self.client.controller
        self.dispatcher = self.client.dispatcher

    def test_first_line_only(self):
        self.dispatcher.send_console("f1k")
        self.runner.reply("f1k", "Frequency set to 1 kHz\n<a href=\"/\">back to the control page</a>")
        self.assertEqual(self.controller.state.output_log.text, "Frequency set to 1 kHz")

    def test_last_message_without_status(self):
        self.dispatcher.send_console("p50%")
        self.assertEqual(self.runner.paths, ["p50%25"])
        self.runner.reply("p50%25", "Pulse width set to 50%")
        self.scheduler.advance(249)
        self.assertEqual(self.runner.paths, [])
        self.scheduler.advance(1)
        self.assertEqual(self.runner.paths, ["LastMessage"])
        self.runner.reply("LastMessage", "Pulse width set to 50%")
        self.scheduler.advance(10000)
        self.assertEqual(self.runner.paths, [])

    def test_presets_not_patched(self):
        self.dispatcher.send_console("n1 Lab")
        self.runner.reply("n1 Lab", RENAME_REPLY)
        self.assertEqual(self.controller.state.preset_slots[1].label, "")

    def test_start_loads_nothing(self):
        self.client.start()
        self.assertEqual(self.runner.paths, [])


if __name__ == "__main__":
    unittest.main()
