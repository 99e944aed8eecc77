"""
Test the pure text handling: status markup, console replies and preset notices
"""

import unittest

from siggen_communication.models import RenamePreset, ClearPreset, OtherNotice
from siggen_communication.communicator.response_handler import (
    ResponseHandler, escape_percent, restore_percent, first_line
)


class TestPercent(unittest.TestCase):

    def test_escape(self):
        self.assertEqual(escape_percent("50%"), "50%25")
        self.assertEqual(escape_percent("a b&c=d"), "a b&c=d")
        self.assertEqual(escape_percent("%%"), "%25%25")

    def test_restore(self):
        self.assertEqual(restore_percent("p50%25"), "p50%")


class TestStatus(unittest.TestCase):

    def test_separators_become_markup(self):
        text = "Wave:\tSine\nFrequency:\t1 kHz\n"
        self.assertEqual(ResponseHandler.translate_status(text),
                         "Wave:<div>Sine</div>Frequency:<div>1 kHz</div>")

    def test_other_text_untouched(self):
        self.assertEqual(ResponseHandler.translate_status("a <b> c"), "a <b> c")

    def test_markup_to_text(self):
        rendered = ResponseHandler.markup_to_text("Wave:<div>Sine</div>Frequency:<div>1 kHz</div>")
        self.assertEqual(rendered, "Wave:\nSine\nFrequency:\n1 kHz")
        self.assertEqual(ResponseHandler.markup_to_text("Rebooting..<br>(auto-reload in 3s)"),
                         "Rebooting..\n(auto-reload in 3s)")
        self.assertEqual(ResponseHandler.markup_to_text('<a href="/">back</a> &amp; more'), "back & more")


class TestConsoleReply(unittest.TestCase):

    def test_first_line(self):
        self.assertEqual(first_line("one\ntwo\nthree"), "one")
        self.assertEqual(first_line("only"), "only")

    def test_profiles(self):
        text = "Frequency set to 1 kHz\n<a href=\"/\">back</a>"
        self.assertEqual(ResponseHandler(first_line_only=True).format_console_reply(text),
                         "Frequency set to 1 kHz")
        self.assertEqual(ResponseHandler(first_line_only=False).format_console_reply(text), text)


class TestPresetNotice(unittest.TestCase):

    def test_rename(self):
        notice = ResponseHandler.parse_preset_notice('Set name of preset [3] to "Audio test"')
        self.assertEqual(notice, RenamePreset(slot=3, label="Audio test"))

    def test_rename_inside_longer_reply(self):
        notice = ResponseHandler.parse_preset_notice(
            'Set name of preset [7] to "Lab"\n<a href="/">back to the control page</a>')
        self.assertEqual(notice, RenamePreset(slot=7, label="Lab"))

    def test_clear(self):
        self.assertEqual(ResponseHandler.parse_preset_notice("Clearing preset 5"), ClearPreset(slot=5))

    def test_unrelated_text(self):
        for text in ("Frequency set to 1 kHz", "Set name of preset [x] to \"A\"",
                     "Clearing the buffer", "", 'preset [1] to "A"'):
            with self.subTest(text=text):
                self.assertIsInstance(ResponseHandler.parse_preset_notice(text), OtherNotice)

    def test_out_of_range_slot_still_parses(self):
        # Range checking belongs to whoever applies the notice
        self.assertEqual(ResponseHandler.parse_preset_notice('Set name of preset [12] to "X"'),
                         RenamePreset(slot=12, label="X"))


class TestPresetTitles(unittest.TestCase):

    def test_titles_from_root_page(self):
        page = ('<div id="preset_1" title="Bench &amp; scope" onclick="loadPreset(1)">1</div>'
                '<div id="preset_2" title="{2}" onclick="loadPreset(2)">2</div>'
                '<div id="preset_3"  title="" onclick="loadPreset(3)">3</div>'
                '<div id="preset_10" title="Hidden">10</div>')
        titles = ResponseHandler(slot_count=9).parse_preset_titles(page)
        self.assertEqual(titles, {1: "Bench & scope", 2: "", 3: ""})

    def test_page_without_presets(self):
        self.assertEqual(ResponseHandler().parse_preset_titles("<html></html>"), {})


if __name__ == "__main__":
    unittest.main()
