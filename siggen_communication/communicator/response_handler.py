"""
response_handler.py

Defines the ResponseHandler class for turning raw device text into what the
client displays, and for recognising the preset rename/clear notices the
device prints. Everything here is pure text processing with no network access.
"""

import html
import re
from typing import Dict

from siggen_communication.config import (
    STATUS_FIELD_SEPARATOR, STATUS_GROUP_SEPARATOR, STATUS_FIELD_MARKUP, STATUS_GROUP_MARKUP,
    RENAME_MARKER, CLEAR_MARKER, PRESET_SLOT_COUNT
)
from siggen_communication.models import PresetNotice, RenamePreset, ClearPreset, OtherNotice

RENAME_PATTERN = re.compile(r'preset \[(.+?)\] to "([^"]+)"')
CLEAR_PATTERN = re.compile(r'Clearing preset (\d+)')
PRESET_TITLE_PATTERN = re.compile(r'id="preset_(\d+)"\s+title="([^"]*)"')
TEMPLATE_TOKEN_PATTERN = re.compile(r'^\{\d+\}$')

_BREAK_TAGS = re.compile(r'<br\s*/?>|</?div[^>]*>', re.IGNORECASE)
_OTHER_TAGS = re.compile(r'<[^>]+>')
_BLANK_LINES = re.compile(r'\n\s*\n+')


def escape_percent(text: str) -> str:
    """
    Escapes the only character the request line cannot carry literally.
    """
    return text.replace("%", "%25")


def restore_percent(text: str) -> str:
    return text.replace("%25", "%")


def first_line(text: str) -> str:
    return text.split("\n")[0]


class ResponseHandler:
    """
    Formats and interprets response text from the signal generator.
    """

    def __init__(self, slot_count: int = PRESET_SLOT_COUNT, first_line_only: bool = False):
        """
        Initializes the ResponseHandler.

        Args:
            slot_count: Highest preset slot shown by the client.
            first_line_only: True when console replies are cut to their first line.
        """
        self.slot_count = slot_count
        self.first_line_only = first_line_only

    def format_console_reply(self, text: str) -> str:
        """
        Everything after the first line break is meant for direct URL requests only,
        so the minimal console keeps the first line.
        """
        return first_line(text) if self.first_line_only else text

    @staticmethod
    def translate_status(text: str) -> str:
        """
        Swaps the two status separators for presentational breaks.

        Args:
            text: The consolidated status block.

        Returns:
            The same block with field and group separators replaced by markup.
        """
        text = text.replace(STATUS_FIELD_SEPARATOR, STATUS_FIELD_MARKUP)
        return text.replace(STATUS_GROUP_SEPARATOR, STATUS_GROUP_MARKUP)

    @staticmethod
    def parse_preset_notice(text: str) -> PresetNotice:
        """
        Recognises a preset rename or clear notice in device output.

        Args:
            text: Any response text.

        Returns:
            RenamePreset, ClearPreset, or OtherNotice when nothing matches.
        """
        if RENAME_MARKER in text:
            match = RENAME_PATTERN.search(text)
            if match:
                try:
                    return RenamePreset(slot=int(match.group(1)), label=match.group(2))
                except ValueError:
                    return OtherNotice()
        if CLEAR_MARKER in text:
            match = CLEAR_PATTERN.search(text)
            if match:
                return ClearPreset(slot=int(match.group(1)))
        return OtherNotice()

    def slot_in_range(self, slot: int) -> bool:
        return 1 <= slot <= self.slot_count

    def parse_preset_titles(self, page: str) -> Dict[int, str]:
        """
        Reads preset labels out of the device's root page, where the firmware fills
        each preset button's title at page-load time.

        Args:
            page: HTML of the device root page.

        Returns:
            A mapping of slot number to label for every in-range slot found.
        """
        titles = {}
        for match in PRESET_TITLE_PATTERN.finditer(page):
            slot = int(match.group(1))
            if not self.slot_in_range(slot):
                continue
            label = html.unescape(match.group(2))
            # An unfilled template token means the slot has no name
            if TEMPLATE_TOKEN_PATTERN.match(label):
                label = ""
            titles[slot] = label
        return titles

    @staticmethod
    def markup_to_text(message: str) -> str:
        """
        Renders the simple markup the device emits into plain text for a Text widget.
        """
        text = _BREAK_TAGS.sub("\n", message)
        text = _OTHER_TAGS.sub("", text)
        text = html.unescape(text)
        text = _BLANK_LINES.sub("\n", text)
        return text.strip("\n")
