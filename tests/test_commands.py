from __future__ import annotations

import unittest

from carpgraph_core.core.commands import (
    COLOR,
    COMMAND_TABLE,
    END_OF_HEADER,
    EOF,
    LINE,
    POINT,
    SIZE,
    Command,
    CommandKind,
)
from carpgraph_core.core.errors import CommandPayloadError, InvalidUtf8Color


class CommandTableTests(unittest.TestCase):
    def test_tags_and_payload_lengths(self) -> None:
        self.assertEqual((CommandKind.COLOR.tag, CommandKind.COLOR.payload_length), (COLOR, 6))
        self.assertEqual((CommandKind.SIZE.tag, CommandKind.SIZE.payload_length), (SIZE, 2))
        self.assertEqual((CommandKind.LINE.tag, CommandKind.LINE.payload_length), (LINE, 0))
        self.assertEqual((CommandKind.POINT.tag, CommandKind.POINT.payload_length), (POINT, 8))
        self.assertEqual(set(COMMAND_TABLE), {0x1B, 0x2B, 0x3B, 0x4B})

    def test_markers_are_not_command_kinds(self) -> None:
        self.assertIsNone(CommandKind.from_tag(END_OF_HEADER))
        self.assertIsNone(CommandKind.from_tag(EOF))
        self.assertIsNone(CommandKind.from_tag(0x99))
        self.assertIs(CommandKind.from_tag(0x4B), CommandKind.POINT)


class CommandConstructionTests(unittest.TestCase):
    def test_wrong_payload_length_is_rejected(self) -> None:
        with self.assertRaises(CommandPayloadError):
            Command(kind=CommandKind.POINT, data=b"\x00" * 7)
        with self.assertRaises(ValueError):
            Command(kind=CommandKind.LINE, data=b"\x00")
        with self.assertRaises(CommandPayloadError):
            Command(kind=CommandKind.SIZE, data=b"")

    def test_point_payload_is_big_endian_pair(self) -> None:
        cmd = Command.point(10, 20)
        self.assertEqual(cmd.data, bytes([0, 0, 0, 10, 0, 0, 0, 20]))
        self.assertEqual(cmd.point_value(), (10, 20))
        self.assertEqual(Command.point(0xFFFFFFFF, 1).point_value(), (0xFFFFFFFF, 1))
        with self.assertRaises(CommandPayloadError):
            Command.point(-1, 0)
        with self.assertRaises(CommandPayloadError):
            Command.point(0, 1 << 32)

    def test_size_payload(self) -> None:
        self.assertEqual(Command.size(4).data, b"\x00\x04")
        self.assertEqual(Command.size(0x1234).size_value(), 0x1234)
        with self.assertRaises(CommandPayloadError):
            Command.size(70000)

    def test_color_strips_hash_and_requires_hex(self) -> None:
        self.assertEqual(Command.color("#ff0000").data, b"ff0000")
        self.assertEqual(Command.color("00FF00").color_text(), "00FF00")
        for bad in ("red", "#fff", "gg0000", "ff00001"):
            with self.assertRaises(CommandPayloadError):
                Command.color(bad)

    def test_invalid_utf8_color_text(self) -> None:
        cmd = Command(kind=CommandKind.COLOR, data=b"\xff\xfe\x00\x00\x00\x00")
        with self.assertRaises(InvalidUtf8Color):
            cmd.color_text()

    def test_truncated_commands(self) -> None:
        cmd = Command.truncated(CommandKind.POINT, b"\x00\x01\x02")
        self.assertFalse(cmd.complete)
        self.assertEqual(len(cmd.data), 3)
        with self.assertRaises(CommandPayloadError):
            cmd.point_value()
        with self.assertRaises(CommandPayloadError):
            Command.truncated(CommandKind.POINT, b"\x00" * 8)

    def test_reader_rejects_other_kind(self) -> None:
        with self.assertRaises(CommandPayloadError):
            Command.line().size_value()

    def test_to_bytes_prefixes_tag(self) -> None:
        self.assertEqual(Command.line().to_bytes(), b"\x3b")
        self.assertEqual(Command.size(2).to_bytes(), b"\x2b\x00\x02")
        self.assertEqual(Command.color("abcdef").to_bytes(), b"\x1babcdef")

    def test_commands_compare_by_value(self) -> None:
        self.assertEqual(Command.point(1, 2), Command(kind=CommandKind.POINT, data=Command.point(1, 2).data))
        self.assertNotEqual(Command.point(1, 2), Command.point(2, 1))


if __name__ == "__main__":
    unittest.main()
