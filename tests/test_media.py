from __future__ import annotations

import base64
import unittest

from carpgraph_core.core.commands import Command
from carpgraph_core.core.errors import MediaError, TruncatedPayload
from carpgraph_core.core.graph import LENIENT, Graph
from carpgraph_core.media import (
    MediaKind,
    classify_media,
    decode_media,
    encode_media,
    validate_media,
)


class MediaClassificationTests(unittest.TestCase):
    def test_classify(self) -> None:
        self.assertIs(classify_media(""), MediaKind.NONE)
        self.assertIs(classify_media("https://example.com/a.png"), MediaKind.URL)
        self.assertIs(classify_media("--CARP2Q0c="), MediaKind.GRAPH)
        self.assertIs(classify_media("--CARP[[[1,2]]]"), MediaKind.LEGACY)
        self.assertIsNone(classify_media("http://example.com/a.png"))

    def test_validate(self) -> None:
        self.assertIs(validate_media("https://example.com"), MediaKind.URL)
        with self.assertRaises(MediaError):
            validate_media("ftp://example.com")
        with self.assertRaises(MediaError):
            validate_media("https://" + "a" * 64 * 512)
        with self.assertRaises(ValueError):
            validate_media("https://abc", max_length=5)


class MediaCodecTests(unittest.TestCase):
    def test_graph_media_round_trip(self) -> None:
        graph = Graph.new(30, 20, [Command.color("00aa00"), Command.point(4, 5), Command.line()])
        media = encode_media(graph)
        self.assertTrue(media.startswith("--CARP2"))
        self.assertEqual(decode_media(media), graph)

    def test_legacy_media_is_converted(self) -> None:
        graph = decode_media("--CARP[[[1,2],[3,4]]]")
        self.assertEqual(graph.dimensions, (300, 200))
        self.assertEqual(graph.count_commands()["POINT"], 2)

    def test_legacy_media_uses_given_canvas(self) -> None:
        graph = decode_media("--CARP[[[1,1]]]", canvas_size=(640, 480))
        self.assertEqual(graph.dimensions, (640, 480))

    def test_non_drawing_media_is_rejected(self) -> None:
        with self.assertRaises(MediaError):
            decode_media("https://example.com/a.png")
        with self.assertRaises(MediaError):
            decode_media("")

    def test_invalid_base64_is_rejected(self) -> None:
        with self.assertRaises(MediaError):
            decode_media("--CARP2abc")

    def test_characters_outside_base64_alphabet_are_rejected(self) -> None:
        media = encode_media(Graph.new(8, 8, [Command.point(1, 1)]))
        for corrupted in (media[:9] + "!" + media[9:], media[:9] + "/" + media[9:], media + "\n"):
            with self.subTest(media=corrupted):
                with self.assertRaises(MediaError):
                    decode_media(corrupted)

    def test_policy_is_forwarded(self) -> None:
        raw = Graph.new(4, 4).to_bytes()[:13] + b"\x4b\x00"
        media = "--CARP2" + base64.urlsafe_b64encode(raw).decode("ascii")
        with self.assertRaises(TruncatedPayload):
            decode_media(media)
        self.assertFalse(decode_media(media, policy=LENIENT).commands[0].complete)

    def test_encoded_media_respects_limit(self) -> None:
        with self.assertRaises(MediaError):
            encode_media(Graph.new(1, 1), max_length=10)


if __name__ == "__main__":
    unittest.main()
