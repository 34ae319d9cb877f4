from __future__ import annotations

import unittest

from carpgraph_core.core.commands import Command
from carpgraph_core.core.errors import CommandPayloadError
from carpgraph_core.core.graph import decode
from carpgraph_core.draw.builder import GraphBuilder
from carpgraph_core.render.svg import render_to_vector


class GraphBuilderTests(unittest.TestCase):
    def test_default_style_emits_only_points_and_line(self) -> None:
        builder = GraphBuilder()
        builder.draw(10.7, 20.2)
        builder.draw(30, 40)
        self.assertEqual(builder.pending_points, [(10, 20), (30, 40)])
        builder.push_state()
        graph = builder.build()
        self.assertEqual(graph.dimensions, (300, 200))
        self.assertEqual(graph.commands, (Command.point(10, 20), Command.point(30, 40), Command.line()))

    def test_style_written_once_per_change(self) -> None:
        builder = GraphBuilder(64, 64)
        builder.set_color("#ff0000")
        builder.set_size(4)
        builder.stroke([(1, 1), (2, 2)])
        builder.stroke([(3, 3)])
        self.assertEqual(
            builder.build().commands,
            (
                Command.color("ff0000"),
                Command.size(4),
                Command.point(1, 1),
                Command.point(2, 2),
                Command.line(),
                Command.point(3, 3),
                Command.line(),
            ),
        )

    def test_color_change_mid_stroke_keeps_stroke_connected(self) -> None:
        builder = GraphBuilder(16, 16)
        builder.draw(1, 1)
        builder.set_color("00ff00")
        builder.draw(2, 2)
        graph = builder.build()
        self.assertEqual(
            graph.commands,
            (Command.point(1, 1), Command.color("00ff00"), Command.point(2, 2), Command.line()),
        )
        paths = render_to_vector(graph).paths
        self.assertEqual(len(paths), 1)
        self.assertEqual(paths[0].stroke, "00ff00")

    def test_move_does_not_record(self) -> None:
        builder = GraphBuilder()
        builder.move(5, 5)
        self.assertEqual(builder.position, (5, 5))
        builder.push_state()
        self.assertEqual(builder.build().commands, ())

    def test_custom_initial_size_is_written(self) -> None:
        builder = GraphBuilder(stroke_size=1)
        builder.draw(0, 0)
        self.assertEqual(builder.build().commands[0], Command.size(1))
        self.assertEqual(builder.stroke_size, 1)
        self.assertEqual(builder.color, "000000")

    def test_negative_coordinates_clamp_to_origin(self) -> None:
        builder = GraphBuilder()
        builder.draw(-3.5, 4)
        self.assertEqual(builder.pending_points, [(0, 4)])

    def test_invalid_input_is_rejected(self) -> None:
        builder = GraphBuilder()
        with self.assertRaises(CommandPayloadError):
            builder.set_color("purple")
        with self.assertRaises(CommandPayloadError):
            builder.set_size(-1)
        with self.assertRaises(ValueError):
            GraphBuilder(0, 10)

    def test_built_graph_round_trips(self) -> None:
        builder = GraphBuilder(120, 80, tag=b"CG", version=b"\x00\x01")
        builder.set_size(7)
        builder.stroke([(0, 0), (119, 79), (60, 40)])
        graph = builder.build()
        self.assertEqual(decode(graph.to_bytes()), graph)


if __name__ == "__main__":
    unittest.main()
