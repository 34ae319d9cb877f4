from __future__ import annotations

import unittest

from carpgraph_core.core.batch import render_many
from carpgraph_core.core.commands import Command
from carpgraph_core.core.errors import MalformedHeader
from carpgraph_core.core.graph import Graph


class RenderManyTests(unittest.TestCase):
    def test_results_keep_input_order(self) -> None:
        graphs = [Graph.new(10 + i, 10, [Command.point(i, i)]) for i in range(8)]
        results = render_many([g.to_bytes() for g in graphs], max_workers=4)
        self.assertEqual([r.index for r in results], list(range(8)))
        self.assertEqual([r.svg for r in results], [g.to_svg() for g in graphs])
        self.assertTrue(all(r.ok for r in results))

    def test_failures_are_captured_per_item(self) -> None:
        good = Graph.new(5, 5).to_bytes()
        with self.assertLogs("carpgraph_core.core.batch", level="WARNING") as logs:
            results = render_many([good, b"\x00", good])
        self.assertEqual([r.ok for r in results], [True, False, True])
        self.assertIsInstance(results[1].error, MalformedHeader)
        self.assertIsNone(results[1].svg)
        self.assertIn("failed=1", logs.output[0])

    def test_empty_batch(self) -> None:
        self.assertEqual(render_many([]), [])


if __name__ == "__main__":
    unittest.main()
