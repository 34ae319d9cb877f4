from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from carpgraph_core.core import CarpGraphError, CodecConfig, Graph, decode, resolve_config
from carpgraph_core.legacy import LegacyGraph
from carpgraph_core.media import decode_media, encode_media
from carpgraph_core.render import rasterize, render_to_vector, save_png


LOGGER = logging.getLogger("carpgraph")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="carpgraph")
    parser.add_argument("--config", type=Path, default=None, help="TOML config file (default: $CARPGRAPH_CONFIG).")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect", help="Print header fields and command counts of a graph file.")
    inspect.add_argument("graph", type=Path)

    render = sub.add_parser("render", help="Render a graph file to SVG or PNG.")
    render.add_argument("graph", type=Path)
    render.add_argument("--format", choices=["svg", "png"], default="svg")
    render.add_argument("--out", type=Path, default=None, help="Output path. Default: stdout for svg.")

    convert = sub.add_parser("convert-legacy", help="Convert a format-1 JSON drawing to a binary graph.")
    convert.add_argument("legacy_json", type=Path)
    convert.add_argument("--out", type=Path, required=True)

    to_media = sub.add_parser("encode-media", help="Print a graph file as a --CARP2 media string.")
    to_media.add_argument("graph", type=Path)

    from_media = sub.add_parser("decode-media", help="Decode a media string file into a binary graph.")
    from_media.add_argument("media", type=Path)
    from_media.add_argument("--out", type=Path, required=True)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = resolve_config(args.config)
        return _dispatch(args, config)
    except (CarpGraphError, OSError, ValueError) as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        return 1


def _dispatch(args: argparse.Namespace, config: CodecConfig) -> int:
    policy = config.decode_policy()

    if args.command == "inspect":
        graph = decode(args.graph.read_bytes(), policy=policy)
        print(json.dumps(_summarize(graph), indent=2, sort_keys=True))
        return 0

    if args.command == "render":
        graph = decode(args.graph.read_bytes(), policy=policy)
        scene = render_to_vector(graph, background=config.svg_background)
        if args.format == "svg":
            markup = scene.to_markup()
            if args.out is None:
                print(markup)
            else:
                args.out.write_text(markup, encoding="utf-8")
            return 0
        if args.out is None:
            raise ValueError("--out is required for png output")
        save_png(rasterize(scene, max_pixels=config.max_raster_pixels), args.out)
        print(f"wrote {args.out}")
        return 0

    if args.command == "convert-legacy":
        legacy = LegacyGraph.from_json(args.legacy_json.read_text(encoding="utf-8"))
        args.out.write_bytes(legacy.to_graph().to_bytes())
        print(f"wrote {args.out}")
        return 0

    if args.command == "encode-media":
        graph = decode(args.graph.read_bytes(), policy=policy)
        print(encode_media(graph, max_length=config.max_media_length))
        return 0

    if args.command == "decode-media":
        media = args.media.read_text(encoding="utf-8").strip()
        graph = decode_media(
            media,
            policy=policy,
            max_length=config.max_media_length,
            canvas_size=(config.canvas_width, config.canvas_height),
        )
        args.out.write_bytes(graph.to_bytes())
        print(f"wrote {args.out}")
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _summarize(graph: Graph) -> dict[str, object]:
    return {
        "tag": graph.tag.hex(),
        "version": graph.version.hex(),
        "width": graph.width,
        "height": graph.height,
        "commands": graph.count_commands(),
        "truncated": sum(1 for command in graph.commands if not command.complete),
    }


if __name__ == "__main__":
    raise SystemExit(main())
