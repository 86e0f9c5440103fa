#!/usr/bin/env python3
"""drawio-layout CLI - create, edit, inspect and lay out .drawio files."""

import argparse
import json
import sys
from typing import Optional

from .diagrams import DiagramFiles
from .exceptions import DrawioLayoutError
from .log import setup_logging
from .models import LayoutKind, ShapeKind
from .text_fit import compute_dimensions


def _json_out(data) -> None:
    print(json.dumps(data))


# ── Files ────────────────────────────────────────────────────────────────────

def cmd_create(files: DiagramFiles, args) -> int:
    _json_out(files.create_diagram(args.file_path, args.title))
    return 0


def cmd_read(files: DiagramFiles, args) -> int:
    _json_out(files.read_diagram(args.file_path))
    return 0


# ── Shapes / connectors ──────────────────────────────────────────────────────

def cmd_add_shape(files: DiagramFiles, args) -> int:
    _json_out(files.add_shape(
        args.file_path, args.shape, args.text, args.x, args.y,
        args.width, args.height, args.fill_color, args.stroke_color,
    ))
    return 0


def cmd_add_connector(files: DiagramFiles, args) -> int:
    _json_out(files.add_connector(args.file_path, args.source, args.target, args.label, args.style))
    return 0


def cmd_list_shapes(files: DiagramFiles, args) -> int:
    _json_out(files.list_shapes(args.file_path))
    return 0


def cmd_fit_text(files: DiagramFiles, args) -> int:
    size = compute_dimensions(args.text, args.width, args.height, ShapeKind.coerce(args.shape))
    _json_out(size.model_dump())
    return 0


# ── Layout ───────────────────────────────────────────────────────────────────

def cmd_auto_layout(files: DiagramFiles, args) -> int:
    outcome = files.auto_layout(args.file_path, args.layout, args.spacing, args.start_x, args.start_y)
    _json_out(outcome.to_json_dict())
    return 1 if outcome.is_error else 0


# ── Main ─────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="drawio-layout", description="draw.io diagram layout CLI")
    parser.add_argument("--log-level", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("create")
    p.add_argument("--file-path", required=True)
    p.add_argument("--title", default="Untitled Diagram")

    p = sub.add_parser("read")
    p.add_argument("--file-path", required=True)

    p = sub.add_parser("add-shape")
    p.add_argument("--file-path", required=True)
    p.add_argument("--text", required=True)
    p.add_argument("--shape", default="rectangle", choices=[k.value for k in ShapeKind])
    p.add_argument("--x", type=float, default=100)
    p.add_argument("--y", type=float, default=100)
    p.add_argument("--width", type=float, default=None)
    p.add_argument("--height", type=float, default=None)
    p.add_argument("--fill-color", default="#dae8fc")
    p.add_argument("--stroke-color", default="#6c8ebf")

    p = sub.add_parser("add-connector")
    p.add_argument("--file-path", required=True)
    p.add_argument("--source", required=True)
    p.add_argument("--target", required=True)
    p.add_argument("--label", default="")
    p.add_argument("--style", default="orthogonal", choices=["straight", "curved", "orthogonal"])

    p = sub.add_parser("list-shapes")
    p.add_argument("--file-path", required=True)

    p = sub.add_parser("fit-text")
    p.add_argument("--text", required=True)
    p.add_argument("--shape", default="rectangle")
    p.add_argument("--width", type=float, default=None)
    p.add_argument("--height", type=float, default=None)

    # Layout kinds are checked by the layout itself so unknown ones get a JSON error
    p = sub.add_parser("auto-layout", help=f"layouts: {', '.join(k.value for k in LayoutKind)}")
    p.add_argument("--file-path", required=True)
    p.add_argument("--layout", default=LayoutKind.GRID.value)
    p.add_argument("--spacing", type=float, default=None)
    p.add_argument("--start-x", type=float, default=None)
    p.add_argument("--start-y", type=float, default=None)

    return parser


CMD_MAP = {
    "create": cmd_create,
    "read": cmd_read,
    "add-shape": cmd_add_shape,
    "add-connector": cmd_add_connector,
    "list-shapes": cmd_list_shapes,
    "fit-text": cmd_fit_text,
    "auto-layout": cmd_auto_layout,
}


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        return CMD_MAP[args.command](DiagramFiles(), args)
    except (DrawioLayoutError, OSError, ValueError) as e:
        _json_out({"status": "error", "error": str(e)})
        return 1


if __name__ == "__main__":
    sys.exit(main())
