#!/usr/bin/env python3
"""
drawio-layout MCP Server

Provides MCP tools for AI agents to create draw.io diagrams on disk, add
shapes and connectors, inspect them, and auto-arrange them.
"""

import json
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from .diagrams import DiagramFiles
from .log import setup_logging

# Create MCP server
mcp = FastMCP("drawio-layout")


def _files() -> DiagramFiles:
    return DiagramFiles()


# ============================================================================
# FILE TOOLS
# ============================================================================

@mcp.tool()
def create_diagram(filepath: str, title: str) -> str:
    """
    Create a new draw.io diagram file on the user's computer.

    Args:
        filepath: File name ending in .drawio. Relative paths are saved to
            the diagrams directory (the Desktop by default)
        title: Name of the diagram page

    Returns the absolute path of the new file; pass it to the other tools.
    """
    return json.dumps(_files().create_diagram(filepath, title), indent=2)


@mcp.tool()
def read_diagram(filepath: str) -> str:
    """
    Read a diagram file and return its raw XML.

    Args:
        filepath: Path to the diagram file
    """
    result = _files().read_diagram(filepath)
    return f"Diagram contents:\n\n{result['content']}"


# ============================================================================
# SHAPE / CONNECTOR TOOLS
# ============================================================================

@mcp.tool()
def add_shape(
    filepath: str,
    shape_type: str,
    text: str,
    x: float = 100,
    y: float = 100,
    width: Optional[float] = None,
    height: Optional[float] = None,
    fill_color: str = "#dae8fc",
    stroke_color: str = "#6c8ebf"
) -> str:
    """
    Add a shape to an existing diagram.

    Args:
        filepath: Exact path returned by create_diagram
        shape_type: rectangle, ellipse, rhombus, cylinder, hexagon, cloud,
            step, parallelogram, trapezoid or triangle
        text: Text to display; use \\n for line breaks
        x: X coordinate position
        y: Y coordinate position
        width: Shape width (computed from the text if omitted)
        height: Shape height (computed from the text if omitted)
        fill_color: Fill color in hex format
        stroke_color: Border color in hex format

    Returns the created shape's generated ID and size.
    """
    result = _files().add_shape(
        filepath, shape_type, text, x, y, width, height, fill_color, stroke_color
    )
    return json.dumps(result, indent=2)


@mcp.tool()
def add_connector(
    filepath: str,
    source_id: str,
    target_id: str,
    label: str = "",
    style: str = "orthogonal"
) -> str:
    """
    Connect two shapes with a directed arrow.

    Args:
        filepath: Path to the diagram file
        source_id: ID of the source shape
        target_id: ID of the target shape
        label: Optional label for the connector
        style: straight, curved or orthogonal
    """
    result = _files().add_connector(filepath, source_id, target_id, label, style)
    return json.dumps(result, indent=2)


@mcp.tool()
def list_shapes(filepath: str) -> str:
    """
    List all shapes in a diagram with their IDs, types, text and geometry.

    Args:
        filepath: Path to the diagram file

    Also reports connectors and structural issues such as connectors that
    point at missing shapes.
    """
    return json.dumps(_files().list_shapes(filepath), indent=2)


# ============================================================================
# LAYOUT
# ============================================================================

@mcp.tool()
def auto_layout(
    filepath: str,
    layout: str,
    spacing: Optional[float] = None,
    start_x: Optional[float] = None,
    start_y: Optional[float] = None
) -> str:
    """
    Automatically arrange all shapes in a diagram.

    Args:
        filepath: Path to the diagram file
        layout: Layout algorithm to use
            - "grid": Simple grid; cells in a row/column share one size
            - "flowchart-vertical": Top-to-bottom flow following connectors
            - "flowchart-horizontal": Left-to-right flow following connectors
        spacing: Space between shapes in pixels (default: 50)
        start_x: Starting X coordinate (default: 50)
        start_y: Starting Y coordinate (default: 50)

    Current positions are used as hints for ordering. Shapes are resized to
    the largest shape in their row, column or level.
    """
    outcome = _files().auto_layout(filepath, layout, spacing, start_x, start_y)
    if outcome.is_error:
        raise ToolError(outcome.message)
    return json.dumps(outcome.to_json_dict(), indent=2)


def main():
    setup_logging()
    mcp.run()


if __name__ == "__main__":
    main()
