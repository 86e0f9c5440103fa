"""
Graph extraction - draw.io document to DiagramGraph.

Documents may be hand-edited, so extraction is forgiving: a shape or
connector record missing a required field is skipped instead of failing
the whole document, and text that is not XML at all yields an empty graph.
"""

import logging
import math
from typing import Optional

from lxml import etree

from .document import DrawioDocument
from .models import DiagramGraph, Edge, Shape
from .style import classify_style

logger = logging.getLogger(__name__)


def _number(value: Optional[str], default: Optional[float] = None) -> Optional[float]:
    if value is None:
        return default
    try:
        result = float(value)
    except ValueError:
        return None
    # "NaN" and "inf" parse but are not coordinates
    return result if math.isfinite(result) else None


def _shape_from_cell(cell: etree._Element) -> Optional[Shape]:
    """Build a Shape from a vertex cell, or None if the record is incomplete."""
    shape_id = DrawioDocument.cell_id(cell)
    geometry = cell.find("mxGeometry")
    if not shape_id or geometry is None:
        return None

    # mxGraph omits x/y when they are zero; size is always written
    x = _number(geometry.get("x"), 0.0)
    y = _number(geometry.get("y"), 0.0)
    width = _number(geometry.get("width"))
    height = _number(geometry.get("height"))
    if x is None or y is None or width is None or height is None:
        return None

    return Shape(
        id=shape_id,
        text=DrawioDocument.cell_label(cell),
        kind=classify_style(cell.get("style")),
        x=x,
        y=y,
        width=width,
        height=height,
    )


def _edge_from_cell(cell: etree._Element) -> Optional[Edge]:
    edge_id = DrawioDocument.cell_id(cell)
    source = cell.get("source")
    target = cell.get("target")
    if not edge_id or not source or not target:
        return None
    return Edge(id=edge_id, source=source, target=target, label=DrawioDocument.cell_label(cell))


def graph_from_document(document: DrawioDocument) -> DiagramGraph:
    """
    Collect shapes and connectors from a parsed document.

    Connectors whose endpoints are missing stay in the edge list but are
    left out of the adjacency indexes.
    """
    shapes: list[Shape] = []
    edges: list[Edge] = []
    skipped = 0

    for cell in document.cells():
        if cell.get("vertex") == "1":
            shape = _shape_from_cell(cell)
            if shape is None:
                skipped += 1
                continue
            shapes.append(shape)
        elif cell.get("edge") == "1":
            edge = _edge_from_cell(cell)
            if edge is None:
                skipped += 1
                continue
            edges.append(edge)

    if skipped:
        logger.debug("Skipped %d incomplete cell records", skipped)

    return DiagramGraph.build(shapes, edges)


def extract_graph(document: str) -> DiagramGraph:
    """Parse document text and extract its graph."""
    return graph_from_document(DrawioDocument.parse(document))
