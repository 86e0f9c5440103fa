"""
draw.io document tree.

Wraps the lxml element tree of a document and addresses cells by id. All
changes (new positions, new cells) are attribute writes on elements, never
text substitution.

Cell ids:
- A plain cell carries its own `id` and `value`
- A cell wrapped in `<object>` / `<UserObject>` takes `id` and `label`
  from the wrapper
"""

import logging
import re
from datetime import datetime, timezone
from typing import Iterator, Optional

from lxml import etree

from .models import PositionResult, ShapeKind
from .style import DEFAULT_FILL_COLOR, DEFAULT_STROKE_COLOR, connector_style, shape_style

logger = logging.getLogger(__name__)

WRAPPER_TAGS = ("object", "UserObject")

# Cells 0 and 1 are the draw.io root and default layer
FIRST_FREE_ID = 2

_PARSER = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)


def format_number(value: float) -> str:
    """Format a coordinate the way draw.io writes it (no trailing .0)."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


def normalize_label(text: str) -> str:
    """Turn literal backslash-n sequences into real line breaks."""
    return text.replace("\\n", "\n")


class DrawioDocument:
    """
    A parsed draw.io document.

    Malformed text produces a document without a tree: it has no cells and
    serialises back to the original text unchanged.
    """

    def __init__(self, root: Optional[etree._Element], source: str = "", declaration: bool = False):
        self._root = root
        self._source = source
        self._declaration = declaration

    # --- Construction ---

    @classmethod
    def parse(cls, text: str) -> "DrawioDocument":
        """Parse document text, tolerating malformed input."""
        if not text or not text.strip():
            return cls(None, text or "")

        try:
            root = etree.fromstring(text.encode("utf-8"), _PARSER)
        except etree.XMLSyntaxError as e:
            logger.debug("Unparseable diagram document: %s", e)
            root = None

        declaration = text.lstrip().startswith("<?xml")
        return cls(root, text, declaration)

    @classmethod
    def new(cls, title: str) -> "DrawioDocument":
        """Build an empty single-page document with the two root cells."""
        mxfile = etree.Element("mxfile", {
            "host": "app.diagrams.net",
            "modified": datetime.now(timezone.utc).isoformat(),
            "agent": "drawio-layout",
            "version": "1.0.0",
            "type": "device",
        })
        diagram = etree.SubElement(mxfile, "diagram", {"name": title, "id": "diagram1"})
        model = etree.SubElement(diagram, "mxGraphModel", {
            "dx": "1422", "dy": "794", "grid": "1", "gridSize": "10",
            "guides": "1", "tooltips": "1", "connect": "1", "arrows": "1",
            "fold": "1", "page": "1", "pageScale": "1",
            "pageWidth": "850", "pageHeight": "1100", "math": "0", "shadow": "0",
        })
        root = etree.SubElement(model, "root")
        etree.SubElement(root, "mxCell", {"id": "0"})
        etree.SubElement(root, "mxCell", {"id": "1", "parent": "0"})
        etree.indent(mxfile, space="  ")
        return cls(mxfile)

    # --- Cell access ---

    @property
    def is_valid(self) -> bool:
        return self._root is not None

    def cells(self) -> Iterator[etree._Element]:
        """All mxCell elements in document order."""
        if self._root is None:
            return iter(())
        return self._root.iter("mxCell")

    @staticmethod
    def cell_id(cell: etree._Element) -> Optional[str]:
        wrapper = cell.getparent()
        if cell.get("id") is None and wrapper is not None and wrapper.tag in WRAPPER_TAGS:
            return wrapper.get("id")
        return cell.get("id")

    @staticmethod
    def cell_label(cell: etree._Element) -> str:
        wrapper = cell.getparent()
        if wrapper is not None and wrapper.tag in WRAPPER_TAGS:
            return wrapper.get("label", "")
        return cell.get("value", "")

    def cell(self, cell_id: str) -> Optional[etree._Element]:
        for cell in self.cells():
            if self.cell_id(cell) == cell_id:
                return cell
        return None

    def ids(self) -> list[str]:
        return [cid for cid in (self.cell_id(c) for c in self.cells()) if cid is not None]

    def next_id(self, prefix: str) -> str:
        """
        Next free `<prefix>_<n>` id.

        Derived from the ids already in the document on every call, so it
        never collides with cells written by an earlier process.
        """
        pattern = re.compile(rf"^{re.escape(prefix)}_(\d+)$")
        highest = FIRST_FREE_ID - 1
        for cid in self.ids():
            match = pattern.match(cid)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{prefix}_{highest + 1}"

    # --- Mutation ---

    def apply_positions(self, positions: PositionResult) -> int:
        """
        Write placements onto the geometry of matching cells.

        Ids without a cell or without geometry are skipped.

        Returns:
            Number of cells updated
        """
        index = {self.cell_id(c): c for c in self.cells()}
        updated = 0

        for shape_id, placement in positions.items():
            cell = index.get(shape_id)
            geometry = cell.find("mxGeometry") if cell is not None else None
            if geometry is None:
                logger.debug("No geometry to update for cell %s", shape_id)
                continue

            geometry.set("x", format_number(placement.x))
            geometry.set("y", format_number(placement.y))
            if placement.width is not None:
                geometry.set("width", format_number(placement.width))
            if placement.height is not None:
                geometry.set("height", format_number(placement.height))
            updated += 1

        return updated

    def _cell_container(self) -> etree._Element:
        if self._root is None:
            raise ValueError("Cannot add cells to a malformed document")
        container = self._root if self._root.tag == "root" else self._root.find(".//root")
        if container is None:
            raise ValueError("Document has no <root> element")
        return container

    def _default_parent(self) -> str:
        for cell in self.cells():
            if cell.get("parent") == "0":
                return self.cell_id(cell) or "1"
        return "1"

    def add_shape(
        self,
        kind: ShapeKind | str,
        text: str,
        x: float,
        y: float,
        width: float,
        height: float,
        fill_color: str = DEFAULT_FILL_COLOR,
        stroke_color: str = DEFAULT_STROKE_COLOR,
    ) -> str:
        """Append a vertex cell and return its id."""
        container = self._cell_container()
        shape_id = self.next_id("shape")
        cell = etree.SubElement(container, "mxCell", {
            "id": shape_id,
            "value": normalize_label(text),
            "style": shape_style(kind, fill_color, stroke_color),
            "vertex": "1",
            "parent": self._default_parent(),
        })
        etree.SubElement(cell, "mxGeometry", {
            "x": format_number(x),
            "y": format_number(y),
            "width": format_number(width),
            "height": format_number(height),
            "as": "geometry",
        })
        return shape_id

    def add_connector(self, source: str, target: str, label: str = "", routing: str = "orthogonal") -> str:
        """Append an edge cell and return its id."""
        container = self._cell_container()
        connector_id = self.next_id("connector")
        cell = etree.SubElement(container, "mxCell", {
            "id": connector_id,
            "value": normalize_label(label),
            "style": connector_style(routing),
            "edge": "1",
            "parent": self._default_parent(),
            "source": source,
            "target": target,
        })
        etree.SubElement(cell, "mxGeometry", {"relative": "1", "as": "geometry"})
        return connector_id

    # --- Serialisation ---

    def to_string(self) -> str:
        if self._root is None:
            return self._source
        if self._declaration:
            return etree.tostring(
                self._root.getroottree(), xml_declaration=True, encoding="UTF-8"
            ).decode("utf-8")
        return etree.tostring(self._root, encoding="unicode")
