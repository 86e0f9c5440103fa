"""
Diagram files - create, edit, inspect and lay out .drawio files on disk.

This module implements the operations behind the MCP tools and the CLI:
- Path resolution through the configured diagrams directory
- Shape and connector authoring with ids derived from the file contents
- Shape listing with structural diagnostics
- Auto layout, writing the file back only when something changed

File-system errors propagate to the caller unchanged.
"""

import logging
from pathlib import Path
from typing import Optional

from .config import Settings, get_settings
from .document import DrawioDocument
from .exceptions import DiagramFormatError
from .extractor import graph_from_document
from .layout import run_layout
from .models import LayoutOutcome, OutcomeStatus, ShapeKind
from .paths import resolve_path
from .style import DEFAULT_FILL_COLOR, DEFAULT_STROKE_COLOR
from .text_fit import compute_dimensions
from .validation import validate_graph, validation_summary

logger = logging.getLogger(__name__)

DRAWIO_SUFFIX = ".drawio"


class DiagramFiles:
    """
    File-level diagram operations.

    Each call reads the file, works on a fresh in-memory tree and writes the
    result back; nothing is cached between calls.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    # --- Persistence ---

    def resolve(self, filepath: str) -> Path:
        return resolve_path(filepath, self._settings)

    def _load(self, filepath: str) -> tuple[Path, DrawioDocument]:
        path = self.resolve(filepath)
        return path, DrawioDocument.parse(path.read_text(encoding="utf-8"))

    def _save(self, path: Path, content: str):
        path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)

    # --- Operations ---

    def create_diagram(self, filepath: str, title: str) -> dict:
        """Write a new empty diagram and return where it went."""
        if not filepath.endswith(DRAWIO_SUFFIX):
            raise DiagramFormatError(f"Filepath must end with {DRAWIO_SUFFIX}")

        path = self.resolve(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._save(path, DrawioDocument.new(title).to_string())

        return {
            "status": "created",
            "path": str(path),
            "message": f"Diagram file created at: {path}",
        }

    def add_shape(
        self,
        filepath: str,
        kind: str,
        text: str,
        x: float = 100,
        y: float = 100,
        width: Optional[float] = None,
        height: Optional[float] = None,
        fill_color: str = DEFAULT_FILL_COLOR,
        stroke_color: str = DEFAULT_STROKE_COLOR,
    ) -> dict:
        """
        Add a shape sized to fit its text.

        Missing width/height are computed from the text; given ones are kept.
        Unknown kinds are drawn as rectangles.
        """
        shape_kind = ShapeKind.coerce(kind)
        size = compute_dimensions(text, width, height, shape_kind)

        path, document = self._load(filepath)
        shape_id = document.add_shape(
            shape_kind, text, x, y, size.width, size.height, fill_color, stroke_color
        )
        self._save(path, document.to_string())

        return {
            "id": shape_id,
            "kind": shape_kind.value,
            "x": x,
            "y": y,
            "width": size.width,
            "height": size.height,
            "message": f"Added {shape_kind.value} shape with ID: {shape_id} at position ({x}, {y})",
        }

    def add_connector(
        self,
        filepath: str,
        source: str,
        target: str,
        label: str = "",
        routing: str = "orthogonal",
    ) -> dict:
        """Connect two shapes. Endpoints are not checked; list_shapes reports dangling ones."""
        path, document = self._load(filepath)
        connector_id = document.add_connector(source, target, label, routing)
        self._save(path, document.to_string())

        return {
            "id": connector_id,
            "source": source,
            "target": target,
            "message": f"Added connector from {source} to {target} with ID: {connector_id}",
        }

    def read_diagram(self, filepath: str) -> dict:
        path = self.resolve(filepath)
        return {"path": str(path), "content": path.read_text(encoding="utf-8")}

    def list_shapes(self, filepath: str) -> dict:
        """List shapes with their kinds and geometry plus any structural issues."""
        _, document = self._load(filepath)
        graph = graph_from_document(document)
        issues = validate_graph(graph)

        return {
            "shapes": [
                {
                    "id": shape.id,
                    "kind": shape.kind.value,
                    "text": shape.text,
                    "x": shape.x,
                    "y": shape.y,
                    "width": shape.width,
                    "height": shape.height,
                }
                for shape in graph.shapes.values()
            ],
            "connectors": [edge.model_dump() for edge in graph.edges],
            "issues": [issue.to_dict() for issue in issues],
            "summary": validation_summary(issues),
        }

    def auto_layout(
        self,
        filepath: str,
        kind: str,
        spacing: Optional[float] = None,
        start_x: Optional[float] = None,
        start_y: Optional[float] = None,
    ) -> LayoutOutcome:
        """Lay out a diagram file. The file is only rewritten when the layout applied."""
        path = self.resolve(filepath)
        outcome = run_layout(path.read_text(encoding="utf-8"), kind, spacing, start_x, start_y)
        if outcome.status == OutcomeStatus.APPLIED:
            self._save(path, outcome.document)
        return outcome
