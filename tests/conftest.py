"""Shared fixtures and document builders."""

from xml.sax.saxutils import quoteattr

import pytest

from drawio_layout.config import Settings, reset_settings
from drawio_layout.extractor import extract_graph
from drawio_layout.models import DiagramGraph


def vertex(cell_id, x=0, y=0, width=100, height=60, style="rounded=0;whiteSpace=wrap;html=1;", text=""):
    return (
        f'<mxCell id="{cell_id}" value={quoteattr(text)} style="{style}" vertex="1" parent="1">'
        f'<mxGeometry x="{x}" y="{y}" width="{width}" height="{height}" as="geometry" />'
        "</mxCell>"
    )


def connector(cell_id, source, target, label=""):
    return (
        f'<mxCell id="{cell_id}" value={quoteattr(label)} style="edgeStyle=orthogonalEdgeStyle;" '
        f'edge="1" parent="1" source="{source}" target="{target}">'
        '<mxGeometry relative="1" as="geometry" /></mxCell>'
    )


def make_document(*cells: str) -> str:
    body = "".join(cells)
    return (
        '<mxfile host="app.diagrams.net"><diagram name="Page-1" id="p1">'
        "<mxGraphModel><root>"
        '<mxCell id="0" /><mxCell id="1" parent="0" />'
        f"{body}"
        "</root></mxGraphModel></diagram></mxfile>"
    )


def make_graph(shapes: dict[str, tuple], edges: list[tuple[str, str]] = ()) -> DiagramGraph:
    """
    Build a graph from {id: (x, y[, width, height])} and (source, target) pairs.
    """
    cells = []
    for shape_id, geometry in shapes.items():
        x, y, *size = geometry
        width, height = size if size else (100, 60)
        cells.append(vertex(shape_id, x, y, width, height, text=shape_id))
    for i, (source, target) in enumerate(edges):
        cells.append(connector(f"e{i}", source, target))
    return extract_graph(make_document(*cells))


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the diagrams directory at a temp dir and drop cached settings."""
    monkeypatch.setenv("DRAWIO_LAYOUT_DIAGRAMS_DIR", str(tmp_path / "diagrams"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(diagrams_dir=tmp_path / "diagrams")
