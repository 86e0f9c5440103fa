"""Tests for style parsing and shape classification."""

import pytest

from drawio_layout.models import ShapeKind
from drawio_layout.style import classify_style, connector_style, parse_style, shape_style


class TestParseStyle:

    def test_pairs_and_tokens(self) -> None:
        parsed = parse_style("ellipse;shape=cloud;whiteSpace=wrap;html=1;")
        assert parsed == {"ellipse": "", "shape": "cloud", "whiteSpace": "wrap", "html": "1"}

    def test_empty_and_none(self) -> None:
        assert parse_style("") == {}
        assert parse_style(None) == {}
        assert parse_style(";;") == {}

    def test_later_key_wins(self) -> None:
        assert parse_style("shape=hexagon;shape=step")["shape"] == "step"

    def test_whitespace_trimmed(self) -> None:
        assert parse_style(" shape = cloud ; rounded=1 ") == {"shape": "cloud", "rounded": "1"}


class TestClassifyStyle:

    def test_cloud_beats_ellipse_token(self) -> None:
        """A cloud style also carries the ellipse token; it must stay a cloud."""
        assert classify_style("ellipse;shape=cloud;whiteSpace=wrap;html=1;") == ShapeKind.CLOUD

    def test_cloud_with_ellipse_after(self) -> None:
        assert classify_style("shape=cloud;ellipse;") == ShapeKind.CLOUD

    def test_plain_ellipse(self) -> None:
        assert classify_style("ellipse;whiteSpace=wrap;") == ShapeKind.ELLIPSE

    def test_cylinder_variants(self) -> None:
        assert classify_style("shape=cylinder3;boundedLbl=1;") == ShapeKind.CYLINDER
        assert classify_style("shape=cylinder;") == ShapeKind.CYLINDER

    def test_substrings_do_not_match(self) -> None:
        """Values that merely contain a kind name are not that kind."""
        assert classify_style("fillColor=#ellipse;") == ShapeKind.RECTANGLE
        assert classify_style("shape=mxgraph.flowchart.decision_rhombus;") == ShapeKind.RECTANGLE

    def test_default_is_rectangle(self) -> None:
        assert classify_style("rounded=1;whiteSpace=wrap;") == ShapeKind.RECTANGLE
        assert classify_style("") == ShapeKind.RECTANGLE
        assert classify_style(None) == ShapeKind.RECTANGLE

    def test_accepts_parsed_dict(self) -> None:
        assert classify_style({"rhombus": ""}) == ShapeKind.RHOMBUS

    @pytest.mark.parametrize("kind", list(ShapeKind))
    def test_generated_styles_classify_back(self, kind: ShapeKind) -> None:
        assert classify_style(shape_style(kind)) == kind


class TestStyleGenerators:

    def test_shape_style_colors(self) -> None:
        style = parse_style(shape_style(ShapeKind.HEXAGON, "#ffffff", "#000000"))
        assert style["shape"] == "hexagon"
        assert style["fillColor"] == "#ffffff"
        assert style["strokeColor"] == "#000000"

    def test_unknown_kind_name_is_rectangle(self) -> None:
        assert shape_style("blob").startswith("rounded=0;")

    def test_connector_routing(self) -> None:
        assert parse_style(connector_style("curved"))["curved"] == "1"
        assert parse_style(connector_style("straight"))["edgeStyle"] == "none"
        assert parse_style(connector_style("zigzag"))["edgeStyle"] == "orthogonalEdgeStyle"
