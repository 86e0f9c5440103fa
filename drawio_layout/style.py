"""
draw.io style strings.

A style is a `;`-separated list of `key=value` pairs and bare named-style
tokens, e.g. `ellipse;shape=cloud;whiteSpace=wrap;`. Styles are parsed into a
dict before anything is inferred from them, so shape classification never
depends on substring matches.
"""

from typing import Callable

from .models import ShapeKind


def parse_style(style: str | None) -> dict[str, str]:
    """
    Parse a style string into a dict.

    Bare tokens map to an empty string. Later duplicates of a key win,
    matching how draw.io applies styles.
    """
    entries: dict[str, str] = {}
    if not style:
        return entries

    for part in style.split(";"):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        entries[key.strip()] = value.strip() if sep else ""

    return entries


def _shape_is(*names: str) -> Callable[[dict[str, str]], bool]:
    return lambda style: style.get("shape", "") in names


def _shape_startswith(prefix: str) -> Callable[[dict[str, str]], bool]:
    return lambda style: style.get("shape", "").startswith(prefix)


def _token(name: str) -> Callable[[dict[str, str]], bool]:
    return lambda style: style.get(name) == ""


# Ordered discriminators, most specific first. An explicit `shape=` always
# beats a named-style token: `ellipse;shape=cloud` is a cloud.
SHAPE_DISCRIMINATORS: list[tuple[ShapeKind, Callable[[dict[str, str]], bool]]] = [
    (ShapeKind.CLOUD, _shape_is("cloud")),
    (ShapeKind.CYLINDER, _shape_startswith("cylinder")),
    (ShapeKind.HEXAGON, _shape_is("hexagon")),
    (ShapeKind.STEP, _shape_is("step")),
    (ShapeKind.PARALLELOGRAM, _shape_is("parallelogram")),
    (ShapeKind.TRAPEZOID, _shape_is("trapezoid")),
    (ShapeKind.TRIANGLE, _shape_is("triangle")),
    (ShapeKind.RHOMBUS, _shape_is("rhombus")),
    (ShapeKind.ELLIPSE, _shape_is("ellipse")),
    (ShapeKind.TRIANGLE, _token("triangle")),
    (ShapeKind.RHOMBUS, _token("rhombus")),
    (ShapeKind.ELLIPSE, _token("ellipse")),
]


def classify_style(style: str | dict[str, str] | None) -> ShapeKind:
    """Classify a vertex style, defaulting to rectangle."""
    parsed = style if isinstance(style, dict) else parse_style(style)
    for kind, matches in SHAPE_DISCRIMINATORS:
        if matches(parsed):
            return kind
    return ShapeKind.RECTANGLE


BASE_SHAPE_STYLES: dict[ShapeKind, str] = {
    ShapeKind.RECTANGLE: "rounded=0",
    ShapeKind.ELLIPSE: "ellipse",
    ShapeKind.RHOMBUS: "rhombus",
    ShapeKind.CYLINDER: "shape=cylinder3",
    ShapeKind.HEXAGON: "shape=hexagon",
    ShapeKind.CLOUD: "ellipse;shape=cloud",
    ShapeKind.STEP: "shape=step",
    ShapeKind.PARALLELOGRAM: "shape=parallelogram",
    ShapeKind.TRAPEZOID: "shape=trapezoid",
    ShapeKind.TRIANGLE: "triangle",
}

CONNECTOR_ROUTINGS: dict[str, str] = {
    "straight": "edgeStyle=none",
    "curved": "edgeStyle=none;curved=1",
    "orthogonal": "edgeStyle=orthogonalEdgeStyle",
}

DEFAULT_FILL_COLOR = "#dae8fc"
DEFAULT_STROKE_COLOR = "#6c8ebf"


def shape_style(
    kind: ShapeKind | str,
    fill_color: str = DEFAULT_FILL_COLOR,
    stroke_color: str = DEFAULT_STROKE_COLOR,
) -> str:
    """Build the style for a new shape cell."""
    base = BASE_SHAPE_STYLES[ShapeKind.coerce(kind)]
    return (
        f"{base};whiteSpace=wrap;html=1;fillColor={fill_color};strokeColor={stroke_color};"
        "fontSize=12;align=left;verticalAlign=top;"
        "spacingLeft=8;spacingRight=8;spacingTop=6;spacingBottom=6;"
    )


def connector_style(routing: str = "orthogonal") -> str:
    """Build the style for a new connector cell. Unknown routings are orthogonal."""
    edge_style = CONNECTOR_ROUTINGS.get(routing, CONNECTOR_ROUTINGS["orthogonal"])
    return f"{edge_style};rounded=0;orthogonalLoop=1;jettySize=auto;html=1;"
