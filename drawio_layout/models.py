"""
Core data models for diagram layout.

These models define the structured view of a draw.io document:
- Shapes (vertex cells) with geometry and a classified kind
- Edges (connector cells) using the source/target naming convention
- The graph with adjacency indexes used by the layout strategies
- Layout options, placements and the typed outcome of a layout run

Shapes are frozen once extracted; layout strategies never move them in place
and instead return a separate position map.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ShapeKind(str, Enum):
    """Shape kinds recognised in draw.io styles."""
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    RHOMBUS = "rhombus"
    CYLINDER = "cylinder"
    HEXAGON = "hexagon"
    CLOUD = "cloud"
    STEP = "step"
    PARALLELOGRAM = "parallelogram"
    TRAPEZOID = "trapezoid"
    TRIANGLE = "triangle"

    @classmethod
    def coerce(cls, value: "str | ShapeKind | None") -> "ShapeKind":
        """Map a kind name to a ShapeKind, falling back to rectangle."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.RECTANGLE


class LayoutKind(str, Enum):
    """Layout strategies available to the layout surface."""
    GRID = "grid"
    FLOWCHART_VERTICAL = "flowchart-vertical"
    FLOWCHART_HORIZONTAL = "flowchart-horizontal"


class Axis(str, Enum):
    """Main flow direction of the layered layout."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    NOOP = "noop"
    ERROR = "error"


class Shape(BaseModel):
    """A vertex cell in the diagram."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str = ""
    kind: ShapeKind = ShapeKind.RECTANGLE
    x: float = 0
    y: float = 0
    width: float
    height: float

    def center(self) -> tuple[float, float]:
        """Get the center point of the shape."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def bounds(self) -> tuple[float, float, float, float]:
        """Get the bounding box (x, y, right, bottom)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


class Edge(BaseModel):
    """
    A connector between two shapes.

    Either endpoint may name a shape that is not in the diagram; such
    dangling edges are kept for reporting but never indexed.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    label: str = ""


class DiagramGraph(BaseModel):
    """
    Structured graph extracted from a document.

    `shapes` keeps document order. `outgoing` and `incoming` hold an entry
    for every shape and only ever reference shapes present in `shapes`.
    """
    shapes: dict[str, Shape] = Field(default_factory=dict)
    edges: list[Edge] = Field(default_factory=list)
    outgoing: dict[str, list[str]] = Field(default_factory=dict)
    incoming: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def build(cls, shapes: list[Shape], edges: list[Edge]) -> "DiagramGraph":
        """Index shapes and edges, leaving dangling edges out of adjacency."""
        graph = cls()
        for shape in shapes:
            graph.shapes[shape.id] = shape
            graph.outgoing[shape.id] = []
            graph.incoming[shape.id] = []

        for edge in edges:
            graph.edges.append(edge)
            if edge.source in graph.shapes and edge.target in graph.shapes:
                graph.outgoing[edge.source].append(edge.target)
                graph.incoming[edge.target].append(edge.source)

        return graph

    def is_empty(self) -> bool:
        return not self.shapes

    def dangling_edges(self) -> list[Edge]:
        """Edges with at least one endpoint missing from the diagram."""
        return [
            e for e in self.edges
            if e.source not in self.shapes or e.target not in self.shapes
        ]


class LayoutOptions(BaseModel):
    """Spacing between cells and the top-left corner of the layout."""
    spacing: float = Field(default=50, gt=0, allow_inf_nan=False)
    start_x: float = Field(default=50, allow_inf_nan=False)
    start_y: float = Field(default=50, allow_inf_nan=False)


class Placement(BaseModel):
    """New geometry for one shape. Size is only set when recomputed."""
    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None

    def shifted(self, dx: float, dy: float) -> "Placement":
        return self.model_copy(update={"x": self.x + dx, "y": self.y + dy})


# Shape id -> new geometry
PositionResult = dict[str, Placement]


class TextSize(BaseModel):
    """Width and height needed to show a label."""
    width: float
    height: float


class LayoutOutcome(BaseModel):
    """
    Result of a layout invocation.

    Failures are reported here rather than raised so that a host can show
    them to the user as-is.
    """
    status: OutcomeStatus
    message: str
    document: str
    strategy: Optional[LayoutKind] = None
    shape_count: int = 0
    connector_count: int = 0

    @property
    def is_error(self) -> bool:
        return self.status == OutcomeStatus.ERROR

    def to_json_dict(self) -> dict:
        """Summary without the document text."""
        result = {
            "status": self.status.value,
            "message": self.message,
            "shape_count": self.shape_count,
            "connector_count": self.connector_count,
        }
        if self.strategy:
            result["strategy"] = self.strategy.value
        return result
