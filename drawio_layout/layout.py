"""
Layout algorithms for diagram shapes.

Provides the layout strategies that can be applied to a diagram:
- Grid: Roughly square grid with uniform row heights and column widths
- Flowchart: Layered layout following connector directions, with swim lanes
  for parallel branches (vertical or horizontal flow)

Layout functions never modify shapes. They return a position map
(shape id -> Placement) that the document applies afterwards. Current
positions are used only as ordering hints.
"""

import logging
import math
from collections import defaultdict, deque
from functools import cmp_to_key
from typing import Optional

from pydantic import ValidationError

from .config import get_settings
from .document import DrawioDocument
from .extractor import graph_from_document
from .models import (
    Axis,
    DiagramGraph,
    LayoutKind,
    LayoutOptions,
    LayoutOutcome,
    OutcomeStatus,
    Placement,
    PositionResult,
    Shape,
)

logger = logging.getLogger(__name__)

# Vertical distance under which two shapes count as the same row
ROW_THRESHOLD = 50

# Extra room for connectors when a level holds more than two shapes
MAIN_AXIS_CLEARANCE = 1.3
CROSS_AXIS_CLEARANCE = 1.5
WIDE_LEVEL_SIZE = 2


def _reading_order(a: Shape, b: Shape) -> float:
    """Top-to-bottom, then left-to-right within a row."""
    dy = a.y - b.y
    if abs(dy) > ROW_THRESHOLD:
        return dy
    return a.x - b.x


def grid_layout(graph: DiagramGraph, options: LayoutOptions) -> PositionResult:
    """
    Arrange shapes in a grid.

    Every cell in a row gets the row's tallest height and every cell in a
    column the column's widest width, so shapes of any size never overlap.

    Args:
        graph: Diagram to arrange
        options: Spacing between cells and top-left corner

    Returns:
        Position map with x, y, width and height for every shape
    """
    positions: PositionResult = {}
    if graph.is_empty():
        return positions

    shapes = sorted(graph.shapes.values(), key=cmp_to_key(_reading_order))

    columns = math.ceil(math.sqrt(len(shapes)))
    rows = math.ceil(len(shapes) / columns)

    col_widths = [0.0] * columns
    row_heights = [0.0] * rows
    for i, shape in enumerate(shapes):
        row, col = divmod(i, columns)
        col_widths[col] = max(col_widths[col], shape.width)
        row_heights[row] = max(row_heights[row], shape.height)

    col_offsets = [0.0] * columns
    for c in range(1, columns):
        col_offsets[c] = col_offsets[c - 1] + col_widths[c - 1] + options.spacing
    row_offsets = [0.0] * rows
    for r in range(1, rows):
        row_offsets[r] = row_offsets[r - 1] + row_heights[r - 1] + options.spacing

    for i, shape in enumerate(shapes):
        row, col = divmod(i, columns)
        positions[shape.id] = Placement(
            x=options.start_x + col_offsets[col],
            y=options.start_y + row_offsets[row],
            width=col_widths[col],
            height=row_heights[row],
        )

    return positions


# --- Flowchart layout ---

def _cross_hint(shape: Shape, axis: Axis) -> float:
    return shape.x if axis == Axis.VERTICAL else shape.y


def _main_hint(shape: Shape, axis: Axis) -> float:
    return shape.y if axis == Axis.VERTICAL else shape.x


def _sorted_children(graph: DiagramGraph, shape_id: str, axis: Axis) -> list[str]:
    return sorted(
        graph.outgoing.get(shape_id, []),
        key=lambda child: _cross_hint(graph.shapes[child], axis),
    )


def find_roots(graph: DiagramGraph, axis: Axis) -> list[str]:
    """
    Shapes without incoming connectors, ordered along the cross axis.

    When every shape has a parent (cycles), the topmost (vertical) or
    leftmost (horizontal) shape is used.
    """
    roots = [sid for sid in graph.shapes if not graph.incoming.get(sid)]
    if not roots and graph.shapes:
        first = min(graph.shapes.values(), key=lambda s: _main_hint(s, axis))
        roots = [first.id]
    roots.sort(key=lambda sid: _cross_hint(graph.shapes[sid], axis))
    return roots


def _bfs_levels(
    graph: DiagramGraph, roots: list[str], axis: Axis, back: set[tuple[str, str]]
) -> tuple[dict[str, int], dict[str, int]]:
    """
    Breadth-first level and swim lane assignment.

    A re-visited shape may only have its level raised, and never through a
    cycle-closing edge (so a self loop leaves its shape where it is).
    Children of a branching shape fan out into lanes lane, lane + 1, ...
    """
    levels: dict[str, int] = {}
    lanes: dict[str, int] = {}
    queue = deque((root, 0, lane, None) for lane, root in enumerate(roots))

    while queue:
        shape_id, level, lane, parent = queue.popleft()

        if shape_id in levels:
            if level > levels[shape_id] and (parent, shape_id) not in back:
                levels[shape_id] = level
            continue

        levels[shape_id] = level
        lanes[shape_id] = lane

        children = _sorted_children(graph, shape_id, axis)
        for index, child in enumerate(children):
            child_lane = lane + index if len(children) > 1 else lane
            queue.append((child, level + 1, child_lane, shape_id))

    return levels, lanes


def _back_edges(graph: DiagramGraph, roots: list[str], axis: Axis) -> set[tuple[str, str]]:
    """Edges that close a cycle (self loops included), found by iterative DFS."""
    back: set[tuple[str, str]] = set()
    on_stack: set[str] = set()
    done: set[str] = set()

    for root in roots:
        if root in done:
            continue
        on_stack.add(root)
        stack = [(root, iter(_sorted_children(graph, root, axis)))]
        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                on_stack.discard(node)
                done.add(node)
            elif child in on_stack:
                back.add((node, child))
            elif child not in done:
                on_stack.add(child)
                stack.append((child, iter(_sorted_children(graph, child, axis))))

    return back


def _raise_to_longest_path(
    graph: DiagramGraph, bfs_levels: dict[str, int], back: set[tuple[str, str]]
) -> dict[str, int]:
    """
    Push BFS levels down to the longest distance from the root set.

    The BFS re-visit rule raises a shape but not the shapes below it, so a
    long path discovered late leaves descendants too high. Relaxing every
    non cycle-closing edge in topological order fixes that.
    """
    visited = list(bfs_levels)
    indegree: dict[str, int] = {sid: 0 for sid in visited}
    forward: dict[str, list[str]] = {sid: [] for sid in visited}
    for source in visited:
        for target in graph.outgoing.get(source, []):
            if target in bfs_levels and (source, target) not in back:
                forward[source].append(target)
                indegree[target] += 1

    levels = dict(bfs_levels)
    queue = deque(sid for sid in visited if indegree[sid] == 0)
    while queue:
        source = queue.popleft()
        for target in forward[source]:
            levels[target] = max(levels[target], levels[source] + 1)
            indegree[target] -= 1
            if indegree[target] == 0:
                queue.append(target)

    return levels


def assign_levels(
    graph: DiagramGraph, axis: Axis = Axis.VERTICAL
) -> tuple[dict[str, int], dict[str, int]]:
    """
    Assign a level and swim lane to every shape.

    Levels are the longest path from the nearest root. Shapes that cannot be
    reached from any root are appended one level each after the deepest one.

    Returns:
        (levels, lanes) keyed by shape id
    """
    roots = find_roots(graph, axis)
    back = _back_edges(graph, roots, axis)
    bfs_levels, lanes = _bfs_levels(graph, roots, axis, back)
    levels = _raise_to_longest_path(graph, bfs_levels, back)

    for shape_id in graph.shapes:
        if shape_id not in levels:
            levels[shape_id] = max(levels.values(), default=0) + 1
            lanes[shape_id] = 0

    return levels, lanes


def flowchart_layout(
    graph: DiagramGraph,
    options: LayoutOptions,
    axis: Axis = Axis.VERTICAL,
) -> PositionResult:
    """
    Arrange shapes in levels following connector directions.

    Levels run top-to-bottom (vertical) or left-to-right (horizontal). Each
    level is centered on the start coordinate along the cross axis, shapes in
    a level share its largest size, and the whole layout is shifted so it
    never starts before the start coordinates.

    Args:
        graph: Diagram to arrange
        options: Spacing between cells and top-left corner
        axis: Flow direction

    Returns:
        Position map with x, y, width and height for every shape
    """
    positions: PositionResult = {}
    if graph.is_empty():
        return positions

    shapes = graph.shapes
    vertical = axis == Axis.VERTICAL
    levels, lanes = assign_levels(graph, axis)

    groups: dict[int, list[Shape]] = defaultdict(list)
    for shape_id, level in levels.items():
        groups[level].append(shapes[shape_id])
    for group in groups.values():
        group.sort(key=lambda s: (lanes.get(s.id, 0), _cross_hint(s, axis)))

    widest = max(len(group) for group in groups.values())
    wide = widest > WIDE_LEVEL_SIZE
    main_spacing = options.spacing * (MAIN_AXIS_CLEARANCE if wide else 1)
    cross_spacing = options.spacing * (CROSS_AXIS_CLEARANCE if wide else 1)

    main_offset = 0.0
    for level in sorted(groups):
        group = groups[level]
        if vertical:
            main_size = max(s.height for s in group)
            cross_size = max(s.width for s in group)
        else:
            main_size = max(s.width for s in group)
            cross_size = max(s.height for s in group)

        extent = len(group) * (cross_size + cross_spacing) - cross_spacing
        first_cross = -extent / 2 + cross_size / 2 if extent > 0 else 0

        for index, shape in enumerate(group):
            cross = first_cross + index * (cross_size + cross_spacing)
            if vertical:
                positions[shape.id] = Placement(
                    x=options.start_x + cross,
                    y=options.start_y + main_offset,
                    width=cross_size,
                    height=main_size,
                )
            else:
                positions[shape.id] = Placement(
                    x=options.start_x + main_offset,
                    y=options.start_y + cross,
                    width=main_size,
                    height=cross_size,
                )

        main_offset += main_size + main_spacing

    # Keep everything at or after the start corner
    min_x = min(p.x for p in positions.values())
    min_y = min(p.y for p in positions.values())
    dx = options.start_x - min_x if min_x < options.start_x else 0
    dy = options.start_y - min_y if min_y < options.start_y else 0
    if dx or dy:
        positions = {sid: p.shifted(dx, dy) for sid, p in positions.items()}

    return positions


# --- Layout surface ---

STRATEGY_NAMES: dict[LayoutKind, str] = {
    LayoutKind.GRID: "grid",
    LayoutKind.FLOWCHART_VERTICAL: "vertical flowchart",
    LayoutKind.FLOWCHART_HORIZONTAL: "horizontal flowchart",
}


def compute_layout(graph: DiagramGraph, kind: LayoutKind, options: LayoutOptions) -> PositionResult:
    """Run the strategy for a layout kind."""
    if kind == LayoutKind.GRID:
        return grid_layout(graph, options)
    if kind == LayoutKind.FLOWCHART_VERTICAL:
        return flowchart_layout(graph, options, Axis.VERTICAL)
    return flowchart_layout(graph, options, Axis.HORIZONTAL)


def run_layout(
    document: str,
    kind: str,
    spacing: Optional[float] = None,
    start_x: Optional[float] = None,
    start_y: Optional[float] = None,
) -> LayoutOutcome:
    """
    Lay out a document and return the rewritten text with a summary.

    Unknown layout kinds and invalid options come back as error outcomes, a
    document without shapes as a no-op. Nothing here raises for bad input.

    Args:
        document: draw.io document text
        kind: "grid", "flowchart-vertical" or "flowchart-horizontal"
        spacing: Gap between cells (settings default if None)
        start_x: Left edge of the layout (settings default if None)
        start_y: Top edge of the layout (settings default if None)
    """
    try:
        layout_kind = LayoutKind(kind)
    except ValueError:
        return LayoutOutcome(
            status=OutcomeStatus.ERROR,
            message=f"Unknown layout type: {kind}",
            document=document,
        )

    settings = get_settings()
    try:
        options = LayoutOptions(
            spacing=settings.default_spacing if spacing is None else spacing,
            start_x=settings.default_start_x if start_x is None else start_x,
            start_y=settings.default_start_y if start_y is None else start_y,
        )
    except ValidationError as e:
        return LayoutOutcome(
            status=OutcomeStatus.ERROR,
            message=f"Invalid layout options: {e.errors()[0]['msg']}",
            document=document,
            strategy=layout_kind,
        )

    parsed = DrawioDocument.parse(document)
    graph = graph_from_document(parsed)

    if graph.is_empty():
        return LayoutOutcome(
            status=OutcomeStatus.NOOP,
            message="No shapes found in the diagram to layout.",
            document=document,
            strategy=layout_kind,
        )

    positions = compute_layout(graph, layout_kind, options)
    parsed.apply_positions(positions)

    shape_count = len(graph.shapes)
    edge_count = len(graph.edges)
    name = STRATEGY_NAMES[layout_kind]
    logger.info("Applied %s layout to %d shapes and %d connectors", name, shape_count, edge_count)

    connectors = f" with {edge_count} connectors" if edge_count > 0 else ""
    return LayoutOutcome(
        status=OutcomeStatus.APPLIED,
        message=f"Applied {name} layout to {shape_count} shapes{connectors}. Shapes have been repositioned.",
        document=parsed.to_string(),
        strategy=layout_kind,
        shape_count=shape_count,
        connector_count=edge_count,
    )
