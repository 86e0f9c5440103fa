"""Tests for the layered flowchart layout."""

import random

import pytest

from drawio_layout.layout import assign_levels, find_roots, flowchart_layout, grid_layout
from drawio_layout.models import Axis, DiagramGraph, LayoutOptions

from conftest import make_graph


def reference_levels(nodes: list[str], edges: list[tuple[str, str]]) -> dict[str, int]:
    """Longest path from any source, for nodes given in topological order."""
    levels = {}
    for node in nodes:
        preds = [levels[s] for s, t in edges if t == node]
        levels[node] = max(preds) + 1 if preds else 0
    return levels


def random_dag(seed: int, size: int) -> tuple[dict[str, tuple], list[tuple[str, str]]]:
    rng = random.Random(seed)
    nodes = [f"n{i}" for i in range(size)]
    edges = [
        (nodes[i], nodes[j])
        for i in range(size) for j in range(i + 1, size)
        if rng.random() < 0.25
    ]
    shapes = {n: (rng.randint(0, 800), rng.randint(0, 800)) for n in nodes}
    return shapes, edges


def lattice(rows: int, cols: int, seed: int) -> tuple[dict[str, tuple], list[tuple[str, str]]]:
    rng = random.Random(seed)
    shapes = {f"{r}_{c}": (rng.randint(0, 500), rng.randint(0, 500)) for r in range(rows) for c in range(cols)}
    edges = []
    for r in range(rows):
        for c in range(cols):
            if r + 1 < rows:
                edges.append((f"{r}_{c}", f"{r + 1}_{c}"))
            if c + 1 < cols:
                edges.append((f"{r}_{c}", f"{r}_{c + 1}"))
    return shapes, edges


class TestLevels:

    def test_diamond_reconvergence(self) -> None:
        graph = make_graph(
            {"A": (0, 0), "B": (0, 100), "C": (200, 100), "D": (0, 200)},
            [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")],
        )
        levels, _ = assign_levels(graph)
        assert levels == {"A": 0, "B": 1, "C": 1, "D": 2}

        positions = flowchart_layout(graph, LayoutOptions())
        for parent in ("B", "C"):
            assert positions["D"].y >= positions[parent].y + positions[parent].height

    def test_late_longer_path_pushes_descendants(self) -> None:
        """X is first reached at level 1 but its longest path is 3; Y must follow it."""
        graph = make_graph(
            {"A": (0, 0), "X": (0, 100), "Y": (0, 200), "B": (200, 100), "C": (200, 200)},
            [("A", "X"), ("X", "Y"), ("A", "B"), ("B", "C"), ("C", "X")],
        )
        levels, _ = assign_levels(graph)
        assert levels == {"A": 0, "X": 3, "Y": 4, "B": 1, "C": 2}

    @pytest.mark.parametrize("seed", range(12))
    def test_random_dags_get_longest_path(self, seed: int) -> None:
        shapes, edges = random_dag(seed, size=6 + seed)
        graph = make_graph(shapes, edges)
        levels, _ = assign_levels(graph)

        assert levels == reference_levels(list(shapes), edges)
        for source, target in edges:
            assert levels[target] >= levels[source] + 1

    @pytest.mark.parametrize("rows,cols,seed", [(2, 2, 0), (3, 4, 1), (5, 5, 2), (6, 3, 3), (4, 7, 4)])
    def test_lattice_levels(self, rows: int, cols: int, seed: int) -> None:
        shapes, edges = lattice(rows, cols, seed)
        levels, _ = assign_levels(make_graph(shapes, edges))
        assert levels == {f"{r}_{c}": r + c for r in range(rows) for c in range(cols)}

    def test_self_loop_stays_at_level_zero(self) -> None:
        graph = make_graph({"A": (0, 0)}, [("A", "A")])
        levels, _ = assign_levels(graph)
        assert levels == {"A": 0}

        positions = flowchart_layout(graph, LayoutOptions(spacing=50, start_x=50, start_y=50))
        assert positions["A"].model_dump() == {"x": 50, "y": 50, "width": 100, "height": 60}

    def test_full_cycle_uses_topmost_root(self) -> None:
        graph = make_graph(
            {"B": (0, 100), "C": (0, 200), "A": (0, 0)},
            [("A", "B"), ("B", "C"), ("C", "A")],
        )
        assert find_roots(graph, Axis.VERTICAL) == ["A"]
        levels, _ = assign_levels(graph)
        assert levels == {"A": 0, "B": 1, "C": 2}

    def test_full_cycle_uses_leftmost_root_horizontally(self) -> None:
        graph = make_graph(
            {"A": (300, 0), "B": (0, 100)},
            [("A", "B"), ("B", "A")],
        )
        assert find_roots(graph, Axis.HORIZONTAL) == ["B"]

    def test_unreachable_shapes_appended_after_deepest_level(self) -> None:
        graph = make_graph(
            {"A": (0, 0), "B": (0, 100), "X": (300, 0), "Y": (300, 100)},
            [("A", "B"), ("X", "Y"), ("Y", "X")],
        )
        levels, lanes = assign_levels(graph)
        assert levels == {"A": 0, "B": 1, "X": 2, "Y": 3}
        assert lanes["X"] == lanes["Y"] == 0

    def test_branches_fan_out_into_lanes(self) -> None:
        graph = make_graph(
            {"A": (0, 0), "B": (500, 100), "C": (0, 100), "D": (0, 200)},
            [("A", "B"), ("A", "C"), ("C", "D")],
        )
        _, lanes = assign_levels(graph)
        assert lanes == {"A": 0, "C": 0, "B": 1, "D": 0}

    def test_roots_ordered_along_cross_axis(self) -> None:
        graph = make_graph({"R2": (300, 0), "R1": (0, 50)})
        assert find_roots(graph, Axis.VERTICAL) == ["R1", "R2"]
        assert find_roots(graph, Axis.HORIZONTAL) == ["R2", "R1"]
        _, lanes = assign_levels(graph)
        assert lanes == {"R1": 0, "R2": 1}


class TestFlowchartPlacement:

    def test_vertical_split_scenario(self) -> None:
        graph = make_graph(
            {"A": (0, 0), "B": (0, 200), "C": (200, 200)},
            [("A", "B"), ("A", "C")],
        )
        positions = flowchart_layout(graph, LayoutOptions(spacing=50, start_x=50, start_y=50))
        a, b, c = positions["A"], positions["B"], positions["C"]

        assert a.y == 50
        assert b.y == c.y == 50 + 60 + 50
        # B and C sit symmetrically around A's center
        a_center = a.x + a.width / 2
        assert (b.x + b.width / 2 + c.x + c.width / 2) / 2 == a_center
        assert c.x - b.x == 100 + 50
        # shifted so nothing starts before the start corner
        assert min(p.x for p in positions.values()) == 50

    def test_horizontal_flow(self) -> None:
        graph = make_graph({"A": (0, 0), "B": (200, 0)}, [("A", "B")])
        positions = flowchart_layout(graph, LayoutOptions(spacing=50), Axis.HORIZONTAL)

        assert (positions["A"].x, positions["A"].y) == (50, 50)
        assert (positions["B"].x, positions["B"].y) == (50 + 100 + 50, 50)
        assert positions["B"].width == 100
        assert positions["B"].height == 60

    def test_wide_level_gets_clearance(self) -> None:
        graph = make_graph(
            {"A": (0, 0), "B": (0, 100), "C": (150, 100), "D": (300, 100)},
            [("A", "B"), ("A", "C"), ("A", "D")],
        )
        positions = flowchart_layout(graph, LayoutOptions(spacing=50, start_x=50, start_y=50))

        assert positions["B"].y == 50 + 60 + 50 * 1.3
        assert positions["C"].x - positions["B"].x == 100 + 50 * 1.5
        assert positions["A"].x == positions["C"].x

    def test_level_shares_largest_size(self) -> None:
        graph = make_graph(
            {"A": (0, 0, 100, 60), "B": (0, 100, 80, 120), "C": (200, 100, 140, 40), "D": (0, 300)},
            [("A", "B"), ("A", "C"), ("B", "D")],
        )
        positions = flowchart_layout(graph, LayoutOptions(spacing=20, start_x=0, start_y=0))

        assert positions["B"].height == positions["C"].height == 120
        assert positions["B"].width == positions["C"].width == 140
        assert positions["D"].y == 60 + 20 + 120 + 20

    def test_normalisation_keeps_sizes(self) -> None:
        graph = make_graph(
            {"A": (0, 0), "B": (0, 100), "C": (200, 100)},
            [("A", "B"), ("A", "C")],
        )
        positions = flowchart_layout(graph, LayoutOptions(start_x=10, start_y=10))

        assert all(p.width is not None and p.height is not None for p in positions.values())
        assert min(p.x for p in positions.values()) == 10
        assert min(p.y for p in positions.values()) == 10

    def test_horizontal_normalisation_shifts_down(self) -> None:
        """Three parallel branches centred on start_y spill above it and are shifted back."""
        graph = make_graph(
            {"A": (0, 100), "B": (200, 0), "C": (200, 100), "D": (200, 200)},
            [("A", "B"), ("A", "C"), ("A", "D")],
        )
        positions = flowchart_layout(graph, LayoutOptions(spacing=50, start_x=10, start_y=10), Axis.HORIZONTAL)

        assert min(p.y for p in positions.values()) == 10
        assert min(p.x for p in positions.values()) == 10
        assert [positions[s].y for s in "BCD"] == [10, 145, 280]
        assert positions["A"].y == positions["C"].y
        assert positions["B"].x == 10 + 100 + 50 * 1.3
        for p in positions.values():
            assert (p.width, p.height) == (100, 60)

    def test_unreachable_shapes_placed_below(self) -> None:
        graph = make_graph(
            {"A": (0, 0), "B": (0, 100), "X": (300, 0), "Y": (300, 100)},
            [("A", "B"), ("X", "Y"), ("Y", "X")],
        )
        positions = flowchart_layout(graph, LayoutOptions())
        assert positions["A"].y < positions["B"].y < positions["X"].y < positions["Y"].y

    def test_empty_graph(self) -> None:
        assert flowchart_layout(DiagramGraph(), LayoutOptions()) == {}


class TestCoverage:

    @pytest.mark.parametrize("seed", range(6))
    @pytest.mark.parametrize("strategy", [
        lambda g, o: grid_layout(g, o),
        lambda g, o: flowchart_layout(g, o, Axis.VERTICAL),
        lambda g, o: flowchart_layout(g, o, Axis.HORIZONTAL),
    ])
    def test_every_shape_placed_once(self, seed: int, strategy) -> None:
        shapes, edges = random_dag(seed, size=9)
        # add a back edge and a dangling edge to stress extraction and leveling
        edges = edges + [("n8", "n0"), ("n3", "missing")]
        graph = make_graph(shapes, edges)

        positions = strategy(graph, LayoutOptions())
        assert set(positions) == set(shapes)
