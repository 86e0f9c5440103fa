"""
drawio-layout - Auto layout and text fitting for draw.io diagrams.

This package provides the layout engine used by both the MCP server and the
CLI, ensuring a single source of truth for extraction, sizing and placement.
"""

from .models import (
    # Enums
    ShapeKind,
    LayoutKind,
    Axis,
    OutcomeStatus,
    # Core models
    Shape,
    Edge,
    DiagramGraph,
    LayoutOptions,
    Placement,
    PositionResult,
    TextSize,
    LayoutOutcome,
)

from .style import parse_style, classify_style
from .document import DrawioDocument
from .extractor import extract_graph, graph_from_document
from .text_fit import fit_text, fit_to_provided, compute_dimensions
from .layout import grid_layout, flowchart_layout, assign_levels, run_layout
from .validation import validate_graph, ValidationIssue, IssueSeverity

__version__ = "0.1.0"

__all__ = [
    # Enums
    "ShapeKind",
    "LayoutKind",
    "Axis",
    "OutcomeStatus",
    # Models
    "Shape",
    "Edge",
    "DiagramGraph",
    "LayoutOptions",
    "Placement",
    "PositionResult",
    "TextSize",
    "LayoutOutcome",
    # Styles
    "parse_style",
    "classify_style",
    # Document
    "DrawioDocument",
    "extract_graph",
    "graph_from_document",
    # Text fitting
    "fit_text",
    "fit_to_provided",
    "compute_dimensions",
    # Layout
    "grid_layout",
    "flowchart_layout",
    "assign_levels",
    "run_layout",
    # Validation
    "validate_graph",
    "ValidationIssue",
    "IssueSeverity",
]
