"""
Diagram diagnostics - Check an extracted graph for structural issues.

Nothing reported here stops a layout: dangling connectors, self loops and
duplicates are all tolerated by extraction and layout. The issues are shown
to the user when shapes are listed.
"""

from dataclasses import dataclass
from enum import Enum

from .models import DiagramGraph


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Invalid state, must be fixed
    WARNING = "warning"  # Potential problem, should review
    INFO = "info"        # Informational, may be intentional


@dataclass
class ValidationIssue:
    """A single validation issue found in a diagram."""
    severity: IssueSeverity
    message: str
    shape_id: str | None = None
    edge_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "message": self.message
        }
        if self.shape_id:
            result["shape_id"] = self.shape_id
        if self.edge_id:
            result["edge_id"] = self.edge_id
        return result


def validate_graph(graph: DiagramGraph) -> list[ValidationIssue]:
    """
    Validate a graph and return a list of issues.

    Checks for:
    - Empty diagram - INFO
    - Connectors whose source/target shape doesn't exist - WARNING
    - Self-referencing connectors - WARNING
    - Duplicate connectors (same source->target) - WARNING
    - Orphan shapes (no connections) - INFO

    Args:
        graph: The graph to validate

    Returns:
        List of ValidationIssue objects
    """
    issues: list[ValidationIssue] = []

    if graph.is_empty():
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            message="Diagram has no shapes"
        ))

    # Dangling endpoints
    for edge in graph.edges:
        if edge.source not in graph.shapes:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Connector references non-existent source shape: {edge.source}",
                edge_id=edge.id
            ))
        if edge.target not in graph.shapes:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Connector references non-existent target shape: {edge.target}",
                edge_id=edge.id
            ))

    for edge in graph.edges:
        if edge.source == edge.target:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message="Self-referencing connector (shape points to itself)",
                edge_id=edge.id,
                shape_id=edge.source
            ))

    seen_pairs: set[tuple[str, str]] = set()
    for edge in graph.edges:
        pair = (edge.source, edge.target)
        if pair in seen_pairs:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Duplicate connector from {edge.source} to {edge.target}",
                edge_id=edge.id
            ))
        else:
            seen_pairs.add(pair)

    # Orphans only matter once there are connectors at all
    if graph.edges:
        orphans = [
            shape for shape in graph.shapes.values()
            if not graph.outgoing[shape.id] and not graph.incoming[shape.id]
        ]
        if orphans:
            labels = ", ".join(f"{s.text or '(no text)'} ({s.id})" for s in orphans)
            issues.append(ValidationIssue(
                severity=IssueSeverity.INFO,
                message=f"Unconnected shapes: {labels}"
            ))

    return issues


def validation_summary(issues: list[ValidationIssue]) -> dict:
    """
    Create a summary of validation issues.

    Args:
        issues: List of validation issues

    Returns:
        Dictionary with counts by severity
    """
    return {
        "total": len(issues),
        "errors": len([i for i in issues if i.severity == IssueSeverity.ERROR]),
        "warnings": len([i for i in issues if i.severity == IssueSeverity.WARNING]),
        "info": len([i for i in issues if i.severity == IssueSeverity.INFO]),
        "valid": len([i for i in issues if i.severity == IssueSeverity.ERROR]) == 0
    }
