"""
Common exceptions for drawio-layout.

Layout failures are not exceptions: they are returned as LayoutOutcome
values. These cover the host surface (paths and files).
"""


class DrawioLayoutError(Exception):
    """Base exception for all drawio-layout errors."""
    pass


class UnsafePathError(DrawioLayoutError):
    """Raised when a diagram path points into a protected system directory."""
    pass


class DiagramFormatError(DrawioLayoutError):
    """Raised when a diagram file name or content is not a draw.io document."""
    pass
