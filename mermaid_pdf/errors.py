"""
Error kinds raised by the conversion pipeline.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

from typing import Optional


class ConversionError(Exception):
    """Base class for every failure that aborts a conversion."""


class ConfigurationError(ConversionError, ValueError):
    """Invalid request value (margin, page format, profile name)."""


class InputReadError(ConversionError):
    """Source markdown file is missing or unreadable."""


class MarkdownTransformError(ConversionError):
    """The markdown parser rejected the input."""


class OutputWriteError(ConversionError):
    """The temporary document or the final PDF could not be written."""


class EngineLaunchError(ConversionError):
    """The rendering engine could not be started."""


class NavigationError(ConversionError):
    """The assembled document could not be loaded into the engine."""


class DiagramRenderTimeout(ConversionError):
    """Mermaid diagrams did not finish rendering before the wait ceiling."""

    def __init__(self, diagram_count: int, timeout_ms: float, detail: Optional[str] = None):
        self.diagram_count = diagram_count
        self.timeout_ms = timeout_ms
        message = (
            f"{diagram_count} Mermaid diagram(s) did not render within {timeout_ms / 1000:g}s"
        )
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class CaptureError(ConversionError):
    """Paginated PDF capture failed."""


class CleanupError(ConversionError):
    """Temporary document deletion failed. Logged, never raised to the caller."""
