"""
Markdown with Mermaid diagrams to PDF, rendered through headless Chromium.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

__version__ = "1.0.0"

from .assembler import DocumentAssembler
from .config import Config, ConversionRequest, Margins, PageFormat, derive_output_path
from .errors import (
    CaptureError,
    CleanupError,
    ConfigurationError,
    ConversionError,
    DiagramRenderTimeout,
    EngineLaunchError,
    InputReadError,
    MarkdownTransformError,
    NavigationError,
    OutputWriteError,
)
from .pipeline import ConversionPipeline
from .renderer import RenderOrchestrator
from .transformer import MarkdownTransformer, TransformedDocument, slugify

__all__ = [
    "__version__",
    "CaptureError",
    "CleanupError",
    "Config",
    "ConfigurationError",
    "ConversionError",
    "ConversionPipeline",
    "ConversionRequest",
    "DiagramRenderTimeout",
    "DocumentAssembler",
    "EngineLaunchError",
    "InputReadError",
    "Margins",
    "MarkdownTransformError",
    "MarkdownTransformer",
    "NavigationError",
    "OutputWriteError",
    "PageFormat",
    "RenderOrchestrator",
    "TransformedDocument",
    "derive_output_path",
    "slugify",
]
