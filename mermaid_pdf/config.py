"""
Conversion request model and configuration resolution.

Values are resolved in priority order: explicit CLI values, ``MD2PDF_*``
environment variables, built-in defaults.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .errors import ConfigurationError
from .profiles import (
    DEFAULT_MARKDOWN_PROFILE,
    DEFAULT_STYLE_PROFILE,
    get_markdown_profile,
    get_style_profile,
)

DEFAULT_TEMP_PATH = "temp.html"
DEFAULT_PAGE_FORMAT = "A4"
DEFAULT_MARGIN = "1"
DEFAULT_MARGIN_UNIT = "cm"
DEFAULT_RENDER_TIMEOUT_SECONDS = 30.0
DEFAULT_CONTINUOUS_WIDTH = "8.5in"
DEFAULT_MERMAID_URL = "https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.esm.min.mjs"

# Named sizes understood by Chromium's print-to-PDF
PAGE_FORMATS = ("A3", "A4", "A5", "Letter", "Legal", "Tabloid")

_LENGTH_PATTERN = re.compile(r'^(-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)\s*(cm|in|mm|pt|px)?$')
_INCHES_PER_UNIT = {
    "in": 1.0,
    "cm": 1 / 2.54,
    "mm": 1 / 25.4,
    "pt": 1 / 72,
    "px": 1 / 96,  # Assuming 96 DPI
}
_MAX_MARGIN_INCHES = 3

PathLike = Union[str, Path]


def normalize_margin(value: Union[str, int, float], default_unit: str = DEFAULT_MARGIN_UNIT) -> str:
    """Validate a single margin and return it as a CSS length.

    A bare number is taken in ``default_unit``; ``2`` becomes ``2cm``.
    """
    match = _LENGTH_PATTERN.match(str(value).strip())
    if not match:
        raise ConfigurationError(
            f"Invalid margin format: '{value}'. Use format like '1', '2.5cm', '10mm', '1in'."
        )

    value_str, unit = match.groups()
    number = float(value_str)
    unit = unit or default_unit

    value_inches = number * _INCHES_PER_UNIT[unit]
    if value_inches < 0:
        raise ConfigurationError(f"Margin cannot be negative: '{value}'. Minimum value is 0.")
    if value_inches > _MAX_MARGIN_INCHES:
        raise ConfigurationError(f"Margin too large: '{value}'. Maximum value is 3 inches (7.62cm).")

    return f"{number:g}{unit}"


def derive_output_path(input_path: PathLike) -> Path:
    """Replace a trailing .md/.markdown extension with .pdf.

    Any other name gets .pdf appended so the source file is never the target.
    """
    text = str(input_path)
    derived, count = re.subn(r'\.(md|markdown)$', '.pdf', text, flags=re.IGNORECASE)
    if count == 0:
        derived = f"{text}.pdf"
    return Path(derived)


@dataclass(frozen=True)
class Margins:
    """Page margins as CSS lengths, one per side."""

    top: str = "1cm"
    right: str = "1cm"
    bottom: str = "1cm"
    left: str = "1cm"

    @classmethod
    def uniform(cls, value: Union[str, int, float]) -> "Margins":
        margin = normalize_margin(value)
        return cls(top=margin, right=margin, bottom=margin, left=margin)

    @classmethod
    def parse(cls, shorthand: Union[str, int, float]) -> "Margins":
        """Parse CSS shorthand with 1, 2 or 4 values (top right bottom left)."""
        parts = str(shorthand).split()

        if len(parts) == 1:
            return cls.uniform(parts[0])
        if len(parts) == 2:
            vertical = normalize_margin(parts[0])
            horizontal = normalize_margin(parts[1])
            return cls(top=vertical, right=horizontal, bottom=vertical, left=horizontal)
        if len(parts) == 4:
            top, right, bottom, left = (normalize_margin(part) for part in parts)
            return cls(top=top, right=right, bottom=bottom, left=left)

        raise ConfigurationError(f"Invalid margin format: '{shorthand}'. Use 1, 2, or 4 values.")

    def as_dict(self) -> Dict[str, str]:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


@dataclass(frozen=True)
class PageFormat:
    """Either a named paper size or an explicit width and height.

    A continuous format only fixes the width; the height is taken from the
    rendered document so the whole content lands on one page.
    """

    name: Optional[str] = DEFAULT_PAGE_FORMAT
    width: Optional[str] = None
    height: Optional[str] = None
    continuous: bool = False

    def __post_init__(self):
        if self.continuous:
            if not self.width:
                raise ConfigurationError("Continuous page format requires a width")
        elif self.name is None:
            if not (self.width and self.height):
                raise ConfigurationError("Page format needs a name or both width and height")
        elif self.name not in PAGE_FORMATS:
            raise ConfigurationError(
                f"Invalid page format '{self.name}'. Available formats: {', '.join(PAGE_FORMATS)}"
            )

    @classmethod
    def named(cls, name: str) -> "PageFormat":
        canonical = {fmt.lower(): fmt for fmt in PAGE_FORMATS}.get(name.strip().lower(), name)
        return cls(name=canonical)

    @classmethod
    def explicit(cls, width: str, height: str) -> "PageFormat":
        return cls(name=None, width=width, height=height)

    @classmethod
    def continuous_page(cls, width: str = DEFAULT_CONTINUOUS_WIDTH) -> "PageFormat":
        return cls(name=None, width=width, continuous=True)

    def pdf_size(self, content_height: Optional[int] = None) -> Dict[str, str]:
        """Size keyword arguments for ``page.pdf``."""
        if self.continuous:
            if content_height is None:
                raise ConfigurationError("Continuous page format needs the content height")
            return {"width": self.width, "height": f"{content_height}px"}
        if self.name is not None:
            return {"format": self.name}
        return {"width": self.width, "height": self.height}

    def describe(self) -> str:
        if self.continuous:
            return f"continuous ({self.width} wide)"
        return self.name or f"{self.width} x {self.height}"


@dataclass(frozen=True)
class ConversionRequest:
    """Everything one conversion needs. Immutable once the pipeline starts."""

    input_path: Path
    output_path: Path
    temp_path: Path = Path(DEFAULT_TEMP_PATH)
    page_format: PageFormat = field(default_factory=PageFormat)
    margins: Margins = field(default_factory=Margins)
    style_profile: str = DEFAULT_STYLE_PROFILE
    markdown_profile: str = DEFAULT_MARKDOWN_PROFILE
    render_timeout_ms: float = DEFAULT_RENDER_TIMEOUT_SECONDS * 1000
    wait_for_network_idle: bool = True
    keep_temp: bool = False
    mermaid_url: str = DEFAULT_MERMAID_URL

    def __post_init__(self):
        for name in ("input_path", "output_path", "temp_path"):
            value = getattr(self, name)
            if value is None or not str(value).strip():
                raise ConfigurationError(f"{name} must not be empty")
            object.__setattr__(self, name, Path(value))

        # The temp document is overwritten and then deleted
        temp = self.temp_path.resolve()
        if temp == self.input_path.resolve():
            raise ConfigurationError(f"Temporary path must differ from the input file: {self.temp_path}")
        if temp == self.output_path.resolve():
            raise ConfigurationError(f"Temporary path must differ from the output file: {self.output_path}")
        if self.output_path.resolve() == self.input_path.resolve():
            raise ConfigurationError(f"Output path must differ from the input file: {self.input_path}")

        if self.render_timeout_ms <= 0:
            raise ConfigurationError(f"Render timeout must be positive, got {self.render_timeout_ms}ms")

        # Fail fast on unknown profile names
        get_style_profile(self.style_profile)
        get_markdown_profile(self.markdown_profile)


class Config:
    """Resolve conversion settings from CLI values, environment and defaults."""

    ENV_PREFIX = "MD2PDF_"

    DEFAULTS: Dict[str, Any] = {
        "temp": DEFAULT_TEMP_PATH,
        "format": DEFAULT_PAGE_FORMAT,
        "margin": DEFAULT_MARGIN,
        "style_profile": DEFAULT_STYLE_PROFILE,
        "markdown_profile": DEFAULT_MARKDOWN_PROFILE,
        "timeout": DEFAULT_RENDER_TIMEOUT_SECONDS,
        "mermaid_url": DEFAULT_MERMAID_URL,
        "continuous": False,
        "page_width": DEFAULT_CONTINUOUS_WIDTH,
        "network_idle": True,
        "keep_temp": False,
    }

    # Settings that may come from MD2PDF_<KEY> environment variables
    ENV_KEYS = ("temp", "format", "margin", "style_profile", "markdown_profile", "timeout", "mermaid_url")

    def __init__(self, cli_config: Optional[Dict[str, Any]] = None, environ: Optional[Mapping[str, str]] = None):
        self.cli_config = {k: v for k, v in (cli_config or {}).items() if v is not None}
        self.environ = os.environ if environ is None else environ

    def get(self, key: str) -> Any:
        if key in self.cli_config:
            return self.cli_config[key]
        if key in self.ENV_KEYS:
            env_value = self.environ.get(f"{self.ENV_PREFIX}{key.upper()}")
            if env_value:
                return env_value
        return self.DEFAULTS[key]

    def get_temp_path(self) -> Path:
        return Path(self.get("temp"))

    def get_page_format(self) -> PageFormat:
        if self.get("continuous"):
            return PageFormat.continuous_page(str(self.get("page_width")))
        return PageFormat.named(str(self.get("format")))

    def get_margins(self) -> Margins:
        return Margins.parse(self.get("margin"))

    def get_style_profile(self) -> str:
        return get_style_profile(str(self.get("style_profile"))).name

    def get_markdown_profile(self) -> str:
        return get_markdown_profile(str(self.get("markdown_profile"))).name

    def get_render_timeout_ms(self) -> float:
        value = self.get("timeout")
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid render timeout '{value}'. Use a number of seconds.")
        if seconds <= 0:
            raise ConfigurationError(f"Render timeout must be positive, got '{value}'")
        return seconds * 1000

    def get_mermaid_url(self) -> str:
        return str(self.get("mermaid_url"))

    def build_request(self, input_path: PathLike, output_path: Optional[PathLike] = None) -> ConversionRequest:
        """Build the immutable request, deriving the output path when none is given."""
        if input_path is None or not str(input_path).strip():
            raise ConfigurationError("input_path must not be empty")
        if not output_path:
            output_path = derive_output_path(input_path)

        return ConversionRequest(
            input_path=Path(input_path),
            output_path=Path(output_path),
            temp_path=self.get_temp_path(),
            page_format=self.get_page_format(),
            margins=self.get_margins(),
            style_profile=self.get_style_profile(),
            markdown_profile=self.get_markdown_profile(),
            render_timeout_ms=self.get_render_timeout_ms(),
            wait_for_network_idle=bool(self.get("network_idle")),
            keep_temp=bool(self.get("keep_temp")),
            mermaid_url=self.get_mermaid_url(),
        )
