"""
Markdown parser profiles and document style profiles.

Profiles are plain data: the transformer and the assembler look them up by
name and never branch on which profile is active.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

from dataclasses import dataclass
from typing import Dict

from .errors import ConfigurationError


@dataclass(frozen=True)
class MarkdownProfile:
    """Parser options handed to markdown-it."""

    name: str
    description: str
    html: bool
    linkify: bool
    typographer: bool


@dataclass(frozen=True)
class StyleProfile:
    """Presentational CSS embedded in the assembled document."""

    name: str
    description: str
    css: str


MARKDOWN_PROFILES: Dict[str, MarkdownProfile] = {
    "minimal": MarkdownProfile(
        name="minimal",
        description="CommonMark blocks and inlines only, raw HTML escaped",
        html=False,
        linkify=False,
        typographer=False,
    ),
    "typographic": MarkdownProfile(
        name="typographic",
        description="Raw HTML passthrough, bare URL links, smart quotes and dashes",
        html=True,
        linkify=True,
        typographer=True,
    ),
}

DEFAULT_MARKDOWN_PROFILE = "typographic"


_MINIMAL_CSS = """
body {
    margin: 0;
    padding: 0;
}

.mermaid {
    margin: 1em 0;
}

.page-break {
    page-break-before: always;
    break-before: page;
}
"""

_BOOK_CSS = """
body {
    font-family: "Times New Roman", Times, serif;
    font-size: 12pt;
    line-height: 1.5;
    max-width: 75ch;
    margin-top: 3cm;
    margin-bottom: 3cm;
    margin-left: auto;
    margin-right: auto;
}

.mermaid {
    margin: 2em 0;
}

h1, h2, h3, h4, h5, h6 {
    font-family: "Times New Roman", Times, serif;
    scroll-margin-top: 1em;
    line-height: 1.2;
}

h1 { font-size: 18pt; margin-top: 2em; }
h2 { font-size: 16pt; margin-top: 1.5em; }
h3 { font-size: 14pt; margin-top: 1.3em; }

p {
    text-align: justify;
    margin: 1em 0;
}

a {
    color: #000000;
    text-decoration: none;
    border-bottom: 1px dotted #666;
}

h1 a, h2 a, h3 a, h4 a, h5 a, h6 a {
    border-bottom: none;
}

code a {
    border-bottom: none;
}

code {
    font-family: "Courier New", Courier, monospace;
    font-size: 11pt;
    background-color: #f5f5f5;
    padding: 0.2em 0.4em;
    border-radius: 3px;
}

pre code {
    display: block;
    padding: 1em;
    overflow-x: auto;
    line-height: 1.4;
}

blockquote {
    margin: 1.5em 0;
    padding-left: 1em;
    border-left: 3px solid #ccc;
    font-style: italic;
}

.page-break {
    page-break-before: always;
    break-before: page;
}
"""

_PRINT_CSS = """
* {
    box-sizing: border-box;
}

body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
    line-height: 1.4;
    color: #333;
    margin: 0;
    padding: 0;
    font-size: 12px;
    width: 100%;
}

h1, h2, h3, h4, h5, h6 {
    color: #2c3e50;
    margin-top: 0.8em;
    margin-bottom: 0.3em;
    font-weight: 600;
    page-break-inside: avoid;
    break-inside: avoid;
}

h1 {
    font-size: 1.6em;
    border-bottom: 2px solid #3498db;
    padding-bottom: 0.2em;
}

h2 {
    font-size: 1.3em;
    border-bottom: 1px solid #bdc3c7;
    padding-bottom: 0.1em;
}

h3 { font-size: 1.1em; }
h4, h5, h6 { font-size: 1.0em; text-decoration: underline; }

h1, h2, h3 {
    page-break-after: avoid;
    break-after: avoid;
}

p {
    margin: 0.5em 0;
    text-align: justify;
}

p, li {
    orphans: 3;
    widows: 3;
}

code {
    background-color: #f8f9fa;
    border: 1px solid #e9ecef;
    border-radius: 3px;
    padding: 0.1em 0.3em;
    font-family: 'Courier New', Consolas, monospace;
    font-size: 0.8em;
    color: #e83e8c;
}

pre {
    background-color: #f8f9fa;
    border: 1px solid #e9ecef;
    border-radius: 5px;
    padding: 0.5em;
    overflow-x: auto;
    margin: 0.5em 0;
    font-size: 0.8em;
}

pre code {
    background: none;
    border: none;
    padding: 0;
    color: #333;
}

blockquote {
    border-left: 4px solid #3498db;
    margin: 0.5em 0;
    padding: 0.3em 0.8em;
    background-color: #f8f9fa;
    color: #555;
}

table {
    border-collapse: collapse;
    width: 100%;
    max-width: 100%;
    margin: 0.5em 0;
}

th, td {
    border: 1px solid #ddd;
    padding: 0.3em;
    text-align: left;
}

th {
    background-color: #f8f9fa;
    font-weight: 600;
}

ul, ol {
    margin: 0.5em 0;
    padding-left: 1.5em;
}

img {
    max-width: 100%;
    height: auto;
    display: block;
    margin: 0.5em auto;
}

a {
    color: #3498db;
    text-decoration: none;
}

.mermaid {
    text-align: center;
    margin: 1em 0;
}

/* Prevent large elements from breaking across pages */
pre, blockquote, table, img, .mermaid {
    page-break-inside: avoid;
    break-inside: avoid;
}

.page-break {
    page-break-before: always;
    break-before: page;
}
"""

STYLE_PROFILES: Dict[str, StyleProfile] = {
    "minimal": StyleProfile(
        name="minimal",
        description="Margin reset only, browser default typography",
        css=_MINIMAL_CSS,
    ),
    "book": StyleProfile(
        name="book",
        description="Print-typeset book styling with serif body and justified paragraphs",
        css=_BOOK_CSS,
    ),
    "print": StyleProfile(
        name="print",
        description="Sans-serif A4 print styling with table and page-break rules",
        css=_PRINT_CSS,
    ),
}

DEFAULT_STYLE_PROFILE = "book"


def get_markdown_profile(name: str) -> MarkdownProfile:
    """Look up a markdown profile by name."""
    if name not in MARKDOWN_PROFILES:
        available_profiles = ", ".join(MARKDOWN_PROFILES.keys())
        raise ConfigurationError(
            f"Invalid markdown profile '{name}'. Available profiles: {available_profiles}"
        )
    return MARKDOWN_PROFILES[name]


def get_style_profile(name: str) -> StyleProfile:
    """Look up a style profile by name."""
    if name not in STYLE_PROFILES:
        available_profiles = ", ".join(STYLE_PROFILES.keys())
        raise ConfigurationError(
            f"Invalid style profile '{name}'. Available profiles: {available_profiles}"
        )
    return STYLE_PROFILES[name]
