"""
Markdown to HTML fragment conversion.

Headings get slug ids from a core rule over the token stream, and ``mermaid``
fences are rendered as diagram containers by the fence render rule, so the
diagram substitution never depends on the shape of the emitted HTML.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from .errors import MarkdownTransformError
from .profiles import DEFAULT_MARKDOWN_PROFILE, MarkdownProfile, get_markdown_profile

DIAGRAM_LANGUAGE = "mermaid"
DIAGRAM_CLASS = "mermaid"
PAGE_BREAK_LANGUAGE = "page-break"
PAGE_BREAK_HTML = '<div class="page-break"></div>\n'
FALLBACK_ANCHOR = "section"

_PAGE_BREAK_COMMENT = re.compile(r'^<!--\s*page-break\s*-->$', re.IGNORECASE)


def slugify(title: str) -> str:
    """Derive a heading anchor id from its plain-text title.

    >>> slugify("Hello, World!")
    'hello-world'
    """
    slug = title.lower()
    slug = re.sub(r'[^\w\s-]', '', slug, flags=re.ASCII)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return re.sub(r'(^-|-$)', '', slug)


def heading_text(inline: Token) -> str:
    """Plain text of a heading's inline token, markup removed."""
    if not inline.children:
        return inline.content

    parts = []
    for child in inline.children:
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
    return "".join(parts)


def _fence_language(token: Token) -> str:
    info = token.info.strip()
    return info.split(maxsplit=1)[0].lower() if info else ""


def _heading_anchor_rule(state: StateCore) -> None:
    """Attach an ``id`` to every heading_open token and record it in env."""
    tokens = state.tokens
    anchors = state.env.setdefault("anchors", [])

    for idx, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        text = heading_text(tokens[idx + 1])
        slug = slugify(text) or FALLBACK_ANCHOR
        token.attrSet("id", slug)
        anchors.append(slug)

        if token.tag == "h1" and "title" not in state.env:
            state.env["title"] = text.strip()


@dataclass
class TransformedDocument:
    """HTML fragment plus what the transformation learned about it."""

    html: str
    anchors: List[str] = field(default_factory=list)
    diagram_count: int = 0
    title: Optional[str] = None


class MarkdownTransformer:
    """Render markdown into an addressable HTML fragment."""

    def __init__(self, profile: Union[str, MarkdownProfile] = DEFAULT_MARKDOWN_PROFILE):
        self.profile = get_markdown_profile(profile) if isinstance(profile, str) else profile
        self._md = self._build_parser()

    def _build_parser(self) -> MarkdownIt:
        md = MarkdownIt(
            "js-default",
            {
                "html": self.profile.html,
                "linkify": self.profile.linkify,
                "typographer": self.profile.typographer,
            },
        )
        md.core.ruler.push("heading_anchors", _heading_anchor_rule)

        default_fence = md.renderer.rules["fence"]
        default_html_block = md.renderer.rules["html_block"]

        def fence(tokens, idx, options, env):
            token = tokens[idx]
            language = _fence_language(token)

            if language == DIAGRAM_LANGUAGE:
                env["diagram_count"] = env.get("diagram_count", 0) + 1
                return f'<div class="{DIAGRAM_CLASS}">{escapeHtml(token.content)}</div>\n'

            if language == PAGE_BREAK_LANGUAGE and not token.content.strip():
                return PAGE_BREAK_HTML

            return default_fence(tokens, idx, options, env)

        def html_block(tokens, idx, options, env):
            # Only reachable when raw HTML is enabled
            if _PAGE_BREAK_COMMENT.match(tokens[idx].content.strip()):
                return PAGE_BREAK_HTML
            return default_html_block(tokens, idx, options, env)

        md.renderer.rules["fence"] = fence
        md.renderer.rules["html_block"] = html_block
        return md

    def transform_document(self, markdown_text: str) -> TransformedDocument:
        env: Dict[str, Any] = {}
        try:
            html = self._md.render(markdown_text, env)
        except Exception as e:
            raise MarkdownTransformError(f"Failed to parse markdown: {e}") from e

        return TransformedDocument(
            html=html,
            anchors=list(env.get("anchors", [])),
            diagram_count=env.get("diagram_count", 0),
            title=env.get("title") or None,
        )

    def transform(self, markdown_text: str) -> str:
        """Return the HTML fragment for ``markdown_text``."""
        return self.transform_document(markdown_text).html
