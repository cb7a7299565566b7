"""
Standalone HTML document assembly.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import html
import json
from typing import Optional, Union

from .config import DEFAULT_MERMAID_URL
from .profiles import DEFAULT_STYLE_PROFILE, StyleProfile, get_style_profile

DEFAULT_TITLE = "Document"


class DocumentAssembler:
    """Wrap an HTML fragment into a self-contained renderable page.

    The page loads Mermaid as an ES module and initialises it with
    ``startOnLoad`` so every ``.mermaid`` container in the body is replaced by
    an SVG once the document has loaded.
    """

    def __init__(self, mermaid_url: str = DEFAULT_MERMAID_URL):
        self.mermaid_url = mermaid_url

    def _mermaid_bootstrap(self) -> str:
        return (
            '<script type="module">\n'
            f"      import mermaid from {json.dumps(self.mermaid_url)};\n"
            "      mermaid.initialize({ startOnLoad: true });\n"
            "    </script>"
        )

    def assemble(
        self,
        html_fragment: str,
        style_profile: Union[str, StyleProfile] = DEFAULT_STYLE_PROFILE,
        title: Optional[str] = None,
    ) -> str:
        """Return the full document. The fragment is embedded unmodified."""
        profile = get_style_profile(style_profile) if isinstance(style_profile, str) else style_profile
        doc_title = html.escape(title or DEFAULT_TITLE)

        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{doc_title}</title>
    {self._mermaid_bootstrap()}
    <style>{profile.css}    </style>
</head>
<body>
{html_fragment}
</body>
</html>
"""
