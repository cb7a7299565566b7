#!/usr/bin/env python3
"""
Markdown to PDF converter with Mermaid diagram support.
Uses Playwright to drive headless Chromium for rendering and PDF capture.
"""

import sys

from mermaid_pdf.cli import main

if __name__ == "__main__":
    sys.exit(main())
