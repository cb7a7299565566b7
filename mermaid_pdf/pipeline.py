"""
End-to-end conversion of one markdown file into one PDF.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import asyncio
from pathlib import Path
from typing import Callable, Optional

from playwright.async_api import async_playwright
from tqdm import tqdm

from .assembler import DocumentAssembler
from .config import ConversionRequest
from .console import ConsoleLogger
from .errors import ConversionError, InputReadError, OutputWriteError
from .renderer import RenderOrchestrator
from .transformer import MarkdownTransformer


def title_from_filename(path: Path) -> str:
    """Humanized filename stem, used when the document has no level-1 heading."""
    stem = path.stem.replace('_', ' ').replace('-', ' ').strip()
    return stem.title() if stem else path.stem


class ConversionPipeline:
    """Read, transform, assemble, render and write a single document."""

    TOTAL_STEPS = 5

    def __init__(
        self,
        logger: Optional[ConsoleLogger] = None,
        playwright_factory: Callable = async_playwright,
        show_progress: bool = True,
    ):
        self.logger = logger or ConsoleLogger()
        self.playwright_factory = playwright_factory
        self.show_progress = show_progress

    def _make_renderer(self, request: ConversionRequest) -> RenderOrchestrator:
        return RenderOrchestrator(
            logger=self.logger,
            render_timeout_ms=request.render_timeout_ms,
            wait_for_network_idle=request.wait_for_network_idle,
            keep_temp=request.keep_temp,
            playwright_factory=self.playwright_factory,
        )

    def _read_input(self, input_path: Path) -> str:
        try:
            with open(input_path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(f"Could not read {input_path}: {e}") from e

    def _write_output(self, pdf_bytes: bytes, output_path: Path) -> None:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'wb') as f:
                f.write(pdf_bytes)
        except OSError as e:
            raise OutputWriteError(f"Could not write {output_path}: {e}") from e

    async def convert(self, request: ConversionRequest) -> Path:
        """Run one conversion. Returns the output path or raises ConversionError."""
        filename = request.input_path.name
        self.logger.debug(
            f"Converting {request.input_path} with style '{request.style_profile}', "
            f"markdown '{request.markdown_profile}', page {request.page_format.describe()}"
        )

        try:
            with tqdm(total=self.TOTAL_STEPS, desc=f"  {filename}", unit="step",
                      leave=False, disable=not self.show_progress) as pbar:
                # Step 1: Read markdown content
                pbar.set_description(f"  {filename} - Reading")
                markdown_text = self._read_input(request.input_path)
                pbar.update(1)

                # Step 2: Markdown to HTML fragment
                pbar.set_description(f"  {filename} - Markdown")
                transformed = MarkdownTransformer(request.markdown_profile).transform_document(markdown_text)
                self.logger.debug(
                    f"Found {len(transformed.anchors)} heading(s) and {transformed.diagram_count} Mermaid diagram(s)"
                )
                pbar.update(1)

                # Step 3: Standalone HTML document
                pbar.set_description(f"  {filename} - HTML")
                doc_title = transformed.title or title_from_filename(request.input_path)
                full_html = DocumentAssembler(request.mermaid_url).assemble(
                    transformed.html, request.style_profile, title=doc_title
                )
                pbar.update(1)

                # Step 4: Render and capture
                pbar.set_description(f"  {filename} - PDF")
                pdf_bytes = await self._make_renderer(request).render(
                    full_html, request.page_format, request.margins, request.temp_path
                )
                pbar.update(1)

                # Step 5: Write the PDF
                pbar.set_description(f"  {filename} - Writing")
                self._write_output(pdf_bytes, request.output_path)
                pbar.update(1)

        except ConversionError as e:
            self.logger.error(f"Error during conversion of {filename}: {e}")
            raise

        self.logger.success(f"PDF created successfully: {request.output_path}")
        return request.output_path

    def run(self, request: ConversionRequest) -> Path:
        """Synchronous entry point: run ``convert`` on a fresh event loop."""
        return asyncio.run(self.convert(request))
