"""
Headless Chromium rendering of an assembled document into PDF bytes.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .config import DEFAULT_RENDER_TIMEOUT_SECONDS, Margins, PageFormat
from .console import ConsoleLogger
from .errors import (
    CaptureError,
    CleanupError,
    DiagramRenderTimeout,
    EngineLaunchError,
    NavigationError,
    OutputWriteError,
)
from .transformer import DIAGRAM_CLASS

DEFAULT_LAUNCH_ARGS = [
    '--disable-dev-shm-usage',  # Use /tmp instead of /dev/shm (prevents OOM crashes)
    '--disable-gpu',             # No GPU in headless mode
    '--no-sandbox',              # Required in some environments
]

_DIAGRAM_COUNT_JS = f"() => document.querySelectorAll('.{DIAGRAM_CLASS}').length"

_DIAGRAMS_RENDERED_JS = f"""() => {{
    const diagrams = document.querySelectorAll('.{DIAGRAM_CLASS}');
    return Array.from(diagrams).every((d) => d.querySelector('svg'));
}}"""

_CONTENT_HEIGHT_JS = "() => document.documentElement.scrollHeight"


class RenderOrchestrator:
    """Load a document in Chromium, wait for Mermaid, capture a PDF.

    Steps run strictly in order. Capture never starts before every diagram
    container holds an SVG. The browser is closed and the temporary document
    deleted on every exit path.
    """

    def __init__(
        self,
        logger: Optional[ConsoleLogger] = None,
        render_timeout_ms: float = DEFAULT_RENDER_TIMEOUT_SECONDS * 1000,
        wait_for_network_idle: bool = True,
        keep_temp: bool = False,
        playwright_factory: Callable = async_playwright,
        launch_args: Optional[List[str]] = None,
    ):
        self.logger = logger or ConsoleLogger()
        self.render_timeout_ms = render_timeout_ms
        self.wait_for_network_idle = wait_for_network_idle
        self.keep_temp = keep_temp
        self._playwright_factory = playwright_factory
        self.launch_args = DEFAULT_LAUNCH_ARGS if launch_args is None else launch_args

    async def render(
        self,
        document: str,
        page_format: PageFormat,
        margins: Margins,
        temp_path: Union[str, Path],
    ) -> bytes:
        """Render ``document`` and return the PDF bytes."""
        temp_path = Path(temp_path)
        self._write_temp(document, temp_path)
        try:
            return await self._render_file(temp_path, page_format, margins)
        finally:
            self._remove_temp(temp_path)

    def _write_temp(self, document: str, temp_path: Path) -> None:
        try:
            temp_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(document, encoding='utf-8')
        except OSError as e:
            raise OutputWriteError(f"Could not write temporary document {temp_path}: {e}") from e
        self.logger.debug(f"Wrote temporary document: {temp_path}")

    def _remove_temp(self, temp_path: Path) -> None:
        if self.keep_temp:
            self.logger.info(f"Keeping temporary document: {temp_path}")
            return
        try:
            temp_path.unlink()
            self.logger.debug(f"Removed temporary document: {temp_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            # Never masks the primary outcome
            self.logger.warning(str(CleanupError(f"Could not delete temporary document {temp_path}: {e}")))

    async def _render_file(self, temp_path: Path, page_format: PageFormat, margins: Margins) -> bytes:
        playwright, browser = await self._launch_browser()
        try:
            try:
                page = await browser.new_page()
            except PlaywrightError as e:
                raise EngineLaunchError(f"Could not open a browser page: {e}") from e

            await self._navigate(page, temp_path)
            await self._wait_for_diagrams(page)
            if self.wait_for_network_idle:
                await self._wait_for_network_idle(page)

            content_height = None
            if page_format.continuous:
                content_height = await self._content_height(page)

            return await self._capture(page, page_format, margins, content_height)
        finally:
            await self._close_browser(playwright, browser)

    async def _launch_browser(self) -> Tuple[object, object]:
        """Start Playwright and launch a fresh headless Chromium instance."""
        playwright = None
        try:
            playwright = await self._playwright_factory().start()
            browser = await playwright.chromium.launch(headless=True, args=self.launch_args)
        except Exception as e:
            if playwright is not None:
                await self._stop_playwright(playwright)
            raise EngineLaunchError(f"Could not launch Chromium: {e}") from e

        self.logger.debug("Browser instance launched")
        return playwright, browser

    async def _close_browser(self, playwright, browser) -> None:
        """Close browser and stop Playwright. Failures are logged only."""
        try:
            await browser.close()
        except PlaywrightError as e:
            self.logger.warning(f"Failed to close browser cleanly: {e}")
        await self._stop_playwright(playwright)
        self.logger.debug("Browser instance closed and cleaned up")

    async def _stop_playwright(self, playwright) -> None:
        try:
            await playwright.stop()
        except PlaywrightError as e:
            self.logger.warning(f"Failed to stop Playwright cleanly: {e}")

    async def _navigate(self, page, temp_path: Path) -> None:
        url = temp_path.resolve().as_uri()
        try:
            await page.goto(url, timeout=self.render_timeout_ms)
        except PlaywrightError as e:
            raise NavigationError(f"Could not load {url}: {e}") from e
        self.logger.debug(f"Loaded {url}")

    async def _wait_for_diagrams(self, page) -> None:
        """Poll until every diagram container holds a rendered SVG."""
        try:
            diagram_count = await page.evaluate(_DIAGRAM_COUNT_JS)
        except PlaywrightError as e:
            raise NavigationError(f"Could not inspect the loaded document: {e}") from e

        self.logger.debug(f"Waiting for {diagram_count} Mermaid diagram(s) to render")
        try:
            await page.wait_for_function(_DIAGRAMS_RENDERED_JS, timeout=self.render_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise DiagramRenderTimeout(diagram_count, self.render_timeout_ms) from e
        except PlaywrightError as e:
            raise NavigationError(f"Page failed while waiting for diagrams: {e}") from e
        self.logger.debug("Mermaid diagrams rendered")

    async def _wait_for_network_idle(self, page) -> None:
        try:
            await page.wait_for_load_state('networkidle', timeout=self.render_timeout_ms)
        except PlaywrightTimeoutError:
            self.logger.warning("Network did not settle before timeout, capturing anyway")
        except PlaywrightError as e:
            raise NavigationError(f"Page failed while waiting for network idle: {e}") from e

    async def _content_height(self, page) -> int:
        try:
            height = await page.evaluate(_CONTENT_HEIGHT_JS)
        except PlaywrightError as e:
            raise NavigationError(f"Could not measure content height: {e}") from e
        self.logger.debug(f"Content height: {height}px")
        return int(height)

    async def _capture(
        self,
        page,
        page_format: PageFormat,
        margins: Margins,
        content_height: Optional[int],
    ) -> bytes:
        size = page_format.pdf_size(content_height)
        self.logger.debug(f"Capturing PDF ({page_format.describe()}) with margins: {margins.as_dict()}")
        try:
            return await page.pdf(
                **size,
                margin=margins.as_dict(),
                print_background=True,
                tagged=True,
                outline=True,
                landscape=False,
                display_header_footer=False,
                prefer_css_page_size=False,
            )
        except PlaywrightError as e:
            raise CaptureError(f"PDF capture failed: {e}") from e
