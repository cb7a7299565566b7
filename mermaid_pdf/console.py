"""
Coloured console logging shared by the pipeline and the CLI.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import sys
import threading

from colorama import init, Fore, Style

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ConsoleLogger:
    """Prefix-tagged coloured logger. Errors go to stderr, everything else to stdout."""

    def __init__(self, debug: bool = False):
        self.debug_enabled = debug
        self._lock = threading.Lock()

    def _emit(self, tag: str, color: str, message: str, stream=None) -> None:
        with self._lock:
            print(f"{color}[{tag}]{Style.RESET_ALL} {message}", file=stream or sys.stdout)

    def debug(self, message: str) -> None:
        """Log debug message with color (only if debug mode is enabled)."""
        if self.debug_enabled:
            self._emit("DEBUG", Fore.CYAN, message)

    def info(self, message: str) -> None:
        """Log info message with color."""
        self._emit("INFO", Fore.GREEN, message)

    def warning(self, message: str) -> None:
        """Log warning message with color."""
        self._emit("WARNING", Fore.YELLOW, message)

    def error(self, message: str) -> None:
        """Log error message with color."""
        self._emit("ERROR", Fore.RED, message, stream=sys.stderr)

    def success(self, message: str) -> None:
        """Log success message with color."""
        self._emit("OK", Fore.GREEN, message)
