"""
Runtime dependency checks and Chromium installation.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import importlib.util
import subprocess
import sys
from typing import List, Optional, Tuple

from .console import ConsoleLogger

# (import name, distribution name)
REQUIRED_MODULES: List[Tuple[str, str]] = [
    ("playwright", "playwright"),
    ("markdown_it", "markdown-it-py"),
    ("colorama", "colorama"),
    ("tqdm", "tqdm"),
]

# Needed only by markdown profiles that enable linkify
OPTIONAL_MODULES: List[Tuple[str, str]] = [
    ("linkify_it", "linkify-it-py"),
]


def run_command(cmd: List[str], description: str, logger: Optional[ConsoleLogger] = None) -> bool:
    """Run a command and return success status."""
    logger = logger or ConsoleLogger()
    logger.info(f"Installing {description}...")
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to install {description}: {e.stderr}")
        return False
    except FileNotFoundError as e:
        logger.error(f"Failed to install {description}: {e}")
        return False
    logger.success(f"{description} installed successfully")
    return True


def install_browsers(logger: Optional[ConsoleLogger] = None) -> bool:
    """Install the Chromium build Playwright drives."""
    return run_command(
        [sys.executable, "-m", "playwright", "install", "chromium"],
        "Playwright Chromium",
        logger,
    )


def missing_modules(check_optional: bool = True) -> List[str]:
    """Distribution names whose import module cannot be found."""
    modules = REQUIRED_MODULES + (OPTIONAL_MODULES if check_optional else [])
    return [dist for module, dist in modules if importlib.util.find_spec(module) is None]


def check_dependencies(check_optional: bool = False, logger: Optional[ConsoleLogger] = None) -> bool:
    """Log and report whether every Python dependency is importable."""
    logger = logger or ConsoleLogger()
    missing = missing_modules(check_optional)
    if not missing:
        logger.debug("All Python dependencies are available")
        return True

    logger.error(f"Missing Python packages: {', '.join(missing)}")
    logger.error(f"Install them with: {sys.executable} -m pip install {' '.join(missing)}")
    return False
