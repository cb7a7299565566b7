"""Shared test fixtures."""

import pytest

from mermaid_pdf.console import ConsoleLogger

from .fakes import FakePlaywright


@pytest.fixture
def fake_playwright():
    return FakePlaywright()


@pytest.fixture
def logger():
    return ConsoleLogger(debug=True)


@pytest.fixture
def sample_markdown():
    return (
        "# Architecture Notes\n"
        "\n"
        "Some *intro* text with a link to https://example.com.\n"
        "\n"
        "## Flow\n"
        "\n"
        "```mermaid\n"
        "graph TD\n"
        "    A[Start] --> B{Check}\n"
        "    B -->|yes| C[Done]\n"
        "```\n"
        "\n"
        "```python\n"
        "print('hello')\n"
        "```\n"
    )


@pytest.fixture
def markdown_file(tmp_path, sample_markdown):
    path = tmp_path / "notes.md"
    path.write_text(sample_markdown, encoding="utf-8")
    return path
