#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/conftest.py
"""Pytest configuration and shared fixtures for the richnote test suite."""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from richnote.ast import Document, Element, element, paragraph, text

settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")


@pytest.fixture
def sample_document() -> Document:
    """Provide a small normalized note with a heading, a list and a table."""
    return Document(
        children=[
            element("heading-one", "Groceries"),
            paragraph("Buy ", text("fresh", bold=True), " food"),
            element("bulleted-list", element("list-item", "milk"), element("list-item", "eggs")),
            Element(
                "table",
                [
                    element("table-row", element("table-cell", text("Item", bold=True)), element("table-cell", text("Qty", bold=True))),
                    element("table-row", element("table-cell", "milk"), element("table-cell", "2")),
                ],
            ),
        ]
    )


@pytest.fixture
def png_bytes() -> bytes:
    """Provide a 4x3 red PNG image."""
    from io import BytesIO

    from PIL import Image

    buffer = BytesIO()
    Image.new("RGB", (4, 3), "red").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def note_file(tmp_path: Path) -> Path:
    """Provide an HTML note on disk."""
    path = tmp_path / "note.html"
    path.write_text("<h1>Plan</h1><p>Step <b>one</b></p>", encoding="utf-8")
    return path
