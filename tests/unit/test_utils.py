#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_utils.py
"""Unit tests for utility modules.

Tests cover:
- MIME type helpers and file parse type decisions
- Search word extraction
- Date normalization
- Markdown detection
- URI encoding and decoding
- Image conversion to data URLs

"""

import asyncio
import base64
import datetime as dt
from io import BytesIO

import pytest

from richnote.constants import NOT_IMPORTABLE_MESSAGE
from richnote.ingestion import SourceFile
from richnote.options import IngestionOptions
from richnote.utils.dates import normalize_date
from richnote.utils.images import alt_from_file_name, convert_image_bytes, encode_data_url, image_file_to_data_url
from richnote.utils.markdown_detect import is_likely_markdown
from richnote.utils.mime import (
    base_mime_type,
    determine_parse_type,
    extract_extension,
    extract_subtype,
    has_tags_like_html,
    target_format,
)
from richnote.utils.uri import decode_uri, encode_uri
from richnote.utils.words import normalize_word, parse_words, remove_diacritics, remove_prefix_words


@pytest.mark.unit
class TestMime:
    """Tests for MIME type helpers."""

    def test_base_and_subtype(self) -> None:
        """Test stripping MIME parameters."""
        assert base_mime_type("text/html;hint=SEMANTIC") == "text/html"
        assert extract_subtype("text/markdown;hint=COMMONMARK") == "markdown"
        assert extract_subtype(None) == ""

    def test_extract_extension(self) -> None:
        """Test extension extraction."""
        assert extract_extension("notes/Todo.MD") == ".md"
        assert extract_extension(".bashrc") == ""
        assert extract_extension("README") == ""

    def test_has_tags_like_html(self) -> None:
        """Test which MIME types count as markup."""
        assert has_tags_like_html("text/html;charset=utf-8")
        assert has_tags_like_html("image/svg+xml")
        assert not has_tags_like_html("text/plain")
        assert not has_tags_like_html(None)

    def test_target_format(self) -> None:
        """Test classification of note subtypes."""
        assert target_format("html;hint=SEMANTIC") == "rich"
        assert target_format("markdown;hint=COMMONMARK") == "markdown"
        assert target_format("csv") == "plain"
        assert target_format(None) == "plain"


@pytest.mark.unit
class TestDetermineParseType:
    """Tests for determine_parse_type."""

    def test_image(self) -> None:
        """Test that images keep their MIME type."""
        info = asyncio.run(determine_parse_type(SourceFile("a.png", "image/png", b"")))
        assert info.parse_type == "image/png"
        assert info.importable

    def test_markup(self) -> None:
        """Test that SVG files are handled as images."""
        info = asyncio.run(determine_parse_type(SourceFile("a.svg", "image/svg+xml", b"<svg/>")))
        assert info.parse_type == "image/svg+xml"

    def test_xhtml_parsed_as_html(self) -> None:
        """Test that XHTML is parsed as HTML."""
        info = asyncio.run(determine_parse_type(SourceFile("a.xhtml", "application/xhtml+xml", b"")))
        assert info.parse_type == "text/html"

    def test_plain_text_that_looks_like_markdown(self) -> None:
        """Test that plain text files are inspected for Markdown."""
        info = asyncio.run(determine_parse_type(SourceFile("a.txt", "text/plain", b"## Heading\n")))
        assert info.parse_type == "text/plain"
        assert info.is_markdown

    def test_extension_without_mime_type(self) -> None:
        """Test that an allowed extension makes an untyped file importable."""
        info = asyncio.run(determine_parse_type(SourceFile("script.py", "", b"print(1)")))
        assert info.parse_type == "text/py"

    def test_binary_not_importable(self) -> None:
        """Test that binary types are refused with a message."""
        info = asyncio.run(determine_parse_type(SourceFile("a.pdf", "application/pdf", b"%PDF")))
        assert not info.importable
        assert info.message == NOT_IMPORTABLE_MESSAGE

    def test_rtf_not_importable(self) -> None:
        """Test that unsupported text subtypes are refused."""
        info = asyncio.run(determine_parse_type(SourceFile("a.rtf", "text/rtf", b"{\\rtf1}")))
        assert not info.importable


@pytest.mark.unit
class TestWords:
    """Tests for search word extraction."""

    def test_parse_words(self) -> None:
        """Test diacritics, entities and hyphenation."""
        assert parse_words("Crème brûlée &amp; co-op") == {"CREME", "BRULEE", "COOP"}

    def test_numbers_keep_dots(self) -> None:
        """Test that dots survive inside numbers only."""
        assert normalize_word("3.14") == "3.14"
        assert normalize_word("e.g") == "EG"

    def test_remove_diacritics(self) -> None:
        """Test stripping combining marks."""
        assert remove_diacritics("naïve") == "naive"

    def test_remove_prefix_words(self) -> None:
        """Test that prefixes of other words are dropped."""
        assert remove_prefix_words({"CAR", "CART", "DOG"}) == {"CART", "DOG"}


@pytest.mark.unit
class TestDates:
    """Tests for normalize_date."""

    def test_iso_string(self) -> None:
        """Test an ISO-8601 string with a Z suffix."""
        assert normalize_date("2024-05-01T10:00:00Z") == dt.datetime(2024, 5, 1, 10, tzinfo=dt.timezone.utc)

    def test_epoch_millis(self) -> None:
        """Test epoch milliseconds as a number and as a string."""
        expected = dt.datetime(2001, 9, 9, 1, 46, 40, tzinfo=dt.timezone.utc)
        assert normalize_date(1_000_000_000_000) == expected
        assert normalize_date("1000000000000") == expected

    def test_rfc_2822(self) -> None:
        """Test an e-mail style date."""
        assert normalize_date("Wed, 01 May 2024 10:00:00 +0000").year == 2024

    def test_date_object(self) -> None:
        """Test a plain date."""
        assert normalize_date(dt.date(2024, 5, 1)) == dt.datetime(2024, 5, 1, tzinfo=dt.timezone.utc)

    def test_garbage_falls_back_to_now(self) -> None:
        """Test that unparsable values become the current time."""
        before = dt.datetime.now(dt.timezone.utc)
        assert normalize_date("soon") >= before
        assert normalize_date(None) >= before


@pytest.mark.unit
class TestMarkdownDetection:
    """Tests for is_likely_markdown."""

    @pytest.mark.parametrize(
        "text",
        [
            "Some **bold** claim",
            "an _emphasized_ word",
            "see [docs](https://example.com)",
            "## Heading",
            "> quoted",
            "```\ncode\n```",
            "1. one\n2. two",
            "- a\n- b",
        ],
    )
    def test_markdown(self, text: str) -> None:
        """Test texts that look like Markdown."""
        assert is_likely_markdown(text)

    @pytest.mark.parametrize("text", ["Call me at 5 pm", "2 * 3 = 6", "- only one item", "# not a heading level"])
    def test_not_markdown(self, text: str) -> None:
        """Test texts that do not look like Markdown."""
        assert not is_likely_markdown(text)


@pytest.mark.unit
class TestUri:
    """Tests for encode_uri and decode_uri."""

    def test_encode(self) -> None:
        """Test that spaces and non-ASCII are encoded and delimiters kept."""
        assert encode_uri("https://example.com/a b?q=ü#top") == "https://example.com/a%20b?q=%C3%BC#top"

    def test_decode_keeps_reserved_escapes(self) -> None:
        """Test that escaped delimiters stay escaped."""
        assert decode_uri("https://example.com/a%20b%2Fc") == "https://example.com/a b%2Fc"

    def test_decode_multibyte(self) -> None:
        """Test decoding a UTF-8 sequence."""
        assert decode_uri("q=%C3%BC") == "q=ü"

    def test_decode_malformed(self) -> None:
        """Test that a truncated sequence raises ValueError."""
        with pytest.raises(ValueError):
            decode_uri("%C3")


@pytest.mark.unit
class TestImages:
    """Tests for image conversion."""

    def test_alt_from_file_name(self) -> None:
        """Test the alt text derived from a file name."""
        assert alt_from_file_name("beach.jpg") == "beach"
        assert alt_from_file_name(".hidden") == ".hidden"
        assert alt_from_file_name(None) == ""

    def test_encode_data_url(self) -> None:
        """Test base64 data URL encoding."""
        assert encode_data_url(b"hi", "text/plain") == "data:text/plain;base64,aGk="

    def test_small_image_passes_through(self, png_bytes: bytes) -> None:
        """Test that a small image keeps its bytes."""
        result = convert_image_bytes(png_bytes, "image/png", "dot.png")
        assert result.data_url == encode_data_url(png_bytes, "image/png")
        assert result.alt == "dot"

    def test_large_image_resized_to_jpeg(self) -> None:
        """Test that an oversized image is scaled down and re-encoded."""
        from PIL import Image

        buffer = BytesIO()
        Image.new("RGBA", (40, 20), (0, 0, 255, 128)).save(buffer, format="PNG")
        options = IngestionOptions(max_image_dimension=10)
        result = convert_image_bytes(buffer.getvalue(), "image/png", "wide.png", options)
        assert result.data_url.startswith("data:image/jpeg;base64,")
        decoded = base64.b64decode(result.data_url.split(",", 1)[1])
        with Image.open(BytesIO(decoded)) as image:
            assert image.size == (10, 5)

    def test_small_svg_passes_through(self) -> None:
        """Test that SVG is not decoded."""
        result = convert_image_bytes(b"<svg/>", "image/svg+xml")
        assert result.data_url == encode_data_url(b"<svg/>", "image/svg+xml")

    def test_image_file_to_data_url(self, png_bytes: bytes) -> None:
        """Test converting a file in a worker thread."""
        result = asyncio.run(image_file_to_data_url(SourceFile("red.png", "image/png", png_bytes)))
        assert result.data_url.startswith("data:image/png;base64,")
        assert result.alt == "red"
