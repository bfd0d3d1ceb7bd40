"""
Tests for HTML flattening.
"""

from unittest.mock import patch

from html_text import html_to_text


class TestHtmlToText:
    """Test HTML to plain text conversion."""

    def test_formatting_is_stripped(self):
        """Test tags and emphasis markers disappear."""
        text = html_to_text("<p>Hello <b>bold</b> world</p>")
        assert text.strip() == "Hello bold world"

    def test_links_kept_by_default(self):
        """Test link URLs are rendered unless omitted."""
        text = html_to_text('<a href="http://example.com/x">the site</a>')
        assert "http://example.com/x" in text
        assert "the site" in text

    def test_omit_links(self):
        """Test link URLs are dropped when asked."""
        text = html_to_text('<a href="http://example.com/x">the site</a>', omit_links=True)
        assert "example.com" not in text
        assert text.strip() == "the site"

    def test_tables(self):
        """Test table cells come through with or without padding."""
        html = "<table><tr><th>name</th><th>n</th></tr><tr><td>alice</td><td>1</td></tr></table>"
        for pretty in (False, True):
            text = html_to_text(html, pretty_tables=pretty)
            assert "alice" in text
            assert "name" in text

    def test_failure_returns_error_text(self):
        """Test a conversion failure degrades to the error description."""
        with patch("html_text.html2text.HTML2Text") as converter:
            converter.return_value.handle.side_effect = ValueError("boom")
            assert html_to_text("<p>x</p>") == "boom"
