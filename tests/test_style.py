"""Tests for style primitives."""

import pytest

from apo.ui.style import Colors, display_width, pad, style, truncate


class TestStyle:
    """Tests for style()."""

    def test_no_codes_returns_text(self):
        """Test text is unchanged without codes."""
        assert style("plain") == "plain"

    def test_codes_and_single_reset(self):
        """Test codes are prepended and one reset appended."""
        assert style("x", Colors.BOLD, Colors.RED) == "\033[1m\033[31mx\033[0m"


class TestPad:
    """Tests for pad()."""

    def test_pads_short_text(self):
        assert pad("ab", 5) == "ab   "

    def test_cuts_long_text(self):
        assert pad("abcdef", 3) == "abc"

    def test_non_positive_width(self):
        assert pad("abc", 0) == ""

    def test_wide_glyphs_measured_in_cells(self):
        """Test emoji count as two cells."""
        padded = pad("🔀", 4)
        assert display_width(padded) == 4


class TestTruncate:
    """Tests for truncate()."""

    def test_fits_unchanged(self):
        assert truncate("hello", 5) == "hello"

    def test_ellipsis(self):
        """Test long text keeps max_width - 3 cells plus an ellipsis."""
        assert truncate("hello world", 8) == "hello..."

    @pytest.mark.parametrize("width,expected", [(3, "hel"), (2, "he"), (1, "h"), (0, "")])
    def test_hard_cut_when_no_room_for_ellipsis(self, width, expected):
        assert truncate("hello", width) == expected

    def test_wide_glyph_width(self):
        """Test truncation never exceeds the width for wide characters."""
        result = truncate("漢字漢字漢字", 7)
        assert display_width(result) <= 7
        assert result.endswith("...")
