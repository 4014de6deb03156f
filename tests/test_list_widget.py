"""Tests for ListWidget selection, scrolling and filtering."""

import random

import pytest

from apo.ui.components import ListItem, ListWidget


def make_items(*labels: str) -> list[ListItem]:
    return [ListItem(id=str(i), icon="*", label=label, data=i) for i, label in enumerate(labels)]


@pytest.fixture
def widget(terminal) -> ListWidget:
    lst = ListWidget(terminal, "Items", search_icon="/")
    lst.set_items(make_items("alpha", "beta", "gamma", "delta", "Alphabet"))
    return lst


class TestNavigation:
    """Tests for moving the selection."""

    def test_move_down_scrolls_minimally(self, terminal):
        """Test 3 items with 2 visible rows: two moves down select 2 and scroll 1."""
        lst = ListWidget(terminal, "Items")
        lst.set_items(make_items("a", "b", "c"))
        lst.set_viewport_height(2)
        lst.move_down()
        lst.move_down()
        assert lst.selection == 2
        assert lst.scroll == 1

    def test_clamps_at_ends(self, widget):
        """Test there is no wraparound at either end."""
        widget.move_up()
        assert widget.selection == 0
        for _ in range(10):
            widget.move_down()
        assert widget.selection == 4

    def test_top_and_bottom(self, widget):
        widget.set_viewport_height(2)
        widget.move_to_bottom()
        assert widget.selection == 4
        assert widget.scroll == 3
        widget.move_to_top()
        assert widget.selection == 0
        assert widget.scroll == 0

    def test_scroll_invariant_under_random_moves(self, terminal):
        """Test selection stays in the viewport and scroll stays in range."""
        rng = random.Random(7)
        for count in (0, 1, 3, 10, 25):
            for height in (1, 2, 5, 30):
                lst = ListWidget(terminal, "Items")
                lst.set_items(make_items(*(f"item {i}" for i in range(count))))
                lst.set_viewport_height(height)
                for _ in range(60):
                    rng.choice([lst.move_up, lst.move_down, lst.move_to_top, lst.move_to_bottom])()
                    assert 0 <= lst.scroll <= max(0, count - height)
                    if count:
                        assert lst.scroll <= lst.selection < lst.scroll + height

    def test_shrinking_viewport_keeps_selection_visible(self, widget):
        widget.set_viewport_height(10)
        widget.move_to_bottom()
        widget.set_viewport_height(2)
        assert widget.scroll <= widget.selection < widget.scroll + 2


class TestSelection:
    """Tests for selected_item and selection."""

    def test_selected_item(self, widget):
        widget.move_down()
        assert widget.selected_item().label == "beta"

    def test_empty_list_has_no_selection(self, terminal):
        lst = ListWidget(terminal, "Items")
        assert lst.selection is None
        assert lst.selected_item() is None

    def test_selection_follows_filtered_sequence(self, widget):
        """Test the selected item is looked up through the filter."""
        widget.set_filter("alpha")
        widget.move_down()
        assert widget.selected_item().label == "Alphabet"
        assert widget.selected_item().data == 4


class TestFiltering:
    """Tests for the substring filter."""

    def test_case_insensitive_in_original_order(self, widget):
        widget.set_filter("ALPHA")
        assert widget.active_indices() == [0, 4]

    def test_same_query_twice_is_stable(self, widget):
        widget.set_filter("a")
        first = list(widget.active_indices())
        widget.move_down()
        widget.set_filter("a")
        assert widget.active_indices() == first
        assert widget.selection == 0

    def test_no_match_yields_empty_sequence(self, widget):
        """Test a query matching nothing shows nothing, not everything."""
        widget.set_filter("zzz")
        assert widget.active_indices() == []
        assert widget.selection is None
        assert widget.selected_item() is None

    def test_empty_query_means_no_filter(self, widget):
        widget.set_filter("")
        assert widget.is_filtered is False
        assert len(widget.active_indices()) == 5

    def test_clear_filter_restores_everything(self, widget):
        widget.set_filter("beta")
        widget.clear_filter()
        assert widget.active_indices() == [0, 1, 2, 3, 4]
        assert widget.selection == 0

    def test_filter_mode_toggle(self, widget):
        """Test entering keeps the query and leaving clears it."""
        widget.set_filter("gam")
        widget.enter_filter_mode()
        assert widget.filter_query == "gam"
        widget.toggle_filter_mode()
        assert widget.filter_mode is False
        assert widget.filter_query == ""
        assert widget.is_filtered is False

    def test_set_items_clears_filter(self, widget):
        widget.set_filter("beta")
        widget.set_items(make_items("one", "two"))
        assert widget.is_filtered is False
        assert widget.selection == 0


class TestRender:
    """Tests for drawing the list."""

    def test_title_counts(self, widget, output):
        widget.render(5, 2, 80, 10)
        assert "Items (5)" in output.getvalue()

    def test_filtered_title(self, widget, output):
        widget.set_filter("alpha")
        widget.render(5, 2, 80, 10)
        assert "Items (filtered: 2/5)" in output.getvalue()

    def test_render_sets_viewport(self, widget):
        widget.render(5, 2, 80, 10)
        assert widget.height == 7

    def test_empty_placeholder(self, terminal, output):
        lst = ListWidget(terminal, "Items")
        lst.render(5, 2, 80, 10)
        assert "No items" in output.getvalue()

    def test_no_matches_placeholder(self, widget, output):
        widget.set_filter("zzz")
        widget.render(5, 2, 80, 10)
        assert "No matches" in output.getvalue()

    def test_filter_prompt_in_filter_mode(self, widget, output):
        widget.enter_filter_mode()
        widget.set_filter("be")
        widget.render(5, 2, 80, 10)
        assert "be" in output.getvalue()
        assert "█" in output.getvalue()

    def test_scroll_indicators(self, widget, output):
        widget.render(5, 2, 80, 5)
        assert "▼" in output.getvalue()
        assert "▲" not in output.getvalue()

        output.truncate(0)
        output.seek(0)
        widget.move_to_bottom()
        widget.render(5, 2, 80, 5)
        assert "▲" in output.getvalue()
        assert "▼" not in output.getvalue()

    def test_selected_row_reversed(self, widget, output):
        widget.render(5, 2, 80, 10)
        assert "\033[7m* alpha" in output.getvalue()
