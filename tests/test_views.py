"""Tests for the dashboard views."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from apo.agent import AgentResult
from apo.ui.terminal import Key, KeyType
from apo.ui.views import (
    BoardsView,
    CopilotView,
    DashboardView,
    PipelinesView,
    PRDetailView,
    PullRequestsView,
    ReposView,
    ViewId,
    WorkItemDetailView,
)
from apo.ui.views.copilot import MessageKind
from apo.ui.views.details import format_date, strip_html, wrap_text


def publish(snapshot, **categories):
    """Apply data the way a refresh cycle does."""
    with snapshot.lock:
        for name, value in categories.items():
            setattr(snapshot, name, value)
        snapshot.version += 1


def type_text(view, text: str) -> None:
    for char in text:
        assert view.handle_key(Key.of(char))


class TestViewId:
    """Tests for ViewId."""

    def test_detail_views(self):
        assert ViewId.WORK_ITEM_DETAIL.is_detail
        assert ViewId.PR_DETAIL.is_detail
        assert not ViewId.BOARDS.is_detail
        assert not ViewId.COPILOT.is_detail


class TestBoardsView:
    """Tests for the work item list."""

    def test_empty_snapshot_renders_placeholder(self, context, output):
        """Test no work items renders a placeholder and selects nothing."""
        view = BoardsView(context)
        view.render(5, 120, 33)
        assert "No items" in output.getvalue()
        assert view.selected_work_item() is None

    def test_labels(self, context, work_items):
        publish(context.snapshot, work_items=work_items)
        view = BoardsView(context)
        view.sync()
        assert view.list.items[0].label == "#101 Fix login page [Active]"
        assert view.list.items[0].icon == "B"

    def test_rebuilds_only_when_version_changes(self, context, work_items):
        publish(context.snapshot, work_items=work_items)
        view = BoardsView(context)
        view.handle_key(Key(KeyType.DOWN))
        view.render(5, 120, 33)
        assert view.list.selection == 1

        publish(context.snapshot, work_items=work_items[:1])
        view.render(5, 120, 33)
        assert len(view.list.items) == 1
        assert view.list.selection == 0

    def test_navigation_keys(self, context, work_items):
        publish(context.snapshot, work_items=work_items)
        view = BoardsView(context)
        assert view.handle_key(Key.of("j"))
        assert view.handle_key(Key.of("j"))
        assert view.selected_work_item().id == 103
        assert view.handle_key(Key.of("k"))
        assert view.selected_work_item().id == 102
        assert view.handle_key(Key.of("g"))
        assert view.selected_work_item().id == 101
        assert view.handle_key(Key.of("G"))
        assert view.selected_work_item().id == 103

    def test_enter_is_declined(self, context, work_items):
        """Test Enter is left to the controller so it can open the detail view."""
        publish(context.snapshot, work_items=work_items)
        view = BoardsView(context)
        assert view.handle_key(Key(KeyType.ENTER)) is False

    def test_selected_item_uses_filtered_row(self, context, work_items):
        """Test the selected work item is the filtered row, not the row at that index."""
        publish(context.snapshot, work_items=work_items)
        view = BoardsView(context)
        view.handle_key(Key.of("f"))
        type_text(view, "docs")
        assert view.selected_work_item().id == 103


class TestListFilterKeys:
    """Tests for filter-mode key handling shared by the list views."""

    @pytest.fixture
    def view(self, context, repositories):
        publish(context.snapshot, repositories=repositories)
        return ReposView(context)

    def test_slash_enters_filter_mode(self, view):
        assert view.handle_key(Key.of("/"))
        assert view.is_filter_mode()

    def test_typing_filters(self, view):
        view.handle_key(Key.of("f"))
        type_text(view, "AP")
        assert view.list.filter_query == "AP"
        assert view.list.selected_item().label == "api (develop)"

    def test_filter_intercepts_global_letters(self, view):
        """Test q and r are filter text while filtering."""
        view.handle_key(Key.of("f"))
        assert view.handle_key(Key.of("q"))
        assert view.handle_key(Key.of("r"))
        assert view.list.filter_query == "qr"

    def test_backspace(self, view):
        view.handle_key(Key.of("f"))
        type_text(view, "we")
        view.handle_key(Key(KeyType.BACKSPACE))
        assert view.list.filter_query == "w"
        view.handle_key(Key(KeyType.BACKSPACE))
        assert view.handle_key(Key(KeyType.BACKSPACE))
        assert view.list.filter_query == ""

    @pytest.mark.parametrize("key_type", [KeyType.ESCAPE, KeyType.ENTER])
    def test_leaving_filter_mode_clears_query(self, view, key_type):
        view.handle_key(Key.of("f"))
        type_text(view, "web")
        assert view.handle_key(Key(key_type))
        assert not view.is_filter_mode()
        assert view.list.filter_query == ""
        assert len(view.list.active_indices()) == 2

    def test_escape_declined_outside_filter_mode(self, view):
        assert view.handle_key(Key(KeyType.ESCAPE)) is False

    def test_non_printable_chars_ignored(self, view):
        view.handle_key(Key.of("f"))
        assert view.handle_key(Key.of("\x01")) is False
        assert view.list.filter_query == ""


class TestOtherLists:
    """Tests for the pipeline, repository and pull request labels."""

    def test_pipeline_labels(self, context, pipelines):
        publish(context.snapshot, pipelines=pipelines)
        view = PipelinesView(context)
        view.sync()
        assert [i.label for i in view.list.items] == ["[7] web-ci", "[8] release/deploy"]

    def test_repo_labels(self, context, repositories):
        publish(context.snapshot, repositories=repositories)
        view = ReposView(context)
        view.sync()
        assert [i.label for i in view.list.items] == ["web (main)", "api (develop)"]

    def test_pull_request_labels(self, context, pull_requests):
        publish(context.snapshot, pull_requests=pull_requests)
        view = PullRequestsView(context)
        view.sync()
        assert view.list.items[0].label == "#11 Login redesign (feature/login→main)"
        assert view.list.items[1].icon == "d"
        view.handle_key(Key.of("j"))
        assert view.selected_pull_request().pull_request_id == 12


class TestDashboardView:
    """Tests for the overview screen."""

    def test_placeholders_when_empty(self, context, output):
        DashboardView(context).render(5, 120, 33)
        text = output.getvalue()
        assert "No work items" in text
        assert "No builds" in text
        assert "No active PRs" in text

    def test_sections(self, context, output, work_items, builds, pull_requests):
        publish(context.snapshot, work_items=work_items, builds=builds,
                pull_requests=pull_requests)
        DashboardView(context).render(5, 120, 33)
        text = output.getvalue()
        assert "#101 Fix login page" in text
        assert "#20240501.2 web-ci" in text
        assert "#11 Login redesign" in text

    def test_failed_categories_line(self, context, output):
        context.snapshot.failed_categories = ["builds", "pipelines"]
        DashboardView(context).render(5, 120, 33)
        assert "Failed to refresh: builds, pipelines" in output.getvalue()


class TestCopilotView:
    """Tests for the question view."""

    @pytest.fixture
    def agent(self):
        fake = MagicMock()
        fake.ask.return_value = AgentResult(
            True, "I can help", suggestions=["Show me failed builds"]
        )
        return fake

    def test_enter_and_exit_toggle_input(self, context, agent, output):
        view = CopilotView(context, agent)
        view.on_enter()
        assert view.input.active
        assert "\033[?25h" in output.getvalue()
        view.on_exit()
        assert not view.input.active
        assert output.getvalue().endswith("\033[?25l")

    def test_submit_records_history(self, context, agent):
        view = CopilotView(context, agent)
        type_text(view, "help")
        assert view.handle_key(Key(KeyType.ENTER))

        agent.ask.assert_called_once_with("help")
        assert view.input.value == ""
        assert [m.kind for m in view.history] == [
            MessageKind.QUESTION, MessageKind.ANSWER, MessageKind.SUGGESTION,
        ]
        assert view.history[2].content == "* Show me failed builds"

    def test_blank_submit_ignored(self, context, agent):
        view = CopilotView(context, agent)
        type_text(view, "   ")
        view.handle_key(Key(KeyType.ENTER))
        agent.ask.assert_not_called()

    def test_data_lines_appended(self, context, agent, builds):
        agent.ask.return_value = AgentResult(True, "Found 2 recent build(s):", data=builds)
        view = CopilotView(context, agent)
        type_text(view, "recent builds")
        view.handle_key(Key(KeyType.ENTER))
        assert view.history[-1].content == "  x #20240501.2 web-ci"

    def test_failed_answer_drawn_in_red(self, context, agent, output):
        agent.ask.return_value = AgentResult(False, "Error: API error (status 401): denied")
        view = CopilotView(context, agent)
        type_text(view, "list pipelines")
        view.handle_key(Key(KeyType.ENTER))
        assert view.history[1].kind == MessageKind.ERROR

        view.render(5, 120, 33)
        text = output.getvalue()
        assert "\033[31mError: API error (status 401): denied\033[0m" in text
        assert "\033[32mError:" not in text

    def test_render(self, context, agent, output):
        view = CopilotView(context, agent)
        view.render(5, 120, 33)
        text = output.getvalue()
        assert "Copilot - Ask me about Azure DevOps" in text
        assert 'Try: "What work items are assigned to me?"' in text
        assert "apo> " in text
        assert "\033[36;2H" in text

    def test_escape_declined(self, context, agent):
        assert CopilotView(context, agent).handle_key(Key(KeyType.ESCAPE)) is False


class TestDetailViews:
    """Tests for the work item and pull request detail screens."""

    def test_work_item_detail(self, context, output, work_items):
        view = WorkItemDetailView(context, "https://dev.azure.com/", "contoso", "web")
        view.set_work_item(work_items[0])
        view.render(5, 120, 33)
        text = output.getvalue()
        assert "Bug #101" in text
        assert "Ada Lovelace" in text
        assert "May 1, 2024" in text
        assert "Fix the login page" in text
        assert view.url == "https://dev.azure.com/contoso/web/_workitems/edit/101"

    def test_pr_detail(self, context, output, pull_requests):
        view = PRDetailView(context, "https://dev.azure.com", "contoso", "web")
        view.set_pull_request(pull_requests[0])
        view.render(5, 120, 33)
        text = output.getvalue()
        assert "Pull Request #11" in text
        assert "ACTIVE" in text
        assert "Grace Hopper - Approved" in text
        assert "Ada Lovelace - Waiting for author" in text
        assert view.url == "https://dev.azure.com/contoso/web/_git/web/pullrequest/11"

    def test_nothing_selected_renders_nothing(self, context, output):
        WorkItemDetailView(context, "https://dev.azure.com", "o", "p").render(5, 120, 33)
        assert output.getvalue() == ""


class TestDetailHelpers:
    """Tests for strip_html, wrap_text and format_date."""

    def test_strip_html(self):
        assert strip_html("<p>a &amp; b</p>&nbsp;") == "a & b"

    def test_wrap_text(self):
        assert wrap_text("one two three four", 9) == ["one two", "three", "four"]
        assert wrap_text("   ", 10) == []

    def test_wrap_keeps_long_words(self):
        assert wrap_text("supercalifragilistic ok", 5) == ["supercalifragilistic", "ok"]

    def test_format_date(self):
        assert format_date("2024-05-01T10:20:30Z") == "May 1, 2024"
        assert format_date("") == "-"
        assert format_date(None) == "-"
        assert format_date("not a date at all") == "not a date"

    def test_format_datetime_with_time(self):
        when = datetime(2024, 1, 2, 15, 4, tzinfo=timezone.utc)
        assert format_date(when, with_time=True) == "Jan 2, 2024 15:04"
