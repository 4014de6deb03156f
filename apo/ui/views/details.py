"""Detail screens for a single work item or pull request."""

import html
import re
from datetime import datetime
from typing import Optional, Union

from ...domain import PullRequest, WorkItem, parse_timestamp
from ...formatters.symbols import pull_request_icon, state_icon, vote_icon, work_item_icon
from ..style import Colors, display_width, style, truncate
from .base import View, ViewContext, ViewId

_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(text: str) -> str:
    """Drop markup tags and decode entities from a rich-text field."""
    return html.unescape(_TAG_RE.sub("", text)).replace("\xa0", " ").strip()


def wrap_text(text: str, width: int) -> list[str]:
    """Greedy word wrap by display width. Words longer than `width` are kept whole."""
    words = text.split()
    if not words:
        return []
    lines = []
    current = words[0]
    for word in words[1:]:
        if display_width(current) + 1 + display_width(word) <= width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def format_date(value: Union[str, datetime, None], with_time: bool = False) -> str:
    """Format a timestamp as "Jan 2, 2006", or "-" when absent.

    Unparseable strings fall back to their first ten characters.
    """
    if not value:
        return "-"
    when = value if isinstance(value, datetime) else parse_timestamp(value)
    if when is None:
        return value[:10] if isinstance(value, str) else "-"
    text = f"{when:%b} {when.day}, {when.year}"
    if with_time:
        text += f" {when:%H:%M}"
    return text


class DetailView(View):
    """Common header, section and URL drawing for detail screens."""

    def __init__(self, context: ViewContext, api_url: str, organization: str, project: str):
        super().__init__(context)
        self.base_url = api_url.rstrip("/")
        self.organization = organization
        self.project = project

    def _section(self, row: int, width: int, name: str) -> None:
        self.terminal.move_cursor(row, 2)
        self.terminal.write(style(f"─── {name} ", Colors.DIM))
        self.terminal.write(style("─" * max(0, width - 20), Colors.DIM))

    def _label(self, row: int, col: int, label: str, value: str) -> None:
        self.terminal.move_cursor(row, col)
        self.terminal.write(style(f"{label}: ", Colors.DIM))
        self.terminal.write(value)

    def _url_line(self, row: int, width: int, url: str) -> None:
        self.terminal.move_cursor(row, 2)
        self.terminal.write(style(f"URL: {truncate(url, width - 10)}", Colors.DIM))


class WorkItemDetailView(DetailView):
    view_id = ViewId.WORK_ITEM_DETAIL
    title = "Work Item"

    def __init__(self, context: ViewContext, api_url: str, organization: str, project: str):
        super().__init__(context, api_url, organization, project)
        self.work_item: Optional[WorkItem] = None

    def set_work_item(self, item: WorkItem) -> None:
        self.work_item = item

    @property
    def url(self) -> str:
        if self.work_item is None:
            return ""
        return (
            f"{self.base_url}/{self.organization}/{self.project}"
            f"/_workitems/edit/{self.work_item.id}"
        )

    def render(self, start_row: int, width: int, height: int) -> None:
        item = self.work_item
        if item is None:
            return
        term = self.terminal
        symbols = self.context.symbols

        term.move_cursor(start_row, 2)
        icon = symbols.get(work_item_icon(item.type))
        term.write(style(f"{icon} {item.type} #{item.id}", Colors.BOLD, Colors.CYAN))

        term.move_cursor(start_row + 2, 2)
        term.write(style(truncate(item.title, width - 4), Colors.BOLD))

        term.move_cursor(start_row + 4, 2)
        term.write(style("State: ", Colors.DIM))
        term.write(style(
            f"{symbols.get(state_icon(item.state))} {item.state}", Colors.BOLD, Colors.YELLOW
        ))

        row = start_row + 6
        self._label(row, 2, "Assigned To", truncate(item.assigned_to, 30))
        self._label(row, width // 2, "Created", format_date(item.get_field("System.CreatedDate")))

        desc_row = start_row + 9
        self._section(desc_row, width, "Description")
        description = strip_html(item.get_field("System.Description"))
        if description:
            last_row = start_row + height - 2
            for offset, line in enumerate(wrap_text(description, width - 6)):
                if desc_row + 1 + offset >= last_row:
                    break
                term.move_cursor(desc_row + 1 + offset, 4)
                term.write(line)
        else:
            term.move_cursor(desc_row + 1, 4)
            term.write(style("No description.", Colors.DIM))

        self._url_line(start_row + height - 2, width, self.url)


class PRDetailView(DetailView):
    view_id = ViewId.PR_DETAIL
    title = "Pull Request"

    def __init__(self, context: ViewContext, api_url: str, organization: str, project: str):
        super().__init__(context, api_url, organization, project)
        self.pull_request: Optional[PullRequest] = None

    def set_pull_request(self, pr: PullRequest) -> None:
        self.pull_request = pr

    @property
    def url(self) -> str:
        pr = self.pull_request
        if pr is None:
            return ""
        return (
            f"{self.base_url}/{self.organization}/{self.project}"
            f"/_git/{pr.repository.name}/pullrequest/{pr.pull_request_id}"
        )

    def render(self, start_row: int, width: int, height: int) -> None:
        pr = self.pull_request
        if pr is None:
            return
        term = self.terminal
        symbols = self.context.symbols

        term.move_cursor(start_row, 2)
        icon = symbols.get(pull_request_icon(pr.is_draft))
        term.write(style(f"{icon} Pull Request #{pr.pull_request_id}", Colors.BOLD, Colors.CYAN))

        term.move_cursor(start_row + 2, 2)
        term.write(style(truncate(pr.title, width - 4), Colors.BOLD))

        term.move_cursor(start_row + 4, 2)
        term.write(style("Status: ", Colors.DIM))
        status_color = Colors.RED if pr.status == "abandoned" else Colors.GREEN
        term.write(style(pr.status.upper(), Colors.BOLD, status_color))

        term.move_cursor(start_row + 6, 2)
        term.write(style("Branch: ", Colors.DIM))
        term.write(style(pr.source_branch, Colors.CYAN))
        term.write(style(" → ", Colors.DIM))
        term.write(style(pr.target_branch, Colors.GREEN))

        self._label(start_row + 8, 2, "Created By", pr.created_by.short_name)
        self._label(
            start_row + 8, width // 2, "Created", format_date(pr.creation_date, with_time=True)
        )

        rev_row = start_row + 10
        self._section(rev_row, width, "Reviewers")
        if not pr.reviewers:
            term.move_cursor(rev_row + 1, 4)
            term.write(style("No reviewers", Colors.DIM))
        else:
            last_row = start_row + height - 4
            for offset, reviewer in enumerate(pr.reviewers):
                if rev_row + 1 + offset >= last_row:
                    break
                term.move_cursor(rev_row + 1 + offset, 4)
                icon = symbols.get(vote_icon(reviewer.vote))
                term.write(f"{icon} {reviewer.display_name} - {reviewer.vote_status}")

        self._url_line(start_row + height - 2, width, self.url)
