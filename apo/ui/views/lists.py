"""List screens: Boards, Pipelines, Repos and Pull Requests.

Each screen wraps a ListWidget whose items are rebuilt from the snapshot
whenever a refresh has been applied since the last rebuild.
"""

from abc import abstractmethod
from typing import Optional

from ...domain import PullRequest, WorkItem
from ...formatters.symbols import Symbol, Symbols, pull_request_icon, work_item_icon
from ..components import ListItem, ListWidget
from ..terminal import Key, KeyType
from .base import View, ViewContext, ViewId

LIST_START_COL = 2


class ListView(View):
    """A view showing one snapshot category as a navigable list."""

    list_icon: Symbol
    list_name: str

    def __init__(self, context: ViewContext):
        super().__init__(context)
        self.list = ListWidget(
            context.terminal,
            f"{context.symbols.get(self.list_icon)} {self.list_name}",
            search_icon=context.symbols.get(Symbols.Search),
        )
        self._version = -1

    @abstractmethod
    def build_items(self) -> list[ListItem]:
        """Build list rows from the snapshot. Called with the snapshot lock held."""
        pass

    def sync(self) -> None:
        """Rebuild the rows if the snapshot changed since the last rebuild."""
        snapshot = self.context.snapshot
        with snapshot.lock:
            if self._version != snapshot.version:
                self.list.set_items(self.build_items())
                self._version = snapshot.version

    def render(self, start_row: int, width: int, height: int) -> None:
        self.sync()
        self.list.render(start_row, LIST_START_COL, width, height)

    def is_filter_mode(self) -> bool:
        return self.list.filter_mode

    def handle_key(self, key: Key) -> bool:
        self.sync()
        if self.list.filter_mode:
            return self._handle_filter_key(key)

        if key.type == KeyType.UP or key.is_char("k"):
            self.list.move_up()
            return True
        if key.type == KeyType.DOWN or key.is_char("j"):
            self.list.move_down()
            return True
        if key.is_char("g"):
            self.list.move_to_top()
            return True
        if key.is_char("G"):
            self.list.move_to_bottom()
            return True
        if key.is_char("f", "/"):
            self.list.enter_filter_mode()
            return True
        return False

    def _handle_filter_key(self, key: Key) -> bool:
        """Filter mode takes Enter, Escape, Backspace and printable characters."""
        lst = self.list
        if key.type in (KeyType.ENTER, KeyType.ESCAPE):
            lst.exit_filter_mode()
            return True
        if key.type == KeyType.BACKSPACE:
            if lst.filter_query:
                lst.set_filter(lst.filter_query[:-1])
            return True
        if key.type == KeyType.CHAR and key.char.isprintable():
            lst.set_filter(lst.filter_query + key.char)
            return True
        return False

    def selected_data(self) -> Optional[object]:
        """Payload of the selected row, or None when nothing is selected."""
        self.sync()
        item = self.list.selected_item()
        return item.data if item is not None else None


class BoardsView(ListView):
    """Work items assigned to the current user."""

    view_id = ViewId.BOARDS
    title = "Boards"
    list_icon = Symbols.Clipboard
    list_name = "Work Items"

    def build_items(self) -> list[ListItem]:
        symbols = self.context.symbols
        return [
            ListItem(
                id=str(item.id),
                icon=symbols.get(work_item_icon(item.type)),
                label=f"#{item.id} {item.title} [{item.state}]",
                data=item,
            )
            for item in self.context.snapshot.work_items
        ]

    def selected_work_item(self) -> Optional[WorkItem]:
        return self.selected_data()


class PipelinesView(ListView):
    view_id = ViewId.PIPELINES
    title = "Pipelines"
    list_icon = Symbols.Wrench
    list_name = "Pipelines"

    def build_items(self) -> list[ListItem]:
        icon = self.context.symbols.get(Symbols.Wrench)
        return [
            ListItem(
                id=str(pipeline.id),
                icon=icon,
                label=f"[{pipeline.id}] {pipeline.full_path}",
                data=pipeline,
            )
            for pipeline in self.context.snapshot.pipelines
        ]


class ReposView(ListView):
    view_id = ViewId.REPOS
    title = "Repos"
    list_icon = Symbols.Folder
    list_name = "Repositories"

    def build_items(self) -> list[ListItem]:
        icon = self.context.symbols.get(Symbols.Folder)
        return [
            ListItem(
                id=repo.id,
                icon=icon,
                label=f"{repo.name} ({repo.default_branch_name})",
                sublabel=repo.size_formatted if repo.size else "",
                data=repo,
            )
            for repo in self.context.snapshot.repositories
        ]


class PullRequestsView(ListView):
    """Active pull requests across the project."""

    view_id = ViewId.PULL_REQUESTS
    title = "PRs"
    list_icon = Symbols.Merge
    list_name = "Pull Requests"

    def build_items(self) -> list[ListItem]:
        symbols = self.context.symbols
        return [
            ListItem(
                id=str(pr.pull_request_id),
                icon=symbols.get(pull_request_icon(pr.is_draft)),
                label=(
                    f"#{pr.pull_request_id} {pr.title} "
                    f"({pr.source_branch}→{pr.target_branch})"
                ),
                sublabel=pr.created_by.short_name,
                data=pr,
            )
            for pr in self.context.snapshot.pull_requests
        ]

    def selected_pull_request(self) -> Optional[PullRequest]:
        return self.selected_data()
