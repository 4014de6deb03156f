"""View abstraction shared by every screen of the dashboard."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from ...formatters.symbols import SymbolsFormatter
from ..snapshot import DataSnapshot
from ..terminal import Key, Terminal


class ViewId(Enum):
    """Identifies a view. Exactly one is current at a time."""
    DASHBOARD = "dashboard"
    BOARDS = "boards"
    PIPELINES = "pipelines"
    REPOS = "repos"
    PULL_REQUESTS = "pullrequests"
    COPILOT = "copilot"
    WORK_ITEM_DETAIL = "workitem_detail"
    PR_DETAIL = "pr_detail"

    @property
    def is_detail(self) -> bool:
        return self in (ViewId.WORK_ITEM_DETAIL, ViewId.PR_DETAIL)


@dataclass
class ViewContext:
    """Collaborators every view draws with."""

    terminal: Terminal
    snapshot: DataSnapshot
    symbols: SymbolsFormatter


class View(ABC):
    """Abstract base class for the dashboard screens.

    The controller calls render() with the snapshot lock held, so views may
    read the snapshot freely while drawing.
    """

    view_id: ViewId
    title: str

    def __init__(self, context: ViewContext):
        self.context = context

    @property
    def terminal(self) -> Terminal:
        return self.context.terminal

    @abstractmethod
    def render(self, start_row: int, width: int, height: int) -> None:
        """Draw the view into the content region.

        Args:
            start_row: First screen row (1-indexed) of the content region
            width: Screen width in cells
            height: Number of rows available
        """
        pass

    def handle_key(self, key: Key) -> bool:
        """Handle a key press.

        Returns:
            True if the view consumed the key, False to let the controller
            apply its own bindings
        """
        return False

    def on_enter(self) -> None:
        """Called when the view becomes current, before its first render."""
        pass

    def on_exit(self) -> None:
        """Called when another view is about to become current."""
        pass

    def is_filter_mode(self) -> bool:
        return False
