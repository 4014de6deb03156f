"""Symbol definitions with emoji/ASCII fallbacks.

Provides the icons used across the dashboard and the CLI. Every icon falls
back to ASCII when the terminal encoding cannot display emoji or when emoji
are disabled on the command line.

Usage:
    symbols = SymbolsFormatter()
    symbols.get(Symbols.Bug)                     # "🐛" or "B"
    symbols.get(work_item_icon("User Story"))    # "📖" or "S"
"""

import platform
import sys
from dataclasses import dataclass
from functools import cached_property


@dataclass(frozen=True)
class Symbol:
    """A symbol with emoji and ASCII fallback."""

    emoji: str
    ascii: str


class Symbols:
    """Symbol definitions as class attributes."""

    # Tabs
    Home = Symbol("🏠", "#")
    Clipboard = Symbol("📋", "=")
    Wrench = Symbol("🔧", "*")
    Folder = Symbol("📁", ">")
    Merge = Symbol("🔀", "<")
    Robot = Symbol("🤖", "?")

    # Work item types
    Bug = Symbol("🐛", "B")
    Story = Symbol("📖", "S")
    Task = Symbol("✅", "T")
    Epic = Symbol("🏔️", "E")
    Feature = Symbol("⭐", "F")

    # Build results
    Succeeded = Symbol("✅", "+")
    Failed = Symbol("❌", "x")
    Canceled = Symbol("⏹️", "-")
    InProgress = Symbol("🔄", "~")

    # Work item states
    New = Symbol("🆕", "o")
    Active = Symbol("🔄", "~")
    Resolved = Symbol("✔️", "v")
    Closed = Symbol("✅", "+")
    Bullet = Symbol("•", "*")

    # Reviewer votes
    Approved = Symbol("✅", "+")
    ThumbsUp = Symbol("👍", "+")
    Hourglass = Symbol("⏳", ".")
    Paused = Symbol("⏸️", "|")
    Rejected = Symbol("❌", "x")

    # Misc
    Draft = Symbol("📝", "d")
    Package = Symbol("📦", "#")
    Bulb = Symbol("💡", "*")
    Search = Symbol("🔍", "/")


def work_item_icon(item_type: str) -> Symbol:
    """Get the icon for a work item type."""
    return {
        "bug": Symbols.Bug,
        "user story": Symbols.Story,
        "story": Symbols.Story,
        "task": Symbols.Task,
        "epic": Symbols.Epic,
        "feature": Symbols.Feature,
    }.get(item_type.lower(), Symbols.Clipboard)


def build_icon(result: str) -> Symbol:
    """Get the icon for a build result."""
    return {
        "succeeded": Symbols.Succeeded,
        "failed": Symbols.Failed,
        "canceled": Symbols.Canceled,
    }.get(result.lower(), Symbols.InProgress)


def state_icon(state: str) -> Symbol:
    """Get the icon for a work item state."""
    return {
        "new": Symbols.New,
        "active": Symbols.Active,
        "in progress": Symbols.Active,
        "resolved": Symbols.Resolved,
        "closed": Symbols.Closed,
        "done": Symbols.Closed,
    }.get(state.lower(), Symbols.Bullet)


def vote_icon(vote: int) -> Symbol:
    """Get the icon for a pull request reviewer vote."""
    return {
        10: Symbols.Approved,
        5: Symbols.ThumbsUp,
        0: Symbols.Hourglass,
        -5: Symbols.Paused,
        -10: Symbols.Rejected,
    }.get(vote, Symbols.Bullet)


def pull_request_icon(is_draft: bool) -> Symbol:
    """Get the icon for a pull request."""
    return Symbols.Draft if is_draft else Symbols.Merge


class SymbolsFormatter:
    """Provides symbols with automatic emoji/ASCII fallback based on terminal support.

    Emoji is disabled when no_emoji=True or when the terminal doesn't support it.
    """

    def __init__(self, no_emoji: bool = False):
        """Initialize the symbols formatter.

        Args:
            no_emoji: If True, always use ASCII symbols instead of emoji
        """
        self._no_emoji = no_emoji

    @cached_property
    def supports_emoji(self) -> bool:
        """Detect if terminal supports emoji display."""
        if self._no_emoji:
            return False

        if platform.system() == "Windows":
            return False

        if not hasattr(sys.stdout, 'encoding') or sys.stdout.encoding is None:
            return False

        encoding = sys.stdout.encoding.lower()
        emoji_encodings = ['utf-8', 'utf8', 'utf-16', 'utf16']

        return any(enc in encoding for enc in emoji_encodings)

    def get(self, symbol: Symbol) -> str:
        """Get the resolved symbol string.

        Args:
            symbol: A Symbol instance to resolve

        Returns:
            Emoji or ASCII string based on terminal support
        """
        return symbol.emoji if self.supports_emoji else symbol.ascii
