"""Reusable widgets drawn by the views."""

from .list_widget import ListItem, ListWidget
from .status_bar import StatusBar
from .tab_bar import Tab, TabBar
from .text_input import TextInput

__all__ = ["ListItem", "ListWidget", "StatusBar", "Tab", "TabBar", "TextInput"]
