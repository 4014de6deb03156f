"""Dashboard screens."""

from .base import View, ViewContext, ViewId
from .copilot import CopilotView
from .dashboard import DashboardView
from .details import PRDetailView, WorkItemDetailView
from .lists import BoardsView, ListView, PipelinesView, PullRequestsView, ReposView

__all__ = [
    "BoardsView",
    "CopilotView",
    "DashboardView",
    "ListView",
    "PipelinesView",
    "PRDetailView",
    "PullRequestsView",
    "ReposView",
    "View",
    "ViewContext",
    "ViewId",
    "WorkItemDetailView",
]
