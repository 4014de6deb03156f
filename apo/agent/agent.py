"""Natural-language query interpretation.

Maps free-text questions to a fixed set of intents by phrase matching and
answers them with the API client. Used by `apo ask` and the Copilot view.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

from ..domain import Build, Pipeline, Project, PullRequest, Repository, WorkItem
from ..exceptions import ApiError
from ..formatters.symbols import (
    Symbols,
    SymbolsFormatter,
    build_icon,
    pull_request_icon,
    work_item_icon,
)
from ..ui.style import truncate

logger = logging.getLogger(__name__)

# Title width in formatted result lines
RESULT_TITLE_WIDTH = 50


class Intent(Enum):
    """What the user is asking for."""
    UNKNOWN = auto()
    HELP = auto()
    MY_WORK_ITEMS = auto()
    FAILED_BUILDS = auto()
    RUNNING_BUILDS = auto()
    RECENT_BUILDS = auto()
    LIST_PIPELINES = auto()
    LIST_REPOS = auto()
    ACTIVE_PRS = auto()
    LIST_PROJECTS = auto()


@dataclass
class AgentResult:
    """Answer to a query."""

    success: bool
    message: str
    suggestions: list[str] = field(default_factory=list)
    data: Optional[list[Any]] = None


# Checked in order; the first matching intent wins
INTENT_PATTERNS: list[tuple[Intent, tuple[str, ...]]] = [
    (Intent.MY_WORK_ITEMS, (
        r"(my|assigned to me).*work\s*items?",
        r"what('s| is| are).*assigned to me",
        r"work\s*items?.*assigned to me",
        r"my (tasks?|bugs?|stories?)",
    )),
    (Intent.FAILED_BUILDS, (
        r"failed builds?",
        r"what('s| is| are) (failing|broken)",
        r"build failures?",
    )),
    (Intent.RUNNING_BUILDS, (
        r"running builds?",
        r"what('s| is) (running|building)",
        r"active builds?",
    )),
    (Intent.RECENT_BUILDS, (
        r"recent builds?",
        r"build (history|status)",
        r"show.*builds?",
    )),
    (Intent.LIST_PIPELINES, (
        r"(list|show|get).*pipelines?",
        r"what pipelines?",
    )),
    (Intent.LIST_REPOS, (
        r"(list|show|get).*repo",
        r"what repo",
    )),
    (Intent.ACTIVE_PRS, (
        r"(active|open) (pull requests?|prs?\b)",
        r"\b(pull requests?|prs?)\b.*\b(open|active)\b",
        r"(list|show|get).*(pull requests?|\bprs?\b)",
        r"pending (reviews?|prs?\b)",
    )),
    (Intent.LIST_PROJECTS, (
        r"(list|show|get).*projects?",
    )),
    (Intent.HELP, (
        r"^help$",
        r"what can you do",
    )),
]

HELP_SUGGESTIONS = [
    "What work items are assigned to me?",
    "Show me failed builds",
    "List all pipelines",
    "What PRs are open?",
]


class Agent:
    """Answers questions about the configured project."""

    def __init__(self, client: Any):
        self.client = client
        self._patterns = [
            (intent, [re.compile(expr, re.IGNORECASE) for expr in exprs])
            for intent, exprs in INTENT_PATTERNS
        ]

    def match_intent(self, query: str) -> Intent:
        for intent, regexps in self._patterns:
            if any(regex.search(query) for regex in regexps):
                return intent
        return Intent.UNKNOWN

    def ask(self, query: str) -> AgentResult:
        """Interpret a question and answer it.

        API failures are reported as an unsuccessful result, never raised.
        """
        query = query.strip()
        if not query:
            return AgentResult(True, "Please ask me something!", ["Try: 'help'"])

        intent = self.match_intent(query)
        logger.debug("query %r matched %s", query, intent.name)
        try:
            return self._execute(intent)
        except ApiError as e:
            logger.warning("query %r failed: %s", query, e)
            return AgentResult(False, f"Error: {e}")

    def _execute(self, intent: Intent) -> AgentResult:
        if intent == Intent.HELP:
            return AgentResult(
                True, "I can help you with Azure DevOps! Try asking:", list(HELP_SUGGESTIONS)
            )

        if intent == Intent.MY_WORK_ITEMS:
            items = self.client.get_my_work_items()
            if not items:
                return AgentResult(True, "No work items assigned to you.", data=items)
            return AgentResult(True, f"Found {len(items)} work item(s):", data=items)

        if intent == Intent.FAILED_BUILDS:
            builds = self.client.get_failed_builds(15)
            if not builds:
                return AgentResult(True, "No failed builds! 🎉", data=builds)
            return AgentResult(True, f"Found {len(builds)} failed build(s):", data=builds)

        if intent == Intent.RUNNING_BUILDS:
            builds = self.client.get_running_builds()
            if not builds:
                return AgentResult(True, "No builds currently running.", data=builds)
            return AgentResult(True, f"Found {len(builds)} running build(s):", data=builds)

        if intent == Intent.RECENT_BUILDS:
            builds = self.client.list_builds("", "", 15)
            return AgentResult(True, f"Found {len(builds)} recent build(s):", data=builds)

        if intent == Intent.LIST_PIPELINES:
            pipelines = self.client.list_pipelines()
            return AgentResult(True, f"Found {len(pipelines)} pipeline(s):", data=pipelines)

        if intent == Intent.LIST_REPOS:
            repos = self.client.list_repositories()
            return AgentResult(True, f"Found {len(repos)} repository(ies):", data=repos)

        if intent == Intent.ACTIVE_PRS:
            prs = self.client.get_active_pull_requests(20)
            if not prs:
                return AgentResult(True, "No active pull requests.", data=prs)
            return AgentResult(True, f"Found {len(prs)} active PR(s):", data=prs)

        if intent == Intent.LIST_PROJECTS:
            projects = self.client.list_projects()
            return AgentResult(True, f"Found {len(projects)} project(s):", data=projects)

        return AgentResult(
            True,
            "I'm not sure what you're asking.",
            ["Try: 'help' to see what I can do"],
        )


def format_result_lines(data: list[Any], symbols: SymbolsFormatter) -> list[str]:
    """Format result records as one indented line each.

    Args:
        data: Records from an AgentResult
        symbols: Resolves icons to emoji or ASCII

    Returns:
        Display lines, empty for unknown record types
    """
    lines = []
    for record in data:
        if isinstance(record, WorkItem):
            icon = symbols.get(work_item_icon(record.type))
            title = truncate(record.title, RESULT_TITLE_WIDTH)
            lines.append(f"  {icon} #{record.id} {title} [{record.state}]")
        elif isinstance(record, Build):
            icon = symbols.get(build_icon(record.result))
            lines.append(f"  {icon} #{record.build_number} {record.definition.name}")
        elif isinstance(record, Pipeline):
            lines.append(f"  {symbols.get(Symbols.Wrench)} [{record.id}] {record.full_path}")
        elif isinstance(record, Repository):
            lines.append(
                f"  {symbols.get(Symbols.Folder)} {record.name} ({record.default_branch_name})"
            )
        elif isinstance(record, PullRequest):
            icon = symbols.get(pull_request_icon(record.is_draft))
            title = truncate(record.title, RESULT_TITLE_WIDTH)
            lines.append(f"  {icon} #{record.pull_request_id} {title}")
        elif isinstance(record, Project):
            lines.append(f"  {symbols.get(Symbols.Package)} {record.name}")
    return lines
