"""Pytest configuration and shared fixtures."""

import io
from unittest.mock import MagicMock

import pytest

from apo.config import Config
from apo.domain import Build, Pipeline, PullRequest, Repository, WorkItem
from apo.formatters.symbols import SymbolsFormatter
from apo.ui.app import App
from apo.ui.snapshot import DataSnapshot
from apo.ui.terminal import Terminal
from apo.ui.views import ViewContext


def work_item_payload(item_id: int, title: str, state: str = "Active", item_type: str = "Task"):
    return {
        "id": item_id,
        "rev": 1,
        "fields": {
            "System.Title": title,
            "System.State": state,
            "System.WorkItemType": item_type,
            "System.AssignedTo": {"displayName": "Ada Lovelace", "uniqueName": "ada@contoso.com"},
            "System.CreatedDate": "2024-05-01T10:20:30.1234567Z",
            "System.Description": "<div>Fix the <b>login</b>&nbsp;page</div>",
        },
        "url": f"https://dev.azure.com/contoso/_apis/wit/workItems/{item_id}",
    }


def build_payload(build_id: int, number: str, name: str, result: str = "succeeded"):
    return {
        "id": build_id,
        "buildNumber": number,
        "status": "completed",
        "result": result,
        "queueTime": "2024-05-01T10:00:00Z",
        "definition": {"id": 7, "name": name},
        "requestedBy": {"displayName": "Grace Hopper"},
        "sourceBranch": "refs/heads/main",
    }


def pull_request_payload(pr_id: int, title: str, is_draft: bool = False):
    return {
        "pullRequestId": pr_id,
        "title": title,
        "status": "active",
        "createdBy": {"displayName": "Alan Turing"},
        "creationDate": "2024-05-02T08:30:00Z",
        "sourceRefName": "refs/heads/feature/login",
        "targetRefName": "refs/heads/main",
        "isDraft": is_draft,
        "repository": {"id": "r1", "name": "web"},
        "reviewers": [
            {"displayName": "Grace Hopper", "vote": 10},
            {"displayName": "Ada Lovelace", "vote": -5},
        ],
    }


@pytest.fixture
def output():
    """Captures everything written to the terminal."""
    return io.StringIO()


@pytest.fixture
def terminal(output) -> Terminal:
    """Terminal writing to a string buffer; size falls back to 40x120."""
    return Terminal(output=output, input_fd=-1)


@pytest.fixture
def symbols() -> SymbolsFormatter:
    return SymbolsFormatter(no_emoji=True)


@pytest.fixture
def snapshot() -> DataSnapshot:
    return DataSnapshot()


@pytest.fixture
def context(terminal, snapshot, symbols) -> ViewContext:
    return ViewContext(terminal, snapshot, symbols)


@pytest.fixture
def config() -> Config:
    return Config(organization="contoso", project="web", pat="secret")


@pytest.fixture
def work_items() -> list[WorkItem]:
    return [
        WorkItem.from_dict(work_item_payload(101, "Fix login page", "Active", "Bug")),
        WorkItem.from_dict(work_item_payload(102, "Add dark mode", "New", "User Story")),
        WorkItem.from_dict(work_item_payload(103, "Update docs", "Resolved", "Task")),
    ]


@pytest.fixture
def builds() -> list[Build]:
    return [
        Build.from_dict(build_payload(1, "20240501.1", "web-ci")),
        Build.from_dict(build_payload(2, "20240501.2", "web-ci", result="failed")),
    ]


@pytest.fixture
def pipelines() -> list[Pipeline]:
    return [
        Pipeline.from_dict({"id": 7, "name": "web-ci", "folder": "\\"}),
        Pipeline.from_dict({"id": 8, "name": "deploy", "folder": "release"}),
    ]


@pytest.fixture
def repositories() -> list[Repository]:
    return [
        Repository.from_dict({"id": "r1", "name": "web", "defaultBranch": "refs/heads/main"}),
        Repository.from_dict({"id": "r2", "name": "api", "defaultBranch": "refs/heads/develop"}),
    ]


@pytest.fixture
def pull_requests() -> list[PullRequest]:
    return [
        PullRequest.from_dict(pull_request_payload(11, "Login redesign")),
        PullRequest.from_dict(pull_request_payload(12, "WIP cache layer", is_draft=True)),
    ]


@pytest.fixture
def client(work_items, builds, pipelines, repositories, pull_requests) -> MagicMock:
    """Data client returning the sample records."""
    fake = MagicMock()
    fake.get_my_work_items.return_value = work_items
    fake.list_builds.return_value = builds
    fake.get_failed_builds.return_value = [b for b in builds if b.result == "failed"]
    fake.get_running_builds.return_value = []
    fake.list_pipelines.return_value = pipelines
    fake.list_repositories.return_value = repositories
    fake.get_active_pull_requests.return_value = pull_requests
    fake.list_projects.return_value = []
    return fake


@pytest.fixture
def clock():
    """Controllable monotonic clock."""
    class FakeClock:
        def __init__(self):
            self.now = 1000.0

        def __call__(self) -> float:
            return self.now

        def advance(self, seconds: float) -> None:
            self.now += seconds

    return FakeClock()


@pytest.fixture
def app(config, client, terminal, symbols, clock):
    """Dashboard controller with the fake client; never touches a real tty."""
    application = App(config, client, terminal=terminal, symbols=symbols, clock=clock)
    yield application
    if application._refresh_thread is not None:
        application._refresh_thread.join(timeout=5)
