"""Domain records for Azure DevOps resources.

Each record is built from the JSON the REST API returns via `from_dict`.
Missing keys fall back to empty values so partially populated responses
still produce usable records.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

BRANCH_PREFIX = "refs/heads/"

# Azure DevOps sends up to 7 fractional digits, datetime accepts 6
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the API.

    Args:
        value: Timestamp string such as "2024-05-01T10:20:30.1234567Z"

    Returns:
        Aware datetime, or None when absent or unparseable
    """
    if not value or not isinstance(value, str):
        return None
    text = _FRACTION_RE.sub(r"\1", value.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _strip_branch(ref: str) -> str:
    if ref.startswith(BRANCH_PREFIX):
        return ref[len(BRANCH_PREFIX):]
    return ref


@dataclass(frozen=True)
class Identity:
    """A user identity."""

    id: str = ""
    display_name: str = ""
    unique_name: str = ""
    url: str = ""
    image_url: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "Identity":
        data = data or {}
        return cls(
            id=data.get("id", ""),
            display_name=data.get("displayName", ""),
            unique_name=data.get("uniqueName", ""),
            url=data.get("url", ""),
            image_url=data.get("imageUrl", ""),
        )

    @property
    def short_name(self) -> str:
        """Display name, or the unique name when no display name is set."""
        return self.display_name or self.unique_name


@dataclass(frozen=True)
class Project:
    """An Azure DevOps project."""

    id: str
    name: str
    description: str = ""
    url: str = ""
    state: str = ""
    visibility: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "Project":
        data = data or {}
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            description=data.get("description", "") or "",
            url=data.get("url", ""),
            state=data.get("state", ""),
            visibility=data.get("visibility", ""),
        )


@dataclass(frozen=True)
class WorkItem:
    """A work item with its raw field map."""

    id: int
    rev: int = 0
    fields: dict[str, Any] = field(default_factory=dict)
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkItem":
        return cls(
            id=int(data.get("id", 0)),
            rev=int(data.get("rev", 0)),
            fields=dict(data.get("fields") or {}),
            url=data.get("url", ""),
        )

    def get_field(self, name: str) -> str:
        """Get a field as text.

        Identity fields are objects; their display name is returned instead.
        """
        value = self.fields.get(name)
        if isinstance(value, str):
            return value
        if isinstance(value, dict):
            display_name = value.get("displayName")
            if isinstance(display_name, str):
                return display_name
        return ""

    @property
    def title(self) -> str:
        return self.get_field("System.Title")

    @property
    def state(self) -> str:
        return self.get_field("System.State")

    @property
    def type(self) -> str:
        return self.get_field("System.WorkItemType")

    @property
    def assigned_to(self) -> str:
        return self.get_field("System.AssignedTo")


@dataclass(frozen=True)
class BuildDefinition:
    """The definition a build was queued from."""

    id: int = 0
    name: str = ""
    path: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "BuildDefinition":
        data = data or {}
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            path=data.get("path", ""),
            url=data.get("url", ""),
        )


@dataclass(frozen=True)
class Build:
    """A pipeline build run."""

    id: int
    build_number: str = ""
    status: str = ""
    """notStarted, inProgress or completed"""

    result: str = ""
    """succeeded, failed, canceled, or empty while running"""

    queue_time: Optional[datetime] = None
    start_time: Optional[datetime] = None
    finish_time: Optional[datetime] = None
    definition: BuildDefinition = field(default_factory=BuildDefinition)
    requested_by: Identity = field(default_factory=Identity)
    source_branch: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Build":
        return cls(
            id=int(data.get("id", 0)),
            build_number=data.get("buildNumber", ""),
            status=data.get("status", ""),
            result=data.get("result", "") or "",
            queue_time=parse_timestamp(data.get("queueTime")),
            start_time=parse_timestamp(data.get("startTime")),
            finish_time=parse_timestamp(data.get("finishTime")),
            definition=BuildDefinition.from_dict(data.get("definition")),
            requested_by=Identity.from_dict(data.get("requestedBy")),
            source_branch=data.get("sourceBranch", ""),
            url=data.get("url", ""),
        )


@dataclass(frozen=True)
class Pipeline:
    """A pipeline definition."""

    id: int
    name: str
    folder: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Pipeline":
        return cls(
            id=int(data.get("id", 0)),
            name=data.get("name", ""),
            folder=data.get("folder", "") or "",
            url=data.get("url", ""),
        )

    @property
    def full_path(self) -> str:
        """Pipeline name including its folder, if any."""
        if self.folder in ("", "\\", "/"):
            return self.name
        return f"{self.folder}/{self.name}"


@dataclass(frozen=True)
class Repository:
    """A Git repository."""

    id: str
    name: str
    url: str = ""
    remote_url: str = ""
    ssh_url: str = ""
    web_url: str = ""
    default_branch: str = ""
    size: int = 0
    """Size in KB"""

    project: Optional[Project] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Repository":
        project = data.get("project")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            url=data.get("url", ""),
            remote_url=data.get("remoteUrl", ""),
            ssh_url=data.get("sshUrl", ""),
            web_url=data.get("webUrl", ""),
            default_branch=data.get("defaultBranch", "") or "",
            size=int(data.get("size", 0) or 0),
            project=Project.from_dict(project) if project else None,
        )

    @property
    def default_branch_name(self) -> str:
        return _strip_branch(self.default_branch)

    @property
    def size_formatted(self) -> str:
        """Repository size in human-readable form."""
        if self.size < 1024:
            return f"{self.size} KB"
        size_mb = self.size / 1024
        if size_mb < 1024:
            return f"{size_mb:.1f} MB"
        return f"{size_mb / 1024:.2f} GB"


@dataclass(frozen=True)
class RepoRef:
    """Reference to the repository a pull request belongs to."""

    id: str = ""
    name: str = ""


VOTE_STATUS = {
    10: "Approved",
    5: "Approved with suggestions",
    0: "No vote",
    -5: "Waiting for author",
    -10: "Rejected",
}


@dataclass(frozen=True)
class Reviewer:
    """A pull request reviewer and their vote."""

    id: str = ""
    display_name: str = ""
    unique_name: str = ""
    vote: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Reviewer":
        return cls(
            id=data.get("id", ""),
            display_name=data.get("displayName", ""),
            unique_name=data.get("uniqueName", ""),
            vote=int(data.get("vote", 0) or 0),
        )

    @property
    def vote_status(self) -> str:
        return VOTE_STATUS.get(self.vote, "Unknown")


@dataclass(frozen=True)
class PullRequest:
    """A pull request."""

    pull_request_id: int
    title: str = ""
    description: str = ""
    status: str = ""
    """active, abandoned or completed"""

    created_by: Identity = field(default_factory=Identity)
    creation_date: Optional[datetime] = None
    source_ref_name: str = ""
    target_ref_name: str = ""
    merge_status: str = ""
    is_draft: bool = False
    url: str = ""
    repository: RepoRef = field(default_factory=RepoRef)
    reviewers: tuple[Reviewer, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PullRequest":
        repository = data.get("repository") or {}
        return cls(
            pull_request_id=int(data.get("pullRequestId", 0)),
            title=data.get("title", ""),
            description=data.get("description", "") or "",
            status=data.get("status", ""),
            created_by=Identity.from_dict(data.get("createdBy")),
            creation_date=parse_timestamp(data.get("creationDate")),
            source_ref_name=data.get("sourceRefName", ""),
            target_ref_name=data.get("targetRefName", ""),
            merge_status=data.get("mergeStatus", ""),
            is_draft=bool(data.get("isDraft", False)),
            url=data.get("url", ""),
            repository=RepoRef(id=repository.get("id", ""), name=repository.get("name", "")),
            reviewers=tuple(Reviewer.from_dict(r) for r in data.get("reviewers") or []),
        )

    @property
    def source_branch(self) -> str:
        return _strip_branch(self.source_ref_name)

    @property
    def target_branch(self) -> str:
        return _strip_branch(self.target_ref_name)

    @property
    def is_active(self) -> bool:
        return self.status == "active"
