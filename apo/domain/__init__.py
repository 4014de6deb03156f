"""Domain records for Azure DevOps resources."""

from .models import (
    Build,
    BuildDefinition,
    Identity,
    Pipeline,
    Project,
    PullRequest,
    RepoRef,
    Repository,
    Reviewer,
    WorkItem,
    parse_timestamp,
)

__all__ = [
    "Build",
    "BuildDefinition",
    "Identity",
    "Pipeline",
    "Project",
    "PullRequest",
    "RepoRef",
    "Repository",
    "Reviewer",
    "WorkItem",
    "parse_timestamp",
]
