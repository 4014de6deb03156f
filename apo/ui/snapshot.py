"""Shared data snapshot read by the views and written by the refresh worker."""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..domain import Build, Pipeline, PullRequest, Repository, WorkItem

# Refresh categories, in fetch order
WORK_ITEMS = "work items"
BUILDS = "builds"
PIPELINES = "pipelines"
REPOSITORIES = "repositories"
PULL_REQUESTS = "pull requests"

CATEGORIES = (WORK_ITEMS, BUILDS, PIPELINES, REPOSITORIES, PULL_REQUESTS)


@dataclass
class DataSnapshot:
    """Everything fetched by the last refresh cycles.

    Fields are written only while holding `lock`; readers hold it for the
    whole of a frame so they never see a half-applied refresh.
    """

    work_items: list[WorkItem] = field(default_factory=list)
    builds: list[Build] = field(default_factory=list)
    pipelines: list[Pipeline] = field(default_factory=list)
    repositories: list[Repository] = field(default_factory=list)
    pull_requests: list[PullRequest] = field(default_factory=list)
    last_refresh: Optional[datetime] = None
    loading: bool = False
    failed_categories: list[str] = field(default_factory=list)
    version: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)
