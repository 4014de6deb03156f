"""Azure DevOps REST API client.

Thin wrapper over a requests session. Every call returns typed domain records
or raises ApiError; nothing is retried.
"""

import logging
from typing import Any, Callable, Optional, TypeVar

import requests

from ..config import DEFAULT_TIMEOUT_SECONDS, Config
from ..domain import Build, Pipeline, Project, PullRequest, Repository, WorkItem
from ..exceptions import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MY_WORK_ITEMS_WIQL = """SELECT [System.Id] FROM WorkItems
WHERE [System.AssignedTo] = @Me
AND [System.State] <> 'Closed'
AND [System.State] <> 'Removed'
ORDER BY [System.ChangedDate] DESC"""

# Longest error body echoed back in ApiError messages
MAX_ERROR_BODY = 200


class AzureDevOpsClient:
    """Client for one organization and project."""

    def __init__(
        self,
        config: Config,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.base_url = config.api_url.rstrip("/")
        self.organization = config.organization
        self.project = config.project
        self.api_version = config.api_version
        self.timeout = timeout

        self.session = session or requests.Session()
        # Personal access tokens use basic auth with an empty user name
        self.session.auth = ("", config.pat)
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    # =========================================================================
    # Request plumbing
    # =========================================================================

    def _project_url(self, path: str) -> str:
        return f"{self.base_url}/{self.organization}/{self.project}/{path}"

    def _org_url(self, path: str) -> str:
        return f"{self.base_url}/{self.organization}/{path}"

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request and decode the JSON response.

        Raises:
            ApiError: On transport errors, non-2xx responses or invalid JSON
        """
        query = {"api-version": self.api_version}
        if params:
            query.update(params)

        logger.debug("%s %s %s", method, url, params or "")
        try:
            response = self.session.request(
                method, url, params=query, json=json, timeout=self.timeout
            )
        except requests.Timeout as e:
            raise ApiError(f"request to {url} timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ApiError(f"executing request: {e}") from e

        if not 200 <= response.status_code < 300:
            body = response.text[:MAX_ERROR_BODY]
            raise ApiError(
                f"API error (status {response.status_code}): {body}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"parsing response: {e}") from e

    def _list(
        self,
        url: str,
        factory: Callable[[dict[str, Any]], T],
        params: Optional[dict[str, Any]] = None,
    ) -> list[T]:
        """GET a collection endpoint and build a record from each entry of "value"."""
        payload = self._request("GET", url, params=params)
        if not isinstance(payload, dict):
            raise ApiError("parsing response: expected a JSON object")
        try:
            return [factory(entry) for entry in payload.get("value") or []]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ApiError(f"parsing response: {e}") from e

    # =========================================================================
    # Resources
    # =========================================================================

    def get_my_work_items(self) -> list[WorkItem]:
        """Open work items assigned to the authenticated user, newest change first."""
        result = self._request(
            "POST", self._project_url("_apis/wit/wiql"), json={"query": MY_WORK_ITEMS_WIQL}
        )
        if not isinstance(result, dict):
            raise ApiError("parsing response: expected a JSON object")
        refs = result.get("workItems") or []
        if not refs:
            return []

        try:
            ids = ",".join(str(int(ref["id"])) for ref in refs)
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(f"parsing response: {e}") from e
        return self._list(
            self._project_url("_apis/wit/workitems"), WorkItem.from_dict, params={"ids": ids}
        )

    def list_builds(self, status: str = "", result: str = "", top: int = 0) -> list[Build]:
        """Recent builds, optionally filtered by status and result."""
        params: dict[str, Any] = {}
        if status:
            params["statusFilter"] = status
        if result:
            params["resultFilter"] = result
        if top > 0:
            params["$top"] = top
        return self._list(self._project_url("_apis/build/builds"), Build.from_dict, params=params)

    def get_failed_builds(self, top: int) -> list[Build]:
        return self.list_builds("completed", "failed", top)

    def get_running_builds(self) -> list[Build]:
        return self.list_builds("inProgress", "", 50)

    def list_pipelines(self) -> list[Pipeline]:
        return self._list(self._project_url("_apis/pipelines"), Pipeline.from_dict)

    def list_repositories(self) -> list[Repository]:
        return self._list(self._project_url("_apis/git/repositories"), Repository.from_dict)

    def get_active_pull_requests(self, top: int = 0) -> list[PullRequest]:
        params: dict[str, Any] = {"searchCriteria.status": "active"}
        if top > 0:
            params["$top"] = top
        return self._list(
            self._project_url("_apis/git/pullrequests"), PullRequest.from_dict, params=params
        )

    def list_projects(self) -> list[Project]:
        """All projects in the organization."""
        return self._list(self._org_url("_apis/projects"), Project.from_dict)
