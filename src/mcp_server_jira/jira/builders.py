"""Request construction for Jira operations.

Builders are pure: the same parameters always produce an equal
``JiraRequest``. Path segments such as issue keys are interpolated as-is;
escaping is left to the transport.
"""

import json
from pathlib import Path
from typing import List, Optional, Tuple

from ..constants import JiraAPIDefaults
from ..error_handling import TemplateNotFoundError, TemplateReadError
from .client import JiraRequest
from .models import (
    AddWatcherParams,
    CreateIssueParams,
    CreateMetaParams,
    GetIssueParams,
    JiraCredentials,
    MineParams,
    NotWatchingParams,
    RecentParams,
)

BASE_PATH = JiraAPIDefaults.BASE_PATH
JSON_HEADERS = {"Content-type": JiraAPIDefaults.JSON_CONTENT_TYPE}


def _auth(params: JiraCredentials) -> Tuple[str, str]:
    return (params.username, params.password)


def _search_params(limit: str, jql: str) -> Tuple[Tuple[str, str], ...]:
    return (("maxResults", limit), ("fields", "summary"), ("jql", jql))


def join_clauses(clauses: List[Optional[str]], joiner: str = "AND") -> str:
    """Join the present clauses left to right."""
    return f" {joiner} ".join(clause for clause in clauses if clause)


def project_clause(project: Optional[str]) -> Optional[str]:
    return f"project={project}" if project else None


def build_server_info_request() -> JiraRequest:
    return JiraRequest(method="GET", path=f"{BASE_PATH}/serverInfo")


def build_not_watching_request(params: NotWatchingParams) -> JiraRequest:
    jql = join_clauses(
        [project_clause(params.project), "watcher != currentUser()"], joiner="and"
    )
    return JiraRequest(
        method="GET",
        path=f"{BASE_PATH}/search",
        params=_search_params(params.limit, jql),
        auth=_auth(params),
    )


def build_mine_request(params: MineParams) -> JiraRequest:
    jql = join_clauses(
        [
            project_clause(params.project),
            "assignee = currentUser()",
            '(status="Open" OR status="In Progress")',
        ]
    )
    return JiraRequest(
        method="GET",
        path=f"{BASE_PATH}/search",
        params=_search_params(params.limit, jql),
        auth=_auth(params),
    )


def build_recent_request(params: RecentParams) -> JiraRequest:
    jql = join_clauses(
        [project_clause(params.project), f"updated >= -{params.days}d"]
    )
    return JiraRequest(
        method="GET",
        path=f"{BASE_PATH}/search",
        params=_search_params(params.limit, jql),
        auth=_auth(params),
    )


def build_get_issue_request(params: GetIssueParams) -> JiraRequest:
    return JiraRequest(
        method="GET",
        path=f"{BASE_PATH}/issue/{params.key}",
        params=(("fields", JiraAPIDefaults.ISSUE_FIELDS),),
        auth=_auth(params),
    )


def build_add_watcher_request(params: AddWatcherParams) -> JiraRequest:
    return JiraRequest(
        method="POST",
        path=f"{BASE_PATH}/issue/{params.key}/watchers",
        headers=dict(JSON_HEADERS),
        auth=_auth(params),
        body=json.dumps(params.username),
    )


def build_create_meta_request(params: CreateMetaParams) -> JiraRequest:
    return JiraRequest(
        method="GET",
        path=f"{BASE_PATH}/issue/createmeta",
        params=(
            ("projectKeys", params.project),
            ("expand", JiraAPIDefaults.CREATEMETA_EXPAND),
        ),
        auth=_auth(params),
    )


def build_create_issue_request(params: CreateIssueParams) -> JiraRequest:
    """Build the create request from the template file's raw contents.

    Raises:
        TemplateNotFoundError: the template does not exist; nothing is sent.
        TemplateReadError: the template exists but cannot be read.
    """
    template = Path(params.template)
    if not template.is_file():
        raise TemplateNotFoundError(params.template)
    try:
        body = template.read_bytes()
    except OSError as e:
        raise TemplateReadError(params.template, e.strerror or str(e)) from e

    return JiraRequest(
        method="POST",
        path=f"{BASE_PATH}/issue",
        headers=dict(JSON_HEADERS),
        auth=_auth(params),
        body=body,
    )
