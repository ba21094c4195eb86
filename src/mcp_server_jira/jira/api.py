"""Jira API operations for MCP Jira Server"""

import json
import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..constants import JiraAPIDefaults, StateKeys
from ..session import SessionState
from .builders import (
    build_add_watcher_request,
    build_create_issue_request,
    build_create_meta_request,
    build_get_issue_request,
    build_mine_request,
    build_not_watching_request,
    build_recent_request,
    build_server_info_request,
)
from .client import JiraRequest, JiraResponse, Transport
from .models import (
    AddWatcherParams,
    CreatedIssue,
    CreateIssueParams,
    CreateMetaParams,
    GetIssueParams,
    IssueDetail,
    MineParams,
    NotWatchingParams,
    RecentParams,
    SearchResult,
    ServerInfoParams,
    WatchCategoryParams,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


async def _execute(transport: Transport, request: JiraRequest, operation: str) -> JiraResponse:
    logger.info(
        f"{operation}: {request.method} {request.path}", extra={"operation": operation}
    )
    return await transport.send(request)


def _parse_model(response: JiraResponse, model: Type[M], operation: str) -> Optional[M]:
    try:
        return model.model_validate_json(response.body)
    except ValidationError as e:
        response.add_error(f"Malformed response from {operation}: {e.errors()[0]['msg']}")
        return None


def _parse_json(response: JiraResponse, operation: str):
    try:
        return json.loads(response.body)
    except ValueError as e:
        response.add_error(f"Malformed response from {operation}: {e}")
        return None


def _normalize_search(
    response: JiraResponse, session: SessionState, operation: str, state_key: str
) -> None:
    """Stash a key -> summary mapping for a successful search."""
    parsed = _parse_model(response, SearchResult, operation)
    if parsed is None:
        return

    issues = parsed.summaries()
    response.result = issues
    session.set(state_key, issues)

    lines = "".join(f"{key} : {summary}\n" for key, summary in issues.items())
    session.set_cli_output(f"\n{lines}")


async def server_info(
    transport: Transport, params: Optional[ServerInfoParams], session: SessionState
) -> JiraResponse:
    """Retrieve server info; useful to test the connection. No authentication."""
    result = await _execute(transport, build_server_info_request(), "server_info")

    if not result.ok:
        result.add_error(f"Unable to get server info (HTTP {result.status})")
        return result

    info = _parse_json(result, "server_info")
    if info is not None:
        result.result = info
        session.set(StateKeys.SERVER_INFO, info)
        session.set_cli_output(json.dumps(info, indent=2))
    return result


async def not_watching(
    transport: Transport, params: NotWatchingParams, session: SessionState
) -> JiraResponse:
    """
    Find issues in a project that the authenticating user is not watching.

    The list may be partial: at most ``limit`` issues are requested and the
    server may cap the page further.
    """
    result = await _execute(transport, build_not_watching_request(params), "not_watching")

    if result.ok:
        _normalize_search(result, session, "not_watching", StateKeys.NOT_WATCHING)
    else:
        result.add_error(
            f"Unable to list unwatched issues in {params.project} (HTTP {result.status})"
        )
    return result


async def mine(
    transport: Transport, params: MineParams, session: SessionState
) -> JiraResponse:
    """Find open or in-progress issues assigned to the authenticating user."""
    result = await _execute(transport, build_mine_request(params), "mine")

    if result.ok:
        _normalize_search(result, session, "mine", StateKeys.MY_BUGS)
    else:
        result.add_error(
            f"Unable to list issues assigned to {params.username} (HTTP {result.status})"
        )
    return result


async def recent(
    transport: Transport, params: RecentParams, session: SessionState
) -> JiraResponse:
    """Find issues updated within the last ``days`` days."""
    result = await _execute(transport, build_recent_request(params), "recent")

    if result.ok:
        _normalize_search(result, session, "recent", StateKeys.RECENT)
    else:
        result.add_error(
            f"Unable to list recently updated issues (HTTP {result.status})"
        )
    return result


async def get_issue(
    transport: Transport, params: GetIssueParams, session: SessionState
) -> JiraResponse:
    """Fetch one issue and flatten the fields of interest."""
    result = await _execute(transport, build_get_issue_request(params), "get_issue")

    if result.status != JiraAPIDefaults.ISSUE_FOUND_STATUS:
        result.add_error(f"Unable to get issue {params.key} (HTTP {result.status})")
        return result

    detail = _parse_model(result, IssueDetail, "get_issue")
    if detail is None:
        return result

    fields = detail.flatten()
    result.result = fields
    session.set(StateKeys.GET_ISSUE, fields)

    lines = "".join(f"  {name}: {value}\n" for name, value in fields.items())
    session.set_cli_output(f"{params.key}\n{lines}")
    return result


async def add_my_watch(
    transport: Transport, params: AddWatcherParams, session: SessionState
) -> JiraResponse:
    """Add the authenticating user as a watcher of one issue."""
    result = await _execute(transport, build_add_watcher_request(params), "add_my_watch")

    if result.status == JiraAPIDefaults.WATCHER_ADDED_STATUS:
        session.set_cli_output(f"Added {params.username} as a watcher to {params.key}")
    else:
        result.add_error(f"Unable to add {params.username} to {params.key}")
    return result


async def watch_category(
    transport: Transport, params: WatchCategoryParams, session: SessionState
) -> JiraResponse:
    """
    Watch every unwatched issue in a project.

    Chains not_watching and add_my_watch. The first failure aborts the
    batch; issues after the failing one are not attempted. Only one page of
    unwatched issues is handled, so large projects may need repeated runs.
    """
    count = 0
    with session.suppress_cli_output():
        result = await not_watching(
            transport,
            NotWatchingParams(
                username=params.username,
                password=params.password,
                project=params.project,
                limit=params.limit,
            ),
            session,
        )
        if not result.succeeded:
            result.add_error("Unable to get list of unwatched issues")
            return result

        issues = session.get(StateKeys.NOT_WATCHING) or {}
        for key, summary in issues.items():
            logger.info(f"{key}: {summary}", extra={"operation": "watch_category", "issue_key": key})
            with session.request_scope():
                session.set_temporary(StateKeys.CURRENT_KEY, key)
                result = await add_my_watch(
                    transport,
                    AddWatcherParams(
                        username=params.username,
                        password=params.password,
                        project=params.project,
                        key=session.get(StateKeys.CURRENT_KEY),
                    ),
                    session,
                )
            if not result.succeeded:
                result.add_error(f"Unable to add watcher to {key}")
                return result
            count += 1

    session.set_cli_output(f"Added {count} bugs to watch in {params.project}")
    return result


async def create_meta(
    transport: Transport, params: CreateMetaParams, session: SessionState
) -> JiraResponse:
    """Fetch the create-issue metadata (issue types and fields) for a project."""
    result = await _execute(transport, build_create_meta_request(params), "create_meta")

    if not result.ok:
        result.add_error(
            f"Unable to get create metadata for {params.project} (HTTP {result.status})"
        )
        return result

    meta = _parse_json(result, "create_meta")
    if meta is not None:
        session.set_cli_output(json.dumps(meta, indent=2))
    return result


async def create_issue(
    transport: Transport, params: CreateIssueParams, session: SessionState
) -> JiraResponse:
    """
    Create an issue from a JSON template file sent verbatim.

    Raises:
        TemplateNotFoundError: the template is missing; no request is sent.
        TemplateReadError: the template cannot be read; no request is sent.
    """
    request = build_create_issue_request(params)
    result = await _execute(transport, request, "create_issue")

    if not result.ok:
        result.add_error(
            f"Unable to create issue from {params.template} (HTTP {result.status})"
        )
        return result

    created = _parse_model(result, CreatedIssue, "create_issue")
    if created is None:
        return result
    if not created.key:
        result.add_error("Malformed response from create_issue: no issue key")
    else:
        result.result = {"id": created.id, "key": created.key}
        session.set_cli_output(f"Created issue {created.key}")
    return result
