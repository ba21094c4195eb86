"""Constants module for MCP Jira Server.

Constants are grouped in small classes so that related values travel
together:

    JiraAPIDefaults: wire-level values for the Jira REST API v2
    StateKeys: names under which results are stashed in session state
    OperationDefaults: defaults applied when optional parameters are absent

Usage examples:
    >>> from mcp_server_jira.constants import JiraAPIDefaults, StateKeys
    >>>
    >>> JiraAPIDefaults.BASE_PATH
    '/rest/api/2'
    >>> StateKeys.NOT_WATCHING
    'not_watching_result'
"""

from typing import Final


class JiraAPIDefaults:
    """Wire-level constants for the Jira REST API."""

    PROTOCOL: Final[str] = "https"
    BASE_PATH: Final[str] = "/rest/api/2"
    JSON_CONTENT_TYPE: Final[str] = "application/json"
    WATCHER_ADDED_STATUS: Final[int] = 204
    ISSUE_FOUND_STATUS: Final[int] = 200
    ISSUE_FIELDS: Final[str] = (
        "issuetype,created,priority,status,summary,updated,"
        "statuscategorychangedate,labels,components"
    )
    CREATEMETA_EXPAND: Final[str] = "projects.issuetypes.fields"


class StateKeys:
    """Session state keys written by operations."""

    SERVER_INFO: Final[str] = "server_info_result"
    NOT_WATCHING: Final[str] = "not_watching_result"
    MY_BUGS: Final[str] = "my_bugs"
    GET_ISSUE: Final[str] = "get_issue_result"
    RECENT: Final[str] = "get_recent_result"
    CLI_OUTPUT: Final[str] = "cli_output"
    MODE: Final[str] = "mode"
    CURRENT_KEY: Final[str] = "key"


class OperationDefaults:
    """Defaults for optional operation parameters."""

    SEARCH_LIMIT: Final[str] = "100"
    RECENT_DAYS: Final[str] = "7"
    PRIORITY_NONE: Final[str] = "none"
    CLI_MODE: Final[str] = "cli"
    REQUEST_TIMEOUT_SECONDS: Final[float] = 30.0


__all__ = [
    "JiraAPIDefaults",
    "StateKeys",
    "OperationDefaults",
]
