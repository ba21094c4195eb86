"""Jira integration for MCP Jira Server"""

from .api import (
    add_my_watch,
    create_issue,
    create_meta,
    get_issue,
    mine,
    not_watching,
    recent,
    server_info,
    watch_category,
)
from .client import JiraClient, JiraRequest, JiraResponse, Transport, get_jira_client
from .models import (
    AddWatcherParams,
    CreateIssueParams,
    CreateMetaParams,
    GetIssueParams,
    MineParams,
    NotWatchingParams,
    RecentParams,
    ServerInfoParams,
    WatchCategoryParams,
)

__all__ = [
    "JiraClient",
    "JiraRequest",
    "JiraResponse",
    "Transport",
    "get_jira_client",
    # Read operations
    "server_info",
    "not_watching",
    "mine",
    "recent",
    "get_issue",
    "create_meta",
    # Write operations
    "add_my_watch",
    "watch_category",
    "create_issue",
    # Models
    "AddWatcherParams",
    "CreateIssueParams",
    "CreateMetaParams",
    "GetIssueParams",
    "MineParams",
    "NotWatchingParams",
    "RecentParams",
    "ServerInfoParams",
    "WatchCategoryParams",
]
