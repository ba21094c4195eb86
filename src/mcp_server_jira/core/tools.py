"""Operation registry for MCP Jira Server"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Type

from mcp.types import Tool
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class JiraTools(str, Enum):
    """Enumeration of all available Jira operations"""
    SERVER_INFO = "server_info"
    NOT_WATCHING = "not_watching"
    MINE = "mine"
    RECENT = "recent"
    GET_ISSUE = "get_issue"
    ADD_MY_WATCH = "add_my_watch"
    WATCH_CATEGORY = "watch_category"
    CREATE_META = "create_meta"
    CREATE_ISSUE = "create_issue"


@dataclass(frozen=True)
class ParameterSpec:
    """A named parameter plus the hints a CLI needs to present it"""
    name: str
    short_flag: str
    long_flag: str
    help: str


USERNAME = ParameterSpec("username", "-u", "--user", "User name")
PASSWORD = ParameterSpec("password", "-P", "--password", "Password")
PROJECT = ParameterSpec("project", "-c", "--project", "Project name (category)")
LIMIT = ParameterSpec("limit", "-l", "--limit", "Limit result set size to this number")
ISSUE_KEY = ParameterSpec("key", "-k", "--issuekey", "Issue key")
DAYS = ParameterSpec("days", "-d", "--days", "Only issues updated in the last N days")
TEMPLATE = ParameterSpec("template", "-t", "--template", "JSON file describing the issue")

CREDENTIAL_NAMES = (USERNAME.name, PASSWORD.name)


@dataclass
class ToolDefinition:
    """Operation contract: parameters, model and handler"""
    name: str
    description: str
    schema: Type[BaseModel]
    handler: Callable
    required: Tuple[ParameterSpec, ...] = ()
    optional: Tuple[ParameterSpec, ...] = ()
    requires_auth: bool = True

    def __post_init__(self):
        # Enum members hash by member name, so key the registry by value
        if isinstance(self.name, JiraTools):
            self.name = self.name.value

    @property
    def required_names(self) -> List[str]:
        return [param.name for param in self.required]

    @property
    def optional_names(self) -> List[str]:
        return [param.name for param in self.optional]

    @property
    def parameters(self) -> Tuple[ParameterSpec, ...]:
        return self.required + self.optional

    def input_schema(self) -> Dict:
        """JSON schema advertised to MCP clients.

        Credentials can come from configuration, so they are never required
        here even though the parameter model requires them.
        """
        schema = self.schema.model_json_schema()
        if self.requires_auth and "required" in schema:
            schema["required"] = [
                name for name in schema["required"] if name not in CREDENTIAL_NAMES
            ]
        return schema


class ToolRegistry:
    """Central registry for all Jira operations"""

    def __init__(self):
        self.tools: Dict[str, ToolDefinition] = {}
        self._initialized = False

    def register(self, tool_def: ToolDefinition):
        """Register an operation in the registry"""
        overlap = set(tool_def.required_names) & set(tool_def.optional_names)
        if overlap:
            raise ValueError(
                f"{tool_def.name}: parameters both required and optional: {sorted(overlap)}"
            )
        self.tools[tool_def.name] = tool_def
        logger.debug(f"Registered tool: {tool_def.name}")

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """Get operation definition by name"""
        return self.tools.get(name)

    def contracts(self) -> List[ToolDefinition]:
        return list(self.tools.values())

    def list_tools(self) -> List[Tool]:
        """Get all operations as MCP Tool objects"""
        return [
            Tool(
                name=tool_def.name,
                description=tool_def.description,
                inputSchema=tool_def.input_schema(),
            )
            for tool_def in self.tools.values()
        ]

    def initialize_default_tools(self):
        """Initialize registry with the default Jira operations"""
        if self._initialized:
            return

        from ..jira import api
        from ..jira.models import (
            AddWatcherParams, CreateIssueParams, CreateMetaParams, GetIssueParams,
            MineParams, NotWatchingParams, RecentParams, ServerInfoParams,
            WatchCategoryParams,
        )

        tools = [
            ToolDefinition(
                name=JiraTools.SERVER_INFO,
                description="Retrieve server info (tests API connectivity, no authentication)",
                schema=ServerInfoParams,
                handler=api.server_info,
                requires_auth=False,
            ),
            ToolDefinition(
                name=JiraTools.NOT_WATCHING,
                description="List issues in a project that I am not watching",
                schema=NotWatchingParams,
                handler=api.not_watching,
                required=(USERNAME, PASSWORD, PROJECT),
                optional=(LIMIT,),
            ),
            ToolDefinition(
                name=JiraTools.MINE,
                description="List open and in-progress issues assigned to me",
                schema=MineParams,
                handler=api.mine,
                required=(USERNAME, PASSWORD),
                optional=(LIMIT, PROJECT),
            ),
            ToolDefinition(
                name=JiraTools.RECENT,
                description="List recently updated issues",
                schema=RecentParams,
                handler=api.recent,
                required=(USERNAME, PASSWORD),
                optional=(LIMIT, PROJECT, DAYS),
            ),
            ToolDefinition(
                name=JiraTools.GET_ISSUE,
                description="Show type, status, priority, dates, labels and components of one issue",
                schema=GetIssueParams,
                handler=api.get_issue,
                required=(USERNAME, PASSWORD, ISSUE_KEY),
            ),
            ToolDefinition(
                name=JiraTools.ADD_MY_WATCH,
                description="Add myself as a watcher to one issue",
                schema=AddWatcherParams,
                handler=api.add_my_watch,
                required=(USERNAME, PASSWORD, ISSUE_KEY),
                optional=(PROJECT,),
            ),
            ToolDefinition(
                name=JiraTools.WATCH_CATEGORY,
                description="Add myself as a watcher to all unwatched issues in a project",
                schema=WatchCategoryParams,
                handler=api.watch_category,
                required=(USERNAME, PASSWORD, PROJECT),
                optional=(LIMIT,),
            ),
            ToolDefinition(
                name=JiraTools.CREATE_META,
                description="Show issue types and fields available when creating issues",
                schema=CreateMetaParams,
                handler=api.create_meta,
                required=(USERNAME, PASSWORD, PROJECT),
            ),
            ToolDefinition(
                name=JiraTools.CREATE_ISSUE,
                description="Create an issue from a JSON template file",
                schema=CreateIssueParams,
                handler=api.create_issue,
                required=(USERNAME, PASSWORD, TEMPLATE),
            ),
        ]

        for tool_def in tools:
            self.register(tool_def)

        self._initialized = True
        logger.info(f"Initialized {len(self.tools)} tools")
