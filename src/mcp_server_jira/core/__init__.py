"""Operation registry and dispatch for MCP Jira Server"""

from .handlers import OperationDispatcher
from .tools import JiraTools, ParameterSpec, ToolDefinition, ToolRegistry

__all__ = [
    "JiraTools",
    "OperationDispatcher",
    "ParameterSpec",
    "ToolDefinition",
    "ToolRegistry",
]
