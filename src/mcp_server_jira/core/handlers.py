"""Operation dispatch for MCP Jira Server"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

from ..configuration import JiraConfig
from ..error_handling import MissingParameterError, UnknownOperationError, log_failure
from ..jira.client import JiraResponse, Transport
from ..session import SessionState
from .tools import ToolDefinition, ToolRegistry

logger = logging.getLogger(__name__)


class OperationDispatcher:
    """Validates raw arguments against a contract and runs the operation"""

    def __init__(
        self,
        transport: Transport,
        config: Optional[JiraConfig] = None,
        registry: Optional[ToolRegistry] = None,
    ):
        self.transport = transport
        self.config = config or JiraConfig()
        if registry is None:
            registry = ToolRegistry()
            registry.initialize_default_tools()
        self.registry = registry

    def get_contract(self, name: str) -> ToolDefinition:
        tool_def = self.registry.get_tool(name)
        if tool_def is None:
            raise UnknownOperationError(name)
        return tool_def

    def resolve_arguments(self, name: str, arguments: Mapping[str, Any]) -> BaseModel:
        """
        Build the operation's parameter model from a raw name -> value mapping.

        Unknown names are dropped. Credentials fall back to configuration.

        Raises:
            UnknownOperationError: no such operation.
            MissingParameterError: a required parameter has no value.
        """
        tool_def = self.get_contract(name)
        known = {param.name for param in tool_def.parameters}
        values: Dict[str, str] = {
            key: str(value)
            for key, value in arguments.items()
            if key in known and value is not None and value != ""
        }

        if tool_def.requires_auth:
            if "username" not in values and self.config.username:
                values["username"] = self.config.username
            if "password" not in values and self.config.password:
                values["password"] = self.config.password

        missing = [param for param in tool_def.required_names if param not in values]
        if missing:
            raise MissingParameterError(name, missing)

        return tool_def.schema.model_validate(values)

    async def dispatch(
        self, name: str, arguments: Mapping[str, Any], session: SessionState
    ) -> JiraResponse:
        """Run operation *name*; remote failures come back as annotations."""
        params = self.resolve_arguments(name, arguments)
        tool_def = self.get_contract(name)

        started = time.time()
        response = await tool_def.handler(self.transport, params, session)
        duration_ms = round((time.time() - started) * 1000, 1)

        if response.succeeded:
            logger.info(
                f"{name} completed",
                extra={"operation": name, "status": response.status, "duration_ms": duration_ms},
            )
        else:
            log_failure(name, response)
        return response
