"""Configuration module for MCP Jira Server.

Configuration is a single pydantic model bound to environment variables.
A project-level ``.env`` file is loaded first with python-dotenv, without
overriding variables that are already set in the process environment.

Environment variable binding:
    ```bash
    export JIRA_HOST=jira.example.com
    export JIRA_USERNAME=jdoe
    export JIRA_PASSWORD=secret
    export JIRA_TIMEOUT=15
    export LOG_LEVEL=DEBUG
    ```

Usage examples:
    >>> from mcp_server_jira.configuration import load_config_from_env
    >>>
    >>> config = load_config_from_env()
    >>> print(f"Talking to {config.host} with a {config.timeout_seconds}s timeout")
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from ..constants import OperationDefaults

logger = logging.getLogger(__name__)

# Values that people leave in .env templates and that must not be used
CREDENTIAL_PLACEHOLDERS = ["", "YOUR_PASSWORD_HERE", "REPLACE_ME", "TODO", "CHANGEME"]


class JiraConfig(BaseModel):
    """Runtime configuration for talking to a Jira server."""

    host: Optional[str] = Field(
        default=None,
        description="Jira host name, optionally with port (no scheme).",
    )
    username: Optional[str] = Field(default=None, description="Default user name.")
    password: Optional[str] = Field(default=None, description="Default password.")
    timeout_seconds: float = Field(
        default=OperationDefaults.REQUEST_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout per request (seconds).",
    )
    log_level: str = Field(default="INFO", description="Root log level.")

    @field_validator("host")
    @classmethod
    def strip_scheme(cls, value: Optional[str]) -> Optional[str]:
        """Accept hosts pasted as URLs; the scheme is fixed by the request."""
        if value is None:
            return None
        value = value.strip()
        for prefix in ("https://", "http://"):
            if value.startswith(prefix):
                value = value[len(prefix):]
        return value.rstrip("/") or None

    @field_validator("username", "password")
    @classmethod
    def drop_placeholders(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value.strip() in CREDENTIAL_PLACEHOLDERS:
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


def load_environment_variables(project_dir: Optional[Path] = None) -> Optional[Path]:
    """Load a ``.env`` file from *project_dir* (default: cwd) if it exists.

    Already-set environment variables win over the file.
    """
    env_file = (project_dir or Path.cwd()) / ".env"
    if not env_file.exists():
        logger.info("No .env file found, using system environment variables only")
        return None

    load_dotenv(env_file, override=False)
    logger.info(f"Loaded environment variables from {env_file}")
    return env_file


def load_config_from_env(project_dir: Optional[Path] = None) -> JiraConfig:
    """Build a JiraConfig from the environment (after loading ``.env``)."""
    load_environment_variables(project_dir)

    values = {
        "host": os.getenv("JIRA_HOST"),
        "username": os.getenv("JIRA_USERNAME"),
        "password": os.getenv("JIRA_PASSWORD"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
    }
    timeout = os.getenv("JIRA_TIMEOUT")
    if timeout:
        values["timeout_seconds"] = timeout

    return JiraConfig.model_validate(values)


__all__ = [
    "JiraConfig",
    "load_config_from_env",
    "load_environment_variables",
]
