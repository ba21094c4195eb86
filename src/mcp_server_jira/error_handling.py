"""Error taxonomy for MCP Jira Server.

Two kinds of failure exist:

- Caller errors (missing parameters, missing template files, unknown
  operations) are raised as ``JiraInputError`` subclasses before any
  request is issued.
- Remote errors (non-success status codes, transport failures) are never
  raised. They are recorded as annotations on the ``JiraResponse`` and the
  response is returned normally. ``classify_response`` grades them for
  logging.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Classification of error severity levels."""

    CRITICAL = "critical"  # Caller must fix input before retrying
    HIGH = "high"  # Credentials or permissions problem
    MEDIUM = "medium"  # Server or network trouble
    LOW = "low"  # Request rejected, e.g. unknown issue key


class JiraError(Exception):
    """Base class for errors raised by this package."""

    severity: ErrorSeverity = ErrorSeverity.CRITICAL


class JiraInputError(JiraError, ValueError):
    """The caller supplied unusable input; no request was issued."""


class MissingParameterError(JiraInputError):
    def __init__(self, operation: str, missing: Iterable[str]):
        self.operation = operation
        self.missing = sorted(missing)
        super().__init__(
            f"Missing required parameter(s) for {operation}: {', '.join(self.missing)}"
        )


class TemplateNotFoundError(JiraInputError):
    def __init__(self, template: str):
        self.template = template
        super().__init__(f"Template file not found: {template}")


class TemplateReadError(JiraInputError):
    def __init__(self, template: str, reason: str):
        self.template = template
        super().__init__(f"Cannot read template file {template}: {reason}")


class UnknownOperationError(JiraInputError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Unknown operation: {operation}")


def classify_status(status: int) -> Optional[ErrorSeverity]:
    """Map an HTTP status to a severity; ``None`` for 2xx."""
    if 200 <= status < 300:
        return None
    if status in (401, 403):
        return ErrorSeverity.HIGH
    if status == 0 or status >= 500:
        return ErrorSeverity.MEDIUM
    return ErrorSeverity.LOW


def classify_response(response) -> Optional[ErrorSeverity]:
    """Severity of a failed response, or ``None`` when it succeeded."""
    if response.succeeded:
        return None
    return classify_status(response.status) or ErrorSeverity.LOW


def log_failure(operation: str, response) -> None:
    """Log a failed response at a level matching its severity."""
    severity = classify_response(response)
    if severity is None:
        return
    level = logging.ERROR if severity is ErrorSeverity.HIGH else logging.WARNING
    logger.log(
        level,
        f"{operation} failed ({severity.value}): {'; '.join(response.errors)}",
        extra={"operation": operation, "status": response.status},
    )
