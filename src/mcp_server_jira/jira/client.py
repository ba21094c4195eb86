"""Jira REST API transport"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

import aiohttp

from ..configuration import JiraConfig
from ..constants import JiraAPIDefaults

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JiraRequest:
    """Fully specified HTTP request, built fresh for every call."""

    method: str
    path: str
    params: Tuple[Tuple[str, str], ...] = ()
    headers: Optional[Dict[str, str]] = None
    auth: Optional[Tuple[str, str]] = None
    body: Optional[Union[str, bytes]] = None
    protocol: str = JiraAPIDefaults.PROTOCOL


@dataclass
class JiraResponse:
    """Transport result plus error annotations added by operations."""

    ok: bool
    status: int
    body: bytes = b""
    errors: List[str] = field(default_factory=list)
    result: Optional[Any] = None

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    @property
    def succeeded(self) -> bool:
        return self.ok and not self.errors

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    async def send(self, request: JiraRequest) -> JiraResponse: ...


@dataclass
class JiraClient:
    """aiohttp-backed transport for a single Jira host."""

    host: str
    session: aiohttp.ClientSession
    timeout_seconds: float = 30.0

    def url_for(self, request: JiraRequest) -> str:
        return f"{request.protocol}://{self.host}{request.path}"

    async def send(self, request: JiraRequest) -> JiraResponse:
        """Execute *request*; network failures come back as annotated responses."""
        url = self.url_for(request)
        auth = aiohttp.BasicAuth(*request.auth) if request.auth else None
        started = time.monotonic()

        try:
            async with self.session.request(
                request.method,
                url,
                params=list(request.params),
                headers=request.headers,
                auth=auth,
                data=request.body,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as resp:
                body = await resp.read()
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Request {request.method} {request.path} failed: {e}")
            response = JiraResponse(ok=False, status=0)
            response.add_error(f"Request to {request.path} failed: {str(e) or type(e).__name__}")
            return response

        duration_ms = round((time.monotonic() - started) * 1000, 1)
        logger.debug(
            f"{request.method} {request.path} -> {status}",
            extra={"status": status, "duration_ms": duration_ms},
        )
        return JiraResponse(ok=200 <= status < 300, status=status, body=body)

    async def close(self) -> None:
        if not self.session.closed:
            await self.session.close()


def get_jira_client(config: JiraConfig) -> Optional[JiraClient]:
    """Get a Jira client for the configured host."""
    if not config.host:
        logger.debug("No Jira host configured (JIRA_HOST)")
        return None

    # Caller is responsible for closing the session
    session = aiohttp.ClientSession()
    return JiraClient(
        host=config.host, session=session, timeout_seconds=config.timeout_seconds
    )
