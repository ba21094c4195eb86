"""Tests for the aiohttp transport."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from mcp_server_jira.configuration import JiraConfig
from mcp_server_jira.jira.client import JiraClient, JiraRequest, JiraResponse, get_jira_client


def _mock_session(status: int = 200, body: bytes = b"{}"):
    response = MagicMock()
    response.status = status
    response.read = AsyncMock(return_value=body)

    session = MagicMock()
    session.request.return_value.__aenter__ = AsyncMock(return_value=response)
    session.request.return_value.__aexit__ = AsyncMock(return_value=False)
    return session


class TestJiraResponse:
    def test_succeeded_requires_ok_and_no_errors(self):
        response = JiraResponse(ok=True, status=200)
        assert response.succeeded
        response.add_error("nope")
        assert not response.succeeded
        assert not JiraResponse(ok=False, status=500).succeeded

    def test_text(self):
        assert JiraResponse(ok=True, status=200, body="é".encode()).text == "é"


class TestJiraClient:
    @pytest.mark.asyncio
    async def test_send_builds_https_call(self):
        session = _mock_session(204, b"")
        client = JiraClient(host="jira.example.com", session=session, timeout_seconds=5)
        request = JiraRequest(
            method="POST",
            path="/rest/api/2/issue/PRJ-1/watchers",
            params=(("b", "2"), ("a", "1")),
            headers={"Content-type": "application/json"},
            auth=("u", "p"),
            body='"u"',
        )

        response = await client.send(request)

        assert response.ok
        assert response.status == 204
        assert response.errors == []
        args, kwargs = session.request.call_args
        assert args == ("POST", "https://jira.example.com/rest/api/2/issue/PRJ-1/watchers")
        assert kwargs["params"] == [("b", "2"), ("a", "1")]
        assert kwargs["headers"] == {"Content-type": "application/json"}
        assert kwargs["auth"] == aiohttp.BasicAuth("u", "p")
        assert kwargs["data"] == '"u"'

    @pytest.mark.asyncio
    async def test_no_auth_when_absent(self):
        session = _mock_session(200, b'{"version": "6"}')
        client = JiraClient(host="jira.example.com", session=session)

        response = await client.send(JiraRequest(method="GET", path="/rest/api/2/serverInfo"))

        assert response.body == b'{"version": "6"}'
        assert session.request.call_args.kwargs["auth"] is None

    @pytest.mark.asyncio
    async def test_non_2xx_is_not_ok(self):
        client = JiraClient(host="jira.example.com", session=_mock_session(404, b""))

        response = await client.send(JiraRequest(method="GET", path="/rest/api/2/issue/X-1"))

        assert not response.ok
        assert response.status == 404
        assert response.errors == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()]
    )
    async def test_network_failure_is_annotated(self, error):
        session = MagicMock()
        session.request.side_effect = error
        client = JiraClient(host="jira.example.com", session=session)

        response = await client.send(JiraRequest(method="GET", path="/rest/api/2/search"))

        assert not response.ok
        assert response.status == 0
        assert response.errors[0].startswith("Request to /rest/api/2/search failed")


class TestGetJiraClient:
    def test_no_host_no_client(self):
        assert get_jira_client(JiraConfig()) is None

    @pytest.mark.asyncio
    async def test_client_for_host(self):
        client = get_jira_client(JiraConfig(host="https://jira.example.com/", timeout_seconds=3))
        try:
            assert client.host == "jira.example.com"
            assert client.timeout_seconds == 3
        finally:
            await client.close()
