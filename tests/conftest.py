"""
Global pytest configuration and fixtures.

Provides a fresh session state, a recording fake transport and the canned
Jira response factory to every test that asks for them.
"""

import os

import pytest

from fixtures.jira_responses import FakeTransport, JiraResponseFactory
from mcp_server_jira.configuration import JiraConfig
from mcp_server_jira.session import SessionState


@pytest.fixture(autouse=True)
def clean_jira_environment(monkeypatch):
    """Keep developer JIRA_* settings out of the tests."""
    for name in list(os.environ):
        if name.startswith("JIRA_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def responses():
    return JiraResponseFactory


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session() -> SessionState:
    """Session without interactive output."""
    return SessionState()


@pytest.fixture
def cli_session() -> SessionState:
    """Session in interactive (CLI) mode."""
    return SessionState(cli_mode=True)


@pytest.fixture
def jira_config() -> JiraConfig:
    return JiraConfig(host="jira.example.com")


@pytest.fixture
def credentials():
    return {"username": "u", "password": "p"}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests between components")
