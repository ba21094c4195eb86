"""Tests for request construction."""

from pathlib import Path

import pytest

from mcp_server_jira.error_handling import (
    JiraInputError,
    TemplateNotFoundError,
    TemplateReadError,
)
from mcp_server_jira.jira.builders import (
    build_add_watcher_request,
    build_create_issue_request,
    build_create_meta_request,
    build_get_issue_request,
    build_mine_request,
    build_not_watching_request,
    build_recent_request,
    build_server_info_request,
    join_clauses,
)
from mcp_server_jira.jira.models import (
    AddWatcherParams,
    CreateIssueParams,
    CreateMetaParams,
    GetIssueParams,
    MineParams,
    NotWatchingParams,
    RecentParams,
)


class TestCommonRules:
    def test_server_info_has_no_auth(self):
        request = build_server_info_request()
        assert request.protocol == "https"
        assert request.method == "GET"
        assert request.path == "/rest/api/2/serverInfo"
        assert request.auth is None
        assert request.body is None
        assert request.params == ()

    def test_authenticated_requests_carry_basic_auth(self):
        request = build_get_issue_request(GetIssueParams(username="u", password="p", key="PRJ-1"))
        assert request.protocol == "https"
        assert request.auth == ("u", "p")

    def test_building_twice_gives_equal_requests(self):
        params = NotWatchingParams(username="u", password="p", project="PRJ", limit="5")
        assert build_not_watching_request(params) == build_not_watching_request(params)

        watch = AddWatcherParams(username="u", password="p", key="PRJ-1")
        assert build_add_watcher_request(watch) == build_add_watcher_request(watch)

    def test_join_clauses_skips_missing(self):
        assert join_clauses([None, "a", "", "b"]) == "a AND b"
        assert join_clauses(["a", "b"], joiner="and") == "a and b"
        assert join_clauses([None]) == ""


class TestSearchRequests:
    def test_not_watching_query(self):
        request = build_not_watching_request(
            NotWatchingParams(username="u", password="p", project="PRJ")
        )
        assert request.method == "GET"
        assert request.path == "/rest/api/2/search"
        assert request.params == (
            ("maxResults", "100"),
            ("fields", "summary"),
            ("jql", "project=PRJ and watcher != currentUser()"),
        )
        assert request.headers is None
        assert request.body is None

    def test_not_watching_honours_limit(self):
        request = build_not_watching_request(
            NotWatchingParams(username="u", password="p", project="PRJ", limit="10")
        )
        assert request.params[0] == ("maxResults", "10")

    def test_mine_without_project(self):
        request = build_mine_request(MineParams(username="u", password="p"))
        assert dict(request.params)["jql"] == (
            'assignee = currentUser() AND (status="Open" OR status="In Progress")'
        )

    def test_mine_with_project(self):
        request = build_mine_request(MineParams(username="u", password="p", project="PRJ"))
        assert dict(request.params)["jql"] == (
            'project=PRJ AND assignee = currentUser() AND (status="Open" OR status="In Progress")'
        )
        assert [name for name, _ in request.params] == ["maxResults", "fields", "jql"]

    def test_recent_filters_on_supplied_project(self):
        # Filters on the caller's project rather than a fixed project code.
        request = build_recent_request(RecentParams(username="u", password="p", project="ABC"))
        assert dict(request.params)["jql"] == "project=ABC AND updated >= -7d"

    def test_recent_without_project_uses_time_window_only(self):
        request = build_recent_request(RecentParams(username="u", password="p", days="3"))
        assert dict(request.params)["jql"] == "updated >= -3d"


class TestIssueRequests:
    def test_get_issue(self):
        request = build_get_issue_request(GetIssueParams(username="u", password="p", key="PRJ-7"))
        assert request.method == "GET"
        assert request.path == "/rest/api/2/issue/PRJ-7"
        assert request.params == (
            (
                "fields",
                "issuetype,created,priority,status,summary,updated,"
                "statuscategorychangedate,labels,components",
            ),
        )

    def test_issue_key_is_not_escaped(self):
        request = build_get_issue_request(GetIssueParams(username="u", password="p", key="A B/1"))
        assert request.path == "/rest/api/2/issue/A B/1"

    def test_add_watcher(self):
        request = build_add_watcher_request(
            AddWatcherParams(username="u", password="p", key="PRJ-1", project="PRJ")
        )
        assert request.method == "POST"
        assert request.path == "/rest/api/2/issue/PRJ-1/watchers"
        assert request.body == '"u"'
        assert request.headers == {"Content-type": "application/json"}
        assert request.auth == ("u", "p")

    def test_create_meta(self):
        request = build_create_meta_request(
            CreateMetaParams(username="u", password="p", project="PRJ")
        )
        assert request.path == "/rest/api/2/issue/createmeta"
        assert request.params == (
            ("projectKeys", "PRJ"),
            ("expand", "projects.issuetypes.fields"),
        )
        assert request.body is None

    def test_create_issue_sends_template_verbatim(self, tmp_path):
        template = tmp_path / "bug.json"
        raw = '{"fields": {"project": {"key": "PRJ"}, "summary": "s"}}\n'
        template.write_text(raw)

        request = build_create_issue_request(
            CreateIssueParams(username="u", password="p", template=str(template))
        )
        assert request.method == "POST"
        assert request.path == "/rest/api/2/issue"
        assert request.body == raw.encode("utf-8")
        assert request.headers == {"Content-type": "application/json"}

    def test_create_issue_missing_template(self, tmp_path):
        missing = tmp_path / "nope.json"
        with pytest.raises(TemplateNotFoundError) as exc_info:
            build_create_issue_request(
                CreateIssueParams(username="u", password="p", template=str(missing))
            )
        assert isinstance(exc_info.value, JiraInputError)
        assert "nope.json" in str(exc_info.value)

    def test_create_issue_keeps_line_endings_and_encoding(self, tmp_path):
        template = tmp_path / "crlf.json"
        raw = b'{"fields":\r\n {"summary": "caf\xe9"}}\r\n'
        template.write_bytes(raw)

        request = build_create_issue_request(
            CreateIssueParams(username="u", password="p", template=str(template))
        )
        assert request.body == raw

    def test_create_issue_unreadable_template(self, tmp_path, monkeypatch):
        template = tmp_path / "locked.json"
        template.write_bytes(b"{}")

        def deny(self):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "read_bytes", deny)
        with pytest.raises(TemplateReadError) as exc_info:
            build_create_issue_request(
                CreateIssueParams(username="u", password="p", template=str(template))
            )
        assert isinstance(exc_info.value, JiraInputError)
        assert "Permission denied" in str(exc_info.value)
