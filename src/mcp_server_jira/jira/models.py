"""Pydantic models for Jira operations and the response shapes they read"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..constants import OperationDefaults


class JiraCredentials(BaseModel):
    username: str
    password: str


class ServerInfoParams(BaseModel):
    pass


class NotWatchingParams(JiraCredentials):
    project: str
    limit: str = OperationDefaults.SEARCH_LIMIT


class MineParams(JiraCredentials):
    project: Optional[str] = None
    limit: str = OperationDefaults.SEARCH_LIMIT


class RecentParams(JiraCredentials):
    project: Optional[str] = None
    limit: str = OperationDefaults.SEARCH_LIMIT
    days: str = OperationDefaults.RECENT_DAYS


class GetIssueParams(JiraCredentials):
    key: str


class AddWatcherParams(JiraCredentials):
    key: str
    project: Optional[str] = None  # accepted for CLI symmetry, not sent


class WatchCategoryParams(JiraCredentials):
    project: str
    limit: str = OperationDefaults.SEARCH_LIMIT


class CreateMetaParams(JiraCredentials):
    project: str


class CreateIssueParams(JiraCredentials):
    template: str


# Response shapes. Only the fields operations read are declared.


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class NamedField(_Lenient):
    name: Optional[str] = None


def _name_of(named: Optional[NamedField]) -> str:
    if named is None or named.name is None:
        return ""
    return named.name


class SearchIssueFields(_Lenient):
    summary: Optional[str] = None


class SearchIssue(_Lenient):
    key: str
    fields: SearchIssueFields = Field(default_factory=SearchIssueFields)


class SearchResult(_Lenient):
    issues: Optional[List[SearchIssue]] = None

    def summaries(self) -> dict:
        """Ordered key -> summary mapping; a null issue list is empty."""
        return {issue.key: issue.fields.summary for issue in self.issues or []}


class IssueFields(_Lenient):
    issuetype: Optional[NamedField] = None
    status: Optional[NamedField] = None
    summary: Optional[str] = None
    created: Optional[str] = None
    updated: Optional[str] = None
    statuscategorychangedate: Optional[str] = None
    priority: Optional[NamedField] = None
    labels: Optional[List[str]] = None
    components: Optional[List[NamedField]] = None


class IssueDetail(_Lenient):
    key: Optional[str] = None
    fields: IssueFields = Field(default_factory=IssueFields)

    def flatten(self) -> dict:
        """
        Flat field-name -> string mapping in a fixed order.

        Null or missing fields become the empty string, except priority
        which falls back to "none".
        """
        fields = self.fields
        priority = (
            fields.priority.name
            if fields.priority is not None and fields.priority.name is not None
            else OperationDefaults.PRIORITY_NONE
        )
        return {
            "issuetype": _name_of(fields.issuetype),
            "status": _name_of(fields.status),
            "summary": fields.summary or "",
            "created": fields.created or "",
            "updated": fields.updated or "",
            "statuscategorychangedate": fields.statuscategorychangedate or "",
            "priority": priority,
            "labels": ",".join(fields.labels or []),
            "components": ",".join(c.name or "" for c in fields.components or []),
        }


class CreatedIssue(_Lenient):
    id: Optional[str] = None
    key: Optional[str] = None
    self_url: Optional[str] = Field(default=None, alias="self")
