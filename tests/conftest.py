"""Shared fixtures: moto-backed AWS sessions and hand-written Jira fakes."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Iterable, Iterator

import boto3
import pytest
from botocore.stub import Stubber
from jira import JIRAError
from moto import mock_aws

from securityhub.utils.config import SyncConfig
from securityhub.utils.models import AccountIdentity, Finding
from securityhub_shared.models import NewTicket, Ticket

ACCOUNT_ID = "123456789012"
REGION = "us-east-1"


# ---------------------------------------------------------------------------
# AWS (moto)
# ---------------------------------------------------------------------------

@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Dummy credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def aws_session(aws_credentials: None) -> Iterator[boto3.session.Session]:
    with mock_aws():
        yield boto3.Session(region_name=REGION)


def stub_client(monkeypatch: pytest.MonkeyPatch, session: boto3.session.Session, service: str) -> Stubber:
    """Make *session* hand out one stubbed *service* client."""
    client = session.client(service, region_name=REGION)
    monkeypatch.setattr(session, "client", lambda *args, **kwargs: client)
    return Stubber(client)


# ---------------------------------------------------------------------------
# Jira
# ---------------------------------------------------------------------------

class FakeResultList(list):
    def __init__(self, items: Iterable[Any], total: int) -> None:
        super().__init__(items)
        self.total = total


class FakeIssue:
    def __init__(self, jira: "FakeJira", key: str, summary: str, status: str = "To Do",
                 labels: Iterable[str] = (), description: str | None = "") -> None:
        self._jira = jira
        self.key = key
        self.fields = SimpleNamespace(
            summary=summary,
            status=SimpleNamespace(name=status),
            labels=list(labels),
            description=description,
        )

    def update(self, fields: dict[str, Any] | None = None, **kwargs: Any) -> None:
        self._jira.updates.append((self.key, dict(fields or {})))
        if fields and "summary" in fields:
            self.fields.summary = fields["summary"]


def transition(tid: str, name: str, to: str) -> dict[str, Any]:
    return {"id": tid, "name": name, "to": {"name": to}}


SIMPLE_WORKFLOW: dict[str, list[dict[str, Any]]] = {
    "To Do": [transition("11", "In Progress", "In Progress"), transition("31", "Done", "Done")],
    "In Progress": [transition("31", "Done", "Done")],
    "Done": [],
}


class FakeJira:
    """Enough of ``jira.JIRA`` for the tracker wrapper."""

    def __init__(
        self,
        issues: Iterable[FakeIssue] = (),
        *,
        page_size: int = 50,
        workflow: dict[str, list[dict[str, Any]]] | None = None,
        users: Iterable[str] = (),
        field_defs: list[dict[str, Any]] | None = None,
    ) -> None:
        self.issues = {issue.key: issue for issue in issues}
        self.page_size = page_size
        self.workflow = SIMPLE_WORKFLOW if workflow is None else workflow
        self.users = set(users)
        self.field_defs = field_defs or []
        self.errors: dict[str, Exception] = {}

        self.searches: list[dict[str, Any]] = []
        self.created: list[dict[str, Any]] = []
        self.transitioned: list[tuple[str, str]] = []
        self.comments: list[tuple[str, str]] = []
        self.links: list[tuple[str, str, str]] = []
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.removed_watchers: list[tuple[str, str]] = []
        self.fields_calls = 0

    def add_issue(self, key: str, summary: str, status: str = "To Do", **kwargs: Any) -> FakeIssue:
        issue = FakeIssue(self, key, summary, status, **kwargs)
        self.issues[key] = issue
        return issue

    def _maybe_fail(self, op: str) -> None:
        if op in self.errors:
            raise self.errors[op]

    def search_issues(self, jql: str, startAt: int = 0, maxResults: int = 50, **kwargs: Any) -> FakeResultList:
        self._maybe_fail("search_issues")
        self.searches.append({"jql": jql, "startAt": startAt, "maxResults": maxResults, **kwargs})
        items = list(self.issues.values())
        size = min(maxResults, self.page_size)
        return FakeResultList(items[startAt:startAt + size], total=len(items))

    def create_issue(self, fields: dict[str, Any]) -> FakeIssue:
        self._maybe_fail("create_issue")
        self.created.append(fields)
        key = f"TEST-{len(self.created)}"
        return self.add_issue(key, fields["summary"], labels=fields.get("labels", ()),
                              description=fields.get("description"))

    def fields(self) -> list[dict[str, Any]]:
        self.fields_calls += 1
        return self.field_defs

    def user(self, user_id: str) -> SimpleNamespace:
        self._maybe_fail("user")
        if user_id not in self.users:
            raise JIRAError(status_code=404, text="user not found")
        return SimpleNamespace(accountId=user_id)

    def current_user(self) -> str:
        return "automation"

    def remove_watcher(self, issue: str, watcher: str) -> None:
        self._maybe_fail("remove_watcher")
        self.removed_watchers.append((issue, watcher))

    def transitions(self, key: str) -> list[dict[str, Any]]:
        self._maybe_fail("transitions")
        return list(self.workflow.get(self.issues[key].fields.status.name, []))

    def transition_issue(self, key: str, transition_id: str) -> None:
        self._maybe_fail("transition_issue")
        issue = self.issues[key]
        for t in self.workflow.get(issue.fields.status.name, []):
            if t["id"] == transition_id:
                issue.fields.status.name = t["to"]["name"]
                self.transitioned.append((key, t["name"]))
                return
        raise JIRAError(status_code=400, text=f"transition {transition_id} not valid")

    def issue(self, key: str) -> FakeIssue:
        self._maybe_fail("issue")
        return self.issues[key]

    def add_comment(self, key: str, body: str) -> None:
        self._maybe_fail("add_comment")
        self.comments.append((key, body))

    def create_issue_link(self, link_type: str, inward: str, outward: str) -> None:
        self._maybe_fail("create_issue_link")
        self.links.append((link_type, inward, outward))


# ---------------------------------------------------------------------------
# Engine collaborators
# ---------------------------------------------------------------------------

class FakeSource:
    def __init__(self, findings: Iterable[Finding] = (), error: Exception | None = None) -> None:
        self.findings = list(findings)
        self.error = error
        self.calls = 0

    def fetch_active_findings(self) -> list[Finding]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.findings)


class FakeTracker:
    """Records every tracker call made by the sync engine."""

    def __init__(self, tickets: Iterable[Ticket] = ()) -> None:
        self.tickets = list(tickets)
        self.calls: list[tuple[str, Any]] = []
        self.searched_labels: list[list[str]] = []
        self.created: list[NewTicket] = []
        self.create_kwargs: list[dict[str, Any]] = []
        self.closed: list[str] = []
        self.renamed: list[tuple[str, str]] = []
        self.comments: list[tuple[str, str]] = []
        self.links: list[tuple[str, str, str]] = []
        self.errors: dict[str, Exception] = {}

    def _maybe_fail(self, op: str) -> None:
        if op in self.errors:
            raise self.errors[op]

    def search(self, identity_labels: Iterable[str]) -> list[Ticket]:
        self._maybe_fail("search")
        self.calls.append(("search", list(identity_labels)))
        self.searched_labels.append(list(identity_labels))
        return list(self.tickets)

    def create(self, ticket: NewTicket, **kwargs: Any) -> Ticket:
        self._maybe_fail("create")
        self.calls.append(("create", ticket.summary))
        self.created.append(ticket)
        self.create_kwargs.append(kwargs)
        return Ticket(key=f"NEW-{len(self.created)}", summary=ticket.summary, status="To Do",
                      labels=list(ticket.labels), body=ticket.body)

    def close(self, key: str) -> None:
        self._maybe_fail("close")
        self.calls.append(("close", key))
        self.closed.append(key)

    def rename(self, key: str, summary: str) -> None:
        self.calls.append(("rename", key))
        self.renamed.append((key, summary))

    def comment(self, key: str, body: str) -> None:
        self.calls.append(("comment", key))
        self.comments.append((key, body))

    def link(self, inward_key: str, outward_key: str, link_type: str = "Relates") -> None:
        self.calls.append(("link", inward_key))
        self.links.append((inward_key, outward_key, link_type))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def account() -> AccountIdentity:
    return AccountIdentity(account_id=ACCOUNT_ID, alias="my-account-alias")


@pytest.fixture
def config() -> SyncConfig:
    return SyncConfig(project="TEST", region=REGION)


def make_finding(title: str, severity: str = "HIGH", **kwargs: Any) -> Finding:
    kwargs.setdefault("region", REGION)
    kwargs.setdefault("account_id", ACCOUNT_ID)
    return Finding(title=title, severity=severity, **kwargs)
