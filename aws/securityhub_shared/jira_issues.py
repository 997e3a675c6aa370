#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

"""Jira issue operations – search by identity labels, create, close via
workflow transitions, rename, comment and link, on top of the ``jira``
client library.

Every failure of the underlying client surfaces as
:class:`~securityhub_shared.errors.TrackerUnavailable`; callers never see ``JIRAError``.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

import requests
from jira import JIRA, JIRAError

from .common import vprint, warn
from .errors import NoCloseTransitionError, QueryTooBroadError, TrackerUnavailable
from .models import NewTicket, Ticket

ACCOUNT_LABEL_RE = re.compile(r"labels = '[0-9]{12}'")

SEARCH_PAGE_SIZE = 100
SEARCH_FIELDS = "summary,status,labels,description"

# Transitions that move an issue sideways rather than to completion.
OPPOSED_TRANSITIONS = {"canceled", "cancelled", "backout", "rejected"}
DONE_WORDS = ("done", "close", "complete")
MAX_WORKFLOW_STEPS = 20


def connect(server: str, token: str, username: str = "") -> JIRA:
    """Open a Jira connection.

    With a username the token is an API token (basic auth, Jira Cloud);
    without one it is a personal access token (bearer auth, Server/DC).
    """
    try:
        if username:
            return JIRA(server=server, basic_auth=(username, token))
        return JIRA(server=server, token_auth=token)
    except (JIRAError, requests.RequestException) as exc:
        raise TrackerUnavailable(f"Error connecting to Jira at {server}: {exc}") from exc


def _quote(value: str) -> str:
    return "'" + str(value).replace("'", "\\'") + "'"


def format_label_query(label: str) -> str:
    return f"labels = {_quote(label)}"


def build_search_query(
    project: str,
    identity_labels: Iterable[str],
    *,
    marker_label: str,
    closed_statuses: Iterable[str] = (),
) -> str:
    """Build the JQL selecting every not-closed issue carrying all *identity_labels*."""
    parts = [format_label_query(label) for label in [*identity_labels, marker_label] if label]
    parts.append(f"project = {_quote(project)}")
    closed = [s for s in closed_statuses if s]
    if closed:
        parts.append("status not in (" + ",".join(_quote(s) for s in closed) + ")")
    return " AND ".join(parts)


def assert_query_scoped(query: str, marker_label: str) -> None:
    """Refuse a JQL query that could match issues outside one account's findings."""
    if format_label_query(marker_label) not in query:
        raise QueryTooBroadError(
            f"Your query does not include the {marker_label!r} label, and is too broad. Refusing to continue"
        )
    if not ACCOUNT_LABEL_RE.search(query):
        raise QueryTooBroadError(
            "Your query does not include an AWS Account ID as a label, and is too broad. Refusing to continue"
        )


def _is_done_like(name: str) -> bool:
    lowered = (name or "").lower()
    return any(word in lowered for word in DONE_WORDS)


def _to_ticket(issue: Any) -> Ticket:
    fields = getattr(issue, "fields", None)
    status = getattr(fields, "status", None)
    return Ticket(
        key=str(issue.key),
        summary=str(getattr(fields, "summary", "") or ""),
        status=str(getattr(status, "name", "") or ""),
        labels=[str(label) for label in (getattr(fields, "labels", None) or [])],
        body=str(getattr(fields, "description", "") or ""),
    )


class JiraTracker:
    """Issue tracker operations scoped to a single Jira project."""

    def __init__(
        self,
        jira: JIRA,
        project: str,
        *,
        marker_label: str,
        closed_statuses: Iterable[str] = ("Done",),
        issue_type: str = "Task",
        cloud: bool = True,
    ) -> None:
        self._jira = jira
        self.project = project
        self.marker_label = marker_label
        self.closed_statuses = list(closed_statuses)
        self.issue_type = issue_type
        self.cloud = cloud
        self._field_ids: dict[str, str] | None = None

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, identity_labels: Iterable[str]) -> list[Ticket]:
        """Return every not-closed issue carrying the marker and all *identity_labels*."""
        query = build_search_query(
            self.project,
            identity_labels,
            marker_label=self.marker_label,
            closed_statuses=self.closed_statuses,
        )
        assert_query_scoped(query, self.marker_label)
        vprint(f"JQL: {query}")

        tickets: list[Ticket] = []
        start_at = 0
        try:
            while True:
                page = self._jira.search_issues(
                    query,
                    startAt=start_at,
                    maxResults=SEARCH_PAGE_SIZE,
                    fields=SEARCH_FIELDS,
                )
                tickets.extend(_to_ticket(issue) for issue in page)
                start_at += len(page)
                total = getattr(page, "total", None)
                if not page or total is None or start_at >= total:
                    break
        except (JIRAError, requests.RequestException) as exc:
            raise TrackerUnavailable(f"Error getting Security Hub issues from Jira: {exc}") from exc

        print(f"Loaded {len(tickets)} open issues from Jira project {self.project}")
        return tickets

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def resolve_field_ids(self, custom_fields: dict[str, Any] | None) -> dict[str, Any]:
        """Map custom field names (e.g. ``"Working Team"``) to Jira field ids.

        Keys that are already ids, or that match no known field name, pass through.
        """
        if not custom_fields:
            return {}
        if self._field_ids is None:
            self._field_ids = {str(f.get("name")): str(f.get("id")) for f in self._jira.fields()}
        return {self._field_ids.get(name, name): value for name, value in custom_fields.items()}

    def user_exists(self, user: str) -> bool:
        try:
            self._jira.user(user)
        except JIRAError as exc:
            if exc.status_code == 404:
                return False
            raise
        return True

    def _assignee_field(self, user: str) -> dict[str, str]:
        return {"accountId": user} if self.cloud else {"name": user}

    def create(
        self,
        ticket: NewTicket,
        *,
        epic_key: str | None = None,
        custom_fields: dict[str, Any] | None = None,
        assignee: str | None = None,
    ) -> Ticket:
        fields: dict[str, Any] = {
            "project": {"key": self.project},
            "summary": ticket.summary,
            "description": ticket.body,
            "issuetype": {"name": self.issue_type},
            "labels": list(ticket.labels),
            "priority": {"id": ticket.priority},
        }
        if epic_key:
            fields["parent"] = {"key": epic_key}

        try:
            fields.update(self.resolve_field_ids(custom_fields))
            if assignee:
                if self.user_exists(assignee):
                    fields["assignee"] = self._assignee_field(assignee)
                else:
                    warn(f"Assignee {assignee!r} not found in Jira; leaving issue unassigned")
            issue = self._jira.create_issue(fields=fields)
        except (JIRAError, requests.RequestException) as exc:
            raise TrackerUnavailable(f"Error creating Jira issue: {exc}") from exc

        created = _to_ticket(issue)
        if not created.summary:
            created.summary = ticket.summary
            created.labels = list(ticket.labels)
            created.body = ticket.body
        self.remove_current_user_as_watcher(created.key)
        return created

    def remove_current_user_as_watcher(self, key: str) -> None:
        # The automation account is auto-added as a watcher; it doesn't need the mail.
        try:
            self._jira.remove_watcher(key, self._jira.current_user())
        except (JIRAError, requests.RequestException) as exc:
            warn(f"Failed to remove automation user as watcher on {key}: {exc}")

    # ------------------------------------------------------------------
    # Close
    # ------------------------------------------------------------------

    def _is_close_transition(self, transition: dict[str, Any]) -> bool:
        name = str(transition.get("name") or "")
        target = str((transition.get("to") or {}).get("name") or "")
        return name == "Done" or name in self.closed_statuses or target in self.closed_statuses

    def close(self, key: str) -> None:
        """Move *key* to a closed status, walking the workflow when needed."""
        try:
            transitions = self._jira.transitions(key)
            direct = next((t for t in transitions if self._is_close_transition(t)), None)
            if direct is not None:
                self._jira.transition_issue(key, direct["id"])
                vprint(f"Transitioned issue {key} via {direct.get('name')!r}")
                return
            self._complete_workflow(key, transitions)
        except (JIRAError, requests.RequestException) as exc:
            raise TrackerUnavailable(f"Error closing issue {key}: {exc}") from exc

    def _complete_workflow(self, key: str, transitions: list[dict[str, Any]]) -> None:
        taken: list[str] = []
        for _ in range(MAX_WORKFLOW_STEPS):
            candidates = [
                t for t in transitions
                if str(t.get("name") or "").lower() not in OPPOSED_TRANSITIONS
                and str(t.get("name") or "").lower() not in taken
            ]
            if not candidates:
                if not taken:
                    raise NoCloseTransitionError(f"Unsupported workflow for {key}; no transition available")
                if not _is_done_like(taken[-1]):
                    raise NoCloseTransitionError(
                        f"Unsupported workflow for {key}; does not contain any of "
                        f"{', '.join(DONE_WORDS)} statuses"
                    )
                return

            step = candidates[0]
            name = str(step.get("name") or "")
            self._jira.transition_issue(key, step["id"])
            taken.append(name.lower())
            vprint(f"Transitioned issue {key} to the next stage: {name}")

            if _is_done_like(name) or _is_done_like(str((step.get("to") or {}).get("name") or "")):
                return
            transitions = self._jira.transitions(key)

        raise NoCloseTransitionError(f"Gave up closing {key} after {MAX_WORKFLOW_STEPS} transitions")

    # ------------------------------------------------------------------
    # Edit
    # ------------------------------------------------------------------

    def rename(self, key: str, summary: str) -> None:
        try:
            self._jira.issue(key).update(fields={"summary": summary})
        except (JIRAError, requests.RequestException) as exc:
            raise TrackerUnavailable(f"Error renaming issue {key}: {exc}") from exc

    def comment(self, key: str, body: str) -> None:
        try:
            self._jira.add_comment(key, body)
        except (JIRAError, requests.RequestException) as exc:
            raise TrackerUnavailable(f"Error commenting on issue {key}: {exc}") from exc

    def link(self, inward_key: str, outward_key: str, link_type: str = "Relates") -> None:
        try:
            self._jira.create_issue_link(link_type, inward_key, outward_key)
        except (JIRAError, requests.RequestException) as exc:
            raise TrackerUnavailable(f"Error linking {inward_key} with {outward_key}: {exc}") from exc
        print(f"Linked issue {inward_key} with {outward_key} ({link_type})")
