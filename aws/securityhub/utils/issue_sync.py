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

"""Core sync orchestration – plans which Jira issues to close and which
findings need a new issue, then applies the plan.

Planning is pure: every new issue's summary, body, labels and priority are
computed before the tracker is touched, so a finding with an unknown
severity aborts the run with nothing closed or created. Applying is
fail-fast: the first tracker error propagates and the remaining steps of
the run are skipped. There is no cross-run locking; two concurrent runs
against one project may both create an issue for the same new finding.
"""

from __future__ import annotations

from typing import Iterable

from securityhub_shared.common import is_verbose, utc_today, vprint
from securityhub_shared.jira_issues import JiraTracker
from securityhub_shared.models import NewTicket, Ticket

from .config import SyncConfig
from .finding_source import SecurityHubFindings
from .issue_builder import (
    build_issue_title,
    build_new_ticket,
    build_resolved_comment,
    build_resolved_title,
    dedupe_findings,
    identity_labels,
    is_resolved_title,
)
from .models import AccountIdentity, Finding, ReconciliationPlan, SyncResult


def expected_identities(findings: Iterable[Finding], prefix: str) -> set[str]:
    return {build_issue_title(f.title, prefix) for f in findings}


def find_stale_tickets(
    findings: Iterable[Finding],
    tickets: Iterable[Ticket],
    config: SyncConfig,
) -> list[Ticket]:
    """Open tickets whose summary matches no active finding."""
    expected = expected_identities(findings, config.title_prefix)
    stale: list[Ticket] = []
    for ticket in tickets:
        if ticket.summary in expected or not config.is_open_status(ticket.status):
            continue
        if not config.auto_close and is_resolved_title(ticket.summary):
            vprint(f"Issue {ticket.key}: already marked resolved – skipping")
            continue
        stale.append(ticket)
    return stale


def find_missing_tickets(
    findings: Iterable[Finding],
    tickets: Iterable[Ticket],
    config: SyncConfig,
    account: AccountIdentity,
) -> list[NewTicket]:
    """One create payload per finding identity that has no issue yet."""
    existing = {ticket.summary for ticket in tickets}
    return [
        build_new_ticket(finding, account, config.region, config.title_prefix)
        for finding in dedupe_findings(findings, config.title_prefix)
        if build_issue_title(finding.title, config.title_prefix) not in existing
    ]


def plan_reconciliation(
    findings: list[Finding],
    tickets: list[Ticket],
    config: SyncConfig,
    account: AccountIdentity,
) -> ReconciliationPlan:
    return ReconciliationPlan(
        to_close=find_stale_tickets(findings, tickets, config),
        to_create=find_missing_tickets(findings, tickets, config, account),
    )


def close_stale_tickets(
    tracker: JiraTracker,
    stale: list[Ticket],
    config: SyncConfig,
    result: SyncResult,
    *,
    dry_run: bool = False,
) -> None:
    if not stale:
        vprint("No open issues without an active finding – nothing to close")
        return

    print(f"Detected {len(stale)} open issue(s) without an underlying, active Security Hub finding")
    for ticket in stale:
        if config.auto_close:
            if dry_run:
                print(f"DRY-RUN: would close issue {ticket.key} ({ticket.summary!r})")
                continue
            print(f"Issue {ticket.key}: no underlying finding found. Closing issue...")
            tracker.close(ticket.key)
            ticket.status = "closed"
            result.closed.append(ticket.key)
            continue

        new_summary = build_resolved_title(ticket.summary)
        if dry_run:
            print(f"DRY-RUN: would rename issue {ticket.key} to {new_summary!r} and comment resolution")
            continue
        print(f"Issue {ticket.key}: no underlying finding found. Marking resolved...")
        tracker.rename(ticket.key, new_summary)
        ticket.summary = new_summary
        tracker.comment(ticket.key, build_resolved_comment(utc_today()))
        result.resolved.append(ticket.key)


def create_missing_tickets(
    tracker: JiraTracker,
    new_tickets: list[NewTicket],
    config: SyncConfig,
    result: SyncResult,
    *,
    dry_run: bool = False,
) -> None:
    if not new_tickets:
        vprint("Every active finding already has an open issue – nothing to create")
        return

    print(f"Creating {len(new_tickets)} issue(s) for findings without an open issue")
    for new in new_tickets:
        if dry_run:
            print(
                f"DRY-RUN: create issue summary={new.summary!r} priority={new.priority} "
                f"labels=[{','.join(new.labels)}] epic={config.epic_key or ''}".rstrip()
            )
            if is_verbose():
                print("DRY-RUN: body_preview_begin")
                print(new.body)
                print("DRY-RUN: body_preview_end")
            continue

        created = tracker.create(
            new,
            epic_key=config.epic_key,
            custom_fields=config.custom_fields,
            assignee=config.assignee,
        )
        print(f"Created issue {created.key} for {new.summary!r}")
        if config.link_issue_key:
            tracker.link(created.key, config.link_issue_key, config.link_type)
        result.created.append(created)


def sync_findings_and_tickets(
    source: SecurityHubFindings,
    tracker: JiraTracker,
    config: SyncConfig,
    account: AccountIdentity,
    *,
    dry_run: bool = False,
) -> SyncResult:
    """Run one reconciliation pass.

    Fetches the tracked issues, then the active findings, closes issues whose
    finding is gone and creates issues for findings that have none.
    """
    tickets = tracker.search(identity_labels(account, config.region))
    findings = source.fetch_active_findings()
    plan = plan_reconciliation(findings, tickets, config, account)

    result = SyncResult()
    if plan.is_empty:
        print("Jira issues are in sync with Security Hub findings – nothing to do")
        return result

    close_stale_tickets(tracker, plan.to_close, config, result, dry_run=dry_run)
    create_missing_tickets(tracker, plan.to_create, config, result, dry_run=dry_run)
    return result
