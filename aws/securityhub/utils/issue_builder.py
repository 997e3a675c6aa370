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

"""Issue summary, labels and body construction from findings."""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import quote

from securityhub_shared.models import NewTicket
from securityhub_shared.templates import render_template

from .constants import DEFAULT_REGION, LABEL_SECURITY_HUB, RESOLVED_TITLE_MARKER
from .models import AccountIdentity, Finding, Resource
from .priority import severity_to_priority
from .templates import ISSUE_BODY_TEMPLATE, RESOLVED_COMMENT_TEMPLATE

CONSOLE_URL = "https://{region}.console.aws.amazon.com/securityhub/home?region={region}#/findings?search={search}"


def build_issue_title(finding_title: str, prefix: str) -> str:
    """Build the identity string shared by a finding and its issue summary.

    The title is used verbatim; findings differing only in case are distinct.
    """
    return f"{prefix} - {finding_title}"


def dedupe_findings(findings: Iterable[Finding], prefix: str) -> list[Finding]:
    """Collapse findings sharing an identity; the last one seen wins."""
    unique: dict[str, Finding] = {}
    for finding in findings:
        unique[build_issue_title(finding.title, prefix)] = finding
    return list(unique.values())


def build_resolved_title(summary: str) -> str:
    return f"{RESOLVED_TITLE_MARKER} {summary}"


def is_resolved_title(summary: str) -> bool:
    return summary.startswith(RESOLVED_TITLE_MARKER)


def identity_labels(account: AccountIdentity, region: str) -> list[str]:
    """Labels that scope the issue search to one account and region."""
    return [account.account_id, region]


def build_issue_labels(finding: Finding, account: AccountIdentity, region: str) -> tuple[str, ...]:
    labels = [LABEL_SECURITY_HUB, *identity_labels(account, region)]
    if finding.severity and finding.severity not in labels:
        labels.append(finding.severity)
    return tuple(label for label in labels if label)


def build_console_url(finding: Finding) -> str:
    """Deep link to the Security Hub console filtered to this finding's title."""
    # The console decodes the filter value a second time; the "Title=" key only once.
    value = quote(quote(f"\\operator\\:EQUALS\\:{finding.title}", safe=""), safe="")
    return CONSOLE_URL.format(region=quote(finding.region or DEFAULT_REGION, safe=""), search=f"Title%3D{value}")


def _resource_table(resources: tuple[Resource, ...]) -> str:
    if not resources:
        return "N/A"
    rows = ["||Type||Id||Region||Partition||"]
    for res in resources:
        rows.append(f"|{res.type or ' '}|{res.id or ' '}|{res.region or ' '}|{res.partition or ' '}|")
    return "\n".join(rows)


def _account_text(finding: Finding) -> str:
    if finding.account_alias:
        return f"{finding.account_id} ({finding.account_alias})"
    return finding.account_id or "N/A"


def build_template_values(finding: Finding) -> dict[str, Any]:
    return {
        "title": finding.title,
        "description": finding.description or "N/A",
        "remediation_url": finding.remediation_url,
        "remediation_text": finding.remediation_text,
        "account": _account_text(finding),
        "severity": finding.severity,
        "region": finding.region or "N/A",
        "standards_control_arn": finding.standards_control_arn or "N/A",
        "resources": _resource_table(finding.resources),
        "console_url": build_console_url(finding),
    }


def build_ticket_body(finding: Finding) -> str:
    """Render the issue description for *finding*; pure and byte-deterministic."""
    return render_template(ISSUE_BODY_TEMPLATE, build_template_values(finding)).strip() + "\n"


def build_resolved_comment(date: str) -> str:
    return render_template(RESOLVED_COMMENT_TEMPLATE, {"date": date})


def build_new_ticket(finding: Finding, account: AccountIdentity, region: str, prefix: str) -> NewTicket:
    """Assemble the create payload; raises ``InvalidSeverityError`` for unknown severities."""
    return NewTicket(
        summary=build_issue_title(finding.title, prefix),
        body=build_ticket_body(finding),
        labels=build_issue_labels(finding, account, region),
        priority=severity_to_priority(finding.severity),
    )
