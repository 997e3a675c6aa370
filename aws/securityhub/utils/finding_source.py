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

"""Security Hub finding retrieval – filter construction, pagination and
normalisation of raw ``AwsSecurityFinding`` records into :class:`Finding`.
"""

from __future__ import annotations

from typing import Any, Iterable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from securityhub_shared.common import vprint
from securityhub_shared.errors import SourceUnavailable

from .constants import (
    ACTIVE_RECORD_STATE,
    ACTIVE_WORKFLOW_STATUSES,
    DEFAULT_REGION,
    DEFAULT_SEVERITIES,
    DEFAULT_TITLE_PREFIX,
    FINDINGS_PAGE_SIZE,
    NO_REMEDIATION_TEXT,
    NO_REMEDIATION_URL,
    PRODUCT_NAME,
)
from .issue_builder import dedupe_findings
from .models import Finding, Resource
from .priority import validate_severities


def _equals(*values: str) -> list[dict[str, str]]:
    return [{"Comparison": "EQUALS", "Value": v} for v in values]


def build_finding_filters(severities: Iterable[str]) -> dict[str, Any]:
    return {
        "RecordState": _equals(ACTIVE_RECORD_STATE),
        "WorkflowStatus": _equals(*ACTIVE_WORKFLOW_STATUSES),
        "ProductName": _equals(PRODUCT_NAME),
        "SeverityLabel": _equals(*severities),
    }


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def parse_finding(raw: dict[str, Any], *, account_alias: str = "") -> Finding:
    """Normalise a raw ``AwsSecurityFinding`` dict."""
    severity = raw.get("Severity") or {}
    recommendation = (raw.get("Remediation") or {}).get("Recommendation") or {}
    product_fields = raw.get("ProductFields") or {}
    compliance = raw.get("Compliance") or {}

    resources = tuple(
        Resource(
            id=_str(res.get("Id")),
            type=_str(res.get("Type")),
            region=_str(res.get("Region")),
            partition=_str(res.get("Partition")),
        )
        for res in (raw.get("Resources") or [])
        if isinstance(res, dict)
    )

    return Finding(
        title=_str(raw.get("Title")),
        severity=_str(severity.get("Label")),
        description=_str(raw.get("Description")),
        region=_str(raw.get("Region")),
        account_id=_str(raw.get("AwsAccountId")),
        account_alias=account_alias,
        remediation_url=_str(recommendation.get("Url")) or NO_REMEDIATION_URL,
        remediation_text=_str(recommendation.get("Text")) or NO_REMEDIATION_TEXT,
        resources=resources,
        standards_control_arn=_str(
            product_fields.get("StandardsControlArn") or compliance.get("SecurityControlId")
        ),
        finding_id=_str(raw.get("Id")),
    )


class SecurityHubFindings:
    """Fetches the active findings of one region via boto3."""

    def __init__(
        self,
        session: boto3.session.Session,
        *,
        region: str = DEFAULT_REGION,
        severities: Iterable[str] = DEFAULT_SEVERITIES,
        account_alias: str = "",
        title_prefix: str = DEFAULT_TITLE_PREFIX,
    ) -> None:
        self.region = region
        self.severities = validate_severities(severities)
        self.account_alias = account_alias
        self.title_prefix = title_prefix
        self._client = session.client("securityhub", region_name=region)

    def iter_raw_findings(self) -> Iterable[dict[str, Any]]:
        paginator = self._client.get_paginator("get_findings")
        pages = paginator.paginate(
            Filters=build_finding_filters(self.severities),
            PaginationConfig={"PageSize": FINDINGS_PAGE_SIZE},
        )
        for page in pages:
            yield from page.get("Findings") or []

    def fetch_active_findings(self) -> list[Finding]:
        """Return every active finding, all pages followed, deduplicated by identity."""
        try:
            raw = list(self.iter_raw_findings())
        except (ClientError, BotoCoreError) as exc:
            raise SourceUnavailable(f"Error getting Security Hub findings in {self.region}: {exc}") from exc

        findings = dedupe_findings(
            (parse_finding(item, account_alias=self.account_alias) for item in raw),
            self.title_prefix,
        )
        print(f"Loaded {len(findings)} unique active findings ({len(raw)} records) from Security Hub in {self.region}")
        vprint(f"Severities: {', '.join(self.severities)}")
        return findings
