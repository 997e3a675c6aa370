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

"""Security Hub data models."""

from dataclasses import dataclass, field

from securityhub_shared.models import NewTicket, Ticket


@dataclass(frozen=True)
class Resource:
    id: str
    type: str = ""
    region: str = ""
    partition: str = ""


@dataclass(frozen=True)
class Finding:
    """An active Security Hub finding, normalised from the API record."""
    title: str
    severity: str
    description: str = ""
    region: str = ""
    account_id: str = ""
    account_alias: str = ""
    remediation_url: str = ""
    remediation_text: str = ""
    resources: tuple[Resource, ...] = ()
    standards_control_arn: str = ""
    finding_id: str = ""


@dataclass(frozen=True)
class AccountIdentity:
    """The AWS account the sync runs against."""
    account_id: str
    alias: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.account_id} ({self.alias})" if self.alias else self.account_id


@dataclass
class ReconciliationPlan:
    """Tracker mutations computed before any of them is applied."""
    to_close: list[Ticket]
    to_create: list[NewTicket]

    @property
    def is_empty(self) -> bool:
        return not self.to_close and not self.to_create


@dataclass
class SyncResult:
    """Aggregated output of a full sync run."""
    closed: list[str] = field(default_factory=list)
    resolved: list[str] = field(default_factory=list)
    created: list[Ticket] = field(default_factory=list)
