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

"""Severity-to-priority mapping.

Security Hub severity labels map onto Jira priority ids, where a lower id is
more urgent. The mapping is strict: an unknown label must never fall back to
a default priority.
"""

from __future__ import annotations

from typing import Iterable

from securityhub_shared.errors import InvalidSeverityError

SEVERITY_PRIORITY_MAP: dict[str, str] = {
    "INFORMATIONAL": "5",
    "LOW": "4",
    "MEDIUM": "3",
    "HIGH": "2",
    "CRITICAL": "1",
}


def severity_to_priority(severity: str) -> str:
    """Return the Jira priority id for a Security Hub *severity* label.

    Raises :class:`InvalidSeverityError` for anything outside the five labels.
    """
    try:
        return SEVERITY_PRIORITY_MAP[severity]
    except (KeyError, TypeError):
        raise InvalidSeverityError(severity) from None


def validate_severities(severities: Iterable[str]) -> list[str]:
    """Return *severities* as a list after checking each one is known."""
    checked = list(severities)
    for severity in checked:
        severity_to_priority(severity)
    return checked
