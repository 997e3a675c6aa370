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

"""Domain constants – label names, title markers, Security Hub filter values."""

LABEL_SECURITY_HUB = "security-hub"

DEFAULT_TITLE_PREFIX = "SecurityHub Finding"
RESOLVED_TITLE_MARKER = "[RESOLVED]"

DEFAULT_REGION = "us-east-1"
DEFAULT_SEVERITIES: tuple[str, ...] = ("HIGH", "CRITICAL")
DEFAULT_CLOSED_STATUSES: tuple[str, ...] = ("Done",)
DEFAULT_ISSUE_TYPE = "Task"
DEFAULT_LINK_TYPE = "Relates"

PRODUCT_NAME = "Security Hub"
ACTIVE_RECORD_STATE = "ACTIVE"
ACTIVE_WORKFLOW_STATUSES: tuple[str, ...] = ("NEW", "NOTIFIED")
FINDINGS_PAGE_SIZE = 100

NO_REMEDIATION_URL = "No Recommendation URL provided."
NO_REMEDIATION_TEXT = "No Recommendation Text provided."

# Fields the sync itself sets on a new issue; custom fields may not override them.
RESERVED_FIELD_KEYS = frozenset(
    {"project", "summary", "description", "issuetype", "labels", "priority", "parent", "assignee"}
)
