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

"""Jira wiki-markup templates for Security Hub issues."""

# The "Finding Title:" line is kept verbatim for humans grepping old issues;
# matching is done on the issue summary only.
ISSUE_BODY_TEMPLATE = """----
*This issue was generated from Security Hub data and is managed through automation.*
Please do not edit the title or body of this issue, or remove the security-hub label. All other edits/comments are welcome.
Finding Title: {{ title }}
----

h2. Type of Issue:

* Security Hub Finding

h2. Title:

{{ title }}

h2. Description:

{{ description }}

h2. Remediation:

{{ remediation_url }}
{{ remediation_text }}

h2. AWS Account:

{{ account }}

h2. Severity:

{{ severity }}

h2. Region:

{{ region }}

h2. Standards Control:

{{ standards_control_arn }}

h2. Resources:

{{ resources }}

h2. Security Hub:

[View this finding in the Security Hub console|{{ console_url }}]

h2. AC:

* All findings of this type are resolved or suppressed, indicated by a Workflow Status of Resolved or Suppressed. (Note: this issue will automatically close when the AC is met.)
"""


RESOLVED_COMMENT_TEMPLATE = (
    "As of {{ date }}, this Security Hub finding has been marked resolved."
)
