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

"""Security Hub sync utilities.

Modules
-------
constants       Domain constants (label names, title markers, filter values).
config          ``SyncConfig`` – every setting and its default, parsed from the environment.
models          Core dataclass definitions (Finding, AccountIdentity, ReconciliationPlan, SyncResult).
priority        Severity-to-priority mapping and severity validation.
templates       Jira wiki-markup body and comment templates.
issue_builder   Issue summary / labels / body construction from findings.
finding_source  Security Hub ``GetFindings`` pagination and normalisation (boto3).
account         AWS account id / alias lookup (STS, IAM).
issue_sync      Core sync orchestration (plan, close or resolve stale issues, create missing ones).
"""
