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

"""Error taxonomy for the sync run.

Every error raised on purpose derives from :class:`SecurityHubSyncError` so
the CLI can report it as a clean ``ERROR:`` line and a non-zero exit.
"""


class SecurityHubSyncError(Exception):
    """Base class for all expected sync failures."""


class ConfigError(SecurityHubSyncError):
    """Required settings are missing or invalid."""


class SourceUnavailable(SecurityHubSyncError):
    """Fetching findings from Security Hub failed."""


class AccountLookupError(SecurityHubSyncError):
    """The AWS account id could not be determined."""


class TrackerUnavailable(SecurityHubSyncError):
    """A Jira call failed."""


class QueryTooBroadError(SecurityHubSyncError):
    """The issue search lacks the labels that scope it to one account."""


class InvalidSeverityError(SecurityHubSyncError, ValueError):
    """A finding carries a severity outside the known enumeration."""

    def __init__(self, severity: object) -> None:
        super().__init__(f"Invalid severity: {severity}")
        self.severity = severity


class NoCloseTransitionError(SecurityHubSyncError):
    """The Jira workflow offers no path to a closed status."""
