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

"""Sync configuration – every setting and its default in one place.

``SyncConfig.from_env`` reads the environment variables documented below;
the CLI overrides individual fields with ``dataclasses.replace``.

=====================  ==========================  ======================
field                  environment variable        default
=====================  ==========================  ======================
jira_server            JIRA_HOST                   (required)
jira_token             JIRA_TOKEN                  (required)
project                JIRA_PROJECT                (required)
jira_username          JIRA_USERNAME               "" (bearer token auth)
issue_type             JIRA_ISSUE_TYPE             Task
region                 AWS_REGION                  us-east-1
severities             SECURITY_HUB_SEVERITIES     HIGH,CRITICAL
closed_statuses        JIRA_CLOSED_STATUSES        Done
open_statuses          JIRA_OPEN_STATUSES          (any non-closed status)
auto_close             AUTO_CLOSE                  true
epic_key               JIRA_EPIC_KEY               none
link_issue_key         JIRA_LINK_ID                none
link_type              JIRA_LINK_TYPE              Relates
assignee               ASSIGNEE                    none
custom_fields          JIRA_CUSTOM_FIELDS (JSON)   {}
title_prefix           TITLE_PREFIX                SecurityHub Finding
=====================  ==========================  ======================
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from securityhub_shared.common import parse_bool, split_csv
from securityhub_shared.errors import ConfigError

from .constants import (
    DEFAULT_CLOSED_STATUSES,
    DEFAULT_ISSUE_TYPE,
    DEFAULT_LINK_TYPE,
    DEFAULT_REGION,
    DEFAULT_SEVERITIES,
    DEFAULT_TITLE_PREFIX,
    RESERVED_FIELD_KEYS,
)
from .priority import validate_severities

REQUIRED_ENV_VARS = ("JIRA_HOST", "JIRA_TOKEN", "JIRA_PROJECT")


def validate_custom_fields(custom_fields: Mapping[str, Any]) -> dict[str, Any]:
    """Check that no custom field collides with a field the sync sets itself."""
    collisions = sorted(k for k in custom_fields if str(k).strip().lower() in RESERVED_FIELD_KEYS)
    if collisions:
        raise ConfigError(f"Custom fields may not override reserved keys: {', '.join(collisions)}")
    return dict(custom_fields)


def parse_custom_fields(raw: str | None) -> dict[str, Any]:
    if not raw or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"JIRA_CUSTOM_FIELDS is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ConfigError("JIRA_CUSTOM_FIELDS must be a JSON object")
    return validate_custom_fields(parsed)


def normalize_server(host: str) -> str:
    host = host.strip().rstrip("/")
    if host and "://" not in host:
        host = f"https://{host}"
    return host


@dataclass(frozen=True)
class SyncConfig:
    project: str
    jira_server: str = ""
    jira_token: str = ""
    jira_username: str = ""
    issue_type: str = DEFAULT_ISSUE_TYPE
    region: str = DEFAULT_REGION
    severities: tuple[str, ...] = DEFAULT_SEVERITIES
    closed_statuses: tuple[str, ...] = DEFAULT_CLOSED_STATUSES
    open_statuses: tuple[str, ...] = ()
    auto_close: bool = True
    epic_key: str | None = None
    link_issue_key: str | None = None
    link_type: str = DEFAULT_LINK_TYPE
    assignee: str | None = None
    custom_fields: dict[str, Any] = field(default_factory=dict)
    title_prefix: str = DEFAULT_TITLE_PREFIX

    def __post_init__(self) -> None:
        validate_severities(self.severities)
        validate_custom_fields(self.custom_fields)

    def is_open_status(self, status: str) -> bool:
        """Whether an issue in *status* still needs action."""
        if self.open_statuses:
            return status in self.open_statuses
        return status not in self.closed_statuses

    @property
    def jira_cloud(self) -> bool:
        return bool(self.jira_username)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SyncConfig":
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_ENV_VARS if not (env.get(name) or "").strip()]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        try:
            auto_close = parse_bool(env.get("AUTO_CLOSE"), default=True)
        except ValueError as exc:
            raise ConfigError(f"AUTO_CLOSE: {exc}") from exc

        return cls(
            project=env["JIRA_PROJECT"].strip(),
            jira_server=normalize_server(env["JIRA_HOST"]),
            jira_token=env["JIRA_TOKEN"].strip(),
            jira_username=(env.get("JIRA_USERNAME") or "").strip(),
            issue_type=(env.get("JIRA_ISSUE_TYPE") or "").strip() or DEFAULT_ISSUE_TYPE,
            region=(env.get("AWS_REGION") or "").strip() or DEFAULT_REGION,
            severities=tuple(split_csv(env.get("SECURITY_HUB_SEVERITIES"))) or DEFAULT_SEVERITIES,
            closed_statuses=tuple(split_csv(env.get("JIRA_CLOSED_STATUSES"))) or DEFAULT_CLOSED_STATUSES,
            open_statuses=tuple(split_csv(env.get("JIRA_OPEN_STATUSES"))),
            auto_close=auto_close,
            epic_key=(env.get("JIRA_EPIC_KEY") or "").strip() or None,
            link_issue_key=(env.get("JIRA_LINK_ID") or "").strip() or None,
            link_type=(env.get("JIRA_LINK_TYPE") or "").strip() or DEFAULT_LINK_TYPE,
            assignee=(env.get("ASSIGNEE") or "").strip() or None,
            custom_fields=parse_custom_fields(env.get("JIRA_CUSTOM_FIELDS")),
            title_prefix=(env.get("TITLE_PREFIX") or "").strip() or DEFAULT_TITLE_PREFIX,
        )
