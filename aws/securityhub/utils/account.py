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

"""AWS account identity lookup (STS account id, IAM account alias)."""

from __future__ import annotations

import re

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from securityhub_shared.common import warn
from securityhub_shared.errors import AccountLookupError

from .models import AccountIdentity

ACCOUNT_ID_RE = re.compile(r"^\d{12}$")


def get_account_id(session: boto3.session.Session, region: str) -> str:
    try:
        identity = session.client("sts", region_name=region).get_caller_identity()
    except (ClientError, BotoCoreError) as exc:
        raise AccountLookupError(f"Error getting AWS Account ID: {exc}") from exc

    account_id = str(identity.get("Account") or "")
    if not ACCOUNT_ID_RE.match(account_id):
        raise AccountLookupError(
            "An issue was encountered when looking up your AWS Account ID. "
            f"Refusing to continue (got {account_id!r})"
        )
    return account_id


def get_account_alias(session: boto3.session.Session, region: str) -> str:
    """Return the first IAM account alias, or ``""`` when none is set or readable."""
    try:
        aliases = session.client("iam", region_name=region).list_account_aliases().get("AccountAliases") or []
    except (ClientError, BotoCoreError) as exc:
        warn(f"Could not list IAM account aliases: {exc}")
        return ""
    return str(aliases[0]) if aliases else ""


def lookup_account(session: boto3.session.Session, region: str) -> AccountIdentity:
    return AccountIdentity(
        account_id=get_account_id(session, region),
        alias=get_account_alias(session, region),
    )
