#!/usr/bin/env python3
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

"""Sync active AWS Security Hub findings into Jira issues.

Design intent:
- One open Jira issue per finding *title* in an account and region.
- Match issues strictly by summary (``"<prefix> - <finding title>"``).
- Issues are scoped by labels: ``security-hub``, the account id and the region.
- Issues without an active finding are closed (or renamed and commented
  when auto-close is disabled).

Requirements:
- AWS credentials with ``securityhub:GetFindings``, ``sts:GetCallerIdentity``
  and (optionally) ``iam:ListAccountAliases``.
- ``JIRA_HOST``, ``JIRA_TOKEN`` and ``JIRA_PROJECT`` in the environment
  (see :mod:`securityhub.utils.config` for every other setting).

Draft / debug (no writes):
    `securityhub-jira-sync --dry-run --verbose`
"""

from __future__ import annotations

import argparse
import dataclasses
import sys

import boto3

from securityhub_shared.common import parse_runner_debug, set_verbose_enabled, split_csv
from securityhub_shared.errors import SecurityHubSyncError
from securityhub_shared.jira_issues import JiraTracker, connect

from securityhub.utils.account import lookup_account
from securityhub.utils.config import SyncConfig
from securityhub.utils.constants import LABEL_SECURITY_HUB
from securityhub.utils.finding_source import SecurityHubFindings
from securityhub.utils.issue_sync import sync_findings_and_tickets
from securityhub.utils.models import SyncResult


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Sync active Security Hub findings to Jira issues")
    p.add_argument("--region", help="Security Hub region (default: AWS_REGION or us-east-1)")
    p.add_argument(
        "--severities",
        help="Comma-separated severity labels to sync (default: HIGH,CRITICAL)",
    )
    p.add_argument("--project", help="Jira project key (default: JIRA_PROJECT)")
    p.add_argument("--epic-key", help="Parent epic for created issues (default: JIRA_EPIC_KEY)")
    p.add_argument(
        "--no-auto-close",
        action="store_true",
        help="Rename and comment stale issues instead of transitioning them to a closed status",
    )
    p.add_argument("--dry-run", action="store_true", help="Print intended actions without writing to Jira")
    p.add_argument("--verbose", action="store_true", help="Verbose logging (also enabled by RUNNER_DEBUG=1)")
    return p.parse_args(argv)


def apply_overrides(config: SyncConfig, args: argparse.Namespace) -> SyncConfig:
    overrides: dict[str, object] = {}
    if args.region:
        overrides["region"] = args.region
    if args.severities:
        overrides["severities"] = tuple(split_csv(args.severities))
    if args.project:
        overrides["project"] = args.project
    if args.epic_key:
        overrides["epic_key"] = args.epic_key
    if args.no_auto_close:
        overrides["auto_close"] = False
    return dataclasses.replace(config, **overrides) if overrides else config


def print_summary(result: SyncResult, *, dry_run: bool) -> None:
    prefix = "DRY-RUN: " if dry_run else ""
    print(
        f"{prefix}Sync finished: {len(result.created)} created, "
        f"{len(result.closed)} closed, {len(result.resolved)} marked resolved"
    )


def run(config: SyncConfig, *, dry_run: bool = False) -> SyncResult:
    session = boto3.Session(region_name=config.region)
    account = lookup_account(session, config.region)
    print(f"Syncing Security Hub findings for account {account.display_name} in {config.region}")

    source = SecurityHubFindings(
        session,
        region=config.region,
        severities=config.severities,
        account_alias=account.alias,
        title_prefix=config.title_prefix,
    )
    tracker = JiraTracker(
        connect(config.jira_server, config.jira_token, config.jira_username),
        config.project,
        marker_label=LABEL_SECURITY_HUB,
        closed_statuses=config.closed_statuses,
        issue_type=config.issue_type,
        cloud=config.jira_cloud,
    )
    return sync_findings_and_tickets(source, tracker, config, account, dry_run=dry_run)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    set_verbose_enabled(args.verbose or parse_runner_debug())

    try:
        config = apply_overrides(SyncConfig.from_env(), args)
        result = run(config, dry_run=args.dry_run)
    except SecurityHubSyncError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        raise SystemExit(1)

    print_summary(result, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
