from __future__ import annotations

import boto3
import pytest

from conftest import ACCOUNT_ID, REGION, stub_client
from securityhub.utils.account import get_account_alias, get_account_id, lookup_account
from securityhub_shared.errors import AccountLookupError


def test_lookup_account(aws_session: boto3.session.Session) -> None:
    aws_session.client("iam").create_account_alias(AccountAlias="my-account-alias")

    account = lookup_account(aws_session, REGION)

    assert account.account_id == ACCOUNT_ID
    assert account.alias == "my-account-alias"
    assert account.display_name == f"{ACCOUNT_ID} (my-account-alias)"


def test_display_name_without_alias(aws_session: boto3.session.Session) -> None:
    account = lookup_account(aws_session, REGION)

    assert account.alias == ""
    assert account.display_name == ACCOUNT_ID


@pytest.mark.parametrize("account_id", ["", "invalid-account-id", "12345"])
def test_invalid_account_id_is_rejected(
    aws_session: boto3.session.Session, monkeypatch: pytest.MonkeyPatch, account_id: str
) -> None:
    stubber = stub_client(monkeypatch, aws_session, "sts")
    stubber.add_response(
        "get_caller_identity",
        {"UserId": "AIDATEST", "Account": account_id, "Arn": "arn:aws:iam::000000000000:user/test"},
    )

    with stubber, pytest.raises(AccountLookupError, match="An issue was encountered when"):
        get_account_id(aws_session, REGION)


def test_sts_failure(aws_session: boto3.session.Session, monkeypatch: pytest.MonkeyPatch) -> None:
    stubber = stub_client(monkeypatch, aws_session, "sts")
    stubber.add_client_error("get_caller_identity", service_error_code="ExpiredToken", http_status_code=403)

    with stubber, pytest.raises(AccountLookupError, match="Error getting AWS Account ID"):
        get_account_id(aws_session, REGION)


def test_unreadable_alias_is_only_a_warning(
    aws_session: boto3.session.Session, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    stubber = stub_client(monkeypatch, aws_session, "iam")
    stubber.add_client_error("list_account_aliases", service_error_code="AccessDenied", http_status_code=403)

    with stubber:
        assert get_account_alias(aws_session, REGION) == ""
    assert "WARN: Could not list IAM account aliases" in capsys.readouterr().err
