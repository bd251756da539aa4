"""Shared pytest fixtures and configuration for the iam-policy-dl test suite.

Guidelines
----------
* No network access and no real AWS CLI in any test.
* The AWS CLI is replaced at the infra boundary — either a fake
  ``IamProvider`` or a fake ``subprocess.run`` runner.
* questionary is mocked at the prompt boundary; no terminal is needed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

LAB_ARN = "arn:aws:iam::123456789012:policy/lab_policy"
USER_ARN = "arn:aws:iam::123456789012:user/alice"
DOCUMENT = {
    "Version": "2012-10-17",
    "Statement": [{"Effect": "Allow", "Action": "s3:ListBucket", "Resource": "*"}],
}


class FakeIamProvider:
    """In-memory :class:`IamProvider` with scriptable failures.

    Any constructor argument may be an exception instance, in which
    case the matching method raises it.
    """

    def __init__(
        self,
        *,
        identity: str | Exception | None = None,
        attached: str | Exception = '["lab_policy"]',
        customer: str | Exception = '["lab_policy", "audit_policy"]',
        arns: dict[str, str] | None = None,
        versions: dict[str, str] | None = None,
        document: str = json.dumps(DOCUMENT, indent=4) + "\n",
        download_error: Exception | None = None,
    ) -> None:
        self.identity = identity if identity is not None else json.dumps(
            {"UserId": "AIDAEXAMPLE", "Account": "123456789012", "Arn": USER_ARN},
        )
        self.attached = attached
        self.customer = customer
        self.arns = {"lab_policy": LAB_ARN} if arns is None else arns
        self.versions = {LAB_ARN: "v2"} if versions is None else versions
        self.document = document
        self.download_error = download_error
        self.calls: list[tuple[str, Any]] = []

    @staticmethod
    def _value(value: Any) -> Any:
        if isinstance(value, Exception):
            raise value
        return value

    def get_caller_identity(self) -> str:
        self.calls.append(("get_caller_identity", None))
        return self._value(self.identity)

    def list_attached_policy_names(self, user_name: str) -> str:
        self.calls.append(("list_attached_policy_names", user_name))
        return self._value(self.attached)

    def list_customer_policy_names(self) -> str:
        self.calls.append(("list_customer_policy_names", None))
        return self._value(self.customer)

    def find_customer_policy_arn(self, policy_name: str) -> str:
        self.calls.append(("find_customer_policy_arn", policy_name))
        return f"{self.arns.get(policy_name, 'None')}\n"

    def get_default_version_id(self, policy_arn: str) -> str:
        self.calls.append(("get_default_version_id", policy_arn))
        return f"  {self.versions.get(policy_arn, 'None')}\n"

    def download_document(self, policy_arn: str, version_id: str, destination: Path) -> None:
        self.calls.append(("download_document", (policy_arn, version_id)))
        if self.download_error is not None:
            destination.write_text('{"Version": ', encoding="utf-8")
            raise self.download_error
        destination.write_text(self.document, encoding="utf-8")


@pytest.fixture
def provider_factory() -> type[FakeIamProvider]:
    """Return the :class:`FakeIamProvider` class for per-test construction."""
    return FakeIamProvider
