"""Core identity service — verifies the caller before anything else runs.

Guarantees
----------
* Pure orchestration — no ``print()``, no subprocess.
* Only :class:`~iam_policy_dl.exceptions.PolicyDlError` subclasses escape.
"""

from __future__ import annotations

from iam_policy_dl.core import json_query
from iam_policy_dl.core.models import Identity
from iam_policy_dl.core.protocols import IamProvider
from iam_policy_dl.exceptions import CredentialsError, PolicyDlError


class IdentityService:
    """Resolve and validate the caller identity.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`IamProvider` protocol.
    """

    def __init__(self, provider: IamProvider) -> None:
        self._provider: IamProvider = provider

    def validate(self) -> Identity:
        """Return the verified :class:`Identity`.

        Raises
        ------
        CredentialsError
            If the call fails, returns malformed JSON, or lacks the
            ``Arn`` / ``Account`` fields.
        JsonToolMissingError
            If ``jmespath`` is not installed.
        """
        raw = self._fetch()

        try:
            document = json_query.parse_json(raw)
        except ValueError as exc:
            raise CredentialsError(
                "Invalid JSON response from AWS STS.",
                hint="Check your AWS CLI configuration.",
            ) from exc

        arn = json_query.search("Arn", document) if isinstance(document, dict) else None
        account = json_query.search("Account", document) if isinstance(document, dict) else None

        if not arn or not account:
            raise CredentialsError(
                "Failed to extract user information from AWS STS response.",
            )

        return Identity(arn=str(arn).strip(), account_id=str(account).strip())

    def _fetch(self) -> str:
        try:
            return self._provider.get_caller_identity()
        except PolicyDlError:
            raise
        except Exception as exc:
            raise CredentialsError(
                f"Unexpected identity provider error: {exc}",
            ) from exc
