"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends only on these protocols, never on the concrete
adapters in :mod:`iam_policy_dl.infra`.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Protocol


class IamProvider(Protocol):
    """Contract for IAM / STS backends.

    Methods return the backend's **raw text output**; parsing, trimming
    and validation happen in the core services so that every backend
    is held to the same rules.

    Implementations must map all backend-specific exceptions to
    :class:`~iam_policy_dl.exceptions.PolicyDlError` subclasses.
    """

    def get_caller_identity(self) -> str:
        """Return the caller identity document as JSON text.

        Raises
        ------
        CredentialsError
            When the backend rejects the credentials.
        """
        ...  # pragma: no cover

    def list_attached_policy_names(self, user_name: str) -> str:
        """Return a JSON array of policy names attached to *user_name*.

        Raises
        ------
        PolicyListError
            When the backend call fails.
        """
        ...  # pragma: no cover

    def list_customer_policy_names(self) -> str:
        """Return a JSON array of customer-managed policy names.

        Raises
        ------
        PolicyListError
            When the backend call fails.
        """
        ...  # pragma: no cover

    def find_customer_policy_arn(self, policy_name: str) -> str:
        """Return the ARN of the customer-managed policy *policy_name*.

        The text may carry surrounding whitespace, and is empty or
        ``"None"`` when there is no such policy.

        Raises
        ------
        PolicyListError
            When the backend call fails.
        """
        ...  # pragma: no cover

    def get_default_version_id(self, policy_arn: str) -> str:
        """Return the default version id of *policy_arn* as text.

        Same whitespace / ``"None"`` conventions as
        :meth:`find_customer_policy_arn`.

        Raises
        ------
        PolicyVersionError
            When the backend call fails.
        """
        ...  # pragma: no cover

    def download_document(
        self,
        policy_arn: str,
        version_id: str,
        destination: Path,
    ) -> None:
        """Write the policy document for *policy_arn* / *version_id*.

        The raw JSON is written to *destination* as the backend returns
        it.  A partially written file may be left behind on failure.

        Raises
        ------
        DownloadFailedError
            When the fetch fails for any reason.
        """
        ...  # pragma: no cover


class OutputGuard(Protocol):
    """Scoped ownership of an output path.

    While the guard is active and not committed, leaving the ``with``
    block for any reason removes the file at the guarded path.
    """

    def __enter__(self) -> OutputGuard:
        ...  # pragma: no cover

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        ...  # pragma: no cover

    def commit(self) -> None:
        """Keep the file: the write has been validated."""
        ...  # pragma: no cover
