"""Core policy service — enumeration and metadata resolution.

This is the central service consumed by the CLI layer.  It depends on
an :class:`~iam_policy_dl.core.protocols.IamProvider` injected at
construction time, keeping the core free of any subprocess handling.

Guarantees
----------
* Pure orchestration — no ``print()``, no filesystem access.
* Only :class:`~iam_policy_dl.exceptions.PolicyDlError` subclasses escape.
* The attached-policies listing never fails; it degrades to an empty
  result and reports why through ``on_warning``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from iam_policy_dl.core import json_query
from iam_policy_dl.core.models import PolicyCandidates, PolicyRef
from iam_policy_dl.core.protocols import IamProvider
from iam_policy_dl.exceptions import (
    PolicyDlError,
    PolicyListError,
    PolicyNotFoundError,
    PolicyVersionError,
)

ATTACHED: str = "attached"
CUSTOMER_MANAGED: str = "customer-managed"


class PolicyService:
    """Stateless service that lists and resolves managed policies.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`IamProvider` protocol.
    on_warning:
        Optional callable invoked with a message whenever a listing
        degrades instead of failing.
    on_log:
        Optional callable receiving diagnostic lines, such as the names
        offered when a lookup finds nothing.
    """

    def __init__(
        self,
        provider: IamProvider,
        *,
        on_warning: Callable[[str], None] | None = None,
        on_log: Callable[[str], None] | None = None,
    ) -> None:
        self._provider: IamProvider = provider
        self._on_warning = on_warning
        self._on_log = on_log

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def attached_policies(self, user_name: str) -> PolicyCandidates:
        """Return policies attached to *user_name*; empty on any failure."""
        try:
            raw = self._provider.list_attached_policy_names(user_name)
            names = self._parse_name_list(raw)
        except PolicyListError as exc:
            self._warn(f"Could not list attached policies ({exc}). Returning empty list.")
            names = ()
        except PolicyDlError:
            raise
        except Exception as exc:  # noqa: BLE001
            self._warn(f"Could not list attached policies ({exc}). Returning empty list.")
            names = ()
        return PolicyCandidates(names=names, source=ATTACHED)

    def customer_policies(self) -> PolicyCandidates:
        """Return every customer-managed policy name in the account.

        Raises
        ------
        PolicyListError
            If the listing fails or is not a JSON array.
        """
        try:
            raw = self._provider.list_customer_policy_names()
        except PolicyDlError:
            raise
        except Exception as exc:
            raise PolicyListError(
                f"Unexpected provider error: {exc}",
            ) from exc

        try:
            names = self._parse_name_list(raw)
        except PolicyListError as exc:
            raise PolicyListError(
                "Invalid JSON response from IAM list-policies.",
            ) from exc
        return PolicyCandidates(names=names, source=CUSTOMER_MANAGED)

    # ------------------------------------------------------------------
    # Metadata resolution
    # ------------------------------------------------------------------

    def resolve(self, policy_name: str) -> PolicyRef:
        """Resolve *policy_name* to its ARN and default version id.

        Raises
        ------
        PolicyNotFoundError
            If no customer-managed policy has that exact name.
        PolicyVersionError
            If the default version id cannot be determined.
        """
        arn = json_query.clean_text_value(self._call(
            self._provider.find_customer_policy_arn, policy_name,
            error_type=PolicyListError,
        ))
        if arn is None:
            self._log_available(policy_name)
            raise PolicyNotFoundError(
                f"Policy '{policy_name}' was not found in customer-managed policies.",
                hint="Policy names are case-sensitive.",
            )

        version_id = json_query.clean_text_value(self._call(
            self._provider.get_default_version_id, arn,
            error_type=PolicyVersionError,
        ))
        if version_id is None:
            raise PolicyVersionError(
                f"Could not determine DefaultVersionId for policy '{policy_name}'.",
            )

        return PolicyRef(name=policy_name, arn=arn, version_id=version_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _log_available(self, policy_name: str) -> None:
        """Best-effort listing of existing names for the not-found diagnostic."""
        if self._on_log is None:
            return
        self._on_log(f"Policy '{policy_name}' not found. Available policies:")
        try:
            available = self.customer_policies()
        except PolicyDlError as exc:
            self._on_log(f"  (could not list policies: {exc})")
            return
        if not available:
            self._on_log("  (none)")
        for name in available.names:
            self._on_log(f"  {name}")

    @staticmethod
    def _call(
        method: Callable[[str], str],
        argument: str,
        *,
        error_type: type[PolicyDlError],
    ) -> str:
        try:
            return method(argument)
        except PolicyDlError:
            raise
        except Exception as exc:
            raise error_type(f"Unexpected provider error: {exc}") from exc

    @staticmethod
    def _parse_name_list(raw: str) -> tuple[str, ...]:
        """Parse a JSON array of names; ``null`` counts as empty."""
        try:
            data: Any = json_query.parse_json(raw)
        except ValueError as exc:
            raise PolicyListError(str(exc)) from exc
        if data is None:
            return ()
        if not isinstance(data, list):
            raise PolicyListError("expected a JSON array of policy names")
        return tuple(str(name) for name in data if isinstance(name, str) and name)

    def _warn(self, message: str) -> None:
        if self._on_warning is not None:
            self._on_warning(message)
