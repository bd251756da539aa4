"""Core download service — fetch, validate and keep a policy document.

This service delegates the fetch to an
:class:`~iam_policy_dl.core.protocols.IamProvider` and the cleanup duty
to an :class:`~iam_policy_dl.core.protocols.OutputGuard` factory, both
injected at construction time.  It is responsible for:

* Guarding the destination for the whole fetch + validate window.
* Reading the written bytes back and checking they form a JSON object.
* Ensuring only :class:`~iam_policy_dl.exceptions.PolicyDlError`
  subclasses escape.

Guarantees
----------
* No ``print()``, no subprocess.
* Filesystem access is limited to reading back the guarded destination.
* When :meth:`DownloadService.download` raises, no file is left at the
  destination.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from iam_policy_dl.core import json_query
from iam_policy_dl.core.models import DownloadResult, PolicyRef
from iam_policy_dl.core.protocols import IamProvider, OutputGuard
from iam_policy_dl.exceptions import (
    DocumentValidationError,
    DownloadFailedError,
    PolicyDlError,
)


class DownloadService:
    """Stateless service that drives the download pipeline.

    Parameters
    ----------
    provider:
        Any object satisfying the :class:`IamProvider` protocol.
    guard_factory:
        Callable returning an :class:`OutputGuard` for a destination path.
    """

    def __init__(
        self,
        provider: IamProvider,
        guard_factory: Callable[[Path], OutputGuard],
    ) -> None:
        self._provider: IamProvider = provider
        self._guard_factory = guard_factory

    # ------------------------------------------------------------------
    # Destination naming (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def destination_for(output_dir: Path, policy_name: str) -> Path:
        """Return ``<output_dir>/<policy_name>.json``."""
        return output_dir / f"{policy_name}.json"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def download(self, policy: PolicyRef, destination: Path) -> DownloadResult:
        """Fetch *policy* into *destination* and validate it.

        Raises
        ------
        DownloadFailedError
            When the fetch fails for any reason.
        DocumentValidationError
            When the written bytes are not a well-formed JSON object.
        """
        with self._guard_factory(destination) as guard:
            self._fetch(policy, destination)
            self._validate(destination)
            guard.commit()

        return DownloadResult(path=destination, size_bytes=destination.stat().st_size)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _fetch(self, policy: PolicyRef, destination: Path) -> None:
        try:
            self._provider.download_document(
                policy.arn.strip(),
                policy.version_id.strip(),
                destination,
            )
        except PolicyDlError:
            # Already one of ours.
            raise
        except Exception as exc:
            raise DownloadFailedError(
                f"Unexpected download error: {exc}",
            ) from exc

    @staticmethod
    def _validate(destination: Path) -> None:
        try:
            text = destination.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentValidationError(
                f"Downloaded policy could not be read back: {exc}",
            ) from exc

        try:
            document = json_query.parse_json(text)
        except ValueError as exc:
            raise DocumentValidationError(
                "Downloaded policy is not valid JSON.",
            ) from exc

        if not isinstance(document, dict):
            raise DocumentValidationError(
                "Downloaded policy is not a JSON object.",
                hint="get-policy-version should return the policy document as an object.",
            )
