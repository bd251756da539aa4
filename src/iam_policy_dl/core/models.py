"""Domain models for iam-policy-dl.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O and no dependencies
on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


# ---------------------------------------------------------------------------
# Caller identity
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Identity:
    """The principal the AWS CLI credentials resolve to."""

    arn: str
    """Principal ARN (e.g. ``arn:aws:iam::123456789012:user/alice``)."""

    account_id: str
    """Twelve-digit AWS account id."""

    @property
    def user_name(self) -> str:
        """Last ``/``-separated segment of the ARN (``alice`` above)."""
        return self.arn.rsplit("/", 1)[-1]


# ---------------------------------------------------------------------------
# Policy references
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PolicyRef:
    """A resolved managed policy: name plus derived ARN and version."""

    name: str
    arn: str
    version_id: str
    """Default version id (e.g. ``v3``)."""


@dataclass(frozen=True, slots=True)
class PolicyCandidates:
    """Immutable, ordered list of policy names offered for selection."""

    names: tuple[str, ...]

    source: str
    """``"attached"`` or ``"customer-managed"``; used in prompts and logs."""

    def __len__(self) -> int:
        return len(self.names)

    def __bool__(self) -> bool:
        return len(self.names) > 0


# ---------------------------------------------------------------------------
# Download outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DownloadResult:
    """Where a validated policy document was written, and how big it is."""

    path: Path
    size_bytes: int
