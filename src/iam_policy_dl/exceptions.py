"""Custom exception hierarchy for iam-policy-dl.

All exceptions that cross layer boundaries must inherit from
:class:`PolicyDlError`.  Raw subprocess / OS exceptions must NEVER
propagate beyond the infrastructure layer — they must be caught and
re-raised as a typed subclass defined here.

Every class carries the process exit code the CLI error boundary uses
when it is the reason the run stops.

Hierarchy
---------
PolicyDlError
├── EnvironmentError                 (1)
│   ├── AwsCliNotFoundError          (1)
│   └── JsonToolMissingError         (3)
├── CredentialsError                 (2)
├── PolicyLookupError                (4)
│   ├── PolicyListError
│   ├── NoPolicyCandidatesError
│   ├── PolicySelectionError
│   └── PolicyNotFoundError
├── PolicyVersionError               (5)
└── DownloadFailedError              (6)
    └── DocumentValidationError
"""

from __future__ import annotations


class PolicyDlError(Exception):
    """Base exception for all iam-policy-dl errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    exit_code: int = 1
    """Process exit code used when this error ends the run."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(PolicyDlError):
    """Raised when a required runtime dependency is not available."""

    exit_code = 1


class AwsCliNotFoundError(EnvironmentError):
    """Raised when the AWS CLI binary cannot be located."""

    exit_code = 1


class JsonToolMissingError(EnvironmentError):
    """Raised when the JMESPath library is not installed."""

    exit_code = 3


# --- Authentication --------------------------------------------------------

class CredentialsError(PolicyDlError):
    """Raised when the caller identity cannot be verified."""

    exit_code = 2


# --- Enumeration / selection -----------------------------------------------

class PolicyLookupError(PolicyDlError):
    """Base for every "which policy?" failure."""

    exit_code = 4


class PolicyListError(PolicyLookupError):
    """Raised when customer-managed policies cannot be listed."""


class NoPolicyCandidatesError(PolicyLookupError):
    """Raised when there is nothing to choose from."""


class PolicySelectionError(PolicyLookupError):
    """Raised when the operator's input matches no listed policy."""


class PolicyNotFoundError(PolicyLookupError):
    """Raised when a policy name has no customer-managed ARN."""


# --- Version metadata ------------------------------------------------------

class PolicyVersionError(PolicyDlError):
    """Raised when the default version id cannot be determined."""

    exit_code = 5


# --- Download --------------------------------------------------------------

class DownloadFailedError(PolicyDlError):
    """Raised when fetching the policy document fails."""

    exit_code = 6


class DocumentValidationError(DownloadFailedError):
    """Raised when the fetched document is not well-formed JSON."""


def append_profile_suggestion(hint: str, profile: str | None) -> str:
    """Append named-profile guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.  Nothing is added when no profile is active.
    """
    if not profile:
        return hint
    marker = "Active AWS profile:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            f"{marker} {profile}",
            f"    aws configure --profile {profile}",
        )
    )
