"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.

The domain codes 1-6 name the ``exit_code`` class attributes in
:mod:`iam_policy_dl.exceptions`; the error boundary in
:func:`iam_policy_dl.cli.app.cli` exits with ``exc.exit_code``, so these
constants document those values rather than being passed around.  The
exceptions module cannot import them without depending on the CLI layer.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — policy saved, or overwrite declined by the operator."""

TOOL_MISSING: int = 1
"""The AWS CLI (or another required runtime tool) is not available.

``EnvironmentError.exit_code``.
"""

INVALID_CREDENTIALS: int = 2
"""The caller identity could not be verified (``CredentialsError.exit_code``)."""

JSON_TOOL_MISSING: int = 3
"""The JMESPath library is not installed (``JsonToolMissingError.exit_code``)."""

POLICY_NOT_FOUND: int = 4
"""No candidates, unmatched selection, or unknown policy name.

``PolicyLookupError.exit_code``.
"""

VERSION_UNRESOLVED: int = 5
"""The default version id could not be determined (``PolicyVersionError.exit_code``)."""

DOWNLOAD_FAILED: int = 6
"""Fetching or validating the document failed (``DownloadFailedError.exit_code``)."""

UNEXPECTED_ERROR: int = 70
"""An unhandled exception escaped all known error boundaries (EX_SOFTWARE)."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C or the process was terminated.  128 + SIGINT=2."""
