"""AWS CLI backed implementation of :class:`~iam_policy_dl.core.protocols.IamProvider`.

This module is the **only** place in the codebase that spawns the AWS
CLI.  Process failures are caught here and re-raised as typed
:class:`~iam_policy_dl.exceptions.PolicyDlError` subclasses — nothing
raw escapes the infrastructure boundary.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import IO, Any

from iam_policy_dl.core import json_query
from iam_policy_dl.exceptions import (
    AwsCliNotFoundError,
    CredentialsError,
    DownloadFailedError,
    PolicyDlError,
    PolicyListError,
    PolicyVersionError,
    append_profile_suggestion,
)

Runner = Callable[..., "subprocess.CompletedProcess[Any]"]

ATTACHED_NAMES_QUERY: str = "AttachedPolicies[].PolicyName"
CUSTOMER_NAMES_QUERY: str = "Policies[].PolicyName"
DEFAULT_VERSION_QUERY: str = "Policy.DefaultVersionId"
DOCUMENT_QUERY: str = "PolicyVersion.Document"


def arn_lookup_query(policy_name: str) -> str:
    """Return the ``--query`` expression selecting *policy_name*'s ARN.

    The name is embedded as a raw string literal and the expression is
    compiled locally, so a quote in a name cannot change its meaning.
    """
    literal = json_query.raw_string_literal(policy_name)
    expression = f"Policies[?PolicyName=={literal}].Arn | [0]"
    json_query.compile_expression(expression)
    return expression


class AwsCliProvider:
    """Concrete :class:`IamProvider` backed by the ``aws`` executable.

    Usage::

        provider = AwsCliProvider("aws", profile="dev")
        identity_json = provider.get_caller_identity()

    This class satisfies the :class:`~iam_policy_dl.core.protocols.IamProvider`
    protocol structurally — no explicit inheritance required.

    Parameters
    ----------
    aws_cmd:
        Name or path of the AWS CLI binary (``AWS_CMD``).
    profile:
        Optional named profile passed as ``--profile``.  When ``None``
        the CLI's own resolution (``AWS_PROFILE``, default) applies.
    runner:
        Callable with the signature of :func:`subprocess.run`; injected
        by tests.
    """

    def __init__(
        self,
        aws_cmd: str = "aws",
        *,
        profile: str | None = None,
        runner: Runner = subprocess.run,
    ) -> None:
        self._aws_cmd = aws_cmd
        self._profile = profile
        self._runner = runner

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def get_caller_identity(self) -> str:
        return self._run(
            ["sts", "get-caller-identity", "--output", "json"],
            error=CredentialsError(
                "Invalid or expired AWS credentials.",
                hint=append_profile_suggestion(
                    "Run 'aws configure' to set up credentials.", self._profile,
                ),
            ),
        )

    def list_attached_policy_names(self, user_name: str) -> str:
        return self._run(
            [
                "iam", "list-attached-user-policies",
                "--user-name", user_name,
                "--query", ATTACHED_NAMES_QUERY,
                "--output", "json",
            ],
            error=PolicyListError(
                f"Failed to list policies attached to user '{user_name}'.",
            ),
        )

    def list_customer_policy_names(self) -> str:
        return self._run(
            [
                "iam", "list-policies",
                "--scope", "Local",
                "--query", CUSTOMER_NAMES_QUERY,
                "--output", "json",
            ],
            error=PolicyListError(
                "Failed to list customer-managed policies.",
                hint="Check IAM permissions.",
            ),
        )

    def find_customer_policy_arn(self, policy_name: str) -> str:
        try:
            query = arn_lookup_query(policy_name)
        except ValueError as exc:
            raise PolicyListError(
                f"Cannot build a lookup query for policy name {policy_name!r}.",
            ) from exc

        return self._run(
            [
                "iam", "list-policies",
                "--scope", "Local",
                "--query", query,
                "--output", "text",
            ],
            error=PolicyListError(
                "Failed to list customer-managed policies.",
                hint="Check IAM permissions.",
            ),
        )

    def get_default_version_id(self, policy_arn: str) -> str:
        return self._run(
            [
                "iam", "get-policy",
                "--policy-arn", policy_arn,
                "--query", DEFAULT_VERSION_QUERY,
                "--output", "text",
            ],
            error=PolicyVersionError(
                f"Could not read policy metadata for {policy_arn}.",
            ),
        )

    def download_document(
        self,
        policy_arn: str,
        version_id: str,
        destination: Path,
    ) -> None:
        """Stream ``get-policy-version`` output straight into *destination*."""
        args = [
            "iam", "get-policy-version",
            "--policy-arn", policy_arn,
            "--version-id", version_id,
            "--query", DOCUMENT_QUERY,
            "--output", "json",
        ]
        error = DownloadFailedError("Failed to download policy document from AWS IAM.")

        try:
            with destination.open("wb") as handle:
                self._run(args, error=error, stdout=handle)
        except PolicyDlError:
            raise
        except OSError as exc:
            raise DownloadFailedError(
                f"Cannot write {destination}: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Process handling
    # ------------------------------------------------------------------

    def _command(self, args: Sequence[str]) -> list[str]:
        """Prefix *args* with the binary and the optional profile."""
        command = [self._aws_cmd]
        if self._profile:
            command.extend(["--profile", self._profile])
        command.extend(args)
        return command

    def _run(
        self,
        args: Sequence[str],
        *,
        error: PolicyDlError,
        stdout: IO[bytes] | None = None,
    ) -> str:
        """Run one AWS CLI command and return its stdout as text.

        When *stdout* is given, output goes to that handle instead and
        ``""`` is returned.  A non-zero exit raises *error*, with the
        CLI's last stderr line appended to its hint.
        """
        command = self._command(args)
        env = {**os.environ, "AWS_PAGER": ""}

        try:
            if stdout is None:
                completed = self._runner(
                    command, capture_output=True, text=True, env=env, check=False,
                )
            else:
                completed = self._runner(
                    command, stdout=stdout, stderr=subprocess.PIPE, env=env, check=False,
                )
        except FileNotFoundError as exc:
            raise AwsCliNotFoundError(
                f"AWS CLI not found: {self._aws_cmd}",
            ) from exc
        except OSError as exc:
            raise type(error)(f"{error} ({exc})", hint=error.hint) from exc

        if completed.returncode != 0:
            raise self._with_stderr(error, completed.stderr)

        if stdout is not None:
            return ""
        return completed.stdout or ""

    @staticmethod
    def _with_stderr(error: PolicyDlError, stderr: str | bytes | None) -> PolicyDlError:
        """Attach the last non-empty stderr line to *error*'s hint."""
        if isinstance(stderr, bytes):
            stderr = stderr.decode("utf-8", errors="replace")
        lines = [line.strip() for line in (stderr or "").splitlines() if line.strip()]
        if not lines:
            return error
        detail = f"aws: {lines[-1]}"
        error.hint = f"{error.hint}\n{detail}" if error.hint else detail
        return error
