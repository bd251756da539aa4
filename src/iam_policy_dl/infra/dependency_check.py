"""Infrastructure: runtime dependency detection and install guidance.

This module is responsible for locating the AWS CLI binary and the
``jmespath`` package, and for providing platform-specific installation
guidance when either is missing.

Rules
-----
* Binary detection via :func:`shutil.which` only, no subprocess.
* No automatic installation.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from iam_policy_dl.core.json_query import load_jmespath
from iam_policy_dl.exceptions import AwsCliNotFoundError, JsonToolMissingError

AWS_CLI_INSTALL_URL: str = "https://aws.amazon.com/cli/"


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ToolStatus:
    """Result of a dependency probe.

    Attributes
    ----------
    name : str
        Display name of the dependency (``"aws"``, ``"jmespath"``).
    found : bool
        Whether the dependency is usable.
    location : str | None
        Resolved binary path or installed package version.
    install_commands : tuple[str, ...]
        Suggested commands for installing the dependency on the current
        platform.  Empty when it is already present.
    """

    name: str
    found: bool
    location: str | None
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# AWS CLI
# ---------------------------------------------------------------------------

def detect_aws_cli(aws_cmd: str = "aws") -> ToolStatus:
    """Probe for the AWS CLI named by *aws_cmd* (a name or a path).

    Returns a :class:`ToolStatus` regardless of whether the binary is
    present — the caller decides whether to abort or merely report.
    """
    result = shutil.which(aws_cmd)

    if result is not None:
        return ToolStatus(
            name="aws",
            found=True,
            location=str(Path(result).resolve()),
            install_commands=(),
        )

    return ToolStatus(
        name="aws",
        found=False,
        location=None,
        install_commands=_platform_install_commands(),
    )


def require_aws_cli(aws_cmd: str = "aws") -> Path:
    """Locate the AWS CLI or raise :class:`AwsCliNotFoundError`."""
    status = detect_aws_cli(aws_cmd)
    if not status.found or status.location is None:
        hint_lines = [f"Install AWS CLI v2 from {AWS_CLI_INSTALL_URL}"]
        hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        if aws_cmd != "aws":
            hint_lines.append(f"AWS_CMD is set to {aws_cmd!r}; check that path.")
        raise AwsCliNotFoundError(
            "AWS CLI not found in PATH.",
            hint="\n".join(hint_lines),
        )
    return Path(status.location)


# ---------------------------------------------------------------------------
# jmespath
# ---------------------------------------------------------------------------

def detect_jmespath() -> ToolStatus:
    """Probe for the ``jmespath`` package without raising."""
    try:
        load_jmespath()
    except JsonToolMissingError:
        return ToolStatus(
            name="jmespath",
            found=False,
            location=None,
            install_commands=("pip install jmespath",),
        )

    try:
        installed = version("jmespath")
    except PackageNotFoundError:
        installed = "unknown"
    return ToolStatus(name="jmespath", found=True, location=installed, install_commands=())


def require_jmespath() -> None:
    """Raise :class:`JsonToolMissingError` when ``jmespath`` is missing."""
    load_jmespath()


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands() -> tuple[str, ...]:
    """Return AWS CLI install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install Amazon.AWSCLI",
            "msiexec.exe /i https://awscli.amazonaws.com/AWSCLIV2.msi",
        )
    if system == "linux":
        return (
            'curl "https://awscli.amazonaws.com/awscli-exe-linux-x86_64.zip" -o awscliv2.zip',
            "unzip awscliv2.zip && sudo ./aws/install",
        )
    if system == "darwin":
        return ("brew install awscli",)
    return (f"Please install the AWS CLI from {AWS_CLI_INSTALL_URL}",)
