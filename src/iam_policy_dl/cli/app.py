"""CLI application entry point and command routing for iam-policy-dl.

This module is the **sole error boundary** for the entire application.
It catches :class:`~iam_policy_dl.exceptions.PolicyDlError`,
``KeyboardInterrupt`` (including ``SIGTERM``, which is re-raised as one),
and any unexpected ``Exception``, rendering a timestamped message on
stderr and returning the exit code the error carries.

Architecture notes
------------------
* The download handler only sequences the phases and logs progress —
  all work is delegated to the core services and infrastructure layer.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys

from iam_policy_dl.cli import exit_codes
from iam_policy_dl.cli.console import console
from iam_policy_dl.config import DEFAULT_OUTPUT_DIR, Settings
from iam_policy_dl.exceptions import DownloadFailedError, PolicyDlError
from iam_policy_dl.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The CLI supports:
    * ``iam-policy-dl [policy-name] [output-dir]`` — download a policy
    * ``iam-policy-dl --doctor``                    — environment diagnostics
    * ``iam-policy-dl --version``
    """
    parser = argparse.ArgumentParser(
        prog="iam-policy-dl",
        description="Download an AWS IAM managed policy document.",
        epilog="Environment: AWS_CMD overrides the AWS CLI binary; AWS_PROFILE selects a profile.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "policy_name",
        nargs="?",
        default=None,
        help="Customer-managed policy to download (prompted for when omitted).",
    )
    parser.add_argument(
        "output_dir",
        nargs="?",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Directory for <policy-name>.json (default: {DEFAULT_OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Named AWS CLI profile to use.",
    )
    parser.add_argument(
        "--doctor",
        action="store_true",
        help="Check the environment and exit.",
    )
    return parser


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------

def _format_size(size_bytes: int) -> str:
    """Human-readable size in the style of ``du -h`` (``512B``, ``1.5K``)."""
    size = float(size_bytes)
    for unit in ("B", "K", "M"):
        if size < 1024:
            return f"{size:.0f}{unit}" if unit == "B" else f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}G"


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_download(settings: Settings) -> int:
    """Run the download workflow.

    Flow:
    1. Check the AWS CLI and jmespath are available.
    2. Validate credentials and show the caller identity.
    3. Create the output directory.
    4. Select a policy (argument or interactive prompt).
    5. Resolve its ARN and default version.
    6. Confirm before overwriting an existing file.
    7. Download, validate, and keep the document.
    """
    from iam_policy_dl.cli.selection_prompt import confirm_overwrite, prompt_policy_selection
    from iam_policy_dl.core.download_service import DownloadService
    from iam_policy_dl.core.identity_service import IdentityService
    from iam_policy_dl.core.models import PolicyCandidates
    from iam_policy_dl.core.policy_service import PolicyService
    from iam_policy_dl.infra.awscli_provider import AwsCliProvider
    from iam_policy_dl.infra.dependency_check import require_aws_cli, require_jmespath
    from iam_policy_dl.infra.output_file import PendingOutput

    # Phase 1
    require_aws_cli(settings.aws_cmd)
    require_jmespath()
    provider = AwsCliProvider(settings.aws_cmd, profile=settings.profile)

    # Phase 2
    console.log("Validating AWS credentials...")
    identity = IdentityService(provider).validate()
    console.log("Credentials are valid.")
    console.log(f"Account: {identity.account_id}")
    console.log(f"User ARN: {identity.arn}")
    if settings.active_profile:
        console.log(f"Profile: {settings.active_profile}")
    console.print()

    # Phase 3
    try:
        settings.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DownloadFailedError(
            f"Cannot create output directory {settings.output_dir}: {exc}",
        ) from exc

    # Phase 4
    policy_service = PolicyService(
        provider,
        on_warning=lambda message: console.log(f"Warning: {message}"),
        on_log=console.log,
    )
    policy_name = settings.policy_name
    if policy_name is None:
        console.log(f"Fetching policies attached to user '{identity.user_name}'...")
        attached = policy_service.attached_policies(identity.user_name)

        def _load_customer_policies() -> PolicyCandidates:
            console.log("Fetching customer-managed policies...")
            return policy_service.customer_policies()

        policy_name = prompt_policy_selection(
            identity.user_name,
            attached,
            _load_customer_policies,
        )

    console.print()
    console.log(f"Selected policy: {policy_name}")

    # Phase 5
    console.log(f"Looking up policy '{policy_name}' in customer-managed policies...")
    policy = policy_service.resolve(policy_name)
    console.log(f"Found policy ARN: {policy.arn}")
    console.log(f"Default policy version: {policy.version_id}")
    console.print()

    # Phase 6
    destination = DownloadService.destination_for(settings.output_dir, policy.name)
    if destination.exists():
        console.log(f"File already exists: {destination}")
        if not confirm_overwrite(destination):
            console.log("Download cancelled. Existing file preserved.")
            return exit_codes.SUCCESS
        console.log("Overwriting existing file...")

    # Phase 7
    console.log(f"Downloading policy document to: {destination}")
    download_service = DownloadService(
        provider,
        guard_factory=lambda path: PendingOutput(
            path,
            on_cleanup=lambda p: console.log(f"Cleaning up partial download: {p}"),
        ),
    )
    result = download_service.download(policy, destination)

    console.print()
    console.log("Policy document saved successfully!")
    console.log(f"Location: {result.path}")
    console.log(f"Size: {_format_size(result.size_bytes)}")
    console.print()
    console.log(f"You can inspect it with: python -m json.tool '{result.path}'")
    return exit_codes.SUCCESS


def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``--doctor`` diagnostics command."""
    from iam_policy_dl.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the iam-policy-dl CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env(
        policy_name=args.policy_name,
        output_dir=args.output_dir,
        profile=args.profile,
    )

    if args.doctor:
        return _handle_doctor(settings)

    return _handle_download(settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    from iam_policy_dl.infra.output_file import raise_on_sigterm

    try:
        with raise_on_sigterm():
            code = main()
        sys.exit(code)
    except PolicyDlError as exc:
        console.log(f"ERROR: {exc}")
        if exc.hint:
            console.log(f"Hint: {exc.hint}")
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        console.print()
        console.log("Aborted by user.")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.log(
            "Unexpected error. Please report this issue. "
            f"{type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
