"""``iam-policy-dl --doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies iam-policy-dl's requirements.
No AWS call is made: credentials are checked by a real run.
"""

from __future__ import annotations

import platform
import sys

from iam_policy_dl.cli import exit_codes
from iam_policy_dl.cli.console import console
from iam_policy_dl.config import Settings
from iam_policy_dl.infra.dependency_check import detect_aws_cli, detect_jmespath
from iam_policy_dl.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _aws_cli_check(aws_cmd: str) -> tuple[str, str, str]:
    """Return (label, value, status) for the AWS CLI row."""
    status_obj = detect_aws_cli(aws_cmd)
    if status_obj.found:
        return "aws", status_obj.location or "found", "[green]OK[/green]"
    return "aws", f"not found ({aws_cmd})", "[red]FAIL[/red]"


def _jmespath_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the jmespath row."""
    status_obj = detect_jmespath()
    if status_obj.found:
        return "jmespath", status_obj.location or "unknown", "[green]OK[/green]"
    return "jmespath", "NOT INSTALLED", "[red]FAIL[/red]"


def _profile_check(settings: Settings) -> tuple[str, str, str]:
    """Return (label, value, status) for the AWS profile row."""
    return "Profile", settings.active_profile or "default", "[green]OK[/green]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _tool_version_check() -> tuple[str, str, str]:
    return "iam-policy-dl", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\niam-policy-dl doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<14} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<14} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all checks pass,
        :data:`exit_codes.TOOL_MISSING` if any check fails.
    """
    checks = [
        _tool_version_check(),
        _python_version_check(),
        _aws_cli_check(settings.aws_cmd),
        _jmespath_check(),
        _profile_check(settings),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
        return exit_codes.TOOL_MISSING if has_failure else exit_codes.SUCCESS

    table = Table(
        title="iam-policy-dl doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.TOOL_MISSING

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
