"""Interactive policy selection UI for the CLI layer.

This module is responsible for:

* Rendering numbered Rich tables of candidate policy names.
* Prompting the operator for a number or a name via questionary.
* Asking for overwrite confirmation.

Resolution of what the operator typed is delegated to
:mod:`iam_policy_dl.core.selection` — no matching logic lives here.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from iam_policy_dl.cli.console import console
from iam_policy_dl.core.models import PolicyCandidates
from iam_policy_dl.core.selection import is_deferral, require_candidates, resolve_selection
from iam_policy_dl.exceptions import EnvironmentError

ATTACHED_PROMPT: str = (
    "Enter policy number or name to download "
    "(or press Enter to list all customer-managed):"
)
FULL_LIST_PROMPT: str = "Enter policy number or name to download:"


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _import_rich_table() -> type[Any]:
    """Import rich table lazily for candidate rendering."""
    try:
        from rich.table import Table
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Table


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _display_candidates(candidates: PolicyCandidates) -> None:
    """Print a numbered table of *candidates* to stderr."""
    table_class = _import_rich_table()

    table = table_class(
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Policy", justify="left", min_width=20)

    for i, name in enumerate(candidates.names, start=1):
        table.add_row(str(i), name)

    console.print(table)
    console.print()


# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------

def _ask_text(message: str) -> str | None:
    """Ask a free-text question; ``None`` on end of input.

    Ctrl+C propagates as ``KeyboardInterrupt`` to the error boundary.
    """
    questionary = _import_questionary()
    try:
        return questionary.text(message).unsafe_ask()
    except EOFError:
        return None


# ---------------------------------------------------------------------------
# Public prompt functions
# ---------------------------------------------------------------------------

def prompt_policy_selection(
    user_name: str,
    attached: PolicyCandidates,
    load_customer_policies: Callable[[], PolicyCandidates],
) -> str:
    """Show attached policies first, then the full list on deferral.

    Parameters
    ----------
    user_name:
        IAM user name, for display.
    attached:
        Policies attached to the user; may be empty.
    load_customer_policies:
        Called at most once, only when the full list is needed.

    Returns
    -------
    str
        The chosen policy name.

    Raises
    ------
    NoPolicyCandidatesError
        If the full customer-managed list turns out empty.
    PolicySelectionError
        If the operator's answer matches nothing.
    """
    if attached:
        console.log(f"Policies attached to user '{user_name}':")
        _display_candidates(attached)
        answer = _ask_text(ATTACHED_PROMPT)
        if not is_deferral(answer):
            return resolve_selection(attached, answer)
        customer = require_candidates(load_customer_policies())
        console.log("Customer-managed policies:")
    else:
        console.log(f"No policies directly attached to user '{user_name}'.")
        console.log("Checking for customer-managed policies in the account...")
        customer = require_candidates(load_customer_policies())
        console.log(f"Found {len(customer)} customer-managed policies:")

    _display_candidates(customer)
    answer = _ask_text(FULL_LIST_PROMPT)
    return resolve_selection(customer, answer)


def confirm_overwrite(path: Path) -> bool:
    """Ask whether *path* may be replaced; anything but "yes" is "no"."""
    questionary = _import_questionary()
    try:
        answer = questionary.confirm(
            "Do you want to overwrite it?",
            default=False,
        ).unsafe_ask()
    except EOFError:
        console.log("EOF detected - cannot prompt for user input.")
        return False
    return answer is True
