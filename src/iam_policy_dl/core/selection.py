"""Pure policy-selection logic.

Every function in this module is a **pure** transformation — no I/O,
no prompting, fully deterministic.  The CLI layer collects the raw
operator input and hands it here for resolution.

Resolution rules (enforced by :func:`resolve_selection`):

1. **Index** — an all-digit input between ``1`` and ``len(candidates)``
   selects that entry.
2. **Name** — otherwise an exact, case-sensitive name match selects it.
3. Anything else is a :class:`PolicySelectionError`.  There is no retry:
   one bad answer ends the run.
"""

from __future__ import annotations

from iam_policy_dl.core.models import PolicyCandidates
from iam_policy_dl.exceptions import NoPolicyCandidatesError, PolicySelectionError


# ---------------------------------------------------------------------------
# Input classification
# ---------------------------------------------------------------------------

def is_deferral(raw_input: str | None) -> bool:
    """Return ``True`` when the operator pressed Enter without a choice."""
    return raw_input is None or not raw_input.strip()


def _parse_index(text: str, count: int) -> int | None:
    """Return a zero-based index for an in-range 1-based number, else ``None``."""
    if not (text.isascii() and text.isdigit()):
        return None
    number = int(text)
    if 1 <= number <= count:
        return number - 1
    return None


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def require_candidates(candidates: PolicyCandidates) -> PolicyCandidates:
    """Return *candidates* unchanged, or raise when the list is empty."""
    if not candidates:
        raise NoPolicyCandidatesError(
            f"No {candidates.source} policies found in this account.",
        )
    return candidates


def resolve_selection(candidates: PolicyCandidates, raw_input: str | None) -> str:
    """Map operator input to exactly one policy name.

    Parameters
    ----------
    candidates:
        The numbered list the operator was shown.
    raw_input:
        What the operator typed.  Surrounding whitespace is ignored.

    Raises
    ------
    NoPolicyCandidatesError
        If *candidates* is empty.
    PolicySelectionError
        If the input is empty, out of range, or matches no name.
    """
    require_candidates(candidates)

    if is_deferral(raw_input):
        raise PolicySelectionError(
            "No selection provided.",
            hint="Enter a number from the list or an exact policy name.",
        )

    text = raw_input.strip()  # type: ignore[union-attr]

    index = _parse_index(text, len(candidates))
    if index is not None:
        return candidates.names[index]

    if text in candidates.names:
        return text

    raise PolicySelectionError(
        "Invalid selection. Enter a valid number or policy name.",
        hint=f"Valid numbers are 1-{len(candidates)}; names are case-sensitive.",
    )
