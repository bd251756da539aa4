"""Tests for the interactive selection UI (cli/selection_prompt.py).

questionary is replaced by a MagicMock at the import seam; Rich renders
to the captured stderr.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from iam_policy_dl.cli.selection_prompt import (
    ATTACHED_PROMPT,
    FULL_LIST_PROMPT,
    confirm_overwrite,
    prompt_policy_selection,
)
from iam_policy_dl.core.models import PolicyCandidates
from iam_policy_dl.exceptions import NoPolicyCandidatesError, PolicySelectionError

_IMPORT_Q = "iam_policy_dl.cli.selection_prompt._import_questionary"

ATTACHED = PolicyCandidates(names=("lab_policy",), source="attached")
NONE_ATTACHED = PolicyCandidates(names=(), source="attached")
CUSTOMER = PolicyCandidates(names=("lab_policy", "audit_policy"), source="customer-managed")
NO_CUSTOMER = PolicyCandidates(names=(), source="customer-managed")


def _questionary(*answers: object) -> MagicMock:
    """Fake questionary whose ``text().unsafe_ask()`` yields *answers*."""
    fake = MagicMock()
    fake.text.return_value.unsafe_ask.side_effect = list(answers)
    return fake


class _Loader:
    def __init__(self, result: PolicyCandidates) -> None:
        self.result = result
        self.calls = 0

    def __call__(self) -> PolicyCandidates:
        self.calls += 1
        return self.result


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class TestPromptPolicySelection:
    def test_pick_attached_by_number(self) -> None:
        fake = _questionary("1")
        loader = _Loader(CUSTOMER)
        with patch(_IMPORT_Q, return_value=fake):
            assert prompt_policy_selection("alice", ATTACHED, loader) == "lab_policy"
        assert loader.calls == 0
        fake.text.assert_called_once_with(ATTACHED_PROMPT)

    def test_pick_attached_by_name(self) -> None:
        with patch(_IMPORT_Q, return_value=_questionary("lab_policy")):
            assert prompt_policy_selection("alice", ATTACHED, _Loader(CUSTOMER)) == "lab_policy"

    def test_invalid_attached_choice_fails_fast(self) -> None:
        fake = _questionary("9")
        with patch(_IMPORT_Q, return_value=fake), pytest.raises(PolicySelectionError):
            prompt_policy_selection("alice", ATTACHED, _Loader(CUSTOMER))
        assert fake.text.call_count == 1

    def test_blank_defers_to_full_list(self) -> None:
        fake = _questionary("", "2")
        loader = _Loader(CUSTOMER)
        with patch(_IMPORT_Q, return_value=fake):
            assert prompt_policy_selection("alice", ATTACHED, loader) == "audit_policy"
        assert loader.calls == 1
        assert fake.text.call_args_list[-1].args == (FULL_LIST_PROMPT,)

    def test_eof_on_first_prompt_defers(self) -> None:
        fake = _questionary(EOFError(), "audit_policy")
        with patch(_IMPORT_Q, return_value=fake):
            assert prompt_policy_selection("alice", ATTACHED, _Loader(CUSTOMER)) == "audit_policy"

    def test_no_attached_goes_straight_to_full_list(
        self, capsys: pytest.CaptureFixture[str],
    ) -> None:
        fake = _questionary("1")
        with patch(_IMPORT_Q, return_value=fake):
            assert prompt_policy_selection("alice", NONE_ATTACHED, _Loader(CUSTOMER)) == "lab_policy"
        err = capsys.readouterr().err
        assert "No policies directly attached to user 'alice'." in err
        assert "Found 2 customer-managed policies" in err
        fake.text.assert_called_once_with(FULL_LIST_PROMPT)

    def test_empty_full_list_raises_before_prompt(self) -> None:
        fake = _questionary()
        with patch(_IMPORT_Q, return_value=fake), pytest.raises(NoPolicyCandidatesError):
            prompt_policy_selection("alice", NONE_ATTACHED, _Loader(NO_CUSTOMER))
        fake.text.assert_not_called()

    def test_empty_full_list_after_deferral(self) -> None:
        with patch(_IMPORT_Q, return_value=_questionary("")), pytest.raises(NoPolicyCandidatesError):
            prompt_policy_selection("alice", ATTACHED, _Loader(NO_CUSTOMER))

    def test_blank_on_full_list_rejected(self) -> None:
        with patch(_IMPORT_Q, return_value=_questionary("", "")), pytest.raises(
            PolicySelectionError, match="No selection provided",
        ):
            prompt_policy_selection("alice", ATTACHED, _Loader(CUSTOMER))

    def test_ctrl_c_propagates(self) -> None:
        with patch(_IMPORT_Q, return_value=_questionary(KeyboardInterrupt())), pytest.raises(
            KeyboardInterrupt,
        ):
            prompt_policy_selection("alice", ATTACHED, _Loader(CUSTOMER))

    def test_candidates_rendered_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch(_IMPORT_Q, return_value=_questionary("1")):
            prompt_policy_selection("alice", ATTACHED, _Loader(CUSTOMER))
        captured = capsys.readouterr()
        assert "lab_policy" in captured.err
        assert "lab_policy" not in captured.out


# ---------------------------------------------------------------------------
# Overwrite confirmation
# ---------------------------------------------------------------------------

class TestConfirmOverwrite:
    def _fake(self, answer: object) -> MagicMock:
        fake = MagicMock()
        fake.confirm.return_value.unsafe_ask.side_effect = [answer]
        return fake

    def test_yes(self) -> None:
        with patch(_IMPORT_Q, return_value=self._fake(True)):
            assert confirm_overwrite(Path("p.json")) is True

    def test_no(self) -> None:
        with patch(_IMPORT_Q, return_value=self._fake(False)):
            assert confirm_overwrite(Path("p.json")) is False

    def test_default_is_no(self) -> None:
        fake = self._fake(False)
        with patch(_IMPORT_Q, return_value=fake):
            confirm_overwrite(Path("p.json"))
        assert fake.confirm.call_args.kwargs["default"] is False

    def test_eof_declines(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch(_IMPORT_Q, return_value=self._fake(EOFError())):
            assert confirm_overwrite(Path("p.json")) is False
        assert "EOF detected" in capsys.readouterr().err

    def test_none_answer_declines(self) -> None:
        with patch(_IMPORT_Q, return_value=self._fake(None)):
            assert confirm_overwrite(Path("p.json")) is False
