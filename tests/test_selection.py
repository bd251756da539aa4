"""Tests for pure selection resolution (core/selection.py)."""

from __future__ import annotations

import pytest

from iam_policy_dl.core.models import PolicyCandidates
from iam_policy_dl.core.selection import is_deferral, require_candidates, resolve_selection
from iam_policy_dl.exceptions import NoPolicyCandidatesError, PolicySelectionError


def _candidates(*names: str) -> PolicyCandidates:
    return PolicyCandidates(names=names, source="attached")


class TestIsDeferral:
    @pytest.mark.parametrize("raw", [None, "", "   ", "\n"])
    def test_blank_is_deferral(self, raw: str | None) -> None:
        assert is_deferral(raw)

    def test_text_is_not_deferral(self) -> None:
        assert not is_deferral("1")


class TestResolveSelection:
    def test_index_one(self) -> None:
        assert resolve_selection(_candidates("lab_policy"), "1") == "lab_policy"

    def test_exact_name(self) -> None:
        assert resolve_selection(_candidates("lab_policy"), "lab_policy") == "lab_policy"

    def test_index_and_name_agree(self) -> None:
        candidates = _candidates("alpha", "beta", "gamma")
        assert resolve_selection(candidates, "1") == resolve_selection(candidates, "alpha")

    def test_last_index(self) -> None:
        assert resolve_selection(_candidates("a", "b", "c"), "3") == "c"

    def test_index_past_end_rejected(self) -> None:
        with pytest.raises(PolicySelectionError, match="Invalid selection"):
            resolve_selection(_candidates("lab_policy"), "9")

    def test_n_plus_one_rejected(self) -> None:
        with pytest.raises(PolicySelectionError):
            resolve_selection(_candidates("a", "b"), "3")

    def test_zero_rejected(self) -> None:
        with pytest.raises(PolicySelectionError):
            resolve_selection(_candidates("a"), "0")

    def test_name_is_case_sensitive(self) -> None:
        with pytest.raises(PolicySelectionError):
            resolve_selection(_candidates("Lab_Policy"), "lab_policy")

    def test_surrounding_whitespace_ignored(self) -> None:
        assert resolve_selection(_candidates("a", "b"), "  2 \n") == "b"

    def test_negative_number_is_treated_as_name(self) -> None:
        with pytest.raises(PolicySelectionError):
            resolve_selection(_candidates("a"), "-1")

    def test_non_ascii_digits_rejected(self) -> None:
        with pytest.raises(PolicySelectionError):
            resolve_selection(_candidates("a"), "¹")

    def test_empty_input_rejected(self) -> None:
        with pytest.raises(PolicySelectionError, match="No selection provided"):
            resolve_selection(_candidates("a"), "")

    def test_no_candidates_is_distinct_error(self) -> None:
        with pytest.raises(NoPolicyCandidatesError):
            resolve_selection(_candidates(), "1")

    def test_hint_names_valid_range(self) -> None:
        with pytest.raises(PolicySelectionError) as exc_info:
            resolve_selection(_candidates("a", "b"), "7")
        assert exc_info.value.hint is not None
        assert "1-2" in exc_info.value.hint


class TestRequireCandidates:
    def test_returns_non_empty(self) -> None:
        candidates = _candidates("a")
        assert require_candidates(candidates) is candidates

    def test_empty_raises_with_source(self) -> None:
        with pytest.raises(NoPolicyCandidatesError, match="customer-managed"):
            require_candidates(PolicyCandidates(names=(), source="customer-managed"))
