"""Tests for stage gating."""

import pytest

from normalizer import normalize_result
from stage_gate import (
    is_selectable,
    reconcile_selection,
    resolve_stage,
    select_stage,
    selectable_stages,
    stage_controls,
)


@pytest.fixture
def clean_result(flat_clean_payload) -> dict:
    return normalize_result(flat_clean_payload)


@pytest.fixture
def lexical_error_result(flat_lexical_error_payload) -> dict:
    return normalize_result(flat_lexical_error_payload)


@pytest.fixture
def syntactic_error_result(flat_syntactic_error_payload) -> dict:
    return normalize_result(flat_syntactic_error_payload)


class TestResolveStage:
    """Tests for stage name resolution."""

    def test_full_names(self) -> None:
        assert resolve_stage("lexical") == "lexical"
        assert resolve_stage(" Semantic ") == "semantic"

    def test_legacy_step_ids(self) -> None:
        assert resolve_stage("lex") == "lexical"
        assert resolve_stage("syn") == "syntactic"
        assert resolve_stage("sem") == "semantic"

    def test_unknown(self) -> None:
        assert resolve_stage("optimization") is None
        assert resolve_stage(None) is None
        assert resolve_stage(2) is None


class TestSelectableStages:
    """Tests for the gating rule."""

    def test_no_result(self) -> None:
        assert selectable_stages(None) == []
        assert not is_selectable(None, "lexical")

    def test_clean_result_unlocks_everything(self, clean_result) -> None:
        assert selectable_stages(clean_result) == ["lexical", "syntactic", "semantic"]

    def test_lexical_errors_lock_later_stages(self, lexical_error_result) -> None:
        assert selectable_stages(lexical_error_result) == ["lexical"]
        assert not is_selectable(lexical_error_result, "syntactic")
        assert not is_selectable(lexical_error_result, "semantic")

    def test_syntactic_errors_lock_semantic(self, syntactic_error_result) -> None:
        assert selectable_stages(syntactic_error_result) == ["lexical", "syntactic"]

    def test_semantic_errors_lock_nothing(self, flat_clean_payload) -> None:
        flat_clean_payload["sem_errors"] = [{"line": 3, "message": "variable no declarada"}]
        result = normalize_result(flat_clean_payload)
        assert selectable_stages(result) == ["lexical", "syntactic", "semantic"]


class TestSelectStage:
    """Tests for selection and forced resets."""

    def test_allowed_selection(self, clean_result) -> None:
        assert select_stage(clean_result, "lexical", "semantic") == "semantic"

    def test_alias_selection(self, clean_result) -> None:
        assert select_stage(clean_result, "lexical", "syn") == "syntactic"

    def test_rejected_selection_is_noop(self, lexical_error_result) -> None:
        assert select_stage(lexical_error_result, "lexical", "syntactic") == "lexical"
        assert select_stage(lexical_error_result, "lexical", "bogus") == "lexical"

    def test_no_result_clears_selection(self) -> None:
        assert select_stage(None, "semantic", "lexical") is None

    @pytest.mark.parametrize("previous", ["syntactic", "semantic"])
    def test_new_result_with_lexical_errors_resets(self, lexical_error_result, previous) -> None:
        assert reconcile_selection(lexical_error_result, previous) == "lexical"

    def test_reconcile_keeps_valid_selection(self, syntactic_error_result) -> None:
        assert reconcile_selection(syntactic_error_result, "syntactic") == "syntactic"
        assert reconcile_selection(syntactic_error_result, "semantic") == "lexical"

    def test_reconcile_without_selection(self, clean_result) -> None:
        assert reconcile_selection(clean_result, None) is None
        assert reconcile_selection(None, "lexical") is None


class TestStageControls:
    """Tests for the selector button model."""

    def test_all_disabled_without_result(self) -> None:
        controls = stage_controls(None, "semantic")
        assert [c["stage"] for c in controls] == ["lexical", "syntactic", "semantic"]
        assert not any(c["enabled"] for c in controls)
        assert not any(c["active"] for c in controls)

    def test_enabled_and_active_flags(self, lexical_error_result) -> None:
        controls = {c["stage"]: c for c in stage_controls(lexical_error_result, "semantic")}
        assert controls["lexical"]["enabled"] and controls["lexical"]["active"]
        assert not controls["syntactic"]["enabled"]
        assert not controls["semantic"]["enabled"]
        assert controls["syntactic"]["id"] == "btn-syn"
        assert controls["semantic"]["label"] == "Análisis Semántico"
