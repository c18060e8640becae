"""Tests for checker.checker: structural draft and ledger checks."""

from __future__ import annotations

from crossweave.checker.checker import CheckerError, check_draft, check_ledger
from crossweave.ledger.ledger import InteractionLedger
from crossweave.schemas.config import SketchConfig
from crossweave.schemas.draft import Draft, DraftRow
from crossweave.schemas.interaction import Interaction

_CONFIG = SketchConfig(num_warps=3, num_warp_layers=2, num_weft_systems=2)


def _draft(rows, col=(0, 1, 0), row_sys=None, col_shuttle=(0, 0, 0), row_shuttle=None) -> Draft:
    rows = tuple(DraftRow(weft_id=0, cells=tuple(r)) for r in rows)
    return Draft(
        rows=rows,
        col_system_mapping=col,
        row_system_mapping=row_sys if row_sys is not None else (0,) * len(rows),
        col_shuttle_mapping=col_shuttle,
        row_shuttle_mapping=row_shuttle if row_shuttle is not None else (0,) * len(rows),
    )


class TestCheckerError:
    def test_str(self):
        assert str(CheckerError("row 2", "bad", "draft_shape")) == "row 2: bad"


class TestCheckDraft:
    def test_valid_draft_passes(self):
        result = check_draft(_draft([[0, 1, 0], [1, 1, 1]]), 3)
        assert result.passed
        assert result.errors == ()

    def test_blank_draft_passes(self):
        assert check_draft(Draft.blank(3, 2), 3).passed

    def test_no_rows(self):
        result = check_draft(_draft([]), 3)
        assert not result.passed
        assert result.errors[0].location == "rows"

    def test_wrong_width(self):
        result = check_draft(_draft([[0, 1]]), 3)
        assert not result.passed
        assert result.errors[0].location == "row 0"
        assert "expected 3" in result.errors[0].message

    def test_non_binary_cells(self):
        result = check_draft(_draft([[0, 2, 0]]), 3)
        assert [e.message for e in result.errors] == ["non-binary cell values [2]"]

    def test_mapping_lengths(self):
        result = check_draft(_draft([[0, 0, 0]], col=(0, 1), row_shuttle=(0, 0)), 3)
        locations = {e.location for e in result.errors}
        assert locations == {"colSystemMapping", "rowShuttleMapping"}
        assert all(e.error_type == "draft_shape" for e in result.errors)

    def test_collects_every_problem(self):
        result = check_draft(_draft([[0, 0], [3, 0, 0]]), 3)
        assert len(result.errors) == 2


class TestCheckLedger:
    def test_consistent_ledger(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(0, True, 0, 0)
        ledger.record_interaction(2, False, 1, 1)
        assert check_ledger(ledger).passed

    def test_gap_in_sequences(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.warp_columns[0].top_interactions.append(
            Interaction(
                path_id=0, weft_id=0, sequence=2, warp_index=0, is_top=True, physical_layer_at_click=0
            )
        )
        ledger.click_sequence = 1
        result = check_ledger(ledger)
        assert not result.passed
        assert result.errors[0].error_type == "ledger_state"
        assert "not dense" in result.errors[0].message

    def test_counter_mismatch(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(1, True, 0, 0)
        ledger.click_sequence = 0
        result = check_ledger(ledger)
        assert [e.location for e in result.errors] == ["ledger"]

    def test_layer_out_of_range(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.warp_columns[1].bottom_interactions.append(
            Interaction(
                path_id=0, weft_id=0, sequence=0, warp_index=1, is_top=False, physical_layer_at_click=5
            )
        )
        ledger.click_sequence = 1
        result = check_ledger(ledger)
        assert [e.location for e in result.errors] == ["interaction 0"]
