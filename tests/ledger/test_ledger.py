"""Tests for ledger.ledger: recording, removal with renumbering, closing and reset."""

from __future__ import annotations

import random

import pytest

from crossweave.ledger.ledger import InteractionLedger
from crossweave.ledger.renumber import is_dense
from crossweave.schemas.config import SketchConfig

_CONFIG = SketchConfig(num_warps=6, num_warp_layers=3, num_weft_systems=4)


def _sequences(ledger: InteractionLedger) -> list[int]:
    return [i.sequence for i in ledger.interactions()]


class TestConstruction:
    def test_one_column_per_warp(self):
        ledger = InteractionLedger(_CONFIG)
        assert len(ledger.warp_columns) == 6
        assert [c.index for c in ledger.warp_columns] == [0, 1, 2, 3, 4, 5]

    def test_cyclic_physical_layers(self):
        assert InteractionLedger(_CONFIG).column_layers == (0, 1, 2, 0, 1, 2)

    def test_starts_empty(self):
        ledger = InteractionLedger(_CONFIG)
        assert len(ledger) == 0
        assert ledger.click_sequence == 0
        assert ledger.interactions() == []
        assert ledger.closed_paths == frozenset()


class TestRecordInteraction:
    def test_assigns_dense_sequences(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(0, True, 0, 0)
        ledger.record_interaction(4, False, 0, 0)
        ledger.record_interaction(4, False, 1, 1)
        assert _sequences(ledger) == [0, 1, 2]
        assert ledger.click_sequence == 3
        assert len(ledger) == 3

    def test_freezes_layer_at_click(self):
        ledger = InteractionLedger(_CONFIG)
        interaction = ledger.record_interaction(4, True, 2, 0)
        assert interaction.physical_layer_at_click == 1
        assert interaction.weft_id == 2
        assert interaction.dot_index == 8

    def test_stored_on_the_clicked_side(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(2, False, 0, 0)
        assert ledger.dot_interactions(2, False)[0].sequence == 0
        assert ledger.dot_interactions(2, True) == []

    def test_invalid_warp_raises(self):
        ledger = InteractionLedger(_CONFIG)
        with pytest.raises(IndexError, match="out of range"):
            ledger.record_interaction(6, True, 0, 0)
        with pytest.raises(IndexError):
            ledger.record_interaction(-1, True, 0, 0)
        assert ledger.click_sequence == 0


class TestRemoveInteraction:
    def test_deleting_middle_renumbers_later_entries(self):
        ledger = InteractionLedger(_CONFIG)
        a = ledger.record_interaction(0, True, 0, 0)
        b = ledger.record_interaction(1, True, 0, 0)
        ledger.record_interaction(2, True, 0, 0)

        assert ledger.remove_interaction(b) == b
        assert _sequences(ledger) == [0, 1]
        assert ledger.dot_interactions(2, True)[0].sequence == 1
        assert ledger.dot_interactions(0, True)[0] == a
        assert ledger.click_sequence == 2

        nxt = ledger.record_interaction(3, False, 0, 0)
        assert nxt.sequence == 2

    def test_removing_unknown_interaction_is_noop(self):
        ledger = InteractionLedger(_CONFIG)
        stale = ledger.record_interaction(0, True, 0, 0)
        ledger.remove_interaction(stale)
        assert ledger.remove_interaction(stale) is None
        assert ledger.click_sequence == 0

    def test_remove_most_recent_on_dot(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(1, True, 0, 0)
        ledger.record_interaction(1, True, 1, 1)
        ledger.record_interaction(3, True, 1, 1)
        removed = ledger.remove_most_recent(1, True)
        assert removed is not None
        assert (removed.weft_id, removed.sequence) == (1, 1)
        assert _sequences(ledger) == [0, 1]

    def test_remove_most_recent_filters_by_weft(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(1, True, 0, 0)
        ledger.record_interaction(1, True, 1, 1)
        removed = ledger.remove_most_recent(1, True, weft_id=0)
        assert removed is not None
        assert removed.weft_id == 0
        assert [i.weft_id for i in ledger.dot_interactions(1, True)] == [1]
        assert ledger.dot_interactions(1, True)[0].sequence == 0

    def test_remove_most_recent_on_empty_dot_is_noop(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(0, True, 0, 0)
        assert ledger.remove_most_recent(0, False) is None
        assert ledger.remove_most_recent(9, True) is None
        assert ledger.remove_most_recent(0, True, weft_id=3) is None
        assert ledger.click_sequence == 1

    def test_density_survives_random_edits(self):
        rng = random.Random(1234)
        ledger = InteractionLedger(_CONFIG)
        for step in range(200):
            if len(ledger) and rng.random() < 0.35:
                victim = rng.choice(ledger.interactions())
                ledger.remove_interaction(victim)
            else:
                ledger.record_interaction(
                    rng.randrange(6), rng.random() < 0.5, rng.randrange(4), step // 10
                )
            assert is_dense(_sequences(ledger))
            assert ledger.click_sequence == len(ledger)


class TestPaths:
    def test_path_queries(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(0, True, 0, 3)
        ledger.record_interaction(5, False, 1, 1)
        ledger.record_interaction(1, True, 0, 3)
        assert ledger.path_ids() == [1, 3]
        assert [i.warp_index for i in ledger.path_interactions(3)] == [0, 1]
        assert ledger.has_path_interaction(0, True, 3)
        assert not ledger.has_path_interaction(0, True, 1)

    def test_close_path_needs_two_dots(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(0, True, 0, 0)
        assert not ledger.close_path(0)
        ledger.record_interaction(1, False, 0, 0)
        assert ledger.close_path(0)
        assert ledger.closed_paths == frozenset({0})

    def test_removal_reopens_short_closed_path(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(0, True, 0, 0)
        last = ledger.record_interaction(1, False, 0, 0)
        ledger.close_path(0)
        ledger.remove_interaction(last)
        assert ledger.closed_paths == frozenset()


class TestResetAll:
    def test_clears_everything(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(0, True, 0, 0)
        ledger.record_interaction(1, True, 0, 0)
        ledger.close_path(0)
        ledger.reset_all()
        assert len(ledger) == 0
        assert ledger.click_sequence == 0
        assert ledger.closed_paths == frozenset()
        assert ledger.column_layers == (0, 1, 2, 0, 1, 2)
        assert ledger.record_interaction(2, True, 0, 1).sequence == 0
