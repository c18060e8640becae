"""Tests for session.session.DrawingSession: event handling, persistence and callbacks."""

from __future__ import annotations

import pytest

from crossweave.compiler.assembly import FunctionResolver
from crossweave.ledger.ledger import InteractionLedger
from crossweave.schemas.config import SketchConfig
from crossweave.schemas.session import DrawingSessionState
from crossweave.session.session import DrawingSession, SessionUpdate

_CONFIG = SketchConfig(num_warps=4, num_warp_layers=2, num_weft_systems=3)


@pytest.fixture
def updates() -> list[SessionUpdate]:
    return []


@pytest.fixture
def session(updates) -> DrawingSession:
    return DrawingSession(_CONFIG, on_update=updates.append)


class TestInitialState:
    def test_blank_draft_without_callback(self, session, updates):
        assert session.draft.cells() == [[0, 0, 0, 0]]
        assert updates == []

    def test_restored_ledger_bumps_path_counter(self):
        ledger = InteractionLedger(_CONFIG)
        ledger.record_interaction(0, True, 0, 3)
        session = DrawingSession(_CONFIG, ledger=ledger, state=DrawingSessionState(next_path_id=1))
        assert session.state.next_path_id == 4


class TestWeftSelect:
    def test_selecting_opens_a_path(self, session, updates):
        session.on_weft_select(1)
        assert session.state.active_weft == 1
        assert session.state.active_path_id == 0
        assert len(updates) == 1

    def test_selecting_again_deselects(self, session):
        session.on_weft_select(1)
        session.on_weft_select(1)
        assert not session.state.drawing

    def test_switching_weft_opens_new_path(self, session):
        session.on_weft_select(0)
        session.on_weft_select(2)
        assert (session.state.active_weft, session.state.active_path_id) == (2, 1)

    def test_invalid_weft_warns_without_update(self, session, updates):
        with pytest.warns(UserWarning, match="weft 3 is not one of the 3"):
            session.on_weft_select(3)
        assert updates == []
        assert not session.state.drawing


class TestDotClick:
    def test_click_without_weft_is_ignored(self, session, updates):
        assert session.on_dot_click(0, True) is None
        assert len(session.ledger) == 0
        assert updates == []

    def test_click_records_and_recompiles(self, session, updates):
        session.on_weft_select(0)
        first = session.on_dot_click(0, True)
        second = session.on_dot_click(2, False)
        assert first is not None and second is not None
        assert (second.sequence, second.path_id, second.weft_id) == (1, 0, 0)
        assert session.draft.cells() == [[0, 0, 1, 0]]
        assert updates[-1].draft == session.draft
        assert len(updates) == 3

    def test_invalid_warp_warns(self, session):
        session.on_weft_select(0)
        with pytest.warns(UserWarning, match="warp 7 ignored"):
            assert session.on_dot_click(7, True) is None

    def test_repeat_click_on_path_dot_is_noop(self, session, updates):
        session.on_weft_select(0)
        session.on_dot_click(1, True)
        session.on_dot_click(2, True)
        count = len(updates)
        assert session.on_dot_click(2, True) is None
        assert len(session.ledger) == 2
        assert len(updates) == count

    def test_first_dot_of_single_dot_path_does_not_close(self, session):
        session.on_weft_select(0)
        session.on_dot_click(1, True)
        assert session.on_dot_click(1, True) is None
        assert session.ledger.closed_paths == frozenset()
        assert session.state.drawing

    def test_clicking_first_dot_closes_path(self, session):
        session.on_weft_select(0)
        session.on_dot_click(0, True)
        session.on_dot_click(3, False)
        assert session.on_dot_click(0, True) is None
        assert session.ledger.closed_paths == frozenset({0})
        assert not session.state.drawing
        assert session.canvas_state()["permanentSplines"] == [
            {"weft": 0, "dots": [0, 7, 0], "closed": True}
        ]

    def test_other_path_may_reuse_a_dot(self, session):
        session.on_weft_select(0)
        session.on_dot_click(1, True)
        session.on_weft_select(1)
        again = session.on_dot_click(1, True)
        assert again is not None
        assert again.path_id == 1
        assert [i.weft_id for i in session.ledger.dot_interactions(1, True)] == [0, 1]

    def test_turn_in_place_produces_two_rows(self, session):
        session.on_weft_select(0)
        for warp, top in ((0, True), (1, True), (1, False), (0, False)):
            session.on_dot_click(warp, top)
        assert session.draft.cells() == [[1, 1, 1, 0], [0, 0, 1, 0]]
        assert session.draft.row_system_mapping == (0, 0)


class TestDeletion:
    def test_delete_most_recent_renumbers(self, session):
        session.on_weft_select(0)
        session.on_dot_click(0, True)
        session.on_dot_click(1, True)
        session.on_dot_click(2, True)
        removed = session.on_delete_most_recent(1, True)
        assert removed is not None and removed.sequence == 1
        nxt = session.on_dot_click(3, True)
        assert nxt is not None and nxt.sequence == 2

    def test_delete_respects_active_weft(self, session):
        session.on_weft_select(0)
        session.on_dot_click(1, True)
        session.on_weft_select(1)
        assert session.on_delete_most_recent(1, True) is None
        assert len(session.ledger) == 1

    def test_delete_on_empty_dot_no_update(self, session, updates):
        assert session.on_delete_most_recent(0, False) is None
        assert updates == []


class TestResetAndDeselect:
    def test_reset_all(self, session, updates):
        session.on_weft_select(0)
        session.on_dot_click(0, True)
        session.on_reset_all()
        assert len(session.ledger) == 0
        assert not session.state.drawing
        assert session.draft.cells() == [[0, 0, 0, 0]]
        session.on_weft_select(0)
        assert session.state.active_path_id == 1

    def test_click_outside(self, session, updates):
        session.on_click_outside()
        assert updates == []
        session.on_weft_select(2)
        session.on_click_outside()
        assert not session.state.drawing
        assert len(updates) == 2


class TestCanvasState:
    def test_keys(self, session):
        session.on_weft_select(0)
        session.on_dot_click(0, True)
        state = session.canvas_state()
        assert state["activeWeft"] == 0
        assert state["activePathId"] == 0
        assert state["nextPathId"] == 1
        assert state["clickSequence"] == 1
        assert state["selectedDots"] == [0]
        assert state["dotFills"][0] == [0]
        assert state["permanentSplines"] == []
        assert len(state["warpData"]) == 4

    def test_snapshot_config(self, session):
        assert session.snapshot().config == {"numWarps": 4, "warpSystems": 2, "weftSystems": 3}

    def test_restore_from_canvas_state(self, session):
        session.on_weft_select(1)
        session.on_dot_click(0, True)
        session.on_dot_click(2, False)
        restored = DrawingSession.from_canvas_state(session.canvas_state(), _CONFIG)
        assert restored.draft == session.draft
        assert restored.state == session.state
        nxt = restored.on_dot_click(3, True)
        assert nxt is not None and (nxt.sequence, nxt.path_id) == (2, 0)

    def test_restore_drops_weft_outside_config(self):
        canvas = {"activeWeft": 9, "activePathId": 0, "nextPathId": 1}
        restored = DrawingSession.from_canvas_state(canvas, _CONFIG)
        assert not restored.state.drawing
        assert restored.state.next_path_id == 1

    def test_resolver_feeds_row_shuttles(self):
        session = DrawingSession(_CONFIG, resolver=FunctionResolver(lambda color, name: 42))
        session.on_weft_select(0)
        session.on_dot_click(0, True)
        assert session.draft.row_shuttle_mapping == (42,)
