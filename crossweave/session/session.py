"""
DrawingSession: headless event handling for the cross-section canvas.

The drawing surface forwards discrete events; the session turns them into
Ledger mutations, recompiles the whole Ledger and hands the host a
SessionUpdate carrying the persisted canvas state and the new Draft.

Event semantics:

  on_weft_select(w)        select weft w and open a fresh path; selecting the
                           active weft again deselects it and ends the path
  on_dot_click(warp, top)  record a click for the active path; clicking the
                           path's first dot again (two or more dots drawn)
                           closes the path and deselects the weft
  on_delete_most_recent    remove the newest interaction on a dot
  on_reset_all             clear the Ledger and the drawing state
  on_click_outside         deselect the active weft

Events that change nothing (no weft selected, invalid indices, repeat clicks)
do not recompile and do not call the update callback.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from crossweave.compiler.assembly import MaterialResolver
from crossweave.compiler.pipeline import DraftCompiler
from crossweave.ledger.ledger import InteractionLedger
from crossweave.paths.splines import project_dot_fills, project_splines, selected_dots
from crossweave.schemas.config import SketchConfig
from crossweave.schemas.draft import Draft
from crossweave.schemas.interaction import Interaction
from crossweave.schemas.session import DrawingSessionState


@dataclass(frozen=True)
class SessionUpdate:
    """Payload passed to the host after every mutating event.

    Attributes:
        canvas_state: JSON-ready canvas state (Ledger snapshot, drawing state,
            spline and dot-fill projections) for the host to persist.
        config: The host's camelCase config mapping.
        draft: The freshly compiled Draft.
    """

    canvas_state: dict[str, Any]
    config: dict[str, int]
    draft: Draft


class DrawingSession:
    """
    One logical drawing session over a single Ledger.

    Single-threaded: each event runs one Ledger mutation and one full
    recompilation before returning.
    """

    def __init__(
        self,
        config: SketchConfig,
        resolver: MaterialResolver | None = None,
        on_update: Callable[[SessionUpdate], None] | None = None,
        ledger: InteractionLedger | None = None,
        state: DrawingSessionState | None = None,
    ) -> None:
        self.config = config
        self.ledger = ledger if ledger is not None else InteractionLedger(config)
        self.state = state if state is not None else DrawingSessionState()
        self._compiler = DraftCompiler(resolver)
        self._on_update = on_update

        # Restored sessions must not reuse an existing path id.
        existing = self.ledger.path_ids()
        if existing and self.state.next_path_id <= existing[-1]:
            self.state = DrawingSessionState(
                active_weft=self.state.active_weft,
                active_path_id=self.state.active_path_id,
                next_path_id=existing[-1] + 1,
            )
        self.draft: Draft = self._compiler.compile(self.ledger).draft

    @classmethod
    def from_canvas_state(
        cls,
        canvas_state: Mapping[str, Any] | None,
        config: SketchConfig,
        resolver: MaterialResolver | None = None,
        on_update: Callable[[SessionUpdate], None] | None = None,
    ) -> DrawingSession:
        """Restore a session from a persisted canvas state (never raises)."""
        ledger = InteractionLedger.from_dict(canvas_state, config)
        state = DrawingSessionState.from_dict(canvas_state)
        if state.active_weft is not None and state.active_weft >= config.num_weft_systems:
            state = state.end_path()
        return cls(config, resolver=resolver, on_update=on_update, ledger=ledger, state=state)

    # ── Events ─────────────────────────────────────────────────────────────────

    def on_weft_select(self, weft_id: int) -> None:
        """Toggle weft selection; selecting a new weft starts a new path."""
        if not 0 <= weft_id < self.config.num_weft_systems:
            warnings.warn(
                f"weft {weft_id} is not one of the {self.config.num_weft_systems} weft systems",
                UserWarning,
                stacklevel=2,
            )
            return
        if self.state.active_weft == weft_id:
            self.state = self.state.end_path()
        else:
            self.state = self.state.start_path(weft_id)
        self._commit()

    def on_dot_click(self, warp_index: int, is_top: bool) -> Interaction | None:
        """Record a click on a dot for the active path.

        Returns the recorded Interaction, or None when nothing was recorded
        (no active weft, invalid warp, repeat click, or a closing click).
        """
        if not self.state.drawing:
            return None
        if not 0 <= warp_index < len(self.ledger.warp_columns):
            warnings.warn(
                f"click on warp {warp_index} ignored: sketch has "
                f"{len(self.ledger.warp_columns)} warps",
                UserWarning,
                stacklevel=2,
            )
            return None

        path_id = self.state.active_path_id
        weft_id = self.state.active_weft
        assert path_id is not None and weft_id is not None

        if self.ledger.has_path_interaction(warp_index, is_top, path_id):
            path = self.ledger.path_interactions(path_id)
            first = path[0]
            if (first.warp_index, first.is_top) == (warp_index, is_top) and len(path) >= 2:
                self.ledger.close_path(path_id)
                self.state = self.state.end_path()
                self._commit()
            return None

        interaction = self.ledger.record_interaction(warp_index, is_top, weft_id, path_id)
        self._commit()
        return interaction

    def on_delete_most_recent(self, warp_index: int, is_top: bool) -> Interaction | None:
        """Remove the newest interaction on a dot (of the active weft, if one is selected)."""
        removed = self.ledger.remove_most_recent(warp_index, is_top, self.state.active_weft)
        if removed is not None:
            self._commit()
        return removed

    def on_reset_all(self) -> None:
        """Clear the Ledger and deselect any weft. Path ids keep counting up."""
        self.ledger.reset_all()
        self.state = self.state.end_path()
        self._commit()

    def on_click_outside(self) -> None:
        """Deselect the active weft, ending the current path."""
        if self.state.drawing:
            self.state = self.state.end_path()
            self._commit()

    # ── State ──────────────────────────────────────────────────────────────────

    def canvas_state(self) -> dict[str, Any]:
        """Return the JSON-ready canvas state for persistence."""
        return {
            **self.state.to_dict(),
            **self.ledger.to_dict(),
            "permanentSplines": [s.to_dict() for s in project_splines(self.ledger)],
            "dotFills": project_dot_fills(self.ledger),
            "selectedDots": selected_dots(self.ledger),
        }

    def snapshot(self) -> SessionUpdate:
        return SessionUpdate(
            canvas_state=self.canvas_state(),
            config=self.config.to_dict(),
            draft=self.draft,
        )

    def _commit(self) -> None:
        self.draft = self._compiler.compile(self.ledger).draft
        if self._on_update is not None:
            self._on_update(self.snapshot())
