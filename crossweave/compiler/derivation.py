"""
Cell Derivation: turns each Pass into a full-width binary draft row.

Rules are applied per pass, in order:

  a. Direct: a top click sets its warp to 0 (weft over), a bottom click to 1
     (weft under). These warps are "touched" for the row.
  b. Segment lift: between consecutive clicks A → B, every untouched warp
     strictly in between whose physical layer is below A's layer at click
     (the effective travel warp system) is lifted.
  c. Boundary correction against the previous pass:
       - same-warp turn: the turn warp and its neighbour on the side the weft
         turns away from are lifted in both rows when their layer is below the
         layer of the current pass's first click;
       - cross-warp transition: the previous pass's last warp and every warp
         between it and the current first click are lifted in the current row
         when their layer is below that click's layer.
     Touched cells are left alone.
  d. Scoop: a top click in the previous pass that forms a peak with the
     current pass's first click (a bottom click on the same layer) is lifted
     in the previous row. This revises a touched cell on purpose: the later
     click shows the weft dipped under that warp.

(c) and (d) run per pass boundary in drawing order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from crossweave.compiler.segmentation import Pass
from crossweave.schemas.interaction import Interaction
from crossweave.utilities.layers import direction, strictly_between


@dataclass
class WorkingRow:
    """Mutable row under derivation."""

    weft_id: int
    cells: list[int]
    touched: set[int] = field(default_factory=set)

    def set_direct(self, warp_index: int, value: int) -> None:
        if 0 <= warp_index < len(self.cells):
            self.cells[warp_index] = value
            self.touched.add(warp_index)

    def lift(self, warp_index: int) -> None:
        """Set the cell to 1 unless it was set directly in this row."""
        if 0 <= warp_index < len(self.cells) and warp_index not in self.touched:
            self.cells[warp_index] = 1

    def force_lift(self, warp_index: int) -> None:
        """Set the cell to 1 even if it was touched (scoop correction only)."""
        if 0 <= warp_index < len(self.cells):
            self.cells[warp_index] = 1


@dataclass(frozen=True)
class DerivedRow:
    """Finished row, in pass order."""

    weft_id: int
    cells: tuple[int, ...]
    touched: frozenset[int]


class _Layers:
    """Column layer lookup; columns outside the table never trigger a lift."""

    def __init__(self, column_layers: Sequence[int]) -> None:
        self._layers = tuple(column_layers)

    def below(self, warp_index: int, layer: int) -> bool:
        """True when column *warp_index* sits on a layer lower than *layer*."""
        if not 0 <= warp_index < len(self._layers):
            return False
        return self._layers[warp_index] < layer


# ── Per-pass rules ────────────────────────────────────────────────────────────


def apply_direct(row: WorkingRow, pass_: Pass) -> None:
    """Rule (a)."""
    for interaction in pass_.interactions:
        row.set_direct(interaction.warp_index, 0 if interaction.is_top else 1)


def apply_segment_lift(row: WorkingRow, pass_: Pass, layers: _Layers) -> None:
    """Rule (b)."""
    for a, b in zip(pass_.interactions, pass_.interactions[1:]):
        etws = a.physical_layer_at_click
        for warp in strictly_between(a.warp_index, b.warp_index):
            if layers.below(warp, etws):
                row.lift(warp)


def is_same_warp_turn(prev_last: Interaction, cur_first: Interaction) -> bool:
    return (
        prev_last.warp_index == cur_first.warp_index
        and prev_last.is_top != cur_first.is_top
        and prev_last.weft_id == cur_first.weft_id
        and prev_last.path_id == cur_first.path_id
    )


def _incoming_direction(pass_: Pass) -> int:
    """Direction of travel into the pass's last click, from the last different warp."""
    last = pass_.last
    for interaction in reversed(pass_.interactions[:-1]):
        if interaction.warp_index != last.warp_index:
            return direction(interaction.warp_index, last.warp_index)
    return 0


def apply_boundary(
    prev_row: WorkingRow,
    row: WorkingRow,
    prev_pass: Pass,
    pass_: Pass,
    layers: _Layers,
) -> None:
    """Rule (c)."""
    prev_last = prev_pass.last
    cur_first = pass_.first
    weft_layer = cur_first.physical_layer_at_click

    if is_same_warp_turn(prev_last, cur_first):
        turn_warp = cur_first.warp_index
        candidates = [turn_warp]
        heading = _incoming_direction(prev_pass)
        if heading != 0:
            candidates.append(turn_warp + heading)
        for warp in candidates:
            if layers.below(warp, weft_layer):
                row.lift(warp)
                prev_row.lift(warp)
        return

    if layers.below(prev_last.warp_index, weft_layer):
        row.lift(prev_last.warp_index)
    for warp in strictly_between(prev_last.warp_index, cur_first.warp_index):
        if layers.below(warp, weft_layer):
            row.lift(warp)


def apply_scoop(prev_row: WorkingRow, prev_pass: Pass, cur_first: Interaction) -> None:
    """Rule (d)."""
    if cur_first.is_top:
        return
    for before, at in zip(prev_pass.interactions, prev_pass.interactions[1:]):
        if not at.is_top:
            continue
        inbound = direction(before.warp_index, at.warp_index)
        outbound = direction(at.warp_index, cur_first.warp_index)
        if inbound == 0 or outbound == 0 or inbound == outbound:
            continue
        if (
            at.physical_layer_at_click <= before.physical_layer_at_click
            and at.physical_layer_at_click == cur_first.physical_layer_at_click
        ):
            prev_row.force_lift(at.warp_index)


# ── Entry point ───────────────────────────────────────────────────────────────


def derive_rows(
    passes: Sequence[Pass], column_layers: Sequence[int], num_warps: int
) -> list[DerivedRow]:
    """
    Derive one row per pass.

    Parameters
    ----------
    passes:
        Passes in drawing order, from :func:`segment_passes`.
    column_layers:
        Physical layer of each column.
    num_warps:
        Row width.

    Returns
    -------
    list[DerivedRow]
        Rows in pass (drawing) order; assembly reverses them.
    """
    layers = _Layers(column_layers)
    width = max(num_warps, 1)
    rows: list[WorkingRow] = []

    for index, pass_ in enumerate(passes):
        row = WorkingRow(weft_id=pass_.weft_id, cells=[0] * width)
        apply_direct(row, pass_)
        apply_segment_lift(row, pass_, layers)
        if index > 0:
            prev_pass = passes[index - 1]
            prev_row = rows[index - 1]
            apply_boundary(prev_row, row, prev_pass, pass_, layers)
            apply_scoop(prev_row, prev_pass, pass_.first)
        rows.append(row)

    return [
        DerivedRow(weft_id=r.weft_id, cells=tuple(r.cells), touched=frozenset(r.touched))
        for r in rows
    ]
