"""
Interaction Ledger: the authoritative record of every click.

The Ledger owns one WarpColumn per warp. Each column keeps the interactions
recorded on its top and bottom dots. A global click counter hands out dense
``sequence`` values; removals renumber later entries so the sequences stay
``{0, ..., count-1}``.

The Ledger also remembers which paths were closed (the user clicked the
path's first dot again). Splines and dot fills are projections of this state;
see ``crossweave.paths.splines``.

Snapshots use the host's canvas-state shape::

    {
        "warpData": [
            {"warpSys": 0,
             "topWeft": [{"weft": 0, "sequence": 0, "pathId": 0, "warpSysAtClick": 0}],
             "bottomWeft": []},
            ...
        ],
        "clickSequence": 1,
        "closedPaths": [],
    }
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from typing import Any

from crossweave.ledger.compat import synthesize_path_ids
from crossweave.ledger.renumber import compact, compact_after_removal
from crossweave.schemas.config import SketchConfig
from crossweave.schemas.interaction import Interaction, WarpColumn
from crossweave.utilities.layers import physical_layer_for


class InteractionLedger:
    """
    Append/remove-only store of Interactions, keyed by warp column and side.

    No entry is mutated in place; renumbering swaps in replacement records.
    """

    def __init__(self, config: SketchConfig) -> None:
        self.config = config
        self.warp_columns: list[WarpColumn] = [
            WarpColumn(index=i, physical_layer=physical_layer_for(i, config.num_warp_layers))
            for i in range(config.num_warps)
        ]
        self.click_sequence: int = 0
        self._closed_paths: set[int] = set()

    # ── Queries ────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return sum(
            len(c.top_interactions) + len(c.bottom_interactions) for c in self.warp_columns
        )

    @property
    def column_layers(self) -> tuple[int, ...]:
        """Physical layer of each column, in column order."""
        return tuple(c.physical_layer for c in self.warp_columns)

    @property
    def closed_paths(self) -> frozenset[int]:
        return frozenset(self._closed_paths)

    def interactions(self) -> list[Interaction]:
        """All interactions across all columns, sorted by sequence."""
        flat = [i for column in self.warp_columns for i in column.all_interactions()]
        return sorted(flat, key=lambda i: i.sequence)

    def path_interactions(self, path_id: int) -> list[Interaction]:
        """Interactions of one path, in sequence order."""
        return [i for i in self.interactions() if i.path_id == path_id]

    def path_ids(self) -> list[int]:
        """Distinct path ids, ascending."""
        return sorted({i.path_id for i in self.interactions()})

    def dot_interactions(self, warp_index: int, is_top: bool) -> list[Interaction]:
        """Interactions recorded on one dot; empty for an invalid warp index."""
        if not 0 <= warp_index < len(self.warp_columns):
            return []
        return list(self.warp_columns[warp_index].side(is_top))

    def has_path_interaction(self, warp_index: int, is_top: bool, path_id: int) -> bool:
        return any(i.path_id == path_id for i in self.dot_interactions(warp_index, is_top))

    # ── Mutations ──────────────────────────────────────────────────────────────

    def record_interaction(
        self, warp_index: int, is_top: bool, weft_id: int, path_id: int
    ) -> Interaction:
        """
        Append a click with ``sequence = click_sequence`` and advance the counter.

        Raises
        ------
        IndexError
            If *warp_index* is not a column of this Ledger.
        """
        if not 0 <= warp_index < len(self.warp_columns):
            raise IndexError(
                f"warp_index {warp_index} out of range for {len(self.warp_columns)} warps"
            )
        column = self.warp_columns[warp_index]
        interaction = Interaction(
            path_id=path_id,
            weft_id=weft_id,
            sequence=self.click_sequence,
            warp_index=warp_index,
            is_top=is_top,
            physical_layer_at_click=column.physical_layer,
        )
        column.side(is_top).append(interaction)
        self.click_sequence += 1
        return interaction

    def remove_interaction(self, ref: Interaction) -> Interaction | None:
        """
        Remove *ref* and renumber every later interaction down by one.

        Returns the removed interaction, or None (no-op) if *ref* is not in
        the Ledger.
        """
        if not 0 <= ref.warp_index < len(self.warp_columns):
            return None
        side = self.warp_columns[ref.warp_index].side(ref.is_top)
        try:
            side.remove(ref)
        except ValueError:
            return None

        for column in self.warp_columns:
            column.top_interactions[:] = compact_after_removal(
                column.top_interactions, ref.sequence
            )
            column.bottom_interactions[:] = compact_after_removal(
                column.bottom_interactions, ref.sequence
            )
        if self.click_sequence > 0:
            self.click_sequence -= 1

        # A closed path needs at least two dots to stay closed.
        if ref.path_id in self._closed_paths and len(self.path_interactions(ref.path_id)) < 2:
            self._closed_paths.discard(ref.path_id)
        return ref

    def remove_most_recent(
        self, warp_index: int, is_top: bool, weft_id: int | None = None
    ) -> Interaction | None:
        """
        Remove the highest-sequence interaction on one dot.

        When *weft_id* is given only that weft's interactions are considered.
        Returns None (no-op) when nothing matches.
        """
        candidates = [
            i
            for i in self.dot_interactions(warp_index, is_top)
            if weft_id is None or i.weft_id == weft_id
        ]
        if not candidates:
            return None
        return self.remove_interaction(max(candidates, key=lambda i: i.sequence))

    def close_path(self, path_id: int) -> bool:
        """Mark *path_id* closed. Paths with fewer than two dots cannot close."""
        if len(self.path_interactions(path_id)) < 2:
            return False
        self._closed_paths.add(path_id)
        return True

    def reset_all(self) -> None:
        """Clear every column and the closed-path set; restart the counter at 0."""
        for column in self.warp_columns:
            column.clear()
        self._closed_paths.clear()
        self.click_sequence = 0

    # ── Snapshots ──────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Return the host canvas-state fields owned by the Ledger."""
        return {
            "warpData": [
                {
                    "warpSys": column.physical_layer,
                    "topWeft": [_interaction_to_dict(i) for i in column.top_interactions],
                    "bottomWeft": [_interaction_to_dict(i) for i in column.bottom_interactions],
                }
                for column in self.warp_columns
            ],
            "clickSequence": self.click_sequence,
            "closedPaths": sorted(self._closed_paths),
        }

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any] | None, config: SketchConfig
    ) -> InteractionLedger:
        """
        Rebuild a Ledger from a host snapshot without raising.

        Malformed entries and entries on columns beyond ``config.num_warps``
        are skipped with a UserWarning. Entries without a ``pathId`` get one
        from the compatibility shim. Sequences are compacted afterwards, so
        the density invariant holds even for corrupt snapshots.
        """
        ledger = cls(config)
        if not data:
            return ledger

        warp_data = data.get("warpData")
        if not isinstance(warp_data, list):
            warp_data = []

        # (column, is_top, weft, sequence, path_id or None, layer_at_click)
        parsed: list[tuple[int, bool, int, int, int | None, int]] = []
        skipped = 0
        for warp_index, entry in enumerate(warp_data):
            if not isinstance(entry, Mapping):
                skipped += 1
                continue
            if warp_index >= config.num_warps:
                skipped += sum(
                    len(entry.get(k) or []) for k in ("topWeft", "bottomWeft")
                    if isinstance(entry.get(k), list)
                )
                continue
            column = ledger.warp_columns[warp_index]
            stored_layer = entry.get("warpSys")
            if _is_index(stored_layer) and stored_layer < config.num_warp_layers:
                column.physical_layer = stored_layer
            for key, is_top in (("topWeft", True), ("bottomWeft", False)):
                records = entry.get(key)
                if not isinstance(records, list):
                    continue
                for record in records:
                    item = _parse_record(record, column.physical_layer)
                    if item is None:
                        skipped += 1
                        continue
                    weft, sequence, path_id, layer = item
                    parsed.append((warp_index, is_top, weft, sequence, path_id, layer))

        if skipped:
            warnings.warn(
                f"skipped {skipped} malformed or out-of-range ledger entries while loading",
                UserWarning,
                stacklevel=2,
            )

        # Older snapshots carry no pathId; rebuild paths from same-weft runs.
        legacy = [n for n, p in enumerate(parsed) if p[4] is None]
        if legacy:
            known = [p[4] for p in parsed if p[4] is not None]
            first = max(known) + 1 if known else 0
            synthetic = synthesize_path_ids([(parsed[n][3], parsed[n][2]) for n in legacy], first)
            for n, path_id in zip(legacy, synthetic):
                w, top, weft, seq, _, layer = parsed[n]
                parsed[n] = (w, top, weft, seq, path_id, layer)

        interactions = compact(
            Interaction(
                path_id=path_id if path_id is not None else 0,
                weft_id=weft,
                sequence=seq,
                warp_index=w,
                is_top=top,
                physical_layer_at_click=layer,
            )
            for w, top, weft, seq, path_id, layer in parsed
        )
        for interaction in interactions:
            ledger.warp_columns[interaction.warp_index].side(interaction.is_top).append(
                interaction
            )
        for column in ledger.warp_columns:
            column.top_interactions.sort(key=lambda i: i.sequence)
            column.bottom_interactions.sort(key=lambda i: i.sequence)
        ledger.click_sequence = len(interactions)

        closed = data.get("closedPaths")
        if isinstance(closed, list):
            for path_id in closed:
                if _is_index(path_id):
                    ledger.close_path(path_id)
        return ledger


# ── Record helpers ────────────────────────────────────────────────────────────


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _interaction_to_dict(interaction: Interaction) -> dict[str, int]:
    return {
        "weft": interaction.weft_id,
        "sequence": interaction.sequence,
        "pathId": interaction.path_id,
        "warpSysAtClick": interaction.physical_layer_at_click,
    }


def _parse_record(record: Any, column_layer: int) -> tuple[int, int, int | None, int] | None:
    """Return ``(weft, sequence, path_id, layer_at_click)`` or None if malformed."""
    if not isinstance(record, Mapping):
        return None
    weft = record.get("weft")
    sequence = record.get("sequence")
    if not _is_index(weft) or not _is_index(sequence):
        return None
    path_id = record.get("pathId")
    if not _is_index(path_id):
        path_id = None
    layer = record.get("warpSysAtClick")
    if not _is_index(layer):
        layer = column_layer
    return weft, sequence, path_id, layer
