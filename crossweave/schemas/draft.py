"""
Draft schema: the compiled weaving draft handed to the host.

Rows are ordered most recent pass first (the topmost draft row is the last
pass drawn). Cells are 0 (warp down / white) or 1 (warp up / black).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from crossweave.utilities.layers import cyclic_layer_mapping


@dataclass(frozen=True)
class DraftRow:
    """One draft row: the weft that weaves it and its lift states."""

    weft_id: int
    cells: tuple[int, ...]

    def __post_init__(self) -> None:
        # Accept lists at construction sites and promote to tuple.
        if isinstance(self.cells, list):
            object.__setattr__(self, "cells", tuple(self.cells))


@dataclass(frozen=True)
class Draft:
    """
    Rectangular binary draft plus system and shuttle mappings.

    Attributes:
        rows: Draft rows, most recent pass first.
        col_system_mapping: Physical warp layer of each column.
        row_system_mapping: Weft id of each row (parallel to ``rows``).
        col_shuttle_mapping: Material id of each column.
        row_shuttle_mapping: Material id of each row (parallel to ``rows``).
    """

    rows: tuple[DraftRow, ...]
    col_system_mapping: tuple[int, ...]
    row_system_mapping: tuple[int, ...]
    col_shuttle_mapping: tuple[int, ...]
    row_shuttle_mapping: tuple[int, ...]

    @property
    def width(self) -> int:
        return len(self.col_system_mapping)

    @property
    def height(self) -> int:
        return len(self.rows)

    def cells(self) -> list[list[int]]:
        """Return the drawdown as nested lists, topmost row first."""
        return [list(row.cells) for row in self.rows]

    @classmethod
    def blank(cls, num_warps: int, num_warp_layers: int) -> Draft:
        """
        Return a single all-zero row of width ``num_warps`` (1 if ``num_warps <= 0``)
        with a cyclic column-system mapping.
        """
        width = num_warps if num_warps > 0 else 1
        return cls(
            rows=(DraftRow(weft_id=0, cells=(0,) * width),),
            col_system_mapping=cyclic_layer_mapping(width, num_warp_layers),
            row_system_mapping=(0,),
            col_shuttle_mapping=(0,) * width,
            row_shuttle_mapping=(0,),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the host's JSON shape for a draft."""
        return {
            "rows": [{"weftId": row.weft_id, "cells": list(row.cells)} for row in self.rows],
            "colSystemMapping": list(self.col_system_mapping),
            "rowSystemMapping": list(self.row_system_mapping),
            "colShuttleMapping": list(self.col_shuttle_mapping),
            "rowShuttleMapping": list(self.row_shuttle_mapping),
        }
