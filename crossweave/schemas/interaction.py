"""
Interaction schema: one recorded click on a warp column's top or bottom dot.

Interaction is the unit of exchange between the Ledger, Pass Segmentation and
Cell Derivation. WarpColumn owns the interactions recorded on its two dots.

Key types:
  Interaction  frozen click record; only ``sequence`` is ever rewritten,
               by replacing the record during renumbering
  WarpColumn   one physical warp thread with its top/bottom interaction lists
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Interaction:
    """
    A single click on a warp dot.

    Attributes:
        path_id: Identity of the continuous drawing path the click belongs to.
        weft_id: Weft system (colour) of the path.
        sequence: Global click order; dense over the whole Ledger, starts at 0.
        warp_index: Column of the clicked dot.
        is_top: True for the top dot (weft passes over), False for the bottom.
        physical_layer_at_click: The column's physical layer, frozen at click time.
    """

    path_id: int
    weft_id: int
    sequence: int
    warp_index: int
    is_top: bool
    physical_layer_at_click: int

    def __post_init__(self) -> None:
        if self.sequence < 0:
            raise ValueError(f"sequence must be >= 0, got {self.sequence}")
        if self.warp_index < 0:
            raise ValueError(f"warp_index must be >= 0, got {self.warp_index}")
        if self.weft_id < 0:
            raise ValueError(f"weft_id must be >= 0, got {self.weft_id}")

    @property
    def dot_index(self) -> int:
        """Canvas dot index: ``warp * 2`` for the top dot, ``warp * 2 + 1`` for the bottom."""
        return dot_index(self.warp_index, self.is_top)


def dot_index(warp_index: int, is_top: bool) -> int:
    """Return the canvas dot index of the top or bottom dot of *warp_index*."""
    return warp_index * 2 + (0 if is_top else 1)


def dot_position(dot: int) -> tuple[int, bool]:
    """Inverse of :func:`dot_index`: return ``(warp_index, is_top)``."""
    return dot // 2, dot % 2 == 0


@dataclass
class WarpColumn:
    """
    One physical warp thread.

    Attributes:
        index: Column index, ``0..num_warps-1``.
        physical_layer: Layer this column belongs to, fixed at configuration time.
        top_interactions: Clicks on the top dot, in recording order.
        bottom_interactions: Clicks on the bottom dot, in recording order.
    """

    index: int
    physical_layer: int
    top_interactions: list[Interaction] = field(default_factory=list)
    bottom_interactions: list[Interaction] = field(default_factory=list)

    def side(self, is_top: bool) -> list[Interaction]:
        """Return the interaction list for the top or bottom dot."""
        return self.top_interactions if is_top else self.bottom_interactions

    def all_interactions(self) -> list[Interaction]:
        return [*self.top_interactions, *self.bottom_interactions]

    def clear(self) -> None:
        self.top_interactions.clear()
        self.bottom_interactions.clear()
