"""
Spline and dot-fill projections of the Interaction Ledger.

The drawing surface renders each path as a spline through its dots and rings
each dot with the colours of the wefts that touched it. Both are recomputed
from the Ledger on demand and are never stored as a second source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from crossweave.ledger.ledger import InteractionLedger


@dataclass(frozen=True)
class Spline:
    """
    One drawn path.

    Attributes:
        path_id: The path this spline draws.
        weft_id: Weft (colour) of the path.
        dots: Dot indices in click order; a closed spline repeats its first
            dot at the end.
        closed: True when the path was closed on its first dot.
    """

    path_id: int
    weft_id: int
    dots: tuple[int, ...]
    closed: bool

    def to_dict(self) -> dict[str, Any]:
        return {"weft": self.weft_id, "dots": list(self.dots), "closed": self.closed}


def project_splines(ledger: InteractionLedger) -> list[Spline]:
    """
    Return one Spline per path, ordered by path id.

    Open paths with a single dot have no segment to draw and are omitted.
    """
    splines: list[Spline] = []
    closed_paths = ledger.closed_paths
    for path_id in ledger.path_ids():
        interactions = ledger.path_interactions(path_id)
        dots = [i.dot_index for i in interactions]
        closed = path_id in closed_paths
        if closed:
            dots.append(dots[0])
        elif len(dots) < 2:
            continue
        splines.append(
            Spline(
                path_id=path_id,
                weft_id=interactions[0].weft_id,
                dots=tuple(dots),
                closed=closed,
            )
        )
    return splines


def project_dot_fills(ledger: InteractionLedger) -> list[list[int]]:
    """
    Return, for every dot index, the weft ids that touched it.

    Each list is ordered by first touch and holds each weft once. The result
    has ``2 * num_warps`` entries: top dot then bottom dot for each warp.
    """
    fills: list[list[int]] = [[] for _ in range(2 * len(ledger.warp_columns))]
    for interaction in ledger.interactions():
        dot_fills = fills[interaction.dot_index]
        if interaction.weft_id not in dot_fills:
            dot_fills.append(interaction.weft_id)
    return fills


def selected_dots(ledger: InteractionLedger) -> list[int]:
    """Dot indices with at least one interaction, in first-touch order."""
    seen: list[int] = []
    for interaction in ledger.interactions():
        if interaction.dot_index not in seen:
            seen.append(interaction.dot_index)
    return seen
