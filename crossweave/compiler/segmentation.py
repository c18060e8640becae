"""
Pass Segmentation: groups ordered interactions into weft passes.

A pass models one physical traversal of a weft across the warp and becomes
one draft row. Interactions are ordered by ``(path_id, sequence)`` and walked
once. A new pass starts when:

  - the path id changes;
  - the weft turns in place: the previous and current clicks are on the same
    warp, same weft and path, opposite dots, with consecutive sequences;
  - the weft turns by direction reversal: the step from the most recent
    different warp in the current pass runs against the pass's established
    trend. Same-warp repeats leave the trend unchanged.

Each new pass starts with no trend.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from crossweave.schemas.interaction import Interaction
from crossweave.utilities.layers import direction


class Trend(str, Enum):
    """Warp-index trend of the interactions in a pass so far."""

    NONE = "NONE"
    INCREASING = "INCREASING"
    DECREASING = "DECREASING"
    STATIONARY = "STATIONARY"

    @classmethod
    def of_step(cls, step: int) -> Trend:
        if step > 0:
            return cls.INCREASING
        if step < 0:
            return cls.DECREASING
        return cls.STATIONARY


@dataclass(frozen=True)
class Pass:
    """
    One weft traversal.

    Attributes:
        interactions: Ordered, non-empty run of the sorted interaction list.
    """

    interactions: tuple[Interaction, ...]

    def __post_init__(self) -> None:
        if not self.interactions:
            raise ValueError("a Pass must contain at least one interaction")

    @property
    def first(self) -> Interaction:
        return self.interactions[0]

    @property
    def last(self) -> Interaction:
        return self.interactions[-1]

    @property
    def weft_id(self) -> int:
        return self.first.weft_id

    @property
    def path_id(self) -> int:
        return self.first.path_id

    @property
    def travel_layer(self) -> int:
        """The effective travel layer: the first interaction's layer at click time."""
        return self.first.physical_layer_at_click


def is_turn_in_place(prev: Interaction, cur: Interaction) -> bool:
    """True when *cur* flips to the opposite dot of *prev*'s warp on the very next click."""
    return (
        prev.warp_index == cur.warp_index
        and prev.is_top != cur.is_top
        and prev.weft_id == cur.weft_id
        and prev.path_id == cur.path_id
        and cur.sequence == prev.sequence + 1
    )


def order_interactions(interactions: Iterable[Interaction]) -> list[Interaction]:
    """Sort by ``(path_id, sequence)``."""
    return sorted(interactions, key=lambda i: (i.path_id, i.sequence))


def segment_passes(interactions: Iterable[Interaction]) -> list[Pass]:
    """
    Split the interactions into passes.

    Parameters
    ----------
    interactions:
        Any iterable of interactions; ordering is established here.

    Returns
    -------
    list[Pass]
        Passes in drawing order. Empty when there are no interactions.
    """
    passes: list[Pass] = []
    current: list[Interaction] = []
    trend = Trend.NONE

    for cur in order_interactions(interactions):
        if not current:
            current.append(cur)
            continue

        prev = current[-1]
        step = direction(prev.warp_index, cur.warp_index)
        reverses = (
            step != 0
            and trend in (Trend.INCREASING, Trend.DECREASING)
            and Trend.of_step(step) != trend
        )

        if cur.path_id != prev.path_id or is_turn_in_place(prev, cur) or reverses:
            passes.append(Pass(interactions=tuple(current)))
            current = [cur]
            trend = Trend.NONE
            continue

        current.append(cur)
        if step != 0:
            trend = Trend.of_step(step)
        elif trend == Trend.NONE:
            trend = Trend.STATIONARY

    if current:
        passes.append(Pass(interactions=tuple(current)))
    return passes
