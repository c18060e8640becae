"""
Sequence renumbering for the Interaction Ledger.

The Ledger's global ``sequence`` values must stay dense: across all
interactions they are exactly ``{0, 1, ..., count-1}``. Removing an entry
shifts every later entry down by one. Interactions are frozen, so renumbering
returns replacement records instead of mutating in place.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from crossweave.schemas.interaction import Interaction


def shift_after_removal(interaction: Interaction, removed_sequence: int) -> Interaction:
    """Return *interaction* with its sequence decremented if it followed the removed one."""
    if interaction.sequence > removed_sequence:
        return replace(interaction, sequence=interaction.sequence - 1)
    return interaction


def compact_after_removal(
    interactions: Iterable[Interaction], removed_sequence: int
) -> list[Interaction]:
    """Apply :func:`shift_after_removal` to every interaction, preserving order."""
    return [shift_after_removal(i, removed_sequence) for i in interactions]


def compact(interactions: Iterable[Interaction]) -> list[Interaction]:
    """
    Reassign sequences ``0..n-1`` in existing sequence order.

    Ties (duplicate sequences from corrupt persisted state) keep their input
    order. Used when loading snapshots, not during normal editing.
    """
    ordered = sorted(enumerate(interactions), key=lambda pair: (pair[1].sequence, pair[0]))
    return [replace(interaction, sequence=n) for n, (_, interaction) in enumerate(ordered)]


def is_dense(sequences: Iterable[int]) -> bool:
    """True when *sequences* is exactly ``{0, ..., n-1}`` with no duplicates."""
    values = sorted(sequences)
    return values == list(range(len(values)))
