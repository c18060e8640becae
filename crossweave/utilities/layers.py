"""
Warp layer arithmetic shared by the Ledger, the compiler and the profile draft.

A warp column's physical layer is fixed when the sketch is configured: column
``i`` belongs to layer ``i mod num_warp_layers``. All functions are pure.
"""

from __future__ import annotations


def physical_layer_for(warp_index: int, num_warp_layers: int) -> int:
    """Return the physical layer of column *warp_index*.

    A non-positive layer count is treated as a single layer.
    """
    return warp_index % max(num_warp_layers, 1)


def cyclic_layer_mapping(width: int, num_warp_layers: int) -> tuple[int, ...]:
    """Return ``(0, 1, ..., L-1, 0, 1, ...)`` cycled to *width* entries."""
    return tuple(physical_layer_for(i, num_warp_layers) for i in range(max(width, 0)))


def direction(from_index: int, to_index: int) -> int:
    """Return the sign of the step ``from_index → to_index`` (-1, 0 or 1)."""
    return (to_index > from_index) - (to_index < from_index)


def strictly_between(a: int, b: int) -> range:
    """Warp indices strictly between *a* and *b*, in increasing order."""
    return range(min(a, b) + 1, max(a, b))
