"""
Compatibility shim for Ledger snapshots persisted before path ids existed.

Older canvas states stored each click as ``{"weft": w, "sequence": s}`` with
no ``pathId``. Paths are reconstructed by walking all records in sequence
order and opening a new path whenever the weft id changes, so consecutive
same-weft runs form one path. This is a loading aid only; the compiler always
sees explicit path ids.
"""

from __future__ import annotations

from collections.abc import Sequence


def synthesize_path_ids(
    records: Sequence[tuple[int, int]], first_path_id: int = 0
) -> list[int]:
    """
    Assign synthetic path ids to ``(sequence, weft_id)`` records.

    Returns one path id per record, aligned with *records*. Ids start at
    *first_path_id* so they do not collide with paths already present.
    """
    order = sorted(range(len(records)), key=lambda i: (records[i][0], i))
    path_ids = [0] * len(records)
    path_id = first_path_id - 1
    previous_weft: int | None = None
    for i in order:
        weft = records[i][1]
        if weft != previous_weft:
            path_id += 1
            previous_weft = weft
        path_ids[i] = path_id
    return path_ids
