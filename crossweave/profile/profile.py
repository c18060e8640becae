"""
Profile draft: a one-row blank draft that borrows its system and shuttle
mappings from an upstream "systems" draft.

Without a systems draft the result is the plain blank row. With one, the
distinct warp systems of the systems draft (in first-appearance order) cycle
across the profile's columns, each column takes the shuttle of the first
systems-draft column on the same system, and the single row sits on weft
system 0 with that system's shuttle.
"""

from __future__ import annotations

from crossweave.schemas.draft import Draft, DraftRow

# The profile's single row is always woven on weft system "a".
_PROFILE_WEFT_SYSTEM: int = 0


def _distinct_in_order(values: tuple[int, ...]) -> list[int]:
    seen: list[int] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def profile_draft(width: int, systems: Draft | None = None) -> Draft:
    """
    Return the profile draft for *width* warps.

    Parameters
    ----------
    width:
        Number of columns; values below 1 give a single column.
    systems:
        Optional draft supplying warp/weft system and shuttle mappings.

    Returns
    -------
    Draft
        Exactly one all-zero row.
    """
    width = max(width, 1)
    if systems is None or not systems.col_system_mapping:
        return Draft(
            rows=(DraftRow(weft_id=_PROFILE_WEFT_SYSTEM, cells=(0,) * width),),
            col_system_mapping=(0,) * width,
            row_system_mapping=(_PROFILE_WEFT_SYSTEM,),
            col_shuttle_mapping=(0,) * width,
            row_shuttle_mapping=(0,),
        )

    warp_systems = _distinct_in_order(systems.col_system_mapping)
    col_systems = tuple(warp_systems[i % len(warp_systems)] for i in range(width))

    # Shuttle of the first systems-draft column on each system.
    first_shuttle: dict[int, int] = {}
    for system, shuttle in zip(systems.col_system_mapping, systems.col_shuttle_mapping):
        first_shuttle.setdefault(system, shuttle)
    col_shuttles = tuple(first_shuttle.get(s, 0) for s in col_systems)

    row_shuttle = 0
    if systems.row_shuttle_mapping:
        row_shuttle = systems.row_shuttle_mapping[0]
        for system, shuttle in zip(systems.row_system_mapping, systems.row_shuttle_mapping):
            if system == _PROFILE_WEFT_SYSTEM:
                row_shuttle = shuttle
                break

    return Draft(
        rows=(DraftRow(weft_id=_PROFILE_WEFT_SYSTEM, cells=(0,) * width),),
        col_system_mapping=col_systems,
        row_system_mapping=(_PROFILE_WEFT_SYSTEM,),
        col_shuttle_mapping=col_shuttles,
        row_shuttle_mapping=(row_shuttle,),
    )


def generate_profile_name(width: int) -> str:
    """Return the display name of a profile draft, e.g. ``"profile draft 20x1"``."""
    return f"profile draft {width}x1"
