"""
Draft Assembly: derived rows plus column metadata → Draft.

Rows arrive in drawing order and are emitted most recent first, together
with a parallel ``row_system_mapping`` of weft ids. Column systems come from
the warp columns' physical layers; row shuttles are material ids resolved
from each weft's palette colour through the host's MaterialResolver.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from crossweave.compiler.derivation import DerivedRow
from crossweave.config.registry import get_registry
from crossweave.schemas.draft import Draft, DraftRow
from crossweave.utilities.layers import cyclic_layer_mapping


@runtime_checkable
class MaterialResolver(Protocol):
    """Host lookup from a weft colour to a persisted material id."""

    def resolve(self, hex_color: str, suggested_name: str) -> int:
        """Return the material id for *hex_color*, creating one if needed."""
        ...


@dataclass(frozen=True)
class FunctionResolver:
    """Adapts a plain ``(hex_color, suggested_name) -> int`` callable to MaterialResolver."""

    fn: Callable[[str, str], int]

    def resolve(self, hex_color: str, suggested_name: str) -> int:
        return self.fn(hex_color, suggested_name)


def column_system_mapping(
    num_warps: int, num_warp_layers: int, column_layers: Sequence[int] | None
) -> tuple[int, ...]:
    """
    Return the per-column system mapping.

    Falls back to the cyclic ``index mod num_warp_layers`` pattern when the
    column metadata is absent or its length does not match *num_warps*.
    """
    width = max(num_warps, 1)
    if column_layers is not None and len(column_layers) == width:
        return tuple(column_layers)
    if column_layers is not None:
        warnings.warn(
            f"column layer metadata has {len(column_layers)} entries for {width} warps; "
            "using cyclic layer mapping",
            UserWarning,
            stacklevel=2,
        )
    return cyclic_layer_mapping(width, num_warp_layers)


def resolve_row_shuttles(
    weft_ids: Sequence[int], resolver: MaterialResolver | None
) -> tuple[int, ...]:
    """
    Map each row's weft id to a material id.

    The resolver is called at most once per distinct weft id. A resolver
    error or a non-integer result falls back to the registry's fallback
    material with a UserWarning. Without a resolver every row gets the
    fallback material.
    """
    registry = get_registry()
    fallback = registry.fallback_material_id
    if resolver is None:
        return (fallback,) * len(weft_ids)

    cache: dict[int, int] = {}
    for weft_id in weft_ids:
        if weft_id in cache:
            continue
        color = registry.color_for_weft(weft_id)
        name = registry.material_name_for_weft(weft_id)
        try:
            material_id = resolver.resolve(color, name)
        except Exception as exc:  # noqa: BLE001
            warnings.warn(
                f"material resolution failed for weft {weft_id} ({color}): {exc}; "
                f"using material {fallback}",
                UserWarning,
                stacklevel=2,
            )
            material_id = fallback
        if not isinstance(material_id, int) or isinstance(material_id, bool):
            warnings.warn(
                f"material resolver returned {material_id!r} for weft {weft_id}; "
                f"using material {fallback}",
                UserWarning,
                stacklevel=2,
            )
            material_id = fallback
        cache[weft_id] = material_id
    return tuple(cache[w] for w in weft_ids)


def assemble_draft(
    rows: Sequence[DerivedRow],
    num_warps: int,
    num_warp_layers: int,
    column_layers: Sequence[int] | None = None,
    resolver: MaterialResolver | None = None,
) -> Draft:
    """
    Build the Draft from rows in drawing order.

    Returns the blank draft when *rows* is empty.
    """
    if not rows:
        return Draft.blank(num_warps, num_warp_layers)

    col_systems = column_system_mapping(num_warps, num_warp_layers, column_layers)
    newest_first = list(reversed(rows))
    weft_ids = tuple(r.weft_id for r in newest_first)

    return Draft(
        rows=tuple(DraftRow(weft_id=r.weft_id, cells=r.cells) for r in newest_first),
        col_system_mapping=col_systems,
        row_system_mapping=weft_ids,
        col_shuttle_mapping=(0,) * len(col_systems),
        row_shuttle_mapping=resolve_row_shuttles(weft_ids, resolver),
    )
