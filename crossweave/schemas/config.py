"""
SketchConfig: the three integers a host supplies on every compilation:
warp count, number of physical warp layers, number of weft systems (colours).
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from crossweave.config.registry import get_registry


@dataclass(frozen=True)
class SketchConfig:
    """
    Validated sketch configuration.

    Attributes:
        num_warps: Draft width; one WarpColumn per warp.
        num_warp_layers: Physical warp layers; column ``i`` sits on layer
            ``i mod num_warp_layers``.
        num_weft_systems: Number of selectable weft colours.
    """

    num_warps: int
    num_warp_layers: int
    num_weft_systems: int

    def __post_init__(self) -> None:
        for name in ("num_warps", "num_warp_layers", "num_weft_systems"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")

    @classmethod
    def default(cls) -> SketchConfig:
        """Return the registry defaults (8 warps, 2 layers, 5 wefts)."""
        params = get_registry().parameters
        return cls(
            num_warps=params["num_warps"].default,
            num_warp_layers=params["num_warp_layers"].default,
            num_weft_systems=params["num_weft_systems"].default,
        )

    @classmethod
    def coerce(cls, raw: Mapping[str, Any] | None) -> SketchConfig:
        """
        Build a config from loosely-typed host values without raising.

        Both snake_case ids (``num_warps``) and the host's camelCase keys
        (``numWarps``) are accepted. Missing values take the registry default
        silently; unparseable values take the default and out-of-range values
        are clamped into the registry limits, each with a UserWarning.
        """
        values: dict[str, int] = {}
        for pid, entry in get_registry().parameters.items():
            raw_value = None
            if raw is not None:
                raw_value = raw.get(pid, raw.get(entry.host_key))
            if raw_value is None:
                values[pid] = entry.default
                continue
            try:
                parsed = int(raw_value)
            except (TypeError, ValueError, OverflowError):
                warnings.warn(
                    f"config value {entry.host_key}={raw_value!r} is not an integer; "
                    f"using default {entry.default}",
                    UserWarning,
                    stacklevel=2,
                )
                values[pid] = entry.default
                continue
            clamped = entry.clamp(parsed)
            if clamped != parsed:
                warnings.warn(
                    f"config value {entry.host_key}={parsed} outside "
                    f"[{entry.min}, {entry.max}]; clamped to {clamped}",
                    UserWarning,
                    stacklevel=2,
                )
            values[pid] = clamped
        return cls(
            num_warps=values["num_warps"],
            num_warp_layers=values["num_warp_layers"],
            num_weft_systems=values["num_weft_systems"],
        )

    def to_dict(self) -> dict[str, int]:
        """Return the host's camelCase config mapping."""
        return {
            "numWarps": self.num_warps,
            "warpSystems": self.num_warp_layers,
            "weftSystems": self.num_weft_systems,
        }
