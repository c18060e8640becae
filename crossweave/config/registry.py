"""
Configuration registry: loads the sketch parameter limits and the weft palette
from YAML at startup, validates them, and exposes a read-only query API.

The registry is a module-level singleton; call get_registry() to obtain it.
Both tables are loaded and validated once at import time. Nothing writes to
the registry after startup.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

import yaml

_DATA_DIR = Path(__file__).parent / "data"

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class ParameterEntry:
    """Bounds and default for one integer sketch parameter."""

    id: str
    host_key: str  # camelCase key used in the host's persisted config
    min: int
    max: int
    default: int
    description: str = ""

    def clamp(self, value: int) -> int:
        """Clamp *value* into ``[min, max]``."""
        return max(self.min, min(self.max, value))


class ConfigRegistry:
    """
    Read-only registry of sketch parameters and palette data.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        self.parameters: MappingProxyType[str, ParameterEntry]
        self.colors: tuple[str, ...]
        self.material_name_template: str
        self.fallback_material_id: int

        self._load_all()
        self._validate()

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Config data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse config data file {path}: {exc}") from exc

    def _load_all(self) -> None:
        self._load_parameters()
        self._load_palette()

    def _load_parameters(self) -> None:
        data = self._load_yaml("parameters.yaml")
        result: dict[str, ParameterEntry] = {}
        for entry in data["entries"]:
            result[entry["id"]] = ParameterEntry(
                id=entry["id"],
                host_key=entry["host_key"],
                min=int(entry["min"]),
                max=int(entry["max"]),
                default=int(entry["default"]),
                description=entry.get("description", "").strip(),
            )
        self.parameters = MappingProxyType(result)

    def _load_palette(self) -> None:
        data = self._load_yaml("palette.yaml")
        self.colors = tuple(str(c) for c in data["colors"])
        self.material_name_template = str(data["material_name_template"])
        self.fallback_material_id = int(data.get("fallback_material_id", 0))

    # ── Validation ─────────────────────────────────────────────────────────────

    def _validate(self) -> None:
        """
        Run at startup. Raises ValueError listing all problems found if a
        parameter default falls outside its limits or the palette is unusable.
        """
        errors: list[str] = []
        for required in ("num_warps", "num_warp_layers", "num_weft_systems"):
            if required not in self.parameters:
                errors.append(f"parameters: missing entry {required!r}")
        for pid, entry in self.parameters.items():
            if entry.min < 1:
                errors.append(f"parameter {pid!r}: min must be >= 1, got {entry.min}")
            if entry.min > entry.max:
                errors.append(f"parameter {pid!r}: min {entry.min} exceeds max {entry.max}")
            elif not entry.min <= entry.default <= entry.max:
                errors.append(
                    f"parameter {pid!r}: default {entry.default} outside [{entry.min}, {entry.max}]"
                )
        if not self.colors:
            errors.append("palette: colors must not be empty")
        for color in self.colors:
            if not _HEX_COLOR.match(color):
                errors.append(f"palette: {color!r} is not a #RRGGBB colour")
        if "{letter}" not in self.material_name_template:
            errors.append("palette: material_name_template must contain '{letter}'")
        if errors:
            raise ValueError(
                "Config registry validation failed:\n" + "\n".join(f"  • {e}" for e in errors)
            )

    # ── Query API ──────────────────────────────────────────────────────────────

    def get_parameter(self, parameter_id: str) -> ParameterEntry:
        """Return the entry for *parameter_id*.

        Raises KeyError if the parameter is not defined.
        """
        try:
            return self.parameters[parameter_id]
        except KeyError:
            raise KeyError(f"Unknown sketch parameter {parameter_id!r}") from None

    def color_for_weft(self, weft_id: int) -> str:
        """Return the palette colour for *weft_id* (cycled over the palette)."""
        return self.colors[weft_id % len(self.colors)]

    def material_name_for_weft(self, weft_id: int) -> str:
        """Return the suggested material name for *weft_id*: weft 0 → ``... a``."""
        return self.material_name_template.format(letter=chr(ord("a") + weft_id))


# ── Module-level singleton ─────────────────────────────────────────────────────

_registry: ConfigRegistry = ConfigRegistry()


def get_registry() -> ConfigRegistry:
    """Return the module-level registry singleton."""
    return _registry
