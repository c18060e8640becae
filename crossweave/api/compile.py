"""
Public cross-section compilation API.

compile_cross_section() is the single entry point for hosts that persist the
canvas state as plain JSON. It rebuilds the configuration and the Ledger from
whatever the host hands over (possibly nothing at all on first invocation)
and always returns a structurally complete Draft.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from typing import Any

from crossweave.compiler.assembly import MaterialResolver
from crossweave.compiler.pipeline import DraftCompiler
from crossweave.ledger.ledger import InteractionLedger
from crossweave.schemas.config import SketchConfig
from crossweave.schemas.draft import Draft


def compile_cross_section(
    canvas_state: Mapping[str, Any] | None,
    config: Mapping[str, Any] | SketchConfig | None,
    resolver: MaterialResolver | None = None,
) -> Draft:
    """
    Compile a persisted canvas state into a Draft.

    Parameters
    ----------
    canvas_state:
        The host's canvas state (``warpData``, ``clickSequence``,
        ``closedPaths``, ...). ``None`` or an empty mapping compiles to the
        blank draft.
    config:
        A SketchConfig, or the host's raw config mapping (``numWarps``,
        ``warpSystems``, ``weftSystems``); missing or invalid values take the
        registry defaults.
    resolver:
        Optional colour → material lookup for the row shuttle mapping.

    Returns
    -------
    Draft
        Always returned; never raises.
    """
    sketch_config = config if isinstance(config, SketchConfig) else SketchConfig.coerce(config)
    if canvas_state is not None and not isinstance(canvas_state, Mapping):
        warnings.warn(
            f"canvas state of type {type(canvas_state).__name__} ignored; compiling blank draft",
            UserWarning,
            stacklevel=2,
        )
        canvas_state = None
    ledger = InteractionLedger.from_dict(canvas_state, sketch_config)
    return DraftCompiler(resolver).compile(ledger).draft


def generate_name(num_warps: int, num_rows: int = 1) -> str:
    """Return the display name of a cross-section draft, e.g. ``"cross section 8x1"``."""
    return f"cross section {num_warps}x{num_rows}"
