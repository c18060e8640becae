"""
DrawingSessionState: interactive drawing state owned by the UI layer.

Carries which weft is selected and which path is being drawn. The compiler
never reads it; only the DrawingSession does.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DrawingSessionState:
    """
    Serializable drawing state.

    Attributes:
        active_weft: Selected weft id, or None when no path is being drawn.
        active_path_id: Path id that new clicks are recorded under, or None.
        next_path_id: Path id handed to the next path that is started.
    """

    active_weft: int | None = None
    active_path_id: int | None = None
    next_path_id: int = 0

    def __post_init__(self) -> None:
        if (self.active_weft is None) != (self.active_path_id is None):
            raise ValueError("active_weft and active_path_id must be set together")
        if self.next_path_id < 0:
            raise ValueError(f"next_path_id must be >= 0, got {self.next_path_id}")

    @property
    def drawing(self) -> bool:
        return self.active_weft is not None

    def start_path(self, weft_id: int) -> DrawingSessionState:
        """Return the state after selecting *weft_id*, which opens a fresh path."""
        return DrawingSessionState(
            active_weft=weft_id,
            active_path_id=self.next_path_id,
            next_path_id=self.next_path_id + 1,
        )

    def end_path(self) -> DrawingSessionState:
        """Return the state with no weft selected."""
        return DrawingSessionState(next_path_id=self.next_path_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "activeWeft": self.active_weft,
            "activePathId": self.active_path_id,
            "nextPathId": self.next_path_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> DrawingSessionState:
        """Restore from a host snapshot; an inconsistent active pair is dropped."""
        if not data:
            return cls()
        next_path_id = data.get("nextPathId")
        next_path_id = next_path_id if isinstance(next_path_id, int) and next_path_id >= 0 else 0
        weft = data.get("activeWeft")
        path = data.get("activePathId")
        if isinstance(weft, int) and isinstance(path, int) and weft >= 0 and path >= 0:
            return cls(
                active_weft=weft,
                active_path_id=path,
                next_path_id=max(next_path_id, path + 1),
            )
        return cls(next_path_id=next_path_id)
