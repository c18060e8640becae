"""
Structural checks for compiled drafts and for the Interaction Ledger.

check_draft verifies that a Draft is rectangular, binary and that every
mapping has the right length. check_ledger verifies the sequence density
invariant and the recorded layers. Both return a CheckResult rather than
raising so the caller can collect every problem before deciding what to do.

CheckerError carries enough context for a diagnostic message:
  - location: what failed (``"row 3"``, ``"colSystemMapping"``, ``"ledger"``)
  - message: human-readable description of the problem
  - error_type: "draft_shape" (the compiled output is malformed) or
                "ledger_state" (the recorded interactions are inconsistent)
"""

from __future__ import annotations

from dataclasses import dataclass

from crossweave.ledger.ledger import InteractionLedger
from crossweave.ledger.renumber import is_dense
from crossweave.schemas.draft import Draft


@dataclass(frozen=True)
class CheckerError:
    """A single structural failure."""

    location: str
    message: str
    error_type: str  # "draft_shape" | "ledger_state"

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a check."""

    passed: bool
    errors: tuple[CheckerError, ...]


def _result(errors: list[CheckerError]) -> CheckResult:
    return CheckResult(passed=len(errors) == 0, errors=tuple(errors))


def check_draft(draft: Draft, num_warps: int) -> CheckResult:
    """
    Validate the shape of *draft* for a sketch of *num_warps* columns.

    Checks (in order):
    1. At least one row.
    2. Every row has exactly ``max(num_warps, 1)`` cells, each 0 or 1.
    3. Row mappings have one entry per row; column mappings one per column.
    """
    width = max(num_warps, 1)
    errors: list[CheckerError] = []

    if not draft.rows:
        errors.append(CheckerError("rows", "draft has no rows", "draft_shape"))

    for idx, row in enumerate(draft.rows):
        if len(row.cells) != width:
            errors.append(
                CheckerError(
                    f"row {idx}",
                    f"has {len(row.cells)} cells, expected {width}",
                    "draft_shape",
                )
            )
        bad = sorted({c for c in row.cells if c not in (0, 1)})
        if bad:
            errors.append(
                CheckerError(f"row {idx}", f"non-binary cell values {bad}", "draft_shape")
            )

    for name, mapping, expected in (
        ("rowSystemMapping", draft.row_system_mapping, len(draft.rows)),
        ("rowShuttleMapping", draft.row_shuttle_mapping, len(draft.rows)),
        ("colSystemMapping", draft.col_system_mapping, width),
        ("colShuttleMapping", draft.col_shuttle_mapping, width),
    ):
        if len(mapping) != expected:
            errors.append(
                CheckerError(
                    name, f"has {len(mapping)} entries, expected {expected}", "draft_shape"
                )
            )

    return _result(errors)


def check_ledger(ledger: InteractionLedger) -> CheckResult:
    """
    Validate the Ledger's invariants.

    Checks:
    1. Sequences are exactly ``{0, ..., count-1}``.
    2. The click counter equals the interaction count.
    3. Every ``physical_layer_at_click`` is a valid layer.
    """
    errors: list[CheckerError] = []
    interactions = ledger.interactions()

    if not is_dense(i.sequence for i in interactions):
        errors.append(
            CheckerError(
                "ledger",
                f"sequences {[i.sequence for i in interactions]} are not dense",
                "ledger_state",
            )
        )
    if ledger.click_sequence != len(interactions):
        errors.append(
            CheckerError(
                "ledger",
                f"click counter {ledger.click_sequence} does not match "
                f"{len(interactions)} interactions",
                "ledger_state",
            )
        )
    num_layers = ledger.config.num_warp_layers
    for interaction in interactions:
        if not 0 <= interaction.physical_layer_at_click < num_layers:
            errors.append(
                CheckerError(
                    f"interaction {interaction.sequence}",
                    f"layer {interaction.physical_layer_at_click} outside 0..{num_layers - 1}",
                    "ledger_state",
                )
            )

    return _result(errors)
