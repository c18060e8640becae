"""
DraftCompiler: wires the full compilation from Ledger to checked Draft.

Pipeline stages:

  1. segment_passes()   → ordered Passes from the Ledger's interactions
  2. derive_rows()      → one binary row per Pass (rules a–d)
  3. assemble_draft()   → reversed rows, system and shuttle mappings
  4. check_draft()      → structural validation of the result

Every compilation starts from scratch over the whole Ledger. The compiler
never raises to its caller: a stage failure or a failed check is reported as
a UserWarning naming the stage, and the blank draft of the configured width
is returned instead. Ledger inconsistencies found by check_ledger() are
reported as warnings but do not stop compilation.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass

from crossweave.checker.checker import CheckResult, check_draft, check_ledger
from crossweave.compiler.assembly import MaterialResolver, assemble_draft
from crossweave.compiler.derivation import derive_rows
from crossweave.compiler.segmentation import Pass, segment_passes
from crossweave.ledger.ledger import InteractionLedger
from crossweave.schemas.config import SketchConfig
from crossweave.schemas.draft import Draft


class CompileError(Exception):
    """Raised inside the compiler when a stage fails.

    Attributes:
        stage: Name of the stage that failed
            (``"segmentation"``, ``"derivation"``, ``"assembly"``, or ``"checker"``).
        detail: Human-readable description of the failure.
    """

    def __init__(self, stage: str, detail: str, passes: tuple[Pass, ...] = ()) -> None:
        super().__init__(f"[{stage}] {detail}")
        self.stage = stage
        self.detail = detail
        self.passes = passes


@dataclass(frozen=True)
class CompileOutput:
    """Output of one compilation.

    Attributes:
        draft: The compiled draft; always structurally complete.
        passes: Passes found by segmentation (empty on fallback before stage 2).
        check: Result of the structural draft check.
        fell_back: True when the blank draft replaced a failed compilation.
    """

    draft: Draft
    passes: tuple[Pass, ...]
    check: CheckResult
    fell_back: bool = False


class DraftCompiler:
    """
    Stateless Ledger → Draft compiler.

    Holds only the optional material resolver; compiling twice from an
    unchanged Ledger yields identical output.
    """

    def __init__(self, resolver: MaterialResolver | None = None) -> None:
        self._resolver = resolver

    def compile(
        self, ledger: InteractionLedger, config: SketchConfig | None = None
    ) -> CompileOutput:
        """Compile *ledger* into a Draft.

        Parameters
        ----------
        ledger:
            The Interaction Ledger to compile.
        config:
            Sketch configuration; defaults to the Ledger's own.

        Returns
        -------
        CompileOutput
            Always returned; never raises.
        """
        config = config or ledger.config
        try:
            return self._run(ledger, config)
        except CompileError as exc:
            warnings.warn(f"compilation failed, returning blank draft: {exc}", stacklevel=2)
            passes = exc.passes

        blank = Draft.blank(config.num_warps, config.num_warp_layers)
        return CompileOutput(
            draft=blank,
            passes=passes,
            check=check_draft(blank, config.num_warps),
            fell_back=True,
        )

    def _run(self, ledger: InteractionLedger, config: SketchConfig) -> CompileOutput:
        ledger_check = check_ledger(ledger)
        if not ledger_check.passed:
            warnings.warn(
                "ledger is inconsistent: " + "; ".join(str(e) for e in ledger_check.errors),
                stacklevel=3,
            )

        # Stage 1: segmentation
        try:
            passes = tuple(segment_passes(ledger.interactions()))
        except Exception as exc:
            raise CompileError("segmentation", str(exc)) from exc

        # Stage 2: cell derivation
        column_layers = ledger.column_layers
        try:
            rows = derive_rows(passes, column_layers, config.num_warps)
        except Exception as exc:
            raise CompileError("derivation", str(exc), passes) from exc

        # Stage 3: assembly
        try:
            draft = assemble_draft(
                rows,
                num_warps=config.num_warps,
                num_warp_layers=config.num_warp_layers,
                column_layers=column_layers,
                resolver=self._resolver,
            )
        except Exception as exc:
            raise CompileError("assembly", str(exc), passes) from exc

        # Stage 4: structural check
        check = check_draft(draft, config.num_warps)
        if not check.passed:
            detail = "; ".join(str(e) for e in check.errors)
            raise CompileError("checker", detail, passes)

        return CompileOutput(draft=draft, passes=passes, check=check)


def compile_ledger(
    ledger: InteractionLedger, resolver: MaterialResolver | None = None
) -> Draft:
    """Compile *ledger* with its own config and return only the Draft."""
    return DraftCompiler(resolver).compile(ledger).draft
