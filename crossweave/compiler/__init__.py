from crossweave.compiler.assembly import FunctionResolver, MaterialResolver, assemble_draft
from crossweave.compiler.derivation import DerivedRow, derive_rows
from crossweave.compiler.pipeline import CompileError, CompileOutput, DraftCompiler, compile_ledger
from crossweave.compiler.segmentation import Pass, Trend, segment_passes

__all__ = [
    # stages
    "segment_passes",
    "derive_rows",
    "assemble_draft",
    # pipeline
    "DraftCompiler",
    "CompileOutput",
    "CompileError",
    "compile_ledger",
    # types
    "Pass",
    "Trend",
    "DerivedRow",
    "MaterialResolver",
    "FunctionResolver",
]
