from .compat import synthesize_path_ids
from .ledger import InteractionLedger
from .renumber import compact, compact_after_removal, is_dense, shift_after_removal

__all__ = [
    "InteractionLedger",
    # renumbering
    "shift_after_removal",
    "compact_after_removal",
    "compact",
    "is_dense",
    # legacy snapshots
    "synthesize_path_ids",
]
