"""
Draft Checker: public API.

Exposed names
-------------
check_draft   -- structural validation of a compiled Draft
check_ledger  -- density and layer validation of an InteractionLedger
CheckResult   -- aggregate result (passed: bool, errors: tuple[CheckerError, ...])
CheckerError  -- a single failure (location, message, error_type)
"""

from crossweave.checker.checker import CheckerError, CheckResult, check_draft, check_ledger

__all__ = ["check_draft", "check_ledger", "CheckResult", "CheckerError"]
