"""Errors raised by the ledger core."""


class LedgerError(Exception):
    pass


class InvalidSplitError(LedgerError, ValueError):
    """A split request or share list failed validation. Raised before any ledger change."""


class InvalidAmountError(LedgerError, ValueError):
    """A money value could not be used (not a number, not positive, ...)."""


class LedgerInvariantViolation(LedgerError, RuntimeError):
    """Credits and debits no longer balance. Indicates upstream corruption; not recoverable."""
