"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidMonthKeyError(DomainException, ValueError):
    """Month key does not match the YYYY-MM pattern"""

    def __init__(self, month: object):
        super().__init__(f"Invalid month key: {month!r}")
        self.month = month


class LedgerTransitionError(DomainException):
    """Ledger entry status cannot move to the requested status"""

    pass
