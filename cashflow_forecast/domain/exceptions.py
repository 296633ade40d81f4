"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class TransactionSourceError(DomainException):
    """Transaction source returned an error or is unavailable"""

    pass


class InvalidInputError(DomainException):
    """Forecast request or transaction data is malformed"""

    pass


class WhatIfEvaluationError(DomainException):
    """What-if comparison could not read a balance at the target day"""

    pass
