"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Request arguments rejected before touching storage"""

    pass


class InvalidPeriodError(ValidationError):
    """Year/month pair or averaging window is out of range"""

    pass


class NotFoundError(DomainException):
    """Referenced entity does not exist"""

    pass


class TransactionNotFoundError(NotFoundError):
    """No transaction with the given identity"""

    pass


class CategoryNotFoundError(NotFoundError):
    """No category with the given id"""

    pass


class DuplicateCategoryError(DomainException):
    """A category with the same name already exists"""

    pass


class InvalidTransactionDataError(DomainException):
    """Raw transaction record is malformed or invalid"""

    pass


class FeedAPIError(DomainException):
    """Transaction feed returned an error or is unavailable"""

    pass
