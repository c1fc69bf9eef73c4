class FinanceTrackerException(Exception):
    """Base exception for finance tracker"""

    pass


class UnauthorizedException(FinanceTrackerException):
    """Raised when the session is missing, expired or credentials are wrong"""

    pass


class NotFoundException(FinanceTrackerException):
    """Raised when resource not found (including rows owned by another tenant)"""

    pass


class ForbiddenException(FinanceTrackerException):
    """Raised when an authenticated user lacks the required role"""

    pass


class ValidationException(FinanceTrackerException):
    """Raised for business logic validation errors"""

    pass


class ConflictException(FinanceTrackerException):
    """Raised when a unique value (email, domain) is already taken"""

    pass


class StorageException(FinanceTrackerException):
    """Raised when the document storage backend fails"""

    pass
