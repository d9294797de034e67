class ChurchAppException(Exception):
    """Base exception for the church tenancy API"""

    pass


class UnauthorizedException(ChurchAppException):
    """Raised when a bearer token is missing, invalid or expired"""

    pass


class NotFoundException(ChurchAppException):
    """Raised when resource does not exist in any tenant"""

    pass


class ForbiddenException(ChurchAppException):
    """Raised on tenant mismatch, insufficient role or missing permission"""

    pass


class PlanLimitExceededException(ForbiddenException):
    """Raised when the church's plan does not allow more branches or members"""

    pass


class ValidationException(ChurchAppException):
    """Raised for malformed identifiers and business validation errors"""

    pass
