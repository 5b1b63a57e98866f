"""
Common error types
"""


class SchedulingError(Exception):
    """Base exception for taskrank errors"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class InvalidRequestError(SchedulingError):
    """Raised when request or task data cannot be parsed"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, "INVALID_REQUEST")
