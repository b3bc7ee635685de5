"""Operational (caller-attributable) error types.

Anything raised here is turned into a 4xx response by the centralized
handlers in ``api.errors``. Anything else that escapes a route is a 500.
"""

class APIError(Exception):
    """Error with an HTTP status code attached."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status = 'fail' if str(status_code).startswith('4') else 'error'
        self.is_operational = True

class ValidationError(APIError):
    """Raised when caller input fails normalization or validation."""

    def __init__(self, message: str):
        super().__init__(message, 400)

class NotFoundError(APIError):
    """Raised when a well-formed identifier matches no record."""

    def __init__(self, message: str = "Event not found"):
        super().__init__(message, 404)

class UploadError(APIError):
    """Raised by the upload layer, classified by ``code``."""

    LIMIT_FILE_SIZE = 'LIMIT_FILE_SIZE'
    LIMIT_UNEXPECTED_FILE = 'LIMIT_UNEXPECTED_FILE'
    INVALID_FILE_TYPE = 'INVALID_FILE_TYPE'

    def __init__(self, code: str, message: str, field: str = None):
        super().__init__(message, 400)
        self.code = code
        self.field = field
