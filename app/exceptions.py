class AppError(Exception):
    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} '{resource_id}' not found", code="NOT_FOUND")


class ValidationError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class UnauthorizedError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="UNAUTHORIZED")


class ForbiddenError(AppError):
    def __init__(self, message: str):
        super().__init__(message, code="FORBIDDEN")


class ParseError(AppError):
    """The uploaded file could not be read as CSV."""

    def __init__(self, message: str):
        super().__init__(message, code="PARSE_ERROR")


class RowValidationError(AppError):
    """A single import row failed content checks. Never aborts the batch."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason, code="ROW_INVALID")


class PersistenceError(AppError):
    """Inserting a single story failed. Never aborts the batch."""

    def __init__(self, message: str):
        super().__init__(message, code="PERSISTENCE_ERROR")
