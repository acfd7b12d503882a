class AppError(Exception):
    """Base for errors that are reported back to the caller as JSON."""

    status_code = 400
    default_code = "error"

    def __init__(self, message, code=None, field=None, status_code=None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.field = field
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        body = {"error": self.message, "code": self.code}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(AppError):
    status_code = 400
    default_code = "validation_error"


class ConflictError(AppError):
    status_code = 409
    default_code = "conflict"


class NotFoundError(AppError):
    status_code = 404
    default_code = "not_found"


class AuthError(AppError):
    status_code = 401
    default_code = "auth_error"


class PermissionDenied(AppError):
    status_code = 403
    default_code = "forbidden"


ERRORS_BY_STATUS = {
    400: ValidationError,
    401: AuthError,
    403: PermissionDenied,
    404: NotFoundError,
    409: ConflictError,
}
