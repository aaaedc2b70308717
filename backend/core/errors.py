"""
Error taxonomy shared by the API and the client.

Every error carries the HTTP status it maps to and a message that is safe to
show to the user.
"""


class TaskError(Exception):
    status_code: int = 400
    default_message = "Unexpected error"

    def __init__(self, message=None, status_code=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self):
        return {"message": self.message}


class ValidationError(TaskError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(TaskError):
    status_code = 404
    default_message = "Task not found"


class CsrfError(TaskError):
    status_code = 403
    default_message = "Invalid or missing CSRF token"


class NetworkError(TaskError):
    status_code = 503
    default_message = "Could not reach the server"


class InternalError(TaskError):
    status_code = 500
    default_message = "Internal server error"


class SubmissionInProgressError(TaskError):
    status_code = 409
    default_message = "Another submission is still in progress"


_BY_STATUS = {
    400: ValidationError,
    403: CsrfError,
    404: NotFoundError,
}


def error_for_status(status_code: int, message: str) -> TaskError:
    if status_code >= 500:
        return InternalError(message, status_code)
    cls = _BY_STATUS.get(status_code, TaskError)
    return cls(message, status_code)
