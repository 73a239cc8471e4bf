# errors.py

from typing import Optional


class WebhookError(Exception):
    """
    Base class for failures raised while handling a webhook request.

    `detail` is the generic text returned to the caller; the exception message
    itself may carry repo names or paths and is only ever logged.
    """
    status_code = 500
    detail = "Internal server error"


class UnsupportedMediaType(WebhookError):
    status_code = 400
    detail = "Unsupported Content-Type"


class InvalidPayload(WebhookError):
    status_code = 400
    detail = "Invalid payload"


class SignatureMismatch(WebhookError):
    status_code = 403
    detail = "Invalid signature"


class RepoNotFound(WebhookError):
    status_code = 500
    detail = "Failed to pull changes"

    def __init__(self, name: str):
        super().__init__(f"Repository '{name}' is not registered.")
        self.name = name


class ExecutionFailure(WebhookError):
    status_code = 500
    detail = "Failed to pull changes"

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code
