from __future__ import annotations


class AppError(Exception):
    """Base for errors that map onto an HTTP status.

    ``detail`` ends up verbatim in the JSON body, so it must be safe to show
    to the caller.
    """

    default_detail = "Application error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFoundError(AppError):
    default_detail = "Not found"


class ForbiddenError(AppError):
    default_detail = "Forbidden"


class ValidationError(AppError):
    default_detail = "Invalid request"
