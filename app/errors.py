"""Typed failures raised by domain code.

Routes may still raise ``HTTPException`` for plain request checks; anything
raised below the API layer uses these so the composition root can render a
consistent ``{"detail": ...}`` body.
"""


class AppError(Exception):
    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(AppError):
    status_code = 404
    default_detail = "Not found"


class Conflict(AppError):
    status_code = 409
    default_detail = "Operation not allowed in the current state"


class UpstreamError(AppError):
    """The LLM or sentiment service failed or answered with something unusable."""

    status_code = 502
    default_detail = "Upstream service failed"
