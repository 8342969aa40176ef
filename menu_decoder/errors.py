"""Exceptions raised by the menu analysis pipeline.

Each error carries the HTTP status and the short ``message`` that is safe to
return to the caller. The exception text itself (``str(exc)``) may hold more
detail and is only ever written to the server log.
"""


class MenuAnalysisError(Exception):
    status_code = 500
    message = "Failed to analyze menu"

    def __init__(self, detail: str | None = None, *, message: str | None = None, status_code: int | None = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(detail or self.message)


class RequestRejectedError(MenuAnalysisError):
    """Upload failed validation before any external call was made."""

    status_code = 400
    message = "Invalid request"


class EmptyAIResponseError(MenuAnalysisError):
    """Gemini returned nothing usable (no candidates, blocked, empty text)."""


class InvalidAIResponseError(MenuAnalysisError):
    """Gemini text could not be parsed into a JSON array of dishes."""

    status_code = 502
    message = "Invalid AI response format"
