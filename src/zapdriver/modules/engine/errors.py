"""Errors raised by the ZAP control API client."""


class ZapApiError(RuntimeError):
    """The engine rejected or could not execute an API request."""

    def __init__(self, message: str, code: str = "", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def __str__(self) -> str:
        if self.code:
            return f"{self.code}: {self.message}"
        return self.message


class ZapConnectionError(ZapApiError):
    """The engine could not be reached at all."""
