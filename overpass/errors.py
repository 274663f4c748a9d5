from typing import Optional


class UpstreamError(Exception):
    """
    The Overpass service failed us: non-success status, timeout, network error
    or an unreadable body. status is None when no HTTP response was received.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"Overpass API returned {self.status}: {self.message}"
