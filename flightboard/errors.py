"""
Error taxonomy for the board refresh pipeline.

Callers only need to catch FetchFailed: a response that arrived but could
not be interpreted (ParseFailed) is handled the same way as one that never
arrived.
"""


class FlightBoardError(Exception):
    """Base class for all FlightBoard errors."""


class FetchFailed(FlightBoardError):
    """An upstream feed request failed or returned a non-success status."""

    def __init__(self, message: str, feed: str = None):
        super().__init__(message)
        self.feed = feed


class ParseFailed(FetchFailed):
    """An upstream response body did not match the expected schema."""
