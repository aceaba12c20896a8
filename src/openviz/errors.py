"""Exception types raised by openviz."""

from __future__ import annotations


class OpenVizError(Exception):
    """Base class for all openviz errors."""


class SpecificationError(OpenVizError):
    """A chart specification could not be parsed or validated.

    ``raw`` holds the offending input (when available) so callers can
    log or display it next to the placeholder.
    """

    def __init__(self, message: str, raw: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.raw = raw
