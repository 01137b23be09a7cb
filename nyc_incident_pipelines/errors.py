# Error kinds raised by the incident pipeline

from typing import Optional


class PipelineError(Exception):
    """Base class for incident pipeline failures."""


class SourceUnavailableError(PipelineError):
    """
    An input feed (incidents, boroughs, population) could not be read or parsed.
    Fatal: the run is aborted and the failing source is named.
    """

    def __init__(self, source: str, location, reason: Optional[str] = None):
        self.source = source
        self.location = str(location)
        self.reason = reason
        message = f"{source} source unavailable: {self.location}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


__all__ = ["PipelineError", "SourceUnavailableError"]
