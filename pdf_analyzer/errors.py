"""
Exception types raised while analyzing a document.

Each error carries the HTTP status code the API reports it with.
"""


class AnalyzerError(Exception):
    """Base class for all PDF analyzer failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AnalyzerError):
    """Missing, wrongly typed or oversized upload."""

    status_code = 400


class ExtractionError(AnalyzerError):
    """The PDF could not be parsed or produced malformed pages."""


class ServiceError(AnalyzerError):
    """A call to the assistant service failed."""


class RunFetchError(ServiceError):
    """Re-fetching the status of a run failed."""


class RunTimeoutError(AnalyzerError, TimeoutError):
    """A run did not reach a terminal status before the deadline."""

    status_code = 504


class RunCancelledError(AnalyzerError):
    """Polling was cancelled before the run finished."""
