"""
StockMeta - Error Types
Failures raised by the metadata pipeline, mapped to HTTP status codes by the server.
"""


class StockMetaError(Exception):
    """Base class for all pipeline errors."""

    status_code = 500


class ValidationError(StockMetaError):
    """Bad request shape (missing/empty filenames, unknown platform)."""

    status_code = 400


class AuthError(StockMetaError):
    """Missing or rejected API credential. Aborts the whole batch."""

    status_code = 401


class ProviderError(StockMetaError):
    """Transport failure or non-2xx answer from the completion provider."""

    status_code = 502

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.provider_status = status_code


class MalformedOutputError(StockMetaError):
    """Model text with no usable value. Sanitizers absorb it with defaults."""
