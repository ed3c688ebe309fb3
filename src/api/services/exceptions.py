"""Shared exceptions for API services."""


class DataRetrievalError(Exception):
    """Raised when retrieval services cannot satisfy a request."""

    pass
