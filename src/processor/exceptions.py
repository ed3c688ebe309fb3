"""Shared exceptions for the statement extraction pipeline."""


class ExtractionError(Exception):
    """Base exception for statement extraction errors."""

    pass


class AmountParseError(ExtractionError, ValueError):
    """Raised when a text cell carries no numeric amount."""

    pass


class FilingPayloadError(ExtractionError):
    """Raised when a filing payload cannot be read or parsed as XML."""

    pass


class ObjectStoreError(Exception):
    """Raised when the artifact store cannot satisfy a request."""

    pass


class ObjectNotFoundError(ObjectStoreError, KeyError):
    """Raised when a key is absent from the artifact store."""

    pass


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing or unusable."""

    pass
