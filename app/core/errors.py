"""
Errors
======
Exception taxonomy for the stress engine.

Every error that can reach an HTTP caller carries its own status code;
main.py renders them all as {"error": message}.

    ValidationError        400  missing / malformed request fields
    AuthError              401  no bearer credential
    NotFoundError          404  referenced resource does not exist
    UpstreamError          502  source-control API failed (non-404)
    GenerationUnavailable  —    generator absent, failing or malformed;
                                never surfaced, always replaced by the
                                deterministic fallback
"""


class StressEngineError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StressEngineError):
    status_code = 400


class AuthError(StressEngineError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(StressEngineError):
    status_code = 404


class UpstreamError(StressEngineError):
    status_code = 502


class GenerationUnavailable(Exception):
    """The external bug generator cannot produce a usable result."""


class GenerationResponseError(GenerationUnavailable):
    """The generator replied, but the reply could not be parsed or validated."""
