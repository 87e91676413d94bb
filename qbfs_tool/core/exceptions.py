"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when the server endpoint or token cannot be determined."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CFG_INVALID")


class ExternalServiceError(ApplicationError):
    """Raised when an external service call fails."""

    def __init__(self, message: str = "External service error", code: str = "SYS_EXTERNAL_SERVICE_ERROR") -> None:
        super().__init__(message, code=code)


class MetastoreRequestError(ExternalServiceError):
    """Raised when the router metastore cannot be reached or answers non-200."""

    def __init__(self, message: str = "Metastore request failed", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MetastoreResponseError(ExternalServiceError):
    """Raised when the metastore answers with a body that cannot be decoded."""

    def __init__(self, message: str = "Malformed metastore response") -> None:
        super().__init__(message, code="SYS_BAD_RESPONSE")


class DumpError(ApplicationError):
    """Raised when the mount table cannot be written to disk."""

    def __init__(self, message: str = "Fail to dump mounts") -> None:
        super().__init__(message, code="SYS_DUMP_FAILED")


class ResolutionError(ApplicationError):
    """Base for path resolution failures. Terminal for the single query."""

    def __init__(self, message: str, code: str, query: str) -> None:
        self.query = query
        super().__init__(message, code=code)


class MalformedInputError(ResolutionError):
    """Raised when a query cannot be parsed as a URI."""

    def __init__(self, query: str, reason: str = "cannot be parsed as a URI") -> None:
        super().__init__(f"Malformed path {query!r}: {reason}", "RES_MALFORMED_INPUT", query)


class WrongSchemeError(ResolutionError):
    """Raised when a forward query does not use the virtual scheme."""

    def __init__(self, query: str, scheme: str, expected: str) -> None:
        self.scheme = scheme
        self.expected = expected
        super().__init__(
            f"Wrong scheme {scheme!r} in {query!r}, expected {expected}://",
            "RES_WRONG_SCHEME",
            query,
        )


class MountNotFoundError(ResolutionError):
    """Raised when no mount entry prefix matches the query."""

    def __init__(self, query: str) -> None:
        super().__init__(f"No mount entry matches {query!r}", "RES_NOT_FOUND", query)
