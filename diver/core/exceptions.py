"""
Custom Exceptions.

Exception taxonomy shared by the session, resolver and CLI layers.
Components raise these; only the CLI boundary turns them into an exit code.
"""


class DiverError(Exception):
    """Base exception for all diver errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class TransportError(DiverError):
    """Raised when the network, TLS or a timeout fails before a response arrives."""

    def __init__(self, message: str = "Transport failure") -> None:
        super().__init__(message, code="NET_TRANSPORT_ERROR")


class ApplicationError(DiverError):
    """Raised when the control plane returns its own error envelope."""

    def __init__(self, message: str = "Request rejected by server", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, code="UCP_APPLICATION_ERROR")


class NotFoundError(DiverError):
    """Raised when a named resource does not exist."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class DecodeError(DiverError):
    """Raised when response bytes do not match the expected schema."""

    def __init__(self, message: str = "Unable to decode response") -> None:
        super().__init__(message, code="VAL_DECODE_ERROR")


class AuthenticationError(DiverError):
    """Raised when credentials are missing, unreadable or rejected."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class ConfigurationError(DiverError):
    """Raised when a settings file does not match its schema."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CFG_INVALID")
