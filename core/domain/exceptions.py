"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Each concrete error
belongs to exactly one kind (not found, conflict, exhausted,
authentication, authorization, validation, storage) so the
API layer can map it to a single HTTP outcome.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class NotFoundError(DomainException):
    """Base exception for entities that are absent or do not match."""

    pass


class ConflictError(DomainException):
    """Base exception for state conflicts."""

    pass


class ExhaustedError(DomainException):
    """Base exception for depleted resources."""

    pass


class AuthenticationError(DomainException):
    """Raised when a credential is missing or invalid."""

    def __init__(self, message: str = "Invalid session.", code: str = "INVALID_SESSION"):
        super().__init__(message, code=code)


class AuthorizationError(DomainException):
    """Raised when an authenticated caller may not perform an operation."""

    def __init__(self, message: str = "Operation not permitted.", code: str = "FORBIDDEN"):
        super().__init__(message, code=code)


class DomainValidationError(DomainException):
    """Base exception for missing or malformed input."""

    pass


class StorageError(DomainException):
    """
    Raised when the storage layer fails for a non-domain reason.

    Callers must not interpret this as an absent entity.
    """

    def __init__(self, message: str = "Storage unavailable.", code: str = "STORAGE_ERROR"):
        super().__init__(message, code=code)


class AppNotFoundError(NotFoundError):
    """Raised when an application id is unknown or its key does not match."""

    def __init__(self, message: str = "App not found."):
        super().__init__(message, code="APP_NOT_FOUND")


class CorporationNotFoundError(NotFoundError):
    """Raised when a corporation is unknown or banned."""

    def __init__(self, message: str = "Corporation not found."):
        super().__init__(message, code="CORPORATION_NOT_FOUND")


class ClientNotFoundError(NotFoundError):
    """Raised when a consumer has no qualifying active attachment."""

    def __init__(self, message: str = "Client not found."):
        super().__init__(message, code="CLIENT_NOT_FOUND")


class LicenseKeyNotFoundError(NotFoundError):
    """Raised when a license key is absent or already used."""

    def __init__(self, message: str = "License key not found."):
        super().__init__(message, code="LICENSE_KEY_NOT_FOUND")


class TokenNotFoundError(NotFoundError):
    """Raised when a client token is unknown, expired or detached."""

    def __init__(self, message: str = "Token not found."):
        super().__init__(message, code="TOKEN_NOT_FOUND")


class CodeAlreadyUsedError(ConflictError):
    """Raised when a corporation code is taken."""

    def __init__(self, message: str = "Code already used."):
        super().__init__(message, code="CODE_ALREADY_USED")


class ClientAlreadyLinkedError(ConflictError):
    """Raised when a consumer already has an active attachment."""

    def __init__(self, message: str = "Client already linked to another corporation."):
        super().__init__(message, code="CLIENT_ALREADY_LINKED")


class ClientNotSuitableError(ConflictError):
    """Raised when a consumer with an active attachment asks for a demo."""

    def __init__(self, message: str = "Client not suitable for demo."):
        super().__init__(message, code="CLIENT_NOT_SUITABLE")


class LicenseKeysOverError(ExhaustedError):
    """Raised when the license inventory has no free key."""

    def __init__(self, message: str = "License keys over."):
        super().__init__(message, code="LICENSE_KEYS_OVER")


class CodeUnspecifiedError(DomainValidationError):
    """Raised when a corporation code is missing or blank."""

    def __init__(self, message: str = "Code unspecified."):
        super().__init__(message, code="CODE_UNSPECIFIED")


class ConsumerKeyUnspecifiedError(DomainValidationError):
    """Raised when a client operation arrives without a consumer key."""

    def __init__(self, message: str = "Consumer key unspecified."):
        super().__init__(message, code="CONSUMER_KEY_UNSPECIFIED")
