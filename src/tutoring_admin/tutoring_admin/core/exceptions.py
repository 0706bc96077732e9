class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MalformedDocumentError(ValidationError):
    """Raised when a stored document does not match its collection schema."""


class NotFoundError(DomainError):
    """Raised when a referenced student or group does not exist."""


class StoreError(DomainError):
    """Raised when a document-store operation fails (network, availability)."""
