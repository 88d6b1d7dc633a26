"""Domain exceptions raised by services and caught by routers.

Services raise these to signal business-rule violations.
Exception handlers in main.py translate them into the standard
error envelope: {"code": "...", "message": "..."}.
"""


class DomainError(Exception):
    """Base class for all domain exceptions."""

    code = "domain_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a node addressed by name does not exist.

    ``entity`` is the most specific path segment that failed to resolve
    (Product, Group, Subgroup or Label).
    """

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        self.code = f"{entity.lower()}_not_found"
        super().__init__(f"{entity} '{identifier}' not found")


class InvalidBodyError(DomainError):
    """Raised when a required request field is missing or empty."""

    code = "invalid_body"


class MissingFieldError(InvalidBodyError):
    """Raised when a stored or seeded record lacks a required field."""

    def __init__(self, kind: str, field: str) -> None:
        self.kind = kind
        self.field = field
        super().__init__(f"{kind} is missing required field '{field}'")


class AlreadyInitializedError(DomainError):
    """Raised when seeding is requested but products already exist."""

    code = "already_initialized"

    def __init__(self) -> None:
        super().__init__("Products already exist in DB")


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state (e.g. duplicate)."""

    code = "conflict"


class ConflictRetryError(ConflictError):
    """Raised when a product was modified by another request between read and save."""

    code = "conflict_retry"

    def __init__(self, productname: str) -> None:
        self.productname = productname
        super().__init__(f"Product '{productname}' was modified concurrently, retry the request")


class AuthenticationError(DomainError):
    """Raised when a request carries no bearer token."""

    code = "unauthorized"


class PermissionDeniedError(DomainError):
    """Raised when a bearer token fails verification."""

    code = "forbidden"
