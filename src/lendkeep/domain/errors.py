"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class InvalidInputError(DomainError, ValueError):
    """Raised when a caller passes a value the domain refuses to correct."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid {field} {value!r}: {reason}.")
        self.field = field
        self.value = value


# ============================================================================
#                           Lookup errors
# ============================================================================


class NotFoundError(DomainError, LookupError):
    """Base class for unknown-entity errors."""

    KIND = "entity"

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"{self.KIND.capitalize()} {entity_id} not found.")
        self.entity_id = entity_id


class ItemNotFoundError(NotFoundError):
    """Raised when an item id does not resolve to a catalog item."""

    KIND = "item"


class RequesterNotFoundError(NotFoundError):
    """Raised when a requester id does not resolve to a known requester."""

    KIND = "requester"


class RentalNotFoundError(NotFoundError):
    """Raised when a rental is unknown or already closed.

    Both cases are reported the same way so that a second return cannot be
    told apart from an unknown rental.
    """

    KIND = "rental"


# ============================================================================
#                           Rental transition errors
# ============================================================================


class InvalidTransitionError(DomainError):
    """Raised when a rental is in an invalid state for the attempted action."""


class RentalAlreadyClosedError(InvalidTransitionError):
    """Raised when a closed rental is asked to change."""

    def __init__(self, rental_id: str) -> None:
        super().__init__(f"Rental {rental_id} has already been returned.")
        self.rental_id = rental_id


class ExtensionLimitExceededError(InvalidTransitionError):
    """Raised when a rental has already been extended the maximum number of times."""

    def __init__(self, rental_id: str, max_extensions: int) -> None:
        super().__init__(
            f"Rental {rental_id} has reached the maximum of {max_extensions} extensions."
        )
        self.rental_id = rental_id
        self.max_extensions = max_extensions
