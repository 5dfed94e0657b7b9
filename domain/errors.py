"""Domain Errors

None of these subclass ValueError, so pydantic validators let them
propagate unchanged instead of folding them into a ValidationError.
"""


class BookingError(Exception):
    """Base class for every booking core error"""


# ==================== VALIDATION ERRORS ====================
class BookingValidationError(BookingError):
    """Raised when a value object or entity is built from bad input"""


class InvalidAmountError(BookingValidationError):
    pass


class InvalidCurrencyError(BookingValidationError):
    pass


class MissingDateError(BookingValidationError):
    pass


class InvalidDateError(BookingValidationError):
    pass


class InvertedRangeError(BookingValidationError):
    pass


class PastStartDateError(BookingValidationError):
    pass


class InvalidDateRangeError(BookingValidationError):
    pass


class InvalidGuestCountError(BookingValidationError):
    pass


class InvalidTypeError(BookingValidationError):
    pass


class InvalidResourceError(BookingValidationError):
    """Bad room, table or business attributes"""


# ==================== NOT FOUND ERRORS ====================
class NotFoundError(BookingError):
    """Raised when a referenced id does not resolve"""


class BusinessNotFoundError(NotFoundError):
    def __init__(self, business_id: str):
        super().__init__("Business not found")
        self.business_id = business_id


class ResourceNotFoundError(NotFoundError):
    def __init__(self, resource_id: str, kind: str = "Resource"):
        super().__init__(f"{kind} not found")
        self.resource_id = resource_id


class ReservationNotFoundError(NotFoundError):
    def __init__(self, reservation_id):
        super().__init__("Reservation not found")
        self.reservation_id = reservation_id


# ==================== DOMAIN RULE ERRORS ====================
class DomainRuleError(BookingError):
    """Raised when an operation violates a business invariant"""


class WrongBusinessTypeError(DomainRuleError):
    pass


class DuplicateResourceNumberError(DomainRuleError):
    pass


class IllegalTransitionError(DomainRuleError):
    pass


class CurrencyMismatchError(DomainRuleError):
    pass


class NegativeResultError(DomainRuleError):
    pass


class DivisionByZeroError(DomainRuleError):
    pass


class NoResourcesAvailableError(DomainRuleError):
    """The business has no rooms/tables at all"""


class ReservationConflictError(DomainRuleError):
    """The requested window overlaps an existing reservation"""

    def __init__(self, message: str, conflicts=None):
        super().__init__(message)
        self.conflicts = list(conflicts or [])


class InactiveResourceError(DomainRuleError):
    """A specific room/table was requested but it is deactivated"""
