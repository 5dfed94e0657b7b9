"""Domain Enums"""
from enum import Enum


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class ReservationType(str, Enum):
    HOTEL = "HOTEL"
    RESTAURANT = "RESTAURANT"


class BusinessType(str, Enum):
    HOTEL = "HOTEL"
    RESTAURANT = "RESTAURANT"


class RoomType(str, Enum):
    STANDARD = "STANDARD"
    DELUXE = "DELUXE"
    SUITE = "SUITE"
    PRESIDENTIAL = "PRESIDENTIAL"


class TableLocation(str, Enum):
    INDOOR = "INDOOR"
    OUTDOOR = "OUTDOOR"
    PATIO = "PATIO"
    BAR = "BAR"


class ConflictPolicy(str, Enum):
    """How overlapping reservations block the resource pool"""
    BUSINESS_WIDE = "BUSINESS_WIDE"
    PER_RESOURCE = "PER_RESOURCE"
