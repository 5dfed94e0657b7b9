"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from datetime import datetime
from decimal import Decimal
import math
import re
from typing import ClassVar, Dict, Optional, Union

from domain.enums import ReservationStatus, ReservationType, BusinessType, RoomType, TableLocation
from domain.errors import (
    IllegalTransitionError, InvalidAmountError, InvalidDateRangeError,
    InvalidGuestCountError, InvalidResourceError, InvalidTypeError,
)
from domain.value_objects import DateRange, Money

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,}$")


def _generate_id() -> str:
    return uuid4().hex[:12]


def _coerce_enum(enum_cls, value, message: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidTypeError(message)


# ==================== UPDATE COMMANDS ====================
class RoomUpdate(BaseModel):
    """Typed partial update for a Room"""
    room_type: Optional[RoomType] = None
    capacity: Optional[int] = None
    price: Optional[Money] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class TableUpdate(BaseModel):
    """Typed partial update for a Table"""
    capacity: Optional[int] = None
    location: Optional[TableLocation] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class BusinessUpdate(BaseModel):
    """Typed partial update for a Business"""
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class ReservationUpdate(BaseModel):
    """Typed partial update for a Reservation"""
    status: Optional[ReservationStatus] = None
    notes: Optional[str] = None
    total_amount: Optional[Money] = None
    updated_at: Optional[datetime] = None


class Reservation(BaseModel):
    """Reservation Aggregate Root Entity"""

    # Identity
    reservation_id: UUID = Field(default_factory=uuid4)

    # References to other contexts
    business_id: str
    customer_id: str
    resource_id: Optional[str] = None

    # Value Objects
    date_range: DateRange
    total_amount: Money

    resource_type: ReservationType
    status: ReservationStatus = ReservationStatus.PENDING
    guests: int
    notes: Optional[str] = None

    # Metadata
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        business_id: str,
        customer_id: str,
        resource_type: Union[ReservationType, str],
        date_range: DateRange,
        guests: int,
        total_amount: Money,
        notes: Optional[str] = None,
        resource_id: Optional[str] = None
    ) -> "Reservation":
        """Create new reservation with validation"""
        Reservation._validate_date_range(date_range)
        Reservation._validate_guests(guests)
        Reservation._validate_amount(total_amount)
        resource_type = _coerce_enum(ReservationType, resource_type, "Invalid reservation type")

        now = datetime.utcnow()
        return Reservation(
            business_id=business_id,
            customer_id=customer_id,
            resource_id=resource_id,
            resource_type=resource_type,
            status=ReservationStatus.PENDING,
            date_range=date_range,
            guests=guests,
            total_amount=total_amount,
            notes=notes,
            created_at=now,
            updated_at=now
        )

    # ==================== STATE TRANSITION METHODS ====================
    def confirm(self) -> None:
        if self.status != ReservationStatus.PENDING:
            raise IllegalTransitionError("Only pending reservations can be confirmed")
        self._move_to(ReservationStatus.CONFIRMED)

    def cancel(self) -> None:
        if self.status == ReservationStatus.COMPLETED:
            raise IllegalTransitionError("Completed reservations cannot be cancelled")
        self._move_to(ReservationStatus.CANCELLED)

    def complete(self) -> None:
        if self.status != ReservationStatus.CONFIRMED:
            raise IllegalTransitionError("Only confirmed reservations can be completed")
        self._move_to(ReservationStatus.COMPLETED)

    # ==================== MODIFICATION METHODS ====================
    def update_notes(self, notes: str) -> None:
        self.notes = notes
        self.updated_at = datetime.utcnow()

    def update_total_amount(self, amount: Money) -> None:
        Reservation._validate_amount(amount)
        self.total_amount = amount
        self.updated_at = datetime.utcnow()

    # ==================== QUERY METHODS ====================
    def is_active(self) -> bool:
        return self.status in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)

    @property
    def start(self) -> datetime:
        return self.date_range.start

    @property
    def end(self) -> datetime:
        return self.date_range.end

    def duration_in_days(self) -> int:
        """Whole days, rounded up"""
        seconds = abs((self.end - self.start).total_seconds())
        return math.ceil(seconds / 86400)

    def duration_in_hours(self) -> int:
        """Whole hours, rounded up"""
        seconds = abs((self.end - self.start).total_seconds())
        return math.ceil(seconds / 3600)

    # ==================== PRIVATE VALIDATION METHODS ====================
    def _move_to(self, status: ReservationStatus) -> None:
        self.status = status
        self.updated_at = datetime.utcnow()

    @staticmethod
    def _validate_date_range(date_range: DateRange) -> None:
        # Stricter than DateRange itself: a zero-length reservation is rejected
        if date_range.end <= date_range.start:
            raise InvalidDateRangeError("End date must be after start date")

    @staticmethod
    def _validate_guests(guests: int) -> None:
        if isinstance(guests, bool) or not isinstance(guests, int) or guests <= 0:
            raise InvalidGuestCountError("Number of guests must be greater than 0")

    @staticmethod
    def _validate_amount(amount: Money) -> None:
        if not isinstance(amount, Money) or amount.amount <= 0:
            raise InvalidAmountError("Total amount must be greater than 0")


class Business(BaseModel):
    """Business Entity (hotel or restaurant owning a resource pool)"""

    business_id: str = Field(default_factory=_generate_id)
    name: str
    business_type: BusinessType
    owner_id: str
    address: str = ""
    phone: str = ""
    email: str = ""
    description: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True

    @staticmethod
    def create(
        name: str,
        business_type: Union[BusinessType, str],
        owner_id: str,
        email: str,
        phone: str,
        address: str = "",
        description: Optional[str] = None
    ) -> "Business":
        Business._validate_name(name)
        Business._validate_email(email)
        Business._validate_phone(phone)
        business_type = _coerce_enum(BusinessType, business_type, "Invalid business type")

        return Business(
            name=name,
            business_type=business_type,
            owner_id=owner_id,
            email=email,
            phone=phone,
            address=address,
            description=description
        )

    def is_hotel(self) -> bool:
        return self.business_type == BusinessType.HOTEL

    def is_restaurant(self) -> bool:
        return self.business_type == BusinessType.RESTAURANT

    def update_info(self, data: BusinessUpdate) -> None:
        """Apply a partial update; nothing changes if any field is invalid"""
        if data.name is not None:
            Business._validate_name(data.name)
        if data.phone is not None:
            Business._validate_phone(data.phone)
        if data.email is not None:
            Business._validate_email(data.email)

        for field, value in data.dict(exclude_none=True).items():
            setattr(self, field, value)
        self.updated_at = datetime.utcnow()

    @staticmethod
    def _validate_name(name: str) -> None:
        if not name or not name.strip():
            raise InvalidResourceError("Business name is required")

    @staticmethod
    def _validate_email(email: str) -> None:
        if not _EMAIL_RE.match(email or ""):
            raise InvalidResourceError("Invalid email format")

    @staticmethod
    def _validate_phone(phone: str) -> None:
        if not _PHONE_RE.match(phone or ""):
            raise InvalidResourceError("Invalid phone format")


class Room(BaseModel):
    """Hotel Room - a bookable resource"""

    room_id: str = Field(default_factory=_generate_id)
    business_id: str
    number: str
    room_type: RoomType
    capacity: int
    price: Money
    description: Optional[str] = None
    is_active: bool = True

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    DISPLAY_NAMES: ClassVar[Dict[RoomType, str]] = {
        RoomType.STANDARD: "Standard Room",
        RoomType.DELUXE: "Deluxe Room",
        RoomType.SUITE: "Suite",
        RoomType.PRESIDENTIAL: "Presidential Suite",
    }

    class Config:
        from_attributes = True

    @staticmethod
    def create(
        business_id: str,
        number: str,
        room_type: Union[RoomType, str],
        capacity: int,
        price: Money,
        description: Optional[str] = None
    ) -> "Room":
        """Create new room with validation"""
        Room._validate_number(number)
        Room._validate_capacity(capacity)
        Room._validate_price(price)
        room_type = _coerce_enum(RoomType, room_type, "Invalid room type")

        return Room(
            business_id=business_id,
            number=number,
            room_type=room_type,
            capacity=capacity,
            price=price,
            description=description,
            is_active=True
        )

    @property
    def resource_id(self) -> str:
        return self.room_id

    def activate(self) -> None:
        self.is_active = True
        self.updated_at = datetime.utcnow()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = datetime.utcnow()

    def update_info(self, data: RoomUpdate) -> None:
        """Apply a partial update; nothing changes if any field is invalid"""
        if data.capacity is not None:
            Room._validate_capacity(data.capacity)
        if data.price is not None:
            Room._validate_price(data.price)

        if data.room_type is not None:
            self.room_type = data.room_type
        if data.capacity is not None:
            self.capacity = data.capacity
        if data.price is not None:
            self.price = data.price
        if data.description is not None:
            self.description = data.description
        if data.is_active is not None:
            self.is_active = data.is_active
        self.updated_at = datetime.utcnow()

    def update_number(self, number: str) -> None:
        Room._validate_number(number)
        self.number = number
        self.updated_at = datetime.utcnow()

    def can_accommodate(self, guests: int) -> bool:
        return self.is_active and 0 < guests <= self.capacity

    def price_per_guest(self) -> Money:
        return self.price.divide(self.capacity)

    def type_display_name(self) -> str:
        return self.DISPLAY_NAMES[self.room_type]

    @staticmethod
    def _validate_number(number: str) -> None:
        if not number or not number.strip():
            raise InvalidResourceError("Room number is required")

    @staticmethod
    def _validate_capacity(capacity: int) -> None:
        if capacity <= 0:
            raise InvalidResourceError("Room capacity must be greater than 0")

    @staticmethod
    def _validate_price(price: Money) -> None:
        if price.amount <= Decimal("0"):
            raise InvalidResourceError("Room price must be greater than 0")


class Table(BaseModel):
    """Restaurant Table - a bookable resource"""

    table_id: str = Field(default_factory=_generate_id)
    business_id: str
    number: str
    capacity: int
    location: TableLocation
    description: Optional[str] = None
    is_active: bool = True

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        from_attributes = True

    @staticmethod
    def create(
        business_id: str,
        number: str,
        capacity: int,
        location: Union[TableLocation, str],
        description: Optional[str] = None,
        is_active: bool = True
    ) -> "Table":
        """Create new table with validation"""
        if not business_id or not business_id.strip():
            raise InvalidResourceError("Business ID is required")
        Table._validate_number(number)
        Table._validate_capacity(capacity)
        location = _coerce_enum(TableLocation, location, "Invalid table location")

        return Table(
            business_id=business_id,
            number=number,
            capacity=capacity,
            location=location,
            description=description,
            is_active=is_active
        )

    @property
    def resource_id(self) -> str:
        return self.table_id

    def activate(self) -> None:
        self.is_active = True
        self.updated_at = datetime.utcnow()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = datetime.utcnow()

    def update_info(self, data: TableUpdate) -> None:
        """Apply a partial update; nothing changes if any field is invalid"""
        if data.capacity is not None:
            Table._validate_capacity(data.capacity)

        if data.capacity is not None:
            self.capacity = data.capacity
        if data.location is not None:
            self.location = data.location
        if data.description is not None:
            self.description = data.description
        if data.is_active is not None:
            self.is_active = data.is_active
        self.updated_at = datetime.utcnow()

    def update_number(self, number: str) -> None:
        Table._validate_number(number)
        self.number = number
        self.updated_at = datetime.utcnow()

    def can_accommodate(self, guests: int) -> bool:
        return self.is_active and 0 < guests <= self.capacity

    def location_display_name(self) -> str:
        return self.location.value.capitalize()

    @staticmethod
    def _validate_number(number: str) -> None:
        if not number or not number.strip():
            raise InvalidResourceError("Table number is required")

    @staticmethod
    def _validate_capacity(capacity: int) -> None:
        if capacity <= 0:
            raise InvalidResourceError("Table capacity must be greater than 0")
