"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar
from uuid import UUID
from datetime import datetime

from domain.entities import (
    Business, Room, Table, Reservation,
    BusinessUpdate, RoomUpdate, TableUpdate, ReservationUpdate,
)
from domain.enums import ReservationStatus, ReservationType, RoomType, TableLocation
from domain.value_objects import Money

R = TypeVar("R")
U = TypeVar("U")


class BusinessRepository(ABC):
    """Repository interface for Business"""

    @abstractmethod
    async def save(self, business: Business) -> Business:
        """Save business"""
        pass

    @abstractmethod
    async def find_by_id(self, business_id: str) -> Optional[Business]:
        """Find business by ID"""
        pass

    @abstractmethod
    async def find_by_owner_id(self, owner_id: str) -> List[Business]:
        """Find businesses owned by a user"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Business]:
        """Find all businesses"""
        pass

    @abstractmethod
    async def update(self, business_id: str, data: BusinessUpdate) -> Optional[Business]:
        """Apply a typed update; None when the id does not resolve"""
        pass


class ResourceRepository(ABC, Generic[R, U]):
    """Common contract for bookable resource pools (rooms and tables)"""

    @abstractmethod
    async def save(self, resource: R) -> R:
        """Save resource"""
        pass

    @abstractmethod
    async def find_by_id(self, resource_id: str) -> Optional[R]:
        """Find resource by ID"""
        pass

    @abstractmethod
    async def find_by_business_id(self, business_id: str) -> List[R]:
        """Find every resource of a business, active or not"""
        pass

    @abstractmethod
    async def find_by_number(self, business_id: str, number: str) -> Optional[R]:
        """Find resource by its human-readable number within a business"""
        pass

    @abstractmethod
    async def find_by_capacity(self, business_id: str, min_capacity: int) -> List[R]:
        """Find resources seating at least min_capacity"""
        pass

    @abstractmethod
    async def find_active(self, business_id: str) -> List[R]:
        """Find active resources of a business"""
        pass

    @abstractmethod
    async def find_all(self) -> List[R]:
        """Find all resources"""
        pass

    @abstractmethod
    async def update(self, resource_id: str, data: U) -> Optional[R]:
        """Apply a typed update; None when the id does not resolve"""
        pass

    @abstractmethod
    async def delete(self, resource_id: str) -> bool:
        """Delete resource"""
        pass


class RoomRepository(ResourceRepository[Room, RoomUpdate]):
    """Repository interface for hotel Rooms"""

    @abstractmethod
    async def find_by_type(self, business_id: str, room_type: RoomType) -> List[Room]:
        """Find rooms of a type within a business"""
        pass

    @abstractmethod
    async def find_by_price_range(self, business_id: str, min_price: Money, max_price: Money) -> List[Room]:
        """Find rooms priced within [min_price, max_price]"""
        pass


class TableRepository(ResourceRepository[Table, TableUpdate]):
    """Repository interface for restaurant Tables"""

    @abstractmethod
    async def find_by_location(self, business_id: str, location: TableLocation) -> List[Table]:
        """Find tables in a location within a business"""
        pass


class ReservationRepository(ABC):
    """Repository interface for Reservation Aggregate"""

    @abstractmethod
    async def save(self, reservation: Reservation) -> Reservation:
        """Save reservation"""
        pass

    @abstractmethod
    async def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        """Find reservation by ID"""
        pass

    @abstractmethod
    async def find_by_customer_id(self, customer_id: str) -> List[Reservation]:
        """Find reservations by customer ID"""
        pass

    @abstractmethod
    async def find_by_business_id(self, business_id: str) -> List[Reservation]:
        """Find reservations by business ID"""
        pass

    @abstractmethod
    async def find_by_status(self, status: ReservationStatus) -> List[Reservation]:
        """Find reservations in a status"""
        pass

    @abstractmethod
    async def find_by_type(self, resource_type: ReservationType) -> List[Reservation]:
        """Find reservations of a kind"""
        pass

    @abstractmethod
    async def find_by_date_range(self, start: datetime, end: datetime) -> List[Reservation]:
        """Find reservations whose range overlaps [start, end]"""
        pass

    @abstractmethod
    async def find_overlapping_reservations(
        self, business_id: str, start: datetime, end: datetime
    ) -> List[Reservation]:
        """Find non-cancelled reservations of a business overlapping [start, end]

        Endpoints are inclusive: a reservation ending exactly at start counts.
        """
        pass

    @abstractmethod
    async def find_active_reservations(self, business_id: str) -> List[Reservation]:
        """Find CONFIRMED reservations of a business"""
        pass

    @abstractmethod
    async def find_upcoming_reservations(
        self, business_id: str, days: int = 7, now: Optional[datetime] = None
    ) -> List[Reservation]:
        """Find CONFIRMED reservations of a business starting in [now, now + days]"""
        pass

    @abstractmethod
    async def count_by_status(self, status: ReservationStatus) -> int:
        """Count reservations in a status"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Reservation]:
        """Find all reservations"""
        pass

    @abstractmethod
    async def update(self, reservation_id: UUID, data: ReservationUpdate) -> Optional[Reservation]:
        """Apply a typed update; None when the id does not resolve"""
        pass

    @abstractmethod
    async def delete(self, reservation_id: UUID) -> bool:
        """Delete reservation"""
        pass
