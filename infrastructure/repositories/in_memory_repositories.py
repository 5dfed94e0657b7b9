"""In-Memory Repository Implementations"""
from typing import Optional, List, Dict
from uuid import UUID
from datetime import datetime

from domain.repositories import (
    BusinessRepository, RoomRepository, TableRepository, ReservationRepository,
)
from domain.entities import (
    Business, Room, Table, Reservation,
    BusinessUpdate, RoomUpdate, TableUpdate, ReservationUpdate,
)
from domain.enums import ReservationStatus, ReservationType, RoomType, TableLocation
from domain.value_objects import DateRange, Money


class InMemoryBusinessRepository(BusinessRepository):
    """In-memory implementation of BusinessRepository"""

    def __init__(self):
        self._storage: Dict[str, Business] = {}

    async def save(self, business: Business) -> Business:
        """Save business to memory"""
        self._storage[business.business_id] = business
        return business

    async def find_by_id(self, business_id: str) -> Optional[Business]:
        """Find business by ID"""
        return self._storage.get(business_id)

    async def find_by_owner_id(self, owner_id: str) -> List[Business]:
        """Find businesses owned by a user"""
        return [b for b in self._storage.values() if b.owner_id == owner_id]

    async def find_all(self) -> List[Business]:
        """Find all businesses"""
        return list(self._storage.values())

    async def update(self, business_id: str, data: BusinessUpdate) -> Optional[Business]:
        """Update business"""
        business = self._storage.get(business_id)
        if business is None:
            return None
        business.update_info(data)
        return business


class InMemoryRoomRepository(RoomRepository):
    """In-memory implementation of RoomRepository"""

    def __init__(self):
        self._storage: Dict[str, Room] = {}

    async def save(self, room: Room) -> Room:
        """Save room to memory"""
        self._storage[room.room_id] = room
        return room

    async def find_by_id(self, room_id: str) -> Optional[Room]:
        """Find room by ID"""
        return self._storage.get(room_id)

    async def find_by_business_id(self, business_id: str) -> List[Room]:
        """Find rooms of a business"""
        return [r for r in self._storage.values() if r.business_id == business_id]

    async def find_by_number(self, business_id: str, number: str) -> Optional[Room]:
        """Find room by number within a business"""
        for room in self._storage.values():
            if room.business_id == business_id and room.number == number:
                return room
        return None

    async def find_by_type(self, business_id: str, room_type: RoomType) -> List[Room]:
        """Find rooms of a type"""
        rooms = await self.find_by_business_id(business_id)
        return [r for r in rooms if r.room_type == room_type]

    async def find_by_capacity(self, business_id: str, min_capacity: int) -> List[Room]:
        """Find rooms with at least min_capacity"""
        rooms = await self.find_by_business_id(business_id)
        return [r for r in rooms if r.capacity >= min_capacity]

    async def find_by_price_range(self, business_id: str, min_price: Money, max_price: Money) -> List[Room]:
        """Find rooms priced within the range"""
        rooms = await self.find_by_business_id(business_id)
        return [
            r for r in rooms
            if r.price.currency == min_price.currency
            and min_price.amount <= r.price.amount <= max_price.amount
        ]

    async def find_active(self, business_id: str) -> List[Room]:
        """Find active rooms"""
        rooms = await self.find_by_business_id(business_id)
        return [r for r in rooms if r.is_active]

    async def find_all(self) -> List[Room]:
        """Find all rooms"""
        return list(self._storage.values())

    async def update(self, room_id: str, data: RoomUpdate) -> Optional[Room]:
        """Update room"""
        room = self._storage.get(room_id)
        if room is None:
            return None
        room.update_info(data)
        return room

    async def delete(self, room_id: str) -> bool:
        """Delete room"""
        if room_id in self._storage:
            del self._storage[room_id]
            return True
        return False


class InMemoryTableRepository(TableRepository):
    """In-memory implementation of TableRepository"""

    def __init__(self):
        self._storage: Dict[str, Table] = {}

    async def save(self, table: Table) -> Table:
        """Save table to memory"""
        self._storage[table.table_id] = table
        return table

    async def find_by_id(self, table_id: str) -> Optional[Table]:
        """Find table by ID"""
        return self._storage.get(table_id)

    async def find_by_business_id(self, business_id: str) -> List[Table]:
        """Find tables of a business"""
        return [t for t in self._storage.values() if t.business_id == business_id]

    async def find_by_number(self, business_id: str, number: str) -> Optional[Table]:
        """Find table by number within a business"""
        for table in self._storage.values():
            if table.business_id == business_id and table.number == number:
                return table
        return None

    async def find_by_location(self, business_id: str, location: TableLocation) -> List[Table]:
        """Find tables in a location"""
        tables = await self.find_by_business_id(business_id)
        return [t for t in tables if t.location == location]

    async def find_by_capacity(self, business_id: str, min_capacity: int) -> List[Table]:
        """Find tables with at least min_capacity"""
        tables = await self.find_by_business_id(business_id)
        return [t for t in tables if t.capacity >= min_capacity]

    async def find_active(self, business_id: str) -> List[Table]:
        """Find active tables"""
        tables = await self.find_by_business_id(business_id)
        return [t for t in tables if t.is_active]

    async def find_all(self) -> List[Table]:
        """Find all tables"""
        return list(self._storage.values())

    async def update(self, table_id: str, data: TableUpdate) -> Optional[Table]:
        """Update table"""
        table = self._storage.get(table_id)
        if table is None:
            return None
        table.update_info(data)
        return table

    async def delete(self, table_id: str) -> bool:
        """Delete table"""
        if table_id in self._storage:
            del self._storage[table_id]
            return True
        return False


class InMemoryReservationRepository(ReservationRepository):
    """In-memory implementation of ReservationRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Reservation] = {}

    async def save(self, reservation: Reservation) -> Reservation:
        """Save reservation to memory"""
        self._storage[reservation.reservation_id] = reservation
        return reservation

    async def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        """Find reservation by ID"""
        return self._storage.get(reservation_id)

    async def find_by_customer_id(self, customer_id: str) -> List[Reservation]:
        """Find reservations by customer ID"""
        return [r for r in self._storage.values() if r.customer_id == customer_id]

    async def find_by_business_id(self, business_id: str) -> List[Reservation]:
        """Find reservations by business ID"""
        return [r for r in self._storage.values() if r.business_id == business_id]

    async def find_by_status(self, status: ReservationStatus) -> List[Reservation]:
        """Find reservations in a status"""
        return [r for r in self._storage.values() if r.status == status]

    async def find_by_type(self, resource_type: ReservationType) -> List[Reservation]:
        """Find reservations of a kind"""
        return [r for r in self._storage.values() if r.resource_type == resource_type]

    async def find_by_date_range(self, start: datetime, end: datetime) -> List[Reservation]:
        """Find reservations overlapping the window"""
        window = DateRange(start=start, end=end)
        return [r for r in self._storage.values() if r.date_range.overlaps(window)]

    async def find_overlapping_reservations(
        self, business_id: str, start: datetime, end: datetime
    ) -> List[Reservation]:
        """Find non-cancelled reservations of a business overlapping the window"""
        window = DateRange(start=start, end=end)
        return [
            r for r in self._storage.values()
            if r.business_id == business_id
            and r.status != ReservationStatus.CANCELLED
            and r.date_range.overlaps(window)
        ]

    async def find_active_reservations(self, business_id: str) -> List[Reservation]:
        """Find confirmed reservations of a business"""
        return [
            r for r in self._storage.values()
            if r.business_id == business_id and r.status == ReservationStatus.CONFIRMED
        ]

    async def find_upcoming_reservations(
        self, business_id: str, days: int = 7, now: Optional[datetime] = None
    ) -> List[Reservation]:
        """Find confirmed reservations of a business starting within the next days"""
        window = DateRange.for_days(now or datetime.now(), days)
        active = await self.find_active_reservations(business_id)
        return [r for r in active if window.contains(r.start)]

    async def count_by_status(self, status: ReservationStatus) -> int:
        """Count reservations in a status"""
        return len(await self.find_by_status(status))

    async def find_all(self) -> List[Reservation]:
        """Find all reservations"""
        return list(self._storage.values())

    async def update(self, reservation_id: UUID, data: ReservationUpdate) -> Optional[Reservation]:
        """Update reservation"""
        reservation = self._storage.get(reservation_id)
        if reservation is None:
            return None
        if data.status is not None:
            reservation.status = data.status
        if data.notes is not None:
            reservation.notes = data.notes
        if data.total_amount is not None:
            reservation.total_amount = data.total_amount
        reservation.updated_at = data.updated_at or datetime.utcnow()
        return reservation

    async def delete(self, reservation_id: UUID) -> bool:
        """Delete reservation"""
        if reservation_id in self._storage:
            del self._storage[reservation_id]
            return True
        return False
