"""Availability Engine - which rooms/tables are free for a time window

The engine is read-only and keeps no state between calls: every query
reloads the business, its resource pool and the overlapping reservations
from the repositories. Nothing here serializes a check against a later
save, so two callers can both see a window as free.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel

from domain.entities import Business, Room, Table, Reservation
from domain.enums import BusinessType, ConflictPolicy, RoomType, TableLocation
from domain.errors import (
    BusinessNotFoundError, ResourceNotFoundError, WrongBusinessTypeError,
)
from domain.repositories import (
    BusinessRepository, RoomRepository, TableRepository, ReservationRepository,
)
from domain.value_objects import Money

logger = logging.getLogger(__name__)

Resource = Union[Room, Table]

_TYPE_LABELS = {
    BusinessType.HOTEL: "a hotel",
    BusinessType.RESTAURANT: "a restaurant",
}


class RoomFilters(BaseModel):
    """Optional narrowing of a hotel availability query"""
    room_type: Optional[RoomType] = None
    min_capacity: Optional[int] = None
    min_price: Optional[Money] = None
    max_price: Optional[Money] = None

    def matches(self, room: Room) -> bool:
        if self.room_type is not None and room.room_type != self.room_type:
            return False
        if self.min_capacity is not None and room.capacity < self.min_capacity:
            return False
        if self.min_price is not None and room.price.less_than(self.min_price):
            return False
        if self.max_price is not None and room.price.greater_than(self.max_price):
            return False
        return True


class TableFilters(BaseModel):
    """Optional narrowing of a restaurant availability query"""
    location: Optional[TableLocation] = None
    min_capacity: Optional[int] = None

    def matches(self, table: Table) -> bool:
        if self.location is not None and table.location != self.location:
            return False
        if self.min_capacity is not None and table.capacity < self.min_capacity:
            return False
        return True


Filters = Union[RoomFilters, TableFilters]


class AvailabilityEngine:
    """Computes free resources and conflicts for a business and time window

    Under ConflictPolicy.BUSINESS_WIDE any overlapping reservation of the
    business blocks the whole pool, whichever unit it was made for. Under
    ConflictPolicy.PER_RESOURCE a reservation only blocks the unit named by
    its resource_id; one without a resource_id still blocks everything.
    """

    def __init__(self,
                 business_repo: BusinessRepository,
                 room_repo: RoomRepository,
                 table_repo: TableRepository,
                 reservation_repo: ReservationRepository,
                 conflict_policy: ConflictPolicy = ConflictPolicy.BUSINESS_WIDE):
        self.business_repo = business_repo
        self.room_repo = room_repo
        self.table_repo = table_repo
        self.reservation_repo = reservation_repo
        self.conflict_policy = conflict_policy

    # ==================== BUSINESS / POOL LOOKUP ====================
    async def require_business(
        self,
        business_id: str,
        business_type: Optional[BusinessType] = None
    ) -> Business:
        """Resolve a business, optionally insisting on its type"""
        business = await self.business_repo.find_by_id(business_id)
        if business is None:
            raise BusinessNotFoundError(business_id)
        if business_type is not None and business.business_type != business_type:
            raise WrongBusinessTypeError(f"Business is not {_TYPE_LABELS[business_type]}")
        return business

    async def load_pool(self, business: Business) -> List[Resource]:
        """Every room or table of the business, active or not"""
        if business.is_hotel():
            return await self.room_repo.find_by_business_id(business.business_id)
        return await self.table_repo.find_by_business_id(business.business_id)

    # ==================== AVAILABILITY QUERIES ====================
    async def get_available_rooms(
        self,
        business_id: str,
        start: datetime,
        end: datetime,
        filters: Optional[RoomFilters] = None
    ) -> List[Room]:
        """Rooms of a hotel with no conflicting reservation in [start, end]"""
        business = await self.require_business(business_id, BusinessType.HOTEL)
        return await self._available(business, start, end, filters)

    async def get_available_tables(
        self,
        business_id: str,
        start: datetime,
        end: datetime,
        filters: Optional[TableFilters] = None
    ) -> List[Table]:
        """Tables of a restaurant with no conflicting reservation in [start, end]"""
        business = await self.require_business(business_id, BusinessType.RESTAURANT)
        return await self._available(business, start, end, filters)

    async def check_availability(
        self,
        business_id: str,
        start: datetime,
        end: datetime,
        filters: Optional[Filters] = None
    ) -> List[Resource]:
        """Free resources of any business, dispatching on its type"""
        business = await self.require_business(business_id)
        if isinstance(filters, RoomFilters) and not business.is_hotel():
            raise WrongBusinessTypeError("Room filters require a hotel")
        if isinstance(filters, TableFilters) and not business.is_restaurant():
            raise WrongBusinessTypeError("Table filters require a restaurant")
        return await self._available(business, start, end, filters)

    async def check_room_availability(self, room_id: str, start: datetime, end: datetime) -> bool:
        room = await self.room_repo.find_by_id(room_id)
        if room is None:
            raise ResourceNotFoundError(room_id, "Room")
        return await self._is_unit_free(room, start, end)

    async def check_table_availability(self, table_id: str, start: datetime, end: datetime) -> bool:
        table = await self.table_repo.find_by_id(table_id)
        if table is None:
            raise ResourceNotFoundError(table_id, "Table")
        return await self._is_unit_free(table, start, end)

    async def check_resource_availability(self, resource_id: str, start: datetime, end: datetime) -> bool:
        """Single-unit check for an id that may be a room or a table"""
        resource = await self.room_repo.find_by_id(resource_id)
        if resource is None:
            resource = await self.table_repo.find_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)
        return await self._is_unit_free(resource, start, end)

    async def find_conflicts(
        self,
        business_id: str,
        start: datetime,
        end: datetime,
        resource_id: Optional[str] = None
    ) -> List[Reservation]:
        """Overlapping reservations that would block a booking of resource_id"""
        overlapping = await self.reservation_repo.find_overlapping_reservations(business_id, start, end)
        return self._blocking(overlapping, resource_id)

    async def occupancy_rate(self, business_id: str, start: datetime, end: datetime) -> float:
        """Overlapping reservations per resource, as a percentage

        This counts reservations, not occupied units, so it can exceed 100.
        """
        business = await self.require_business(business_id)
        pool = await self.load_pool(business)
        overlapping = await self.reservation_repo.find_overlapping_reservations(business_id, start, end)

        if not pool:
            return 0.0

        return len(overlapping) / len(pool) * 100

    # ==================== INTERNALS ====================
    async def _available(
        self,
        business: Business,
        start: datetime,
        end: datetime,
        filters: Optional[Filters]
    ) -> List[Resource]:
        pool = await self.load_pool(business)
        overlapping = await self.reservation_repo.find_overlapping_reservations(
            business.business_id, start, end
        )
        logger.debug(
            f"Availability for business {business.business_id} {start} - {end}: "
            f"{len(pool)} resources, {len(overlapping)} overlapping reservations"
        )

        free = self._subtract_occupied(pool, overlapping)
        if len(free) < len(pool):
            logger.info(
                f"{len(pool) - len(free)} of {len(pool)} resources blocked for business "
                f"{business.business_id} ({self.conflict_policy.value})"
            )

        if filters is not None:
            free = [resource for resource in free if filters.matches(resource)]
        return free

    async def _is_unit_free(self, resource: Resource, start: datetime, end: datetime) -> bool:
        if not resource.is_active:
            return False
        conflicts = await self.find_conflicts(resource.business_id, start, end, resource.resource_id)
        return len(conflicts) == 0

    def _subtract_occupied(self, pool: Sequence[Resource], overlapping: Sequence[Reservation]) -> List[Resource]:
        if not overlapping:
            return list(pool)
        if self.conflict_policy == ConflictPolicy.BUSINESS_WIDE:
            return []
        if any(r.resource_id is None for r in overlapping):
            return []
        occupied = {r.resource_id for r in overlapping}
        return [resource for resource in pool if resource.resource_id not in occupied]

    def _blocking(self, overlapping: Sequence[Reservation], resource_id: Optional[str]) -> List[Reservation]:
        if self.conflict_policy == ConflictPolicy.BUSINESS_WIDE or resource_id is None:
            return list(overlapping)
        return [r for r in overlapping if r.resource_id is None or r.resource_id == resource_id]
