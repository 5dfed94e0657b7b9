"""Application Services - Business use cases"""
import logging
from uuid import UUID
from datetime import datetime
from typing import List, Optional, Union

from application.availability import AvailabilityEngine
from domain.repositories import (
    BusinessRepository, RoomRepository, TableRepository, ReservationRepository,
)
from domain.entities import (
    Business, BusinessUpdate, Reservation, Room, Table,
    RoomUpdate, TableUpdate, ReservationUpdate,
)
from domain.enums import (
    BusinessType, ReservationStatus, ReservationType, RoomType, TableLocation,
)
from domain.errors import (
    BusinessNotFoundError, DuplicateResourceNumberError, InactiveResourceError, InvalidTypeError,
    NoResourcesAvailableError, ReservationConflictError, ReservationNotFoundError,
    ResourceNotFoundError, WrongBusinessTypeError,
)
from domain.value_objects import DateRange, Money

logger = logging.getLogger(__name__)

_UNIT_LABELS = {
    ReservationType.HOTEL: "rooms",
    ReservationType.RESTAURANT: "tables",
}


class ReservationService:
    """Service for Reservation business use cases"""

    def __init__(self,
                 repository: ReservationRepository,
                 engine: AvailabilityEngine,
                 reject_past_dates: bool = False):
        self.repository = repository
        self.engine = engine
        self.reject_past_dates = reject_past_dates

    async def create_reservation(
        self,
        customer_id: str,
        business_id: str,
        resource_type: Union[ReservationType, str],
        start: datetime,
        end: datetime,
        guests: int,
        total_amount: Money,
        notes: Optional[str] = None,
        resource_id: Optional[str] = None
    ) -> Reservation:
        """Check the window against existing bookings and create a PENDING reservation

        The check and the save are not atomic: concurrent calls for the same
        business and window can both pass the check.
        """
        try:
            resource_type = ReservationType(resource_type)
        except ValueError:
            raise InvalidTypeError("Invalid reservation type")
        units = _UNIT_LABELS[resource_type]

        business = await self.engine.require_business(business_id, BusinessType(resource_type.value))
        date_range = DateRange.create(start, end, reject_past=self.reject_past_dates)

        pool = await self.engine.load_pool(business)
        if not pool:
            raise NoResourcesAvailableError(f"No {units} available for this business")
        if resource_id is not None:
            unit = next((r for r in pool if r.resource_id == resource_id), None)
            if unit is None:
                raise ResourceNotFoundError(resource_id)
            if not unit.is_active:
                raise InactiveResourceError(f"Selected {units[:-1]} is not active")

        conflicts = await self.engine.find_conflicts(
            business_id, date_range.start, date_range.end, resource_id
        )
        if conflicts:
            logger.info(
                f"Rejected {resource_type.value} booking for business {business_id} "
                f"({date_range}): {len(conflicts)} conflicting reservations"
            )
            raise ReservationConflictError(
                f"No {units} available for the selected date range", conflicts
            )

        reservation = Reservation.create(
            business_id=business_id,
            customer_id=customer_id,
            resource_type=resource_type,
            date_range=date_range,
            guests=guests,
            total_amount=total_amount,
            notes=notes,
            resource_id=resource_id
        )
        saved = await self.repository.save(reservation)
        logger.info(f"Created reservation {saved.reservation_id} for business {business_id} ({date_range})")
        return saved

    async def create_hotel_reservation(self, customer_id: str, business_id: str, start: datetime,
                                       end: datetime, guests: int, total_amount: Money,
                                       notes: Optional[str] = None,
                                       room_id: Optional[str] = None) -> Reservation:
        return await self.create_reservation(
            customer_id, business_id, ReservationType.HOTEL, start, end,
            guests, total_amount, notes=notes, resource_id=room_id
        )

    async def create_restaurant_reservation(self, customer_id: str, business_id: str, start: datetime,
                                            end: datetime, guests: int, total_amount: Money,
                                            notes: Optional[str] = None,
                                            table_id: Optional[str] = None) -> Reservation:
        return await self.create_reservation(
            customer_id, business_id, ReservationType.RESTAURANT, start, end,
            guests, total_amount, notes=notes, resource_id=table_id
        )

    # ==================== STATE TRANSITIONS ====================
    async def confirm_reservation(self, reservation_id: Union[UUID, str]) -> Reservation:
        reservation = await self.get_reservation(reservation_id)
        reservation.confirm()
        return await self._persist(reservation, ReservationUpdate(status=reservation.status))

    async def cancel_reservation(self, reservation_id: Union[UUID, str]) -> Reservation:
        reservation = await self.get_reservation(reservation_id)
        reservation.cancel()
        return await self._persist(reservation, ReservationUpdate(status=reservation.status))

    async def complete_reservation(self, reservation_id: Union[UUID, str]) -> Reservation:
        reservation = await self.get_reservation(reservation_id)
        reservation.complete()
        return await self._persist(reservation, ReservationUpdate(status=reservation.status))

    async def update_notes(self, reservation_id: Union[UUID, str], notes: str) -> Reservation:
        reservation = await self.get_reservation(reservation_id)
        reservation.update_notes(notes)
        return await self._persist(reservation, ReservationUpdate(notes=reservation.notes))

    async def update_total_amount(self, reservation_id: Union[UUID, str], amount: Money) -> Reservation:
        reservation = await self.get_reservation(reservation_id)
        reservation.update_total_amount(amount)
        return await self._persist(reservation, ReservationUpdate(total_amount=reservation.total_amount))

    # ==================== QUERIES ====================
    async def get_reservation(self, reservation_id: Union[UUID, str]) -> Reservation:
        """Get reservation by ID (UUID or its string form)"""
        try:
            key = UUID(str(reservation_id))
        except ValueError:
            raise ReservationNotFoundError(reservation_id)
        reservation = await self.repository.find_by_id(key)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    async def get_customer_reservations(self, customer_id: str) -> List[Reservation]:
        """Get all reservations for a customer"""
        return await self.repository.find_by_customer_id(customer_id)

    async def get_business_reservations(self, business_id: str) -> List[Reservation]:
        """Get all reservations for a business"""
        await self.engine.require_business(business_id)
        return await self.repository.find_by_business_id(business_id)

    async def get_reservations_by_status(self, status: ReservationStatus) -> List[Reservation]:
        return await self.repository.find_by_status(status)

    async def get_reservations_by_type(self, resource_type: ReservationType) -> List[Reservation]:
        return await self.repository.find_by_type(resource_type)

    async def get_reservations_by_date_range(self, start: datetime, end: datetime) -> List[Reservation]:
        return await self.repository.find_by_date_range(start, end)

    async def get_active_reservations(self, business_id: str) -> List[Reservation]:
        """CONFIRMED reservations of a business"""
        await self.engine.require_business(business_id)
        return await self.repository.find_active_reservations(business_id)

    async def get_upcoming_reservations(
        self,
        business_id: str,
        days: int = 7,
        now: Optional[datetime] = None
    ) -> List[Reservation]:
        """CONFIRMED reservations of a business starting within the next `days`"""
        await self.engine.require_business(business_id)
        return await self.repository.find_upcoming_reservations(business_id, days, now)

    async def count_reservations_by_status(self, status: ReservationStatus) -> int:
        return await self.repository.count_by_status(status)

    async def _persist(self, reservation: Reservation, data: ReservationUpdate) -> Reservation:
        data.updated_at = reservation.updated_at
        updated = await self.repository.update(reservation.reservation_id, data)
        if updated is None:
            raise ReservationNotFoundError(reservation.reservation_id)
        logger.debug(f"Reservation {updated.reservation_id} is now {updated.status.value}")
        return updated


class BusinessService:
    """Service for Business use cases"""

    def __init__(self, repository: BusinessRepository):
        self.repository = repository

    async def create_business(
        self,
        name: str,
        business_type: Union[BusinessType, str],
        owner_id: str,
        email: str,
        phone: str,
        address: str = "",
        description: Optional[str] = None
    ) -> Business:
        business = Business.create(
            name=name,
            business_type=business_type,
            owner_id=owner_id,
            email=email,
            phone=phone,
            address=address,
            description=description
        )
        saved = await self.repository.save(business)
        logger.info(f"Created {saved.business_type.value} business {saved.business_id}")
        return saved

    async def update_business(self, business_id: str, data: BusinessUpdate) -> Business:
        """Re-validates name, phone and email before anything is stored"""
        await self.get_business(business_id)
        updated = await self.repository.update(business_id, data)
        if updated is None:
            raise BusinessNotFoundError(business_id)
        return updated

    async def get_business(self, business_id: str) -> Business:
        business = await self.repository.find_by_id(business_id)
        if business is None:
            raise BusinessNotFoundError(business_id)
        return business

    async def get_businesses_by_owner(self, owner_id: str) -> List[Business]:
        return await self.repository.find_by_owner_id(owner_id)


class _ResourceService:
    """Shared pool management for rooms and tables"""

    business_type: BusinessType
    kind: str

    def __init__(self,
                 business_repo: BusinessRepository,
                 repository,
                 reservation_repo: ReservationRepository,
                 default_currency: str = "USD"):
        self.business_repo = business_repo
        self.repository = repository
        self.reservation_repo = reservation_repo
        self.default_currency = default_currency

    async def _require_business(self, business_id: str):
        business = await self.business_repo.find_by_id(business_id)
        if business is None:
            raise BusinessNotFoundError(business_id)
        if business.business_type != self.business_type:
            raise WrongBusinessTypeError(f"Business is not a {self.business_type.value.lower()}")
        return business

    async def _ensure_number_free(self, business_id: str, number: str) -> None:
        existing = await self.repository.find_by_number(business_id, number)
        if existing is not None:
            raise DuplicateResourceNumberError(
                f"{self.kind} number already exists for this business"
            )

    async def _get(self, resource_id: str):
        resource = await self.repository.find_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id, self.kind)
        return resource

    async def _update(self, resource_id: str, data):
        await self._get(resource_id)
        updated = await self.repository.update(resource_id, data)
        if updated is None:
            raise ResourceNotFoundError(resource_id, self.kind)
        return updated

    async def _delete(self, resource_id: str) -> bool:
        await self._get(resource_id)
        return await self.repository.delete(resource_id)

    async def _by_number(self, business_id: str, number: str):
        await self._require_business(business_id)
        resource = await self.repository.find_by_number(business_id, number)
        if resource is None:
            raise ResourceNotFoundError(number, self.kind)
        return resource

    async def _revenue(self, business_id: str, start: datetime, end: datetime) -> Money:
        """Total of COMPLETED reservations of this kind overlapping the window"""
        await self._require_business(business_id)
        reservation_type = ReservationType(self.business_type.value)
        reservations = await self.reservation_repo.find_by_date_range(start, end)
        completed = [
            r for r in reservations
            if r.business_id == business_id
            and r.resource_type == reservation_type
            and r.status == ReservationStatus.COMPLETED
        ]

        if not completed:
            return Money.zero(self.default_currency)

        total = Money.zero(completed[0].total_amount.currency)
        for reservation in completed:
            total = total.add(reservation.total_amount)
        return total


class RoomService(_ResourceService):
    """Service for hotel Room use cases"""

    business_type = BusinessType.HOTEL
    kind = "Room"

    def __init__(self,
                 business_repo: BusinessRepository,
                 room_repo: RoomRepository,
                 reservation_repo: ReservationRepository,
                 default_currency: str = "USD"):
        super().__init__(business_repo, room_repo, reservation_repo, default_currency)

    async def create_room(
        self,
        business_id: str,
        number: str,
        room_type: Union[RoomType, str],
        capacity: int,
        price: Money,
        description: Optional[str] = None
    ) -> Room:
        """Create a room; the number must be unique within the hotel"""
        await self._require_business(business_id)
        await self._ensure_number_free(business_id, number)

        room = Room.create(
            business_id=business_id,
            number=number,
            room_type=room_type,
            capacity=capacity,
            price=price,
            description=description
        )
        saved = await self.repository.save(room)
        logger.info(f"Created room {saved.number} ({saved.room_id}) for business {business_id}")
        return saved

    async def update_room(self, room_id: str, data: RoomUpdate) -> Room:
        return await self._update(room_id, data)

    async def activate_room(self, room_id: str) -> Room:
        return await self._update(room_id, RoomUpdate(is_active=True))

    async def deactivate_room(self, room_id: str) -> Room:
        return await self._update(room_id, RoomUpdate(is_active=False))

    async def delete_room(self, room_id: str) -> bool:
        return await self._delete(room_id)

    async def get_room_by_id(self, room_id: str) -> Room:
        return await self._get(room_id)

    async def get_room_by_number(self, business_id: str, number: str) -> Room:
        return await self._by_number(business_id, number)

    async def get_all_rooms(self) -> List[Room]:
        return await self.repository.find_all()

    async def get_rooms_by_business(self, business_id: str) -> List[Room]:
        await self._require_business(business_id)
        return await self.repository.find_by_business_id(business_id)

    async def get_active_rooms(self, business_id: str) -> List[Room]:
        await self._require_business(business_id)
        return await self.repository.find_active(business_id)

    async def get_rooms_by_type(self, business_id: str, room_type: RoomType) -> List[Room]:
        await self._require_business(business_id)
        return await self.repository.find_by_type(business_id, room_type)

    async def get_rooms_by_capacity(self, business_id: str, min_capacity: int) -> List[Room]:
        await self._require_business(business_id)
        return await self.repository.find_by_capacity(business_id, min_capacity)

    async def get_rooms_by_price_range(self, business_id: str, min_price: Money, max_price: Money) -> List[Room]:
        await self._require_business(business_id)
        return await self.repository.find_by_price_range(business_id, min_price, max_price)

    async def get_room_revenue(self, business_id: str, start: datetime, end: datetime) -> Money:
        return await self._revenue(business_id, start, end)


class TableService(_ResourceService):
    """Service for restaurant Table use cases"""

    business_type = BusinessType.RESTAURANT
    kind = "Table"

    def __init__(self,
                 business_repo: BusinessRepository,
                 table_repo: TableRepository,
                 reservation_repo: ReservationRepository,
                 default_currency: str = "USD"):
        super().__init__(business_repo, table_repo, reservation_repo, default_currency)

    async def create_table(
        self,
        business_id: str,
        number: str,
        capacity: int,
        location: Union[TableLocation, str],
        description: Optional[str] = None
    ) -> Table:
        """Create a table; the number must be unique within the restaurant"""
        await self._require_business(business_id)
        await self._ensure_number_free(business_id, number)

        table = Table.create(
            business_id=business_id,
            number=number,
            capacity=capacity,
            location=location,
            description=description
        )
        saved = await self.repository.save(table)
        logger.info(f"Created table {saved.number} ({saved.table_id}) for business {business_id}")
        return saved

    async def update_table(self, table_id: str, data: TableUpdate) -> Table:
        return await self._update(table_id, data)

    async def activate_table(self, table_id: str) -> Table:
        return await self._update(table_id, TableUpdate(is_active=True))

    async def deactivate_table(self, table_id: str) -> Table:
        return await self._update(table_id, TableUpdate(is_active=False))

    async def delete_table(self, table_id: str) -> bool:
        return await self._delete(table_id)

    async def get_table_by_id(self, table_id: str) -> Table:
        return await self._get(table_id)

    async def get_table_by_number(self, business_id: str, number: str) -> Table:
        return await self._by_number(business_id, number)

    async def get_all_tables(self) -> List[Table]:
        return await self.repository.find_all()

    async def get_tables_by_business(self, business_id: str) -> List[Table]:
        await self._require_business(business_id)
        return await self.repository.find_by_business_id(business_id)

    async def get_active_tables(self, business_id: str) -> List[Table]:
        await self._require_business(business_id)
        return await self.repository.find_active(business_id)

    async def get_tables_by_location(self, business_id: str, location: TableLocation) -> List[Table]:
        await self._require_business(business_id)
        return await self.repository.find_by_location(business_id, location)

    async def get_tables_by_capacity(self, business_id: str, min_capacity: int) -> List[Table]:
        await self._require_business(business_id)
        return await self.repository.find_by_capacity(business_id, min_capacity)

    async def get_table_revenue(self, business_id: str, start: datetime, end: datetime) -> Money:
        return await self._revenue(business_id, start, end)
