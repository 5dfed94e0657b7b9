"""Composition root - wires repositories, engine and services"""
import logging
from dataclasses import dataclass
from typing import Optional

from application.availability import AvailabilityEngine
from application.services import BusinessService, ReservationService, RoomService, TableService
from infrastructure.config import Settings, get_settings
from infrastructure.logging_config import setup_logging
from infrastructure.repositories.in_memory_repositories import (
    InMemoryBusinessRepository, InMemoryRoomRepository,
    InMemoryTableRepository, InMemoryReservationRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class BookingServices:
    """Everything a caller (controller, AI extraction, notifications) needs"""
    settings: Settings
    business_repo: InMemoryBusinessRepository
    room_repo: InMemoryRoomRepository
    table_repo: InMemoryTableRepository
    reservation_repo: InMemoryReservationRepository
    engine: AvailabilityEngine
    businesses: BusinessService
    reservations: ReservationService
    rooms: RoomService
    tables: TableService


def build_services(settings: Optional[Settings] = None) -> BookingServices:
    """Build a fresh, fully wired set of services backed by in-memory storage"""
    settings = settings or get_settings()

    business_repo = InMemoryBusinessRepository()
    room_repo = InMemoryRoomRepository()
    table_repo = InMemoryTableRepository()
    reservation_repo = InMemoryReservationRepository()

    engine = AvailabilityEngine(
        business_repo, room_repo, table_repo, reservation_repo,
        conflict_policy=settings.CONFLICT_POLICY
    )

    services = BookingServices(
        settings=settings,
        business_repo=business_repo,
        room_repo=room_repo,
        table_repo=table_repo,
        reservation_repo=reservation_repo,
        engine=engine,
        businesses=BusinessService(business_repo),
        reservations=ReservationService(
            reservation_repo, engine, reject_past_dates=settings.REJECT_PAST_DATES
        ),
        rooms=RoomService(
            business_repo, room_repo, reservation_repo, default_currency=settings.DEFAULT_CURRENCY
        ),
        tables=TableService(
            business_repo, table_repo, reservation_repo, default_currency=settings.DEFAULT_CURRENCY
        ),
    )
    logger.debug(f"{settings.APP_NAME} wired with {settings.CONFLICT_POLICY.value} conflict policy")
    return services


if __name__ == "__main__":
    settings = get_settings()
    setup_logging(settings)
    build_services(settings)
    logger.info(f"{settings.APP_NAME} ready")
