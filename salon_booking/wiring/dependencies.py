from functools import lru_cache
import logging

from salon_booking.core.config import settings
from salon_booking.application.ports.booking_store import BookingStorePort
from salon_booking.application.ports.clock import ClockPort
from salon_booking.application.ports.notifier import NotificationPort
from salon_booking.application.use_cases.booking_access import BookingAccessPolicy
from salon_booking.application.use_cases.booking import BookingUseCase
from salon_booking.application.use_cases.booking_queries import BookingQueryUseCase
from salon_booking.infrastructure.catalog.memory_catalog import MemoryCatalog
from salon_booking.infrastructure.catalog.seed_data import build_catalog
from salon_booking.infrastructure.clock import SystemClock
from salon_booking.infrastructure.notifications.logging_notifier import LoggingNotifier
from salon_booking.infrastructure.notifications.webhook_notifier import WebhookNotifier
from salon_booking.infrastructure.store.json_store import JsonBookingStore
from salon_booking.infrastructure.store.memory_store import MemoryBookingStore


_booking_store: BookingStorePort | None = None


@lru_cache
def get_catalog() -> MemoryCatalog:
    return build_catalog()


def get_booking_store() -> BookingStorePort:
    global _booking_store
    if _booking_store is None:
        if settings.STORE_PROVIDER.lower() == "json":
            _booking_store = JsonBookingStore(path=settings.BOOKING_DATA_PATH)
        else:
            _booking_store = MemoryBookingStore()
    return _booking_store


@lru_cache
def get_clock() -> ClockPort:
    return SystemClock()


@lru_cache
def get_notifier() -> NotificationPort:
    logger = logging.getLogger(__name__)
    if settings.NOTIFY_WEBHOOK_URL:
        logger.info("Using WebhookNotifier")
        return WebhookNotifier(settings.NOTIFY_WEBHOOK_URL, timeout=settings.NOTIFY_TIMEOUT_SECONDS)
    logger.info("Using LoggingNotifier (NOTIFY_WEBHOOK_URL not set)")
    return LoggingNotifier()


@lru_cache
def get_booking_use_case() -> BookingUseCase:
    catalog = get_catalog()
    return BookingUseCase(
        salons=catalog,
        services=catalog,
        staff=catalog,
        bookings=get_booking_store(),
        clock=get_clock(),
        notifier=get_notifier(),
        slot_interval_minutes=settings.SLOT_INTERVAL_MINUTES,
        cancellation_window_hours=settings.CANCELLATION_WINDOW_HOURS,
        notes_max_length=settings.NOTES_MAX_LENGTH,
    )


@lru_cache
def get_booking_access_policy() -> BookingAccessPolicy:
    catalog = get_catalog()
    return BookingAccessPolicy(salons=catalog, staff=catalog, bookings=get_booking_store())


@lru_cache
def get_booking_query_use_case() -> BookingQueryUseCase:
    return BookingQueryUseCase(bookings=get_booking_store(), clock=get_clock())
