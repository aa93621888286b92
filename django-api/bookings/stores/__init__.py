from bookings.stores.django_store import DjangoBookingStore
from bookings.stores.interfaces import BookingStore, StoreConflictError, StoreError
from bookings.stores.memory_store import InMemoryBookingStore

__all__ = [
    "BookingStore",
    "DjangoBookingStore",
    "InMemoryBookingStore",
    "StoreConflictError",
    "StoreError",
]
