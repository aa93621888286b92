from bookings.services.booking_service import BookingService
from bookings.services.catalog_service import CatalogService
from bookings.services.promo_ledger import PromoCodeLedger
from bookings.services.slot_ledger import SlotLedger

__all__ = ["BookingService", "CatalogService", "PromoCodeLedger", "SlotLedger"]
