"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.cache import EXPERIENCE_LIST_KEY, experience_detail_key
from bookings.domain import BookingRequest
from bookings.domain.errors import DomainError, ErrorCode, InvalidFieldError
from bookings.handlers.serializers import (
    BookingSerializer,
    ExperienceSerializer,
    PromoCodeSerializer,
    SlotSerializer,
)
from bookings.services import BookingService, CatalogService, PromoCodeLedger
from bookings.stores import DjangoBookingStore

ERROR_STATUS = {
    ErrorCode.MISSING_FIELD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_FIELD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PROMO: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.TRANSACTION_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=ERROR_STATUS[error.code],
    )


def _payload(request: Request) -> dict:
    return request.data if isinstance(request.data, dict) else {}


class ExperienceListView(APIView):
    """Handler for GET /api/experiences"""

    def get(self, request: Request) -> Response:
        search = request.query_params.get("search")
        if not search:
            cached = cache.get(EXPERIENCE_LIST_KEY)
            if cached is not None:
                return Response(cached)
        try:
            experiences = CatalogService(DjangoBookingStore()).list_experiences(search)
        except DomainError as error:
            return error_response(error)
        data = ExperienceSerializer(experiences, many=True).data
        if not search:
            cache.set(EXPERIENCE_LIST_KEY, data, settings.CATALOG_CACHE_TTL)
        return Response(data)


class ExperienceDetailView(APIView):
    """Handler for GET /api/experiences/{experience_id}"""

    def get(self, request: Request, experience_id: str) -> Response:
        try:
            key = experience_detail_key(experience_id)
        except ValueError:
            return error_response(InvalidFieldError("experience_id"))
        cached = cache.get(key)
        if cached is not None:
            return Response(cached)
        try:
            experience = CatalogService(DjangoBookingStore()).get_experience(experience_id)
        except DomainError as error:
            return error_response(error)
        data = ExperienceSerializer(experience).data
        cache.set(key, data, settings.CATALOG_CACHE_TTL)
        return Response(data)


class SlotListView(APIView):
    """Handler for GET /api/experiences/{experience_id}/slots"""

    def get(self, request: Request, experience_id: str) -> Response:
        try:
            slots = CatalogService(DjangoBookingStore()).get_upcoming_slots(experience_id)
        except DomainError as error:
            return error_response(error)
        return Response(SlotSerializer(slots, many=True).data)


class PromoCodeApplyView(APIView):
    """Handler for POST /api/promo-codes/apply"""

    def post(self, request: Request) -> Response:
        ledger = PromoCodeLedger(DjangoBookingStore())
        try:
            promo_code = ledger.apply(_payload(request).get("code"), timezone.now())
        except DomainError as error:
            return error_response(error)
        return Response(PromoCodeSerializer(promo_code).data)


class BookingCreateView(APIView):
    """Handler for POST /api/bookings"""

    def post(self, request: Request) -> Response:
        payload = _payload(request)
        booking_request = BookingRequest(
            experience_id=payload.get("experienceId"),
            slot_id=payload.get("slotId"),
            customer_name=payload.get("customerName"),
            customer_email=payload.get("customerEmail"),
            quantity=payload.get("quantity", 1),
            promo_code_id=payload.get("promoCodeId"),
            total_price=payload.get("totalPrice"),
        )
        try:
            booking = BookingService(DjangoBookingStore()).submit(booking_request)
        except DomainError as error:
            return error_response(error)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class BookingDetailView(APIView):
    """Handler for GET /api/bookings/{booking_id}"""

    def get(self, request: Request, booking_id: str) -> Response:
        try:
            booking = BookingService(DjangoBookingStore()).get_booking(booking_id)
        except DomainError as error:
            return error_response(error)
        return Response(BookingSerializer(booking).data)
