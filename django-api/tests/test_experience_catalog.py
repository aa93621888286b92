"""Integration tests for the experience catalog endpoints.

Run with: pytest tests/test_experience_catalog.py -v
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.core.cache import cache
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from bookings import models
from bookings.cache import EXPERIENCE_LIST_KEY


@pytest.mark.django_db
class TestExperienceList:
    """Tests for GET /api/experiences"""

    def test_list_experiences_returns_all(self, api_client: APIClient, experience):
        response = api_client.get(reverse("experience-list"))

        assert response.status_code == 200
        assert len(response.data) == 1
        assert response.data[0]["id"] == str(experience.id)
        assert response.data[0]["basePrice"] == "1000.00"

    def test_list_experiences_empty_catalog(self, api_client: APIClient):
        response = api_client.get(reverse("experience-list"))

        assert response.status_code == 200
        assert response.data == []

    def test_list_experiences_search(self, api_client: APIClient, experience):
        models.Experience.objects.create(
            title="Scuba", description="Reef dive", location="Andaman", base_price=Decimal("5")
        )

        response = api_client.get(reverse("experience-list"), {"search": "reef"})

        assert [e["title"] for e in response.data] == ["Scuba"]

    def test_list_experiences_cached_response(self, api_client: APIClient, experience):
        cache.set(EXPERIENCE_LIST_KEY, [{"title": "from cache"}])

        response = api_client.get(reverse("experience-list"))

        assert response.data == [{"title": "from cache"}]


@pytest.mark.django_db
class TestExperienceDetail:
    """Tests for GET /api/experiences/{id}"""

    def test_get_experience_returns_details(self, api_client: APIClient, experience):
        response = api_client.get(reverse("experience-detail", args=[experience.id]))

        assert response.status_code == 200
        assert response.data["title"] == "Sunrise Trek"
        assert response.data["location"] == "Manali"
        assert response.data["images"] == []

    def test_get_experience_includes_gallery(self, api_client: APIClient, experience):
        experience.image_url = "https://img.example.com/main.jpg"
        experience.images = ["https://img.example.com/1.jpg", "https://img.example.com/2.jpg"]
        experience.save()

        response = api_client.get(reverse("experience-detail", args=[experience.id]))

        assert response.data["imageUrl"] == "https://img.example.com/main.jpg"
        assert response.data["images"] == [
            "https://img.example.com/1.jpg",
            "https://img.example.com/2.jpg",
        ]

    def test_get_experience_not_found(self, api_client: APIClient):
        response = api_client.get(reverse("experience-detail", args=[uuid4()]))

        assert response.status_code == 404
        assert response.data["error"]["code"] == "NOT_FOUND"

    def test_get_experience_invalid_id_format(self, api_client: APIClient):
        response = api_client.get(reverse("experience-detail", args=["abc"]))

        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_FIELD"


@pytest.mark.django_db
class TestSlotList:
    """Tests for GET /api/experiences/{id}/slots"""

    def test_list_slots_ordered_by_start_time(self, api_client: APIClient, experience, slot):
        later = models.Slot.objects.create(
            experience=experience, starts_at=timezone.now() + timedelta(days=5)
        )
        models.Slot.objects.create(
            experience=experience, starts_at=timezone.now() - timedelta(days=1)
        )

        response = api_client.get(reverse("slot-list", args=[experience.id]))

        assert response.status_code == 200
        assert [s["id"] for s in response.data] == [str(slot.id), str(later.id)]
        assert response.data[0]["available"] == 5

    def test_list_slots_experience_not_found(self, api_client: APIClient):
        response = api_client.get(reverse("slot-list", args=[uuid4()]))

        assert response.status_code == 404
