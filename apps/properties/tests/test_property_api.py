"""Tests for the property API."""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.properties.models import Property

User = get_user_model()


class PropertyAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(username="realtor", password="StrongPass123")
        self.list_url = reverse("property-list")

    def test_owner_can_create_property(self) -> None:
        self.client.force_authenticate(self.owner)
        payload = {
            "title": "Уютная квартира",
            "description": "Описание объекта",
            "rental_mode": Property.RentalMode.MONTHLY,
        }

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        created = Property.objects.get()
        self.assertEqual(created.owner, self.owner)
        self.assertEqual(created.status, Property.Status.DRAFT)
        self.assertEqual(created.rental_mode, Property.RentalMode.MONTHLY)

    def test_anonymous_sees_only_active_properties(self) -> None:
        Property.objects.create(owner=self.owner, title="Черновик")
        active = Property.objects.create(owner=self.owner, title="Активный", status=Property.Status.ACTIVE)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p["id"] for p in response.data], [active.id])

    def test_filter_by_rental_mode(self) -> None:
        Property.objects.create(owner=self.owner, title="Посуточно", status=Property.Status.ACTIVE)
        monthly = Property.objects.create(
            owner=self.owner,
            title="Помесячно",
            status=Property.Status.ACTIVE,
            rental_mode=Property.RentalMode.MONTHLY,
        )

        response = self.client.get(self.list_url, {"rental_mode": "Monthly"})

        self.assertEqual([p["id"] for p in response.data], [monthly.id])

    def test_rental_mode_locked_while_bookings_exist(self) -> None:
        property_obj = Property.objects.create(owner=self.owner, title="Студия", status=Property.Status.ACTIVE)
        Booking.objects.create(guest=self.owner, property=property_obj, start_date=timezone.localdate())
        self.client.force_authenticate(self.owner)
        url = reverse("property-detail", args=[property_obj.id])

        response = self.client.patch(url, {"rental_mode": Property.RentalMode.MONTHLY}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        property_obj.refresh_from_db()
        self.assertEqual(property_obj.rental_mode, Property.RentalMode.DAILY)

    def test_rental_mode_can_change_on_idle_property(self) -> None:
        property_obj = Property.objects.create(owner=self.owner, title="Студия")
        self.client.force_authenticate(self.owner)

        response = self.client.patch(
            reverse("property-detail", args=[property_obj.id]),
            {"rental_mode": Property.RentalMode.MONTHLY},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_only_owner_can_update(self) -> None:
        property_obj = Property.objects.create(owner=self.owner, title="Студия", status=Property.Status.ACTIVE)
        stranger = User.objects.create_user(username="stranger", password="StrongPass123")
        self.client.force_authenticate(stranger)

        response = self.client.patch(
            reverse("property-detail", args=[property_obj.id]), {"title": "Чужое"}, format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
