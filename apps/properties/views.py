"""Property API views."""

from __future__ import annotations

from datetime import date

from django.db import models  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, permissions, serializers, viewsets  # type: ignore

from .models import BlockedPeriod, Property
from .serializers import BlockedPeriodSerializer, PropertySerializer, PropertyWriteSerializer


class IsPropertyOwnerOrAdmin(permissions.BasePermission):
    """Позволяет управлять объектом его владельцу и персоналу."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj: Property | BlockedPeriod):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return True
        owner_id = obj.owner_id if isinstance(obj, Property) else obj.property.owner_id
        return owner_id == user.id


class PropertyViewSet(viewsets.ModelViewSet):
    """Viewset для управления объектами недвижимости."""

    queryset = Property.objects.select_related("owner")
    permission_classes = [IsPropertyOwnerOrAdmin]
    filterset_fields = ["status", "rental_mode"]

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if not user.is_authenticated:
            return qs.filter(status=Property.Status.ACTIVE)
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(models.Q(status=Property.Status.ACTIVE) | models.Q(owner=user))

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return PropertyWriteSerializer
        return PropertySerializer

    def perform_create(self, serializer):  # type: ignore
        serializer.save(owner=self.request.user)


class PropertyCalendarMixin:
    """Вспомогательный миксин для получения объекта и проверки прав."""

    property_lookup_url_kwarg = "property_id"
    permission_classes = [permissions.IsAuthenticated, IsPropertyOwnerOrAdmin]

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        property_id = kwargs.get(self.property_lookup_url_kwarg)
        self.property_object = get_object_or_404(Property, pk=property_id)
        self.check_object_permissions(request, self.property_object)

    def get_property(self) -> Property:
        return self.property_object

    def get_serializer_context(self):  # type: ignore
        context = super().get_serializer_context()
        context["property"] = getattr(self, "property_object", None)
        return context


class BlockedPeriodViewSet(
    PropertyCalendarMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Управление блокировками календаря владельцем."""

    serializer_class = BlockedPeriodSerializer
    queryset = BlockedPeriod.objects.select_related("property", "created_by").all()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset().filter(property=self.get_property())
        start = self.request.query_params.get("start")
        end = self.request.query_params.get("end")

        if start:
            qs = qs.filter(end_date__gt=start)
        if end:
            qs = qs.filter(start_date__lt=end)

        return qs.order_by("start_date")

    def _validate_overlap(self, start_date: date, end_date: date) -> None:
        overlap_filter = models.Q(start_date__lt=end_date) & models.Q(end_date__gt=start_date)
        if BlockedPeriod.objects.filter(property=self.get_property()).filter(overlap_filter).exists():
            raise serializers.ValidationError(
                "Невозможно создать блокировку: выбранные даты пересекаются с существующей блокировкой."
            )

    def perform_create(self, serializer):  # type: ignore
        self._validate_overlap(serializer.validated_data["start_date"], serializer.validated_data["end_date"])
        serializer.save(property=self.get_property(), created_by=self.request.user)
