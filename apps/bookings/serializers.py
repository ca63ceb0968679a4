"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.properties.models import Property

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Создание посуточной брони гостем. Пустая end_date занимает одни сутки."""

    property = serializers.PrimaryKeyRelatedField(queryset=Property.objects.all())
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True, default=None)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        start_date = attrs["start_date"]
        end_date = attrs.get("end_date")
        if end_date is not None and end_date <= start_date:
            raise serializers.ValidationError("Дата выезда должна быть позже даты заезда.")
        property_obj = attrs["property"]
        if property_obj.status != Property.Status.ACTIVE:
            raise serializers.ValidationError("Объект недоступен для бронирования.")
        return attrs


class BookingSerializer(serializers.ModelSerializer):
    """Детальный сериализатор бронирования."""

    guest_id = serializers.ReadOnlyField(source="guest.id")
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")

    class Meta:
        model = Booking
        fields = [
            "id",
            "guest_id",
            "property_id",
            "property_title",
            "start_date",
            "end_date",
            "status",
            "special_requests",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
