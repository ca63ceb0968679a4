"""Serializers for the rentals domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.properties.models import Property

from .domain.entities import RentalMode
from .models import RentalRequest


class AvailabilityQuerySerializer(serializers.Serializer):
    property = serializers.IntegerField(min_value=1)
    start = serializers.DateField()
    end = serializers.DateField()
    mode = serializers.ChoiceField(choices=[m.value for m in RentalMode])

    def validate(self, attrs):  # type: ignore
        if attrs["end"] <= attrs["start"]:
            raise serializers.ValidationError("end must be after start")
        return attrs


class CanRequestQuerySerializer(serializers.Serializer):
    """Даты необязательны; без них проверяется только право подать заявку."""

    property = serializers.IntegerField(min_value=1)
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):  # type: ignore
        start, end = attrs.get("start"), attrs.get("end")
        if (start is None) != (end is None):
            raise serializers.ValidationError("start and end go together")
        if start is not None and end <= start:
            raise serializers.ValidationError("end must be after start")
        return attrs


class RentalRequestCreateSerializer(serializers.Serializer):
    """Заявка арендатора на долгосрочную аренду."""

    property = serializers.PrimaryKeyRelatedField(queryset=Property.objects.all())
    proposed_start = serializers.DateField()
    proposed_end = serializers.DateField()
    lease_duration_months = serializers.IntegerField(min_value=1)
    message = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        if attrs["proposed_end"] <= attrs["proposed_start"]:
            raise serializers.ValidationError("Дата окончания должна быть позже даты начала.")
        return attrs


class RentalRequestRespondSerializer(serializers.Serializer):
    approved = serializers.BooleanField()
    note = serializers.CharField(required=False, allow_blank=True, default="")


class RentalRequestSerializer(serializers.ModelSerializer):
    """Детальный сериализатор заявки."""

    user_id = serializers.ReadOnlyField(source="user.id")
    property_id = serializers.ReadOnlyField(source="property.id")
    property_title = serializers.ReadOnlyField(source="property.title")

    class Meta:
        model = RentalRequest
        fields = [
            "id",
            "user_id",
            "property_id",
            "property_title",
            "proposed_start",
            "proposed_end",
            "lease_duration_months",
            "status",
            "message",
            "request_date",
            "landlord_response",
            "response_date",
        ]
        read_only_fields = fields


class TenantLeaseInfoSerializer(serializers.Serializer):
    """Read-only view of apps.rentals.application.lease_calculator.TenantLeaseInfo"""

    tenant_id = serializers.IntegerField(source="tenant.id")
    user_id = serializers.IntegerField(source="tenant.user_id")
    property_id = serializers.IntegerField(source="tenant.property_id")
    lease_start = serializers.DateField()
    lease_end = serializers.DateField(allow_null=True)
    lease_duration_months = serializers.IntegerField(allow_null=True)
    remaining_days = serializers.IntegerField(allow_null=True)
    is_expired = serializers.BooleanField()
    is_expiring_soon = serializers.BooleanField()
