"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import BlockedPeriod, Property


class PropertySerializer(serializers.ModelSerializer):
    """Публичное представление объекта."""

    owner_id = serializers.ReadOnlyField(source="owner.id")

    class Meta:
        model = Property
        fields = [
            "id",
            "owner_id",
            "title",
            "description",
            "status",
            "rental_mode",
            "published_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PropertyWriteSerializer(serializers.ModelSerializer):
    """Создание и редактирование объекта владельцем."""

    class Meta:
        model = Property
        fields = [
            "title",
            "description",
            "status",
            "rental_mode",
        ]

    def validate_rental_mode(self, value):  # type: ignore
        instance = self.instance
        if instance is None or instance.rental_mode == value:
            return value
        if instance.bookings.exclude(status="Cancelled").exists() or instance.tenants.filter(status="Active").exists():
            raise serializers.ValidationError(
                "Нельзя сменить режим аренды, пока у объекта есть бронирования или действующие договоры."
            )
        return value


class BlockedPeriodSerializer(serializers.ModelSerializer):
    """Период блокировки объекта владельцем."""

    property_id = serializers.ReadOnlyField(source="property.id")
    created_by_id = serializers.ReadOnlyField(source="created_by.id")

    class Meta:
        model = BlockedPeriod
        fields = [
            "id",
            "property_id",
            "start_date",
            "end_date",
            "reason",
            "created_by_id",
            "created_at",
        ]
        read_only_fields = ["id", "property_id", "created_by_id", "created_at"]

    def validate(self, attrs):  # type: ignore
        start_date = attrs.get("start_date")
        end_date = attrs.get("end_date")
        if start_date and end_date and end_date <= start_date:
            raise serializers.ValidationError("Дата окончания должна быть позже даты начала.")
        return attrs
