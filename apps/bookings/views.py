"""API views for the booking domain."""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.rentals.application.coordinator import CreateDailyBookingCommand
from apps.rentals.services import build_coordinator
from apps.rentals.views import refused_response

from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer


class IsBookingStakeholder(permissions.BasePermission):
    """Гости, владельцы объектов и персонал имеют доступ к бронированию."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return True
        return obj.guest_id == user.id or obj.property.owner_id == user.id


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Создание и просмотр посуточных бронирований.

    Новая бронь создаётся только через координатор аренды, который
    проверяет режим объекта и доступность под блокировкой объекта.
    """

    queryset = Booking.objects.select_related("property", "guest", "property__owner").all()
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(Q(guest=user) | Q(property__owner=user))

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = build_coordinator().create_daily_booking(CreateDailyBookingCommand(
            property_id=data["property"].pk,
            user_id=request.user.pk,
            start=data["start_date"],
            end=data.get("end_date"),
            special_requests=data.get("special_requests", ""),
        ))
        if not result.created:
            code = status.HTTP_400_BAD_REQUEST if result.invalid else status.HTTP_409_CONFLICT
            return Response({"available": False, "reason": result.reason}, status=code)

        booking = Booking.objects.select_related("property").get(pk=result.booking.id)
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        result = build_coordinator().cancel_booking(booking.pk, request.data.get("reason", ""))
        if not result:
            return refused_response(result)
        return Response({"status": Booking.Status.CANCELLED}, status=status.HTTP_200_OK)
