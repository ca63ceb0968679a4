"""API views for the rentals domain."""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.domain.value_objects import DateRange

from apps.properties.models import Property

from .application.coordinator import ActionResult, Refusal
from .application.rental_requests import Rejection, SubmitRentalRequestCommand
from .domain.entities import RentalMode
from .models import RentalRequest
from .serializers import (
    AvailabilityQuerySerializer,
    CanRequestQuerySerializer,
    RentalRequestCreateSerializer,
    RentalRequestRespondSerializer,
    RentalRequestSerializer,
    TenantLeaseInfoSerializer,
)
from .services import build_coordinator, build_lease_calculator, build_rental_request_service


REFUSAL_STATUS = {
    Refusal.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Refusal.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    Refusal.INVALID: status.HTTP_400_BAD_REQUEST,
    Refusal.CONFLICT: status.HTTP_409_CONFLICT,
}


def refused_response(result: ActionResult) -> Response:
    code = REFUSAL_STATUS.get(result.refusal, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({"detail": result.reason}, status=code)


class AvailabilityView(APIView):
    """Проверка доступности объекта для посуточной или помесячной аренды."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        result = build_coordinator().check_availability(
            data["property"], DateRange(data["start"], data["end"]), RentalMode(data["mode"]),
        )
        return Response(result.to_dict())


class RentalRequestViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Заявки на долгосрочную аренду.

    Список по умолчанию содержит заявки текущего пользователя;
    ?scope=landlord возвращает ожидающие ответа заявки на его объекты,
    ?property=<id> все заявки на принадлежащий ему объект.
    """

    queryset = RentalRequest.objects.select_related("property", "user").all()
    permission_classes = [permissions.IsAuthenticated]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return RentalRequestCreateSerializer
        if self.action == "respond":
            return RentalRequestRespondSerializer
        if self.action == "can_request":
            return CanRequestQuerySerializer
        return RentalRequestSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if getattr(user, "is_staff", False):
            return qs
        return qs.filter(Q(user=user) | Q(property__owner=user))

    def list(self, request, *args, **kwargs):  # type: ignore
        service = build_rental_request_service()
        user = request.user

        if request.query_params.get("scope") == "landlord":
            requests = service.pending_for_landlord(user.pk)
        elif "property" in request.query_params:
            try:
                property_id = int(request.query_params["property"])
            except (TypeError, ValueError):
                return Response({"detail": "property must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
            property_obj = get_object_or_404(Property, pk=property_id)
            if property_obj.owner_id != user.pk and not getattr(user, "is_staff", False):
                return Response(
                    {"detail": "Заявки на объект видит только его владелец."},
                    status=status.HTTP_403_FORBIDDEN,
                )
            requests = service.for_property(property_id)
        else:
            requests = service.for_user(user.pk)

        return Response(self._serialize([r.id for r in requests]))

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = build_coordinator().submit_rental_request(SubmitRentalRequestCommand(
            property_id=data["property"].pk,
            user_id=request.user.pk,
            start=data["proposed_start"],
            end=data["proposed_end"],
            lease_duration_months=data["lease_duration_months"],
            message=data.get("message", ""),
        ))
        if not result.created:
            code = status.HTTP_400_BAD_REQUEST if result.rejection == Rejection.INVALID else status.HTTP_409_CONFLICT
            return Response({"available": result.available, "reason": result.reason}, status=code)

        record = RentalRequest.objects.select_related("property").get(pk=result.request.id)
        read_serializer = RentalRequestSerializer(record, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"])
    def respond(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        request_id = int(pk)
        result = build_coordinator().respond_to_request(
            request_id,
            serializer.validated_data["approved"],
            serializer.validated_data["note"],
            user_id=request.user.pk,
        )
        if not result:
            return refused_response(result)
        return self._read(request_id)

    @action(detail=True, methods=["post"])
    def withdraw(self, request, pk=None):  # type: ignore
        request_id = int(pk)
        result = build_coordinator().withdraw_request(request_id, request.user.pk)
        if not result:
            return refused_response(result)
        return self._read(request_id)

    @action(detail=False, methods=["get"], url_path="can-request")
    def can_request(self, request):  # type: ignore
        """Может ли пользователь подать заявку и свободны ли выбранные даты."""
        query = self.get_serializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        coordinator = build_coordinator()
        dates_free = None
        if data.get("start") and data.get("end"):
            dates_free = coordinator.validate_rental_availability(
                data["property"], DateRange(data["start"], data["end"]),
            )
        return Response({
            "property": data["property"],
            "can_request": coordinator.can_request_property(request.user.pk, data["property"]),
            "dates_free": dates_free,
        })

    @action(detail=False, methods=["get"], url_path="starting-soon", permission_classes=[permissions.IsAdminUser])
    def starting_soon(self, request):  # type: ignore
        """Одобренные договоры, начинающиеся в ближайшие ?days= дней."""
        try:
            days = int(request.query_params.get("days", 30))
        except (TypeError, ValueError):
            return Response({"detail": "days must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
        if days < 0:
            return Response({"detail": "days must not be negative"}, status=status.HTTP_400_BAD_REQUEST)

        requests = build_rental_request_service().expiring_contracts(days)
        return Response(self._serialize([r.id for r in requests]))

    def _serialize(self, request_ids: list[int]) -> list:
        records = RentalRequest.objects.select_related("property").in_bulk(request_ids)
        ordered = [records[request_id] for request_id in request_ids if request_id in records]
        return RentalRequestSerializer(ordered, many=True, context=self.get_serializer_context()).data

    def _read(self, request_id: int) -> Response:
        record = RentalRequest.objects.select_related("property").get(pk=request_id)
        return Response(RentalRequestSerializer(record, context=self.get_serializer_context()).data)


class ExpiringLeasesView(APIView):
    """Договоры, заканчивающиеся в ближайшие ?days= дней."""

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):  # type: ignore
        try:
            days = int(request.query_params.get("days", 30))
        except (TypeError, ValueError):
            return Response({"detail": "days must be an integer"}, status=status.HTTP_400_BAD_REQUEST)
        if days < 0:
            return Response({"detail": "days must not be negative"}, status=status.HTTP_400_BAD_REQUEST)

        calculator = build_lease_calculator()
        leases = [calculator.lease_info(tenant) for tenant in calculator.list_expiring(days)]
        return Response(TenantLeaseInfoSerializer(leases, many=True).data)


class ExpiredLeasesView(APIView):
    """Действующие арендаторы, чей договор уже закончился."""

    permission_classes = [permissions.IsAdminUser]

    def get(self, request):  # type: ignore
        calculator = build_lease_calculator()
        leases = [calculator.lease_info(tenant) for tenant in calculator.list_expired()]
        return Response(TenantLeaseInfoSerializer(leases, many=True).data)
