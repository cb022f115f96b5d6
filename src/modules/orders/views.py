"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.

- ``OrderViewSet``: a customer's own orders (``/orders/``).
- ``AdminOrderViewSet``: every order, for administrators
  (``/admin/orders/``).

Authorization is decided by the service (``OrderAccessPolicy``), never
by filtering querysets in the view; domain exceptions propagate to the
standard exception handler.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import IsAdminRole
from modules.core.pagination import (
    SmallResultsSetPagination,
    StandardResultsSetPagination,
)
from modules.orders.catalog import ProductCatalogGateway
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    UpdateStatusSerializer,
    VersionedRequestSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from shared.domain.actor import Actor

UUID_LOOKUP = r"[0-9a-fA-F-]{36}"
ITEM_PATH = r"items/(?P<index>-?\d+)"


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        catalog_gateway=ProductCatalogGateway(ProductDjangoRepository()),
    )


def _expected_version(request: Request) -> int | None:
    serializer = VersionedRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data["expected_version"]


class OrderMutationMixin:
    """Item removal and cancellation, shared by owner and admin routes."""

    _service: OrderService

    @action(detail=True, methods=["put", "delete"], url_path=ITEM_PATH)
    def remove_item(self, request: Request, pk: str | None = None, index: str = "0") -> Response:
        """PUT|DELETE .../orders/{pk}/items/{index}/

        Removes the line at *index*.  Removing the last line deletes the
        order, reported as ``{"deleted": true}``.
        """
        outcome = self._service.remove_item(
            order_id=pk,
            index=int(index),
            actor=Actor.from_user(request.user),
            expected_version=_expected_version(request),
        )
        if outcome.deleted:
            return Response(
                {"detail": "Order deleted (no items remaining).", "deleted": True}
            )
        return Response(OrderSerializer(outcome.order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST .../orders/{pk}/cancel/"""
        order = self._service.cancel_order(
            order_id=pk,
            actor=Actor.from_user(request.user),
            expected_version=_expected_version(request),
        )
        return Response(OrderSerializer(order).data)


class OrderViewSet(OrderMutationMixin, GenericViewSet):
    """ViewSet for a customer's own orders.

    Uses ``OrderService`` with injected repository and catalog gateway
    (DIP).  Does **not** extend ``ModelViewSet``; all ORM access goes
    through the service/repository layer.
    """

    permission_classes = [IsAuthenticated]
    pagination_class = SmallResultsSetPagination
    serializer_class = OrderSerializer
    lookup_value_regex = UUID_LOOKUP
    queryset = Order.objects.all()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_orders_for(Actor.from_user(self.request.user))

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in data["items"]
            ],
            notes=data.get("notes", ""),
        )
        order = self._service.create_order(dto, Actor.from_user(request.user))
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/ (own orders, newest first, paginated)"""
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(OrderListSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk, Actor.from_user(request.user))
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/

        Cancels the order and returns it; the record is kept.
        ``POST .../cancel/`` is an alias.
        """
        return self.cancel(request, pk=pk)


class AdminOrderViewSet(OrderMutationMixin, GenericViewSet):
    """Administrator view over every order."""

    permission_classes = [IsAdminRole]
    pagination_class = StandardResultsSetPagination
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["created_at", "total", "status"]
    ordering = ["-created_at", "-id"]
    lookup_value_regex = UUID_LOOKUP
    queryset = Order.objects.all()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_queryset(self):
        return self._service.list_orders()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/orders/?status=pending"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(OrderListSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/orders/{pk}/"""
        order = self._service.get_order(pk, Actor.from_user(request.user))
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/orders/{pk}/"""
        self._service.delete_order(pk, Actor.from_user(request.user))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["put"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/admin/orders/{pk}/status/"""
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.update_status(
            order_id=pk,
            new_status=serializer.validated_data["status"],
            actor=Actor.from_user(request.user),
            expected_version=serializer.validated_data["expected_version"],
        )
        return Response(OrderSerializer(order).data)
