"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Customers browse active products; administrators manage the catalog
under ``admin/products``.  Domain exceptions propagate to the standard
exception handler.
"""

from __future__ import annotations

from typing import Any, Dict

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import IsAdminRole
from modules.core.pagination import StandardResultsSetPagination
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

UUID_LOOKUP = r"[0-9a-fA-F-]{36}"

_UPDATE_FIELDS = (
    "name_en",
    "name_fr",
    "price",
    "size",
    "color",
    "allowed_quantities",
    "related_products",
    "is_active",
)


def _supplied(data: Dict[str, Any], *fields: str) -> Dict[str, Any]:
    return {field: data[field] for field in fields if field in data}


class ProductViewSet(GenericViewSet):
    """Catalog browsing for authenticated users.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Only active products are listed or resolvable by reference.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ProductSerializer
    pagination_class = StandardResultsSetPagination
    lookup_value_regex = UUID_LOOKUP
    queryset = Product.objects.all()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_queryset(self):
        return self._service.list_active_products().order_by("reference")

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(ProductSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(pk)
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"])
    def search(self, request: Request) -> Response:
        """GET /api/v1/products/search/?q=primer"""
        products = self._service.search_products(request.query_params.get("q", ""))
        return Response({"results": ProductSerializer(products, many=True).data})

    @action(detail=False, methods=["get"], url_path=r"reference/(?P<reference>[^/]+)")
    def by_reference(self, request: Request, reference: str) -> Response:
        """GET /api/v1/products/reference/{reference}/"""
        product = self._service.get_product_by_reference(reference)
        return Response(ProductSerializer(product).data)

    @action(detail=True, methods=["get"])
    def related(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/related/"""
        products = self._service.get_related_products(pk)
        return Response({"results": ProductSerializer(products, many=True).data})


class AdminProductViewSet(GenericViewSet):
    """Administrator catalog management, inactive products included."""

    permission_classes = [IsAdminRole]
    serializer_class = ProductSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["reference", "name_en", "price", "created_at"]
    ordering = ["reference"]
    lookup_value_regex = UUID_LOOKUP
    queryset = Product.objects.all()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_queryset(self):
        return self._service.list_products()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/products/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(ProductSerializer(page, many=True).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/admin/products/"""
        dto = CreateProductDTO(
            **_supplied(
                request.data,
                "reference",
                "name_en",
                "name_fr",
                "price",
                "size",
                "color",
                "allowed_quantities",
                "related_products",
            )
        )
        product = self._service.create_product(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/admin/products/{pk}/"""
        dto = UpdateProductDTO(**_supplied(request.data, *_UPDATE_FIELDS))
        product = self._service.update_product(pk, dto)
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/admin/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/products/{pk}/

        Deactivates the product; order history keeps its snapshots.
        """
        self._service.delete_product(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["put"], url_path=r"reference/(?P<reference>[^/]+)")
    def update_by_reference(self, request: Request, reference: str) -> Response:
        """PUT /api/v1/admin/products/reference/{reference}/

        Accepts ``new_reference`` to rename the product.
        """
        dto = UpdateProductDTO(**_supplied(request.data, *_UPDATE_FIELDS, "new_reference"))
        product = self._service.update_product_by_reference(reference, dto)
        return Response(ProductSerializer(product).data)
