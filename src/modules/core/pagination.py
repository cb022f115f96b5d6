"""Shared pagination classes."""

from __future__ import annotations

from django.conf import settings
from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """Page-number pagination driven by ``?page=`` and ``?limit=``."""

    page_size = settings.REST_FRAMEWORK.get("PAGE_SIZE", 20)
    page_size_query_param = "limit"
    max_page_size = 100


class SmallResultsSetPagination(StandardResultsSetPagination):
    """Same query parameters with a default page of 10."""

    page_size = 10
