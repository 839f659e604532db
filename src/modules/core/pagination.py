"""Shared pagination classes for list endpoints."""

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """Page-number pagination with a client-selectable ``limit`` (max 100)."""

    page_size_query_param = "limit"
    max_page_size = 100
