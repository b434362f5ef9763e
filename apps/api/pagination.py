# apps/api/pagination.py
from rest_framework.pagination import PageNumberPagination


class StandardPagination(PageNumberPagination):
    """Page-number pagination; ?page=2&limit=25."""
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100
