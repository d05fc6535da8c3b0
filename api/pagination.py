from rest_framework.pagination import PageNumberPagination


class LedgerPagination(PageNumberPagination):
    """Page size from REST_FRAMEWORK["PAGE_SIZE"]; clients may request up to 100 per page."""
    page_size_query_param = 'page_size'
    max_page_size = 100
