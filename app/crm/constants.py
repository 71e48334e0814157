"""
Central constants for the CRM application.
"""
from __future__ import annotations

# Lookup table contents (customer_statuses.name)
CUSTOMER_STATUSES = ("active", "churned", "prospect")
DEFAULT_CUSTOMER_STATUS = "prospect"

# Lookup table contents (order_item_categories.name)
ORDER_ITEM_CATEGORIES = ("Suit", "Shirt", "Trousers", "Dress", "Jacket", "Coat")

# Customer list paging
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
MAX_SEARCH_LENGTH = 100

# The three body measurements that make up a custom size, in wire order.
MEASUREMENT_FIELDS = ("chest", "waist", "hips")
