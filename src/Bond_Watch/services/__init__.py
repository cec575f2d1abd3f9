"""Bond fetching, pricing, token lookup, and caching services.

Re-exports all public service classes so consumers can import directly:
    from Bond_Watch.services import BondService, PriceService
"""

from Bond_Watch.services.bonds import (
    BondService,
    bonds_query_key,
    exclude_sold_out,
    sort_by_discount,
)
from Bond_Watch.services.cache import CacheEntry, ServiceCache
from Bond_Watch.services.pricing import PriceService
from Bond_Watch.services.token_registry import TokenRegistry

__all__ = [
    # Infrastructure
    "CacheEntry",
    "ServiceCache",
    # Data services
    "BondService",
    "PriceService",
    "TokenRegistry",
    # Query helpers
    "bonds_query_key",
    "exclude_sold_out",
    "sort_by_discount",
]
