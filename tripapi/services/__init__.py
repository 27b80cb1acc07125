"""Services module."""
from tripapi.services.poi_search_service import POISearchService

__all__ = [
    "POISearchService",
]
