"""
Location autocomplete built from the cities and postal codes of existing listings.
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from realty.services.property import PropertyService
from realty.schemas.property import LocationSuggestion
from realty.utils.dependencies import get_property_service


router = APIRouter(prefix="/locations", tags=["Locations"])


@router.get(
    "",
    response_model=List[LocationSuggestion],
    summary="Autocomplete locations",
    description="Up to 20 unique city and postal code pairs matching the search term."
)
async def search_locations(
    search: Optional[str] = Query(None, max_length=100),
    property_service: PropertyService = Depends(get_property_service)
) -> List[LocationSuggestion]:
    results = await property_service.search_locations(search)
    return [LocationSuggestion(**r) for r in results]
