from fastapi import APIRouter, Depends, HTTPException
from routers.deps import get_locale, get_store
from services.query_service import ListingStore
from services.tour_service import list_cities, get_city

router = APIRouter(prefix="/cities", tags=["cities"])


@router.get("/")
def cities(locale: str = Depends(get_locale), store: ListingStore = Depends(get_store)):
    return list_cities(store, locale)


@router.get("/{slug}")
def city_detail(slug: str, locale: str = Depends(get_locale), store: ListingStore = Depends(get_store)):
    """A city with the tours that start there."""
    city = get_city(store, slug, locale)
    if city is None:
        raise HTTPException(status_code=404, detail=f"City '{slug}' not found")
    return city
