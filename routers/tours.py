from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from routers.deps import get_locale, get_store
from services.query_service import ListingStore
from services.tour_service import list_tours, get_tour

router = APIRouter(prefix="/tours", tags=["tours"])


@router.get("/")
def tours(
    city: Optional[str] = Query(None, description="City slug"),
    locale: str = Depends(get_locale),
    store: ListingStore = Depends(get_store)
):
    """All tours, or only those of one city. An unknown city yields an empty list."""
    return list_tours(store, locale, city_slug=city)


@router.get("/{slug}")
def tour_detail(slug: str, locale: str = Depends(get_locale), store: ListingStore = Depends(get_store)):
    tour = get_tour(store, slug, locale)
    if tour is None:
        raise HTTPException(status_code=404, detail=f"Tour '{slug}' not found")
    return tour
