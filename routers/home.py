from fastapi import APIRouter, Depends
from routers.deps import get_locale, get_store
from services.query_service import ListingStore
from services.tour_service import home

router = APIRouter(tags=["home"])


@router.get("/home")
def landing(locale: str = Depends(get_locale), store: ListingStore = Depends(get_store)):
    """Featured tours, cities, transfers and train tickets for the landing page."""
    return home(store, locale)
