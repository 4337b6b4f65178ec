from fastapi import APIRouter, Depends, HTTPException
from models.schemas import BookingCreate
from routers.deps import get_locale, get_store, require_user
from services.auth_service import SessionContext
from services.booking_service import create_booking, my_bookings
from services.query_service import ListingStore

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("/", status_code=201)
def book_tour(
    req: BookingCreate,
    session: SessionContext = Depends(require_user),
    store: ListingStore = Depends(get_store)
):
    """
    Book a tour for the signed-in user.
    The total is priced from the tour as it is right now and stored as-is.
    """
    booking = create_booking(store, session.user.id, req)
    if booking is None:
        raise HTTPException(status_code=404, detail=f"Tour '{req.tour_id}' not found")
    return booking


@router.get("/mine")
def mine(
    session: SessionContext = Depends(require_user),
    locale: str = Depends(get_locale),
    store: ListingStore = Depends(get_store)
):
    return my_bookings(store, session.user.id, locale)
