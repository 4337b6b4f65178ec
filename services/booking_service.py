# Booking Service — tour bookings
# total_price is computed once, from the tour's price at submission time, and
# stored on the booking. Later price edits on the tour never touch it.

import logging
from typing import Dict, List, Optional

from config import BOOKINGS, TOURS, PROFILES
from models.schemas import BookingCreate
from services.i18n_service import resolve_text
from services.listing_service import compute_total_price, status_class
from services.query_service import ListingStore, ReadQuery, Relation

logger = logging.getLogger(__name__)

BOOKING_TOUR    = Relation(field="tour_id", collection=TOURS, alias="tour", fields=("title", "slug"))
BOOKING_PROFILE = Relation(field="user_id", collection=PROFILES, alias="profile", fields=("full_name",))


def booking_view(row: Dict, locale: str) -> Dict:
    tour = row.get("tour") or {}
    return {
        "id":           row["id"],
        "tour_id":      row.get("tour_id"),
        "tour_title":   resolve_text(tour.get("title"), locale),
        "tour_slug":    tour.get("slug"),
        "booking_date": row.get("booking_date"),
        "participants": row.get("participants"),
        "total_price":  row.get("total_price"),
        "status":       row.get("status"),
        "status_class": status_class(row.get("status")),
        "created_at":   row.get("created_at")
    }


def create_booking(store: ListingStore, user_id: str, data: BookingCreate) -> Optional[Dict]:
    """Insert a pending booking; None when the tour does not exist."""
    tour = store.get(TOURS, data.tour_id)
    if tour is None:
        return None

    row = store.insert(BOOKINGS, {
        "tour_id":      data.tour_id,
        "user_id":      user_id,
        "booking_date": data.booking_date.isoformat(),
        "participants": data.participants,
        "total_price":  compute_total_price(tour.get("price"), data.participants),
        "status":       "pending"
    })
    logger.info("booking %s: %d × %s for user %s", row["id"], data.participants, data.tour_id, user_id)
    return row


def get_booking(store: ListingStore, booking_id: str) -> Optional[Dict]:
    return store.get(BOOKINGS, booking_id)


def my_bookings(store: ListingStore, user_id: str, locale: str) -> List[Dict]:
    rows = store.select(ReadQuery(
        collection=BOOKINGS,
        filters=(("user_id", user_id),),
        order_by=(("created_at", True),),
        relations=(BOOKING_TOUR,)
    ))
    return [booking_view(r, locale) for r in rows]


def admin_list_bookings(store: ListingStore, locale: str) -> List[Dict]:
    rows = store.select(ReadQuery(
        collection=BOOKINGS,
        order_by=(("created_at", True),),
        relations=(BOOKING_TOUR, BOOKING_PROFILE)
    ))
    views = []
    for row in rows:
        view                  = booking_view(row, locale)
        view["user_id"]       = row.get("user_id")
        view["customer_name"] = (row.get("profile") or {}).get("full_name")
        views.append(view)
    return views


def set_booking_status(store: ListingStore, booking_id: str, status: str) -> Optional[Dict]:
    return store.update(BOOKINGS, booking_id, {"status": status})
