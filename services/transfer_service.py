# Transfer Service — private transfers and transfer booking requests

import logging
from typing import Dict, List, Optional

from config import TRANSFERS, TRANSFER_BOOKINGS
from models.schemas import TransferIn, TransferUpdate, TransferBookingCreate
from services.query_service import ListingStore, ReadQuery, Relation

logger = logging.getLogger(__name__)

NEWEST = (("created_at", True),)

BOOKING_TRANSFER = Relation(
    field="transfer_id", collection=TRANSFERS, alias="transfer", fields=("from_city", "to_city", "vehicle_type")
)


class TooManyPassengers(ValueError):
    def __init__(self, passengers: int, max_passengers: int):
        super().__init__(f"this transfer takes at most {max_passengers} passengers, got {passengers}")
        self.passengers     = passengers
        self.max_passengers = max_passengers


def transfer_view(row: Dict) -> Dict:
    return {
        "id":             row["id"],
        "from_city":      row.get("from_city"),
        "to_city":        row.get("to_city"),
        "vehicle_type":   row.get("vehicle_type"),
        "max_passengers": row.get("max_passengers"),
        "price":          float(row.get("price") or 0),
        "currency":       row.get("currency") or "USD",
        "description":    row.get("description"),
        "image_url":      row.get("image_url")
    }


def list_transfers(store: ListingStore) -> List[Dict]:
    rows = store.select(ReadQuery(
        collection=TRANSFERS,
        filters=(("status", "published"),),
        order_by=NEWEST
    ))
    return [transfer_view(r) for r in rows]


def book_transfer(
    store: ListingStore,
    transfer_id: str,
    user_id: Optional[str],
    data: TransferBookingCreate
) -> Optional[Dict]:
    """Store a transfer booking request; None when the transfer does not exist."""
    transfer = store.get(TRANSFERS, transfer_id)
    if transfer is None:
        return None

    limit = transfer.get("max_passengers")
    if limit and data.passengers > limit:
        raise TooManyPassengers(data.passengers, limit)

    row = store.insert(TRANSFER_BOOKINGS, {
        "transfer_id": transfer_id,
        "user_id":     user_id,
        "full_name":   data.full_name,
        "phone":       data.phone,
        "email":       data.email,
        "pickup_date": data.pickup_date.isoformat(),
        "passengers":  data.passengers,
        "notes":       data.notes,
        "status":      "pending"
    })
    logger.info("transfer booking %s for transfer %s", row["id"], transfer_id)
    return row


# ── Admin ───────────────────────────────────────────────────────────────────

def admin_list_transfers(store: ListingStore) -> List[Dict]:
    return store.select(ReadQuery(collection=TRANSFERS, order_by=NEWEST))


def create_transfer(store: ListingStore, data: TransferIn) -> Dict:
    return store.insert(TRANSFERS, data.model_dump())


def update_transfer(store: ListingStore, transfer_id: str, data: TransferUpdate) -> Optional[Dict]:
    return store.update(TRANSFERS, transfer_id, data.model_dump(exclude_unset=True))


def delete_transfer(store: ListingStore, transfer_id: str) -> bool:
    return store.delete(TRANSFERS, transfer_id)


def admin_list_transfer_bookings(store: ListingStore) -> List[Dict]:
    return store.select(ReadQuery(
        collection=TRANSFER_BOOKINGS, order_by=NEWEST, relations=(BOOKING_TRANSFER,)
    ))
