# Train Service — train routes, bookable train tickets and ticket requests
#
# Routes are read pre-sorted by train type → origin → departure and grouped
# by train type for display; group order is first appearance in that list.
# Ticket requests are plain request rows: no seat or availability check.

import logging
from typing import Dict, List, Optional

from config import TRAIN_ROUTES, TRAIN_TICKETS, TRAIN_TICKET_REQUESTS
from data.train_schedule import TRAIN_SCHEDULE
from models.schemas import (
    TrainRouteIn, TrainRouteUpdate, TrainTicketIn, TrainTicketUpdate, TrainTicketRequestCreate
)
from services.i18n_service import resolve_text
from services.listing_service import group_routes_by_type, display_price
from services.query_service import ListingStore, ReadQuery, Relation

logger = logging.getLogger(__name__)

ROUTE_ORDER = (("train_type", False), ("from_city", False), ("departure_time", False))
NEWEST      = (("created_at", True),)

REQUEST_TICKET = Relation(
    field="train_ticket_id", collection=TRAIN_TICKETS, alias="ticket", fields=("route", "train_type")
)


# ── Routes ──────────────────────────────────────────────────────────────────

def route_view(row: Dict) -> Dict:
    return {
        "id":             row["id"],
        "train_type":     row.get("train_type"),
        "from_city":      row.get("from_city"),
        "to_city":        row.get("to_city"),
        "departure_time": row.get("departure_time"),
        "arrival_time":   row.get("arrival_time"),
        "operating_days": row.get("operating_days") or "Daily",
        "price":          display_price(row.get("price")),
        "currency":       row.get("currency")
    }


def published_routes(store: ListingStore) -> List[Dict]:
    rows = store.select(ReadQuery(
        collection=TRAIN_ROUTES,
        filters=(("status", "published"),),
        order_by=ROUTE_ORDER
    ))
    groups = group_routes_by_type(route_view(r) for r in rows)
    return [{"train_type": name, "routes": routes} for name, routes in groups.items()]


def schedule(locale: str) -> List[Dict]:
    """The static timetable, grouped by train type."""
    rows = [
        {
            "train_type": item["train_type"],
            "route":      resolve_text(item["route"], locale),
            "entries": [
                {"departure": dep, "arrival": arr, "note": note}
                for dep, arr, note in item["entries"]
            ]
        }
        for item in TRAIN_SCHEDULE
    ]
    groups = group_routes_by_type(rows)
    return [{"train_type": name, "routes": routes} for name, routes in groups.items()]


def admin_list_routes(store: ListingStore) -> List[Dict]:
    return store.select(ReadQuery(collection=TRAIN_ROUTES, order_by=ROUTE_ORDER))


def create_route(store: ListingStore, data: TrainRouteIn) -> Dict:
    return store.insert(TRAIN_ROUTES, data.model_dump())


def update_route(store: ListingStore, route_id: str, data: TrainRouteUpdate) -> Optional[Dict]:
    return store.update(TRAIN_ROUTES, route_id, data.model_dump(exclude_unset=True))


def delete_route(store: ListingStore, route_id: str) -> bool:
    return store.delete(TRAIN_ROUTES, route_id)


# ── Tickets ─────────────────────────────────────────────────────────────────

def ticket_view(row: Dict, locale: str) -> Dict:
    duration = row.get("duration") or 0
    return {
        "id":          row["id"],
        "route":       resolve_text(row.get("route"), locale),
        "train_type":  resolve_text(row.get("train_type"), locale),
        "description": resolve_text(row.get("description"), locale),
        "duration":    duration if duration > 0 else None,
        "price_from":  float(row.get("price_from") or 0)
    }


def list_tickets(store: ListingStore, locale: str) -> List[Dict]:
    rows = store.select(ReadQuery(collection=TRAIN_TICKETS, order_by=NEWEST))
    return [ticket_view(r, locale) for r in rows]


def request_ticket(
    store: ListingStore,
    ticket_id: str,
    user_id: Optional[str],
    data: TrainTicketRequestCreate
) -> Optional[Dict]:
    """Store a ticket request; None when the ticket does not exist."""
    if store.get(TRAIN_TICKETS, ticket_id) is None:
        return None

    row = store.insert(TRAIN_TICKET_REQUESTS, {
        "train_ticket_id": ticket_id,
        "user_id":         user_id,
        "full_name":       data.full_name,
        "phone":           data.phone,
        "email":           data.email,
        "travel_date":     data.travel_date.isoformat(),
        "passengers":      data.passengers,
        "notes":           data.notes,
        "status":          "pending"
    })
    logger.info("ticket request %s for ticket %s", row["id"], ticket_id)
    return row


def admin_list_tickets(store: ListingStore) -> List[Dict]:
    return store.select(ReadQuery(collection=TRAIN_TICKETS, order_by=NEWEST))


def create_ticket(store: ListingStore, data: TrainTicketIn) -> Dict:
    return store.insert(TRAIN_TICKETS, data.model_dump())


def update_ticket(store: ListingStore, ticket_id: str, data: TrainTicketUpdate) -> Optional[Dict]:
    return store.update(TRAIN_TICKETS, ticket_id, data.model_dump(exclude_unset=True))


def delete_ticket(store: ListingStore, ticket_id: str) -> bool:
    return store.delete(TRAIN_TICKETS, ticket_id)


def admin_list_ticket_requests(store: ListingStore, locale: str) -> List[Dict]:
    rows = store.select(ReadQuery(
        collection=TRAIN_TICKET_REQUESTS, order_by=NEWEST, relations=(REQUEST_TICKET,)
    ))
    for row in rows:
        ticket              = row.pop("ticket", None) or {}
        row["ticket_route"] = resolve_text(ticket.get("route"), locale)
    return rows
