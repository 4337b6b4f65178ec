# Tour Service — tours, cities and the home page
#
# Tours filtered by city go through two reads: all cities are fetched, the
# slug is matched to a city id, and only then are tours queried by city_id.
# An unknown slug stops after the first read and yields no tours.

from typing import Any, Dict, List, Optional

from config import TOURS, CITIES, TRANSFERS, TRAIN_TICKETS, HOME_LIMITS
from models.schemas import TourIn, TourUpdate, CityIn, CityUpdate
from services.i18n_service import resolve_text, resolve_list
from services.listing_service import find_by_slug, cover_image
from services.query_service import ListingStore, ReadQuery, Relation
from services.train_service import ticket_view
from services.transfer_service import transfer_view

TOUR_CITY = Relation(field="city_id", collection=CITIES, alias="city", fields=("name", "slug"))


class SlugTakenError(Exception):
    def __init__(self, collection: str, slug: str):
        super().__init__(f"{collection} slug '{slug}' is already in use")
        self.collection = collection
        self.slug       = slug


# ── Projections ─────────────────────────────────────────────────────────────

def city_ref_view(ref: Optional[Dict[str, Any]], locale: str) -> Optional[Dict[str, Any]]:
    if not ref:
        return None
    return {"name": resolve_text(ref.get("name"), locale), "slug": ref.get("slug")}


def tour_card(row: Dict[str, Any], locale: str) -> Dict[str, Any]:
    return {
        "id":          row["id"],
        "slug":        row.get("slug"),
        "title":       resolve_text(row.get("title"), locale),
        "description": resolve_text(row.get("description"), locale),
        "price":       float(row.get("price") or 0),
        "duration":    int(row.get("duration") or 1),
        "cover_image": cover_image(row.get("images")),
        "city_id":     row.get("city_id"),
        "city":        city_ref_view(row.get("city"), locale)
    }


def tour_detail(row: Dict[str, Any], locale: str) -> Dict[str, Any]:
    view = tour_card(row, locale)
    view.update({
        "itinerary": resolve_text(row.get("itinerary"), locale),
        "included":  resolve_list(row.get("included"), locale),
        "excluded":  resolve_list(row.get("excluded"), locale),
        "images":    list(row.get("images") or [])
    })
    return view


def city_view(row: Dict[str, Any], locale: str) -> Dict[str, Any]:
    return {
        "id":          row["id"],
        "slug":        row.get("slug"),
        "name":        resolve_text(row.get("name"), locale),
        "description": resolve_text(row.get("description"), locale),
        "cover_image": row.get("cover_image")
    }


# ── Public reads ────────────────────────────────────────────────────────────

def list_tours(store: ListingStore, locale: str, city_slug: Optional[str] = None) -> List[Dict]:
    filters = ()
    if city_slug:
        city = find_by_slug(store.select(ReadQuery(collection=CITIES)), city_slug)
        if city is None:
            return []
        filters = (("city_id", city["id"]),)

    rows = store.select(ReadQuery(collection=TOURS, filters=filters, relations=(TOUR_CITY,)))
    return [tour_card(r, locale) for r in rows]


def get_tour(store: ListingStore, slug: str, locale: str) -> Optional[Dict]:
    row = store.select_one(ReadQuery(
        collection=TOURS,
        filters=(("slug", slug),),
        relations=(TOUR_CITY,)
    ))
    return tour_detail(row, locale) if row else None


def list_cities(store: ListingStore, locale: str, limit: Optional[int] = None) -> List[Dict]:
    rows = store.select(ReadQuery(collection=CITIES, limit=limit))
    return [city_view(r, locale) for r in rows]


def get_city(store: ListingStore, slug: str, locale: str) -> Optional[Dict]:
    """City detail with its tours."""
    row = store.select_one(ReadQuery(collection=CITIES, filters=(("slug", slug),)))
    if row is None:
        return None
    tours = store.select(ReadQuery(
        collection=TOURS,
        filters=(("city_id", row["id"]),),
        relations=(TOUR_CITY,)
    ))
    view          = city_view(row, locale)
    view["tours"] = [tour_card(t, locale) for t in tours]
    return view


def home(store: ListingStore, locale: str) -> Dict[str, List[Dict]]:
    """Featured slices for the landing page."""
    tours = store.select(ReadQuery(
        collection=TOURS, limit=HOME_LIMITS["tours"], relations=(TOUR_CITY,)
    ))
    transfers = store.select(ReadQuery(
        collection=TRANSFERS, limit=HOME_LIMITS["transfers"]
    ))
    tickets = store.select(ReadQuery(
        collection=TRAIN_TICKETS, limit=HOME_LIMITS["train_tickets"]
    ))

    return {
        "tours":         [tour_card(t, locale) for t in tours],
        "cities":        list_cities(store, locale, limit=HOME_LIMITS["cities"]),
        "transfers":     [transfer_view(t) for t in transfers],
        "train_tickets": [ticket_view(t, locale) for t in tickets]
    }


# ── Admin writes ────────────────────────────────────────────────────────────

def _ensure_slug_free(store: ListingStore, collection: str, slug: str, own_id: Optional[str] = None):
    clash = store.select_one(ReadQuery(collection=collection, filters=(("slug", slug),)))
    if clash is not None and clash["id"] != own_id:
        raise SlugTakenError(collection, slug)


def admin_list_tours(store: ListingStore, locale: str) -> List[Dict]:
    """Raw rows (for edit forms) plus display title and city name."""
    rows = store.select(ReadQuery(collection=TOURS, relations=(TOUR_CITY,)))
    for row in rows:
        row["display_title"] = resolve_text(row.get("title"), locale)
        row["city_name"]     = resolve_text((row.get("city") or {}).get("name"), locale)
    return rows


def create_tour(store: ListingStore, data: TourIn) -> Dict:
    _ensure_slug_free(store, TOURS, data.slug)
    return store.insert(TOURS, data.model_dump())


def update_tour(store: ListingStore, tour_id: str, data: TourUpdate) -> Optional[Dict]:
    changes = data.model_dump(exclude_unset=True)
    if changes.get("slug"):
        _ensure_slug_free(store, TOURS, changes["slug"], own_id=tour_id)
    return store.update(TOURS, tour_id, changes)


def delete_tour(store: ListingStore, tour_id: str) -> bool:
    return store.delete(TOURS, tour_id)


def append_tour_images(store: ListingStore, tour_id: str, urls: List[str]) -> Optional[Dict]:
    tour = store.get(TOURS, tour_id)
    if tour is None:
        return None
    return store.update(TOURS, tour_id, {"images": list(tour.get("images") or []) + list(urls)})


def admin_list_cities(store: ListingStore) -> List[Dict]:
    return store.select(ReadQuery(collection=CITIES))


def create_city(store: ListingStore, data: CityIn) -> Dict:
    _ensure_slug_free(store, CITIES, data.slug)
    return store.insert(CITIES, data.model_dump())


def update_city(store: ListingStore, city_id: str, data: CityUpdate) -> Optional[Dict]:
    changes = data.model_dump(exclude_unset=True)
    if changes.get("slug"):
        _ensure_slug_free(store, CITIES, changes["slug"], own_id=city_id)
    return store.update(CITIES, city_id, changes)


def delete_city(store: ListingStore, city_id: str) -> bool:
    return store.delete(CITIES, city_id)
