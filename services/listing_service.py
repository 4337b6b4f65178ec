# Listing Service — grouping / filtering helpers shared by the page endpoints

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

STATUS_CLASSES = {
    "confirmed": "positive",
    "cancelled": "negative"
}


def group_routes_by_type(routes: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Partition routes by train_type.
    Groups keep first-seen order and routes keep input order inside a group;
    nothing is re-sorted.
    """
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for route in routes:
        groups.setdefault(route.get("train_type") or "", []).append(route)
    return groups


def compute_total_price(unit_price, participants: int) -> float:
    """unit price × participants, rounded to cents."""
    total = Decimal(str(unit_price or 0)) * int(participants)
    return float(total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def status_class(status: Optional[str]) -> str:
    return STATUS_CLASSES.get(status or "", "neutral")


def find_by_slug(rows: Iterable[Dict[str, Any]], slug: str) -> Optional[Dict[str, Any]]:
    return next((r for r in rows if r.get("slug") == slug), None)


def display_price(price) -> Optional[float]:
    # 0 means "not shown"
    if not price:
        return None
    return float(price)


def cover_image(images) -> Optional[str]:
    if images and isinstance(images, list):
        return images[0]
    return None
