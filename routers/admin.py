from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from config import TOURS
from models.schemas import (
    TourIn, TourUpdate, CityIn, CityUpdate, BookingStatusUpdate,
    TransferIn, TransferUpdate, TrainRouteIn, TrainRouteUpdate, TrainTicketIn, TrainTicketUpdate
)
from routers.deps import get_bucket, get_locale, get_store, require_admin
from services import booking_service, tour_service, train_service, transfer_service
from services.query_service import ListingStore
from services.storage_service import upload_image

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _found(row, what: str, key: str):
    if row is None or row is False:
        raise HTTPException(status_code=404, detail=f"{what} '{key}' not found")
    return row


def _slug_guard(fn, *args):
    try:
        return fn(*args)
    except tour_service.SlugTakenError as e:
        raise HTTPException(status_code=409, detail=str(e))


def _upload_all(bucket, files: List[UploadFile]) -> List[str]:
    return [upload_image(bucket, f.file.read(), f.filename, f.content_type) for f in files]


# ── Tours ─────────────────────────────────────────────────────────

@router.get("/tours")
def admin_tours(locale: str = Depends(get_locale), store: ListingStore = Depends(get_store)):
    return tour_service.admin_list_tours(store, locale)


@router.post("/tours", status_code=201)
def create_tour(req: TourIn, store: ListingStore = Depends(get_store)):
    return _slug_guard(tour_service.create_tour, store, req)


@router.put("/tours/{tour_id}")
def update_tour(tour_id: str, req: TourUpdate, store: ListingStore = Depends(get_store)):
    return _found(_slug_guard(tour_service.update_tour, store, tour_id, req), "Tour", tour_id)


@router.delete("/tours/{tour_id}", status_code=204)
def delete_tour(tour_id: str, store: ListingStore = Depends(get_store)):
    _found(tour_service.delete_tour(store, tour_id), "Tour", tour_id)


@router.post("/tours/images", status_code=201)
def upload_tour_images(files: List[UploadFile] = File(...), bucket=Depends(get_bucket)):
    """Upload images ahead of saving a tour; returns their public URLs."""
    return {"urls": _upload_all(bucket, files)}


@router.post("/tours/{tour_id}/images", status_code=201)
def add_tour_images(
    tour_id: str,
    files: List[UploadFile] = File(...),
    bucket=Depends(get_bucket),
    store: ListingStore = Depends(get_store)
):
    if store.get(TOURS, tour_id) is None:
        raise HTTPException(status_code=404, detail=f"Tour '{tour_id}' not found")
    urls = _upload_all(bucket, files)
    return _found(tour_service.append_tour_images(store, tour_id, urls), "Tour", tour_id)


# ── Cities ────────────────────────────────────────────────────────

@router.get("/cities")
def admin_cities(store: ListingStore = Depends(get_store)):
    return tour_service.admin_list_cities(store)


@router.post("/cities", status_code=201)
def create_city(req: CityIn, store: ListingStore = Depends(get_store)):
    return _slug_guard(tour_service.create_city, store, req)


@router.put("/cities/{city_id}")
def update_city(city_id: str, req: CityUpdate, store: ListingStore = Depends(get_store)):
    return _found(_slug_guard(tour_service.update_city, store, city_id, req), "City", city_id)


@router.delete("/cities/{city_id}", status_code=204)
def delete_city(city_id: str, store: ListingStore = Depends(get_store)):
    _found(tour_service.delete_city(store, city_id), "City", city_id)


# ── Bookings ──────────────────────────────────────────────────────

@router.get("/bookings")
def admin_bookings(locale: str = Depends(get_locale), store: ListingStore = Depends(get_store)):
    """All bookings, newest first, with tour title and customer name."""
    return booking_service.admin_list_bookings(store, locale)


@router.patch("/bookings/{booking_id}")
def set_booking_status(booking_id: str, req: BookingStatusUpdate, store: ListingStore = Depends(get_store)):
    return _found(booking_service.set_booking_status(store, booking_id, req.status), "Booking", booking_id)


# ── Transfers ─────────────────────────────────────────────────────

@router.get("/transfers")
def admin_transfers(store: ListingStore = Depends(get_store)):
    return transfer_service.admin_list_transfers(store)


@router.post("/transfers", status_code=201)
def create_transfer(req: TransferIn, store: ListingStore = Depends(get_store)):
    return transfer_service.create_transfer(store, req)


@router.put("/transfers/{transfer_id}")
def update_transfer(transfer_id: str, req: TransferUpdate, store: ListingStore = Depends(get_store)):
    return _found(transfer_service.update_transfer(store, transfer_id, req), "Transfer", transfer_id)


@router.delete("/transfers/{transfer_id}", status_code=204)
def delete_transfer(transfer_id: str, store: ListingStore = Depends(get_store)):
    _found(transfer_service.delete_transfer(store, transfer_id), "Transfer", transfer_id)


@router.get("/transfer-bookings")
def admin_transfer_bookings(store: ListingStore = Depends(get_store)):
    return transfer_service.admin_list_transfer_bookings(store)


# ── Train routes ──────────────────────────────────────────────────

@router.get("/train-routes")
def admin_train_routes(store: ListingStore = Depends(get_store)):
    """Every route, drafts included, ordered by train type, origin and departure."""
    return train_service.admin_list_routes(store)


@router.post("/train-routes", status_code=201)
def create_train_route(req: TrainRouteIn, store: ListingStore = Depends(get_store)):
    return train_service.create_route(store, req)


@router.put("/train-routes/{route_id}")
def update_train_route(route_id: str, req: TrainRouteUpdate, store: ListingStore = Depends(get_store)):
    return _found(train_service.update_route(store, route_id, req), "Train route", route_id)


@router.delete("/train-routes/{route_id}", status_code=204)
def delete_train_route(route_id: str, store: ListingStore = Depends(get_store)):
    _found(train_service.delete_route(store, route_id), "Train route", route_id)


# ── Train tickets ─────────────────────────────────────────────────

@router.get("/train-tickets")
def admin_train_tickets(store: ListingStore = Depends(get_store)):
    return train_service.admin_list_tickets(store)


@router.post("/train-tickets", status_code=201)
def create_train_ticket(req: TrainTicketIn, store: ListingStore = Depends(get_store)):
    return train_service.create_ticket(store, req)


@router.put("/train-tickets/{ticket_id}")
def update_train_ticket(ticket_id: str, req: TrainTicketUpdate, store: ListingStore = Depends(get_store)):
    return _found(train_service.update_ticket(store, ticket_id, req), "Train ticket", ticket_id)


@router.delete("/train-tickets/{ticket_id}", status_code=204)
def delete_train_ticket(ticket_id: str, store: ListingStore = Depends(get_store)):
    _found(train_service.delete_ticket(store, ticket_id), "Train ticket", ticket_id)


@router.get("/train-ticket-requests")
def admin_ticket_requests(locale: str = Depends(get_locale), store: ListingStore = Depends(get_store)):
    return train_service.admin_list_ticket_requests(store, locale)
