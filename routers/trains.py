from fastapi import APIRouter, Depends, HTTPException
from models.schemas import TrainTicketRequestCreate
from routers.deps import get_locale, get_session, get_store
from services.auth_service import SessionContext
from services.query_service import ListingStore
from services.train_service import published_routes, schedule, list_tickets, request_ticket

router = APIRouter(tags=["trains"])


@router.get("/train-routes")
def train_routes(store: ListingStore = Depends(get_store)):
    """Published routes grouped by train type."""
    return published_routes(store)


@router.get("/train-routes/schedule")
def train_schedule(locale: str = Depends(get_locale)):
    return schedule(locale)


@router.get("/train-tickets")
def train_tickets(locale: str = Depends(get_locale), store: ListingStore = Depends(get_store)):
    return list_tickets(store, locale)


@router.post("/train-tickets/{ticket_id}/requests", status_code=201)
def ticket_request(
    ticket_id: str,
    req: TrainTicketRequestCreate,
    session: SessionContext = Depends(get_session),
    store: ListingStore = Depends(get_store)
):
    """Request a train ticket. Signing in is optional."""
    user_id = session.user.id if session.user else None
    row     = request_ticket(store, ticket_id, user_id, req)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Train ticket '{ticket_id}' not found")
    return row
