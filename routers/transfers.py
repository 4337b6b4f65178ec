from fastapi import APIRouter, Depends, HTTPException
from models.schemas import TransferBookingCreate
from routers.deps import get_session, get_store
from services.auth_service import SessionContext
from services.query_service import ListingStore
from services.transfer_service import list_transfers, book_transfer, TooManyPassengers

router = APIRouter(prefix="/transfers", tags=["transfers"])


@router.get("/")
def transfers(store: ListingStore = Depends(get_store)):
    """Published transfers, newest first."""
    return list_transfers(store)


@router.post("/{transfer_id}/bookings", status_code=201)
def transfer_booking(
    transfer_id: str,
    req: TransferBookingCreate,
    session: SessionContext = Depends(get_session),
    store: ListingStore = Depends(get_store)
):
    user_id = session.user.id if session.user else None
    try:
        row = book_transfer(store, transfer_id, user_id, req)
    except TooManyPassengers as e:
        raise HTTPException(status_code=422, detail=str(e))
    if row is None:
        raise HTTPException(status_code=404, detail=f"Transfer '{transfer_id}' not found")
    return row
