from fastapi import APIRouter, Depends, HTTPException
from models.schemas import LoginRequest, SessionOut, SignUpRequest
from routers.deps import get_session, get_store, require_user
from services import auth_service
from services.auth_service import AuthError, SessionContext
from services.query_service import ListingStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/session", response_model=SessionOut)
def session_state(session: SessionContext = Depends(get_session)):
    return session.to_schema()


@router.post("/signup", status_code=201)
def signup(req: SignUpRequest, store: ListingStore = Depends(get_store)):
    user = auth_service.sign_up(store, req.email, req.password, req.full_name)
    return user.model_dump()


@router.post("/login")
def login(req: LoginRequest):
    """Exchange email + password for a Firebase ID token."""
    try:
        return auth_service.sign_in(req.email, req.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/logout", response_model=SessionOut)
def logout(session: SessionContext = Depends(require_user), store: ListingStore = Depends(get_store)):
    auth_service.sign_out(session, store)
    return session.to_schema()
