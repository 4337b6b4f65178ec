from fastapi import APIRouter, Depends, HTTPException, Response
from config import SUPPORTED_LOCALES
from routers.deps import get_locale
from services.i18n_service import next_locale

router = APIRouter(prefix="/locale", tags=["locale"])


@router.get("/")
def current_locale(locale: str = Depends(get_locale)):
    return {"locale": locale, "supported": list(SUPPORTED_LOCALES), "next": next_locale(locale)}


@router.post("/{code}")
def switch_locale(code: str, response: Response):
    """Remember the display language for this browser session."""
    code = code.lower()
    if code not in SUPPORTED_LOCALES:
        raise HTTPException(status_code=400, detail=f"Unsupported locale '{code}'")
    response.set_cookie("lang", code, samesite="lax")
    return {"locale": code}
