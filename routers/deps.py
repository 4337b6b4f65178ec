import functools
from typing import Optional

from fastapi import Cookie, Depends, Header, HTTPException, Query
from firebase_admin import auth

import config
from services.auth_service import SessionContext, SessionStatus, bearer_token, resolve_session
from services.i18n_service import negotiate_locale
from services.query_service import ListingStore

_store: Optional[ListingStore] = None


def get_store() -> ListingStore:
    """One ListingStore (and query cache) per process."""
    global _store
    if _store is None:
        _store = ListingStore(config.get_db())
    return _store


def get_bucket():
    return config.get_bucket()


def get_verifier():
    config.init_firebase()
    # refresh tokens revoked on logout also end the ID tokens already handed out
    return functools.partial(auth.verify_id_token, check_revoked=True)


def get_locale(
    lang: Optional[str] = Query(None, description="Display language, e.g. en or ru"),
    lang_cookie: Optional[str] = Cookie(None, alias="lang"),
    accept_language: Optional[str] = Header(None)
) -> str:
    return negotiate_locale(lang, lang_cookie, accept_language)


def get_session(
    authorization: Optional[str] = Header(None),
    store: ListingStore = Depends(get_store),
    verify=Depends(get_verifier)
) -> SessionContext:
    return resolve_session(bearer_token(authorization), store, verify)


def require_user(session: SessionContext = Depends(get_session)) -> SessionContext:
    if session.status != SessionStatus.AUTHENTICATED:
        raise HTTPException(status_code=401, detail="Sign in required")
    return session


def require_admin(session: SessionContext = Depends(require_user)) -> SessionContext:
    if not session.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return session
