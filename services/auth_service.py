# Auth Service — session / role provider on top of Firebase Auth
#
# A SessionContext starts in LOADING, moves to ANONYMOUS or AUTHENTICATED,
# and derives is_admin from the user's role rows. The role lookup finishes
# after the user is known, so is_admin stays False until it has completed
# and found an "admin" row. A failed lookup counts as "not admin".

import enum
import logging
from typing import Callable, Dict, Iterable, Optional

import httpx
from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError

from config import (
    FIREBASE_WEB_API_KEY, AUTH_REQUEST_TIMEOUT_SECONDS, PROFILES, USER_ROLES
)
from models.schemas import SessionOut, SessionUser
from services.query_service import ListingStore, ReadQuery, RemoteError

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"


class AuthError(Exception):
    """The identity service refused the credentials."""


class SessionStatus(str, enum.Enum):
    LOADING       = "loading"
    ANONYMOUS     = "anonymous"
    AUTHENTICATED = "authenticated"


class RoleLookup(str, enum.Enum):
    PENDING = "pending"
    DONE    = "done"
    FAILED  = "failed"


class SessionContext:
    def __init__(self):
        self.status: SessionStatus   = SessionStatus.LOADING
        self.user: Optional[SessionUser] = None
        self.role_lookup: RoleLookup = RoleLookup.PENDING
        self._roles: frozenset       = frozenset()

    @property
    def is_admin(self) -> bool:
        return (
            self.status == SessionStatus.AUTHENTICATED
            and self.role_lookup == RoleLookup.DONE
            and "admin" in self._roles
        )

    def authenticate(self, user: SessionUser):
        self.status      = SessionStatus.AUTHENTICATED
        self.user        = user
        self.role_lookup = RoleLookup.PENDING
        self._roles      = frozenset()

    def complete_role_lookup(self, roles: Iterable[str]):
        if self.status != SessionStatus.AUTHENTICATED:
            return
        self._roles      = frozenset(roles)
        self.role_lookup = RoleLookup.DONE

    def fail_role_lookup(self):
        self._roles      = frozenset()
        self.role_lookup = RoleLookup.FAILED

    def sign_out(self):
        self.status      = SessionStatus.ANONYMOUS
        self.user        = None
        self.role_lookup = RoleLookup.PENDING
        self._roles      = frozenset()

    def to_schema(self) -> SessionOut:
        return SessionOut(status=self.status.value, user=self.user, is_admin=self.is_admin)


# ── Session resolution ──────────────────────────────────────────────────────

def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def role_query(user_id: str) -> ReadQuery:
    return ReadQuery(collection=USER_ROLES, filters=(("user_id", user_id),))


def resolve_session(
    token: Optional[str],
    store: ListingStore,
    verify: Callable[[str], Dict] = auth.verify_id_token
) -> SessionContext:
    """Build the request's session from a Firebase ID token."""
    session = SessionContext()
    if not token:
        session.sign_out()
        return session

    try:
        claims = verify(token)
    except (ValueError, FirebaseError) as e:
        logger.warning("rejected ID token: %s", e)
        session.sign_out()
        return session

    session.authenticate(SessionUser(
        id=claims["uid"],
        email=claims.get("email"),
        display_name=claims.get("name")
    ))

    try:
        rows = store.select(role_query(session.user.id))
    except RemoteError as e:
        logger.warning("role lookup for %s failed: %s", session.user.id, e)
        session.fail_role_lookup()
        return session

    session.complete_role_lookup(r.get("role") for r in rows)
    return session


# ── Account operations ──────────────────────────────────────────────────────

def sign_up(store: ListingStore, email: str, password: str, full_name: str) -> SessionUser:
    """Create the Firebase user and its profile row."""
    try:
        record = auth.create_user(email=email, password=password, display_name=full_name)
    except (ValueError, FirebaseError) as e:
        logger.error("sign-up for %s failed: %s", email, e)
        raise RemoteError(str(e), "auth", "sign_up") from e

    store.insert(PROFILES, {"full_name": full_name, "avatar_url": None}, doc_id=record.uid)
    logger.info("registered user %s", record.uid)
    return SessionUser(id=record.uid, email=record.email, display_name=record.display_name)


def _json_payload(response: httpx.Response) -> Optional[Dict]:
    """The decoded JSON object, or None when the body is not one."""
    if "application/json" not in response.headers.get("content-type", "").lower():
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def sign_in(email: str, password: str, client: Optional[httpx.Client] = None) -> Dict:
    """
    Password sign-in through the Identity Toolkit REST endpoint.
    Returns the ID token the client sends back as a Bearer token.
    """
    own_client = client is None
    client     = client or httpx.Client(timeout=AUTH_REQUEST_TIMEOUT_SECONDS)
    try:
        r = client.post(
            SIGN_IN_URL,
            params={"key": FIREBASE_WEB_API_KEY},
            json={"email": email, "password": password, "returnSecureToken": True}
        )
    except httpx.HTTPError as e:
        logger.error("sign-in request failed: %s", e)
        raise RemoteError(str(e), "auth", "sign_in") from e
    finally:
        if own_client:
            client.close()

    payload = _json_payload(r)
    if r.status_code != 200:
        if payload is None:
            # not the identity service's JSON error: a proxy or outage page
            logger.error("sign-in returned non-JSON HTTP %s", r.status_code)
            raise RemoteError(f"sign-in failed with HTTP {r.status_code}: {r.text[:200]}", "auth", "sign_in")
        message = (payload.get("error") or {}).get("message") or f"HTTP {r.status_code}"
        raise AuthError(message)

    if not payload or not payload.get("idToken"):
        logger.error("sign-in response without idToken (HTTP %s)", r.status_code)
        raise RemoteError("sign-in response did not include an ID token", "auth", "sign_in")

    return {
        "id_token":      payload["idToken"],
        "refresh_token": payload.get("refreshToken"),
        "expires_in":    int(payload.get("expiresIn", 3600)),
        "user_id":       payload.get("localId")
    }


def sign_out(session: SessionContext, store: ListingStore):
    """Revoke the user's refresh tokens and forget cached role rows."""
    if session.user is not None:
        try:
            auth.revoke_refresh_tokens(session.user.id)
        except FirebaseError as e:
            logger.error("revoking tokens for %s failed: %s", session.user.id, e)
            raise RemoteError(str(e), "auth", "sign_out") from e
    store.invalidate(USER_ROLES)
    session.sign_out()
