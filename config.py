import os
import firebase_admin
from firebase_admin import credentials, firestore, storage
from dotenv import load_dotenv

load_dotenv()

FIREBASE_CREDENTIALS    = os.getenv("FIREBASE_CREDENTIALS", "serviceAccountKey.json")
FIREBASE_STORAGE_BUCKET = os.getenv("FIREBASE_STORAGE_BUCKET", "")
FIREBASE_WEB_API_KEY    = os.getenv("FIREBASE_WEB_API_KEY", "")

QUERY_CACHE_TTL_SECONDS      = float(os.getenv("QUERY_CACHE_TTL_SECONDS", "30"))
AUTH_REQUEST_TIMEOUT_SECONDS = float(os.getenv("AUTH_REQUEST_TIMEOUT_SECONDS", "10"))

DEFAULT_LOCALE    = os.getenv("DEFAULT_LOCALE", "en")
SUPPORTED_LOCALES = tuple(
    s.strip() for s in os.getenv("SUPPORTED_LOCALES", "en,ru").split(",") if s.strip()
)

CORS_ORIGINS = [s.strip() for s in os.getenv("CORS_ORIGINS", "*").split(",") if s.strip()]
LOG_LEVEL    = os.getenv("LOG_LEVEL", "INFO")


# ── Firebase initialization (lazy, runs once) ────────────────────

def init_firebase():
    if not firebase_admin._apps:
        cred    = credentials.Certificate(FIREBASE_CREDENTIALS)
        options = {"storageBucket": FIREBASE_STORAGE_BUCKET} if FIREBASE_STORAGE_BUCKET else None
        firebase_admin.initialize_app(cred, options)


def get_db():
    init_firebase()
    return firestore.client()


def get_bucket():
    init_firebase()
    return storage.bucket(FIREBASE_STORAGE_BUCKET or None)


# ── Collections ──────────────────────────────────────────────────
TOURS                 = "tours"
CITIES                = "cities"
BOOKINGS              = "bookings"
PROFILES              = "profiles"
USER_ROLES            = "user_roles"
TRANSFERS             = "transfers"
TRANSFER_BOOKINGS     = "transfer_bookings"
TRAIN_ROUTES          = "train_routes"
TRAIN_TICKETS         = "train_tickets"
TRAIN_TICKET_REQUESTS = "train_ticket_requests"

TOUR_IMAGES_FOLDER = "tour-images"

# ── Booking rules ────────────────────────────────────────────────
MIN_PARTICIPANTS = 1
MAX_PARTICIPANTS = 20

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")
ROUTE_STATUSES   = ("published", "draft")
APP_ROLES        = ("admin", "user")

# ── Home page limits ─────────────────────────────────────────────
HOME_LIMITS = {
    "tours":         6,
    "cities":        6,
    "transfers":     4,
    "train_tickets": 4
}
