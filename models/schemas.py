from datetime import date
from pydantic import BaseModel, BeforeValidator, Field, StringConstraints, field_validator
from typing import Annotated, Dict, List, Literal, Optional, Union
from config import MIN_PARTICIPANTS, MAX_PARTICIPANTS

# Either one language (plain string) or {"en": ..., "ru": ...}
LocalizedInput     = Union[str, Dict[str, str]]
LocalizedListInput = Union[List[str], Dict[str, Union[List[str], str]]]

NonEmpty = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Slug     = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")]
ClockTime = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]

BookingStatus = Literal["pending", "confirmed", "cancelled"]
RouteStatus   = Literal["published", "draft"]


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]


# ── Tours & cities ────────────────────────────────────────────────

class TourIn(BaseModel):
    slug:        Slug
    title:       LocalizedInput           = ""
    description: LocalizedInput           = ""
    itinerary:   Optional[LocalizedInput] = None
    included:    Optional[LocalizedListInput] = None
    excluded:    Optional[LocalizedListInput] = None
    price:       float = Field(0, ge=0)
    duration:    int   = Field(1, ge=1)
    images:      List[str] = []
    city_id:     OptionalText = None


class TourUpdate(BaseModel):
    slug:        Optional[Slug]           = None
    title:       Optional[LocalizedInput] = None
    description: Optional[LocalizedInput] = None
    itinerary:   Optional[LocalizedInput] = None
    included:    Optional[LocalizedListInput] = None
    excluded:    Optional[LocalizedListInput] = None
    price:       Optional[float] = Field(None, ge=0)
    duration:    Optional[int]   = Field(None, ge=1)
    images:      Optional[List[str]] = None
    city_id:     OptionalText    = None


class CityIn(BaseModel):
    slug:        Slug
    name:        LocalizedInput = ""
    description: LocalizedInput = ""
    cover_image: OptionalText   = None


class CityUpdate(BaseModel):
    slug:        Optional[Slug]           = None
    name:        Optional[LocalizedInput] = None
    description: Optional[LocalizedInput] = None
    cover_image: OptionalText             = None


# ── Bookings ──────────────────────────────────────────────────────

class BookingCreate(BaseModel):
    tour_id:      NonEmpty
    booking_date: date
    participants: int = Field(1, ge=MIN_PARTICIPANTS, le=MAX_PARTICIPANTS)

    @field_validator("booking_date")
    @classmethod
    def not_in_past(cls, v: date) -> date:
        if v < date.today():
            raise ValueError("booking date cannot be in the past")
        return v


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


# ── Trains ────────────────────────────────────────────────────────

class TrainRouteIn(BaseModel):
    train_type:     NonEmpty = "Afrosiyob"
    from_city:      NonEmpty
    to_city:        NonEmpty
    departure_time: ClockTime
    arrival_time:   ClockTime
    operating_days: str         = "Daily"
    price:          float       = Field(0, ge=0)
    currency:       str         = "USD"
    status:         RouteStatus = "published"


class TrainRouteUpdate(BaseModel):
    train_type:     Optional[NonEmpty]    = None
    from_city:      Optional[NonEmpty]    = None
    to_city:        Optional[NonEmpty]    = None
    departure_time: Optional[ClockTime]   = None
    arrival_time:   Optional[ClockTime]   = None
    operating_days: Optional[str]         = None
    price:          Optional[float]       = Field(None, ge=0)
    currency:       Optional[str]         = None
    status:         Optional[RouteStatus] = None


class TrainTicketIn(BaseModel):
    route:       LocalizedInput = ""
    train_type:  LocalizedInput = ""
    description: LocalizedInput = ""
    duration:    float = Field(0, ge=0)
    price_from:  float = Field(0, ge=0)
    status:      RouteStatus = "published"


class TrainTicketUpdate(BaseModel):
    route:       Optional[LocalizedInput] = None
    train_type:  Optional[LocalizedInput] = None
    description: Optional[LocalizedInput] = None
    duration:    Optional[float] = Field(None, ge=0)
    price_from:  Optional[float] = Field(None, ge=0)
    status:      Optional[RouteStatus] = None


class ContactRequest(BaseModel):
    full_name:  NonEmpty
    phone:      NonEmpty
    email:      OptionalText = None
    passengers: int = Field(1, ge=1)
    notes:      OptionalText = None


class TrainTicketRequestCreate(ContactRequest):
    travel_date: date


# ── Transfers ─────────────────────────────────────────────────────

class TransferIn(BaseModel):
    from_city:      NonEmpty
    to_city:        NonEmpty
    vehicle_type:   NonEmpty      = "Sedan"
    max_passengers: int           = Field(3, ge=1)
    price:          float         = Field(0, ge=0)
    currency:       str           = "USD"
    description:    OptionalText  = None
    image_url:      OptionalText  = None
    status:         RouteStatus   = "published"


class TransferUpdate(BaseModel):
    from_city:      Optional[NonEmpty]    = None
    to_city:        Optional[NonEmpty]    = None
    vehicle_type:   Optional[NonEmpty]    = None
    max_passengers: Optional[int]         = Field(None, ge=1)
    price:          Optional[float]       = Field(None, ge=0)
    currency:       Optional[str]         = None
    description:    Optional[str]         = None
    image_url:      Optional[str]         = None
    status:         Optional[RouteStatus] = None


class TransferBookingCreate(ContactRequest):
    pickup_date: date


# ── Auth ──────────────────────────────────────────────────────────

class SignUpRequest(BaseModel):
    email:     NonEmpty
    password:  str = Field(..., min_length=6)
    full_name: NonEmpty


class LoginRequest(BaseModel):
    email:    NonEmpty
    password: str


class SessionUser(BaseModel):
    id:           str
    email:        Optional[str] = None
    display_name: Optional[str] = None


class SessionOut(BaseModel):
    status:   Literal["loading", "anonymous", "authenticated"]
    user:     Optional[SessionUser] = None
    is_admin: bool = False
