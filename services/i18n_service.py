# i18n Service — localized content resolution
# Every localized field shown by the API goes through resolve_text / resolve_list
# so tours, cities, tickets and bookings degrade the same way:
#   active locale → "en" → empty.

from typing import Any, List, Optional
from models.localized import (
    PlainText, ByLocale, PlainList, ListByLocale, parse_text, parse_list
)
from config import DEFAULT_LOCALE, SUPPORTED_LOCALES

FALLBACK_LOCALE = "en"


def _present(value: Any) -> bool:
    # "" and None are missing translations; an empty list is a real value
    return value is not None and value != "" and value is not False


def _pick(values: dict, locale: str) -> Any:
    value = values.get(locale)
    if _present(value):
        return value
    return values.get(FALLBACK_LOCALE)


def resolve_text(raw: Any, locale: str = DEFAULT_LOCALE) -> str:
    """Display string for a LocalizedText value. Never raises."""
    parsed = parse_text(raw)
    if parsed is None:
        return ""
    if isinstance(parsed, PlainText):
        return parsed.value
    if isinstance(parsed, ByLocale):
        # only strings are displayable; lists, maps and numbers count as missing
        for code in (locale, FALLBACK_LOCALE):
            value = parsed.values.get(code)
            if isinstance(value, str) and value:
                return value
        return ""
    return ""


def resolve_list(raw: Any, locale: str = DEFAULT_LOCALE) -> List[Any]:
    """
    Display list for a LocalizedList value. Never raises.
    A single non-empty string under the chosen locale becomes a one-item list.
    """
    parsed = parse_list(raw)
    if parsed is None:
        return []
    if isinstance(parsed, PlainList):
        return list(parsed.items)
    if isinstance(parsed, ListByLocale):
        value = _pick(parsed.values, locale)
        if isinstance(value, (list, tuple)):
            return list(value)
        if isinstance(value, str) and value:
            return [value]
        return []
    return []


# ── Locale negotiation ──────────────────────────────────────────────────────

def _supported(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    code = code.strip().lower()
    return code if code in SUPPORTED_LOCALES else None


def _accept_language_tags(header: str) -> List[str]:
    """Primary language tags in the order of their q-weights."""
    weighted = []
    for pos, part in enumerate(header.split(",")):
        piece = part.strip()
        if not piece:
            continue
        tag, _, params = piece.partition(";")
        q = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                q = float(params[2:])
            except ValueError:
                q = 0.0
        weighted.append((-q, pos, tag.split("-")[0].strip().lower()))
    return [tag for _, _, tag in sorted(weighted)]


def negotiate_locale(
    query: Optional[str] = None,
    cookie: Optional[str] = None,
    accept_language: Optional[str] = None
) -> str:
    """?lang= beats the lang cookie, which beats Accept-Language."""
    for candidate in (query, cookie):
        found = _supported(candidate)
        if found:
            return found
    if accept_language:
        for tag in _accept_language_tags(accept_language):
            found = _supported(tag)
            if found:
                return found
    return DEFAULT_LOCALE


def next_locale(current: str) -> str:
    """The language toggle: cycle through SUPPORTED_LOCALES."""
    if current not in SUPPORTED_LOCALES:
        return DEFAULT_LOCALE
    idx = SUPPORTED_LOCALES.index(current)
    return SUPPORTED_LOCALES[(idx + 1) % len(SUPPORTED_LOCALES)]
