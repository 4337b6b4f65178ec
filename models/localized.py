# Localized content shapes
# Admin-authored fields arrive either as a plain value (one language only)
# or as a map keyed by language code. Parsing turns the raw JSON into a
# tagged union so resolution can match on the tag instead of sniffing types.

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class PlainText:
    value: str


@dataclass(frozen=True)
class ByLocale:
    values: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PlainList:
    items: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class ListByLocale:
    values: Dict[str, Any] = field(default_factory=dict)


LocalizedText = Union[PlainText, ByLocale]
LocalizedList = Union[PlainList, ListByLocale]


def parse_text(raw: Any) -> Optional[LocalizedText]:
    """None for empty input and for shapes that carry no translations."""
    if not raw:
        return None
    if isinstance(raw, str):
        return PlainText(raw)
    if isinstance(raw, dict):
        return ByLocale(dict(raw))
    return None


def parse_list(raw: Any) -> Optional[LocalizedList]:
    if not raw:
        return None
    if isinstance(raw, (list, tuple)):
        return PlainList(tuple(raw))
    if isinstance(raw, dict):
        return ListByLocale(dict(raw))
    return None
