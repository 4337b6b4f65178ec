# Query Service — listing query layer over Firestore
#
# Reads are declared as ReadQuery values (collection + equality filters +
# ordering + limit + related-document projections) and executed by
# ListingStore. Results are cached per ReadQuery for a short freshness window;
# any write to a collection drops the cached reads that touch it.
#
# Every remote failure is re-raised as RemoteError carrying the backend's own
# message, which the API hands back to the caller unchanged.

import copy
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
from firebase_admin import firestore
from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter

from config import QUERY_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

REMOTE_ERRORS = (GoogleAPIError, FirebaseError, httpx.HTTPError)


class RemoteError(Exception):
    """A call to the hosted backend failed (network, auth denial, constraint)."""

    def __init__(self, message: str, collection: str = "", operation: str = ""):
        super().__init__(message)
        self.message    = message
        self.collection = collection
        self.operation  = operation


@dataclass(frozen=True)
class Relation:
    """Project `fields` of the document referenced by `field` under `alias`."""
    field:      str
    collection: str
    alias:      str
    fields:     Tuple[str, ...]


@dataclass(frozen=True)
class ReadQuery:
    collection: str
    filters:    Tuple[Tuple[str, Any], ...]   = ()
    order_by:   Tuple[Tuple[str, bool], ...]  = ()   # (field, descending)
    limit:      Optional[int]                 = None
    relations:  Tuple[Relation, ...]          = ()

    def touches(self, collection: str) -> bool:
        return self.collection == collection or any(
            r.collection == collection for r in self.relations
        )


def _row(doc) -> Dict[str, Any]:
    row       = doc.to_dict() or {}
    row["id"] = doc.id
    return row


class ListingStore:
    def __init__(
        self,
        db,
        ttl: float = QUERY_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        self.db     = db
        self.ttl    = ttl
        self._clock = clock
        self._cache: Dict[ReadQuery, Tuple[float, List[Dict[str, Any]]]] = {}
        self._writes: Dict[str, int] = {}
        self._lock  = threading.Lock()

    # ── Cache ─────────────────────────────────────────────────────────────────

    def _cached(self, query: ReadQuery) -> Optional[List[Dict[str, Any]]]:
        if self.ttl <= 0:
            return None
        with self._lock:
            entry = self._cache.get(query)
            if entry is None:
                return None
            stored_at, rows = entry
            if self._clock() - stored_at > self.ttl:
                del self._cache[query]
                return None
        logger.debug("cache hit for %s", query.collection)
        return copy.deepcopy(rows)

    def _write_marks(self, query: ReadQuery) -> Dict[str, int]:
        names = {query.collection} | {r.collection for r in query.relations}
        with self._lock:
            return {name: self._writes.get(name, 0) for name in names}

    def _remember(self, query: ReadQuery, rows: List[Dict[str, Any]], marks: Dict[str, int]):
        if self.ttl <= 0:
            return
        with self._lock:
            # a write landed while the read was in flight: its rows may predate it
            if any(self._writes.get(name, 0) != seen for name, seen in marks.items()):
                logger.debug("not caching %s, written during read", query.collection)
                return
            self._cache[query] = (self._clock(), copy.deepcopy(rows))

    def invalidate(self, collection: str):
        """Drop every cached read of `collection` or projecting from it."""
        with self._lock:
            self._writes[collection] = self._writes.get(collection, 0) + 1
            for key in [q for q in self._cache if q.touches(collection)]:
                del self._cache[key]

    # ── Reads ─────────────────────────────────────────────────────────────────

    def select(self, query: ReadQuery) -> List[Dict[str, Any]]:
        cached = self._cached(query)
        if cached is not None:
            return cached

        ref = self.db.collection(query.collection)
        for name, value in query.filters:
            ref = ref.where(filter=FieldFilter(name, "==", value))
        for name, descending in query.order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            ref = ref.order_by(name, direction=direction)
        if query.limit is not None:
            ref = ref.limit(query.limit)

        marks = self._write_marks(query)
        try:
            rows = [_row(doc) for doc in ref.stream()]
            for relation in query.relations:
                self._project(rows, relation)
        except REMOTE_ERRORS as e:
            logger.error("select on %s failed: %s", query.collection, e)
            raise RemoteError(str(e), query.collection, "select") from e

        self._remember(query, rows, marks)
        return copy.deepcopy(rows)

    def select_one(self, query: ReadQuery) -> Optional[Dict[str, Any]]:
        rows = self.select(ReadQuery(
            collection=query.collection,
            filters=query.filters,
            order_by=query.order_by,
            limit=1,
            relations=query.relations
        ))
        return rows[0] if rows else None

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        if not doc_id:
            return None
        try:
            doc = self.db.collection(collection).document(doc_id).get()
        except REMOTE_ERRORS as e:
            logger.error("get %s/%s failed: %s", collection, doc_id, e)
            raise RemoteError(str(e), collection, "get") from e
        return _row(doc) if doc.exists else None

    def _project(self, rows: List[Dict[str, Any]], relation: Relation):
        ref     = self.db.collection(relation.collection)
        fetched = {}
        for ref_id in {row.get(relation.field) for row in rows if row.get(relation.field)}:
            doc = ref.document(ref_id).get()
            if doc.exists:
                data            = doc.to_dict() or {}
                fetched[ref_id] = {f: data.get(f) for f in relation.fields}
        for row in rows:
            row[relation.alias] = copy.deepcopy(fetched.get(row.get(relation.field)))

    # ── Writes ────────────────────────────────────────────────────────────────

    def insert(self, collection: str, row: Dict[str, Any], doc_id: Optional[str] = None) -> Dict[str, Any]:
        data = {k: v for k, v in row.items() if k != "id"}
        data.setdefault("created_at", datetime.now(timezone.utc))
        try:
            ref = self.db.collection(collection).document(doc_id) if doc_id \
                else self.db.collection(collection).document()
            ref.set(data)
        except REMOTE_ERRORS as e:
            logger.error("insert into %s failed: %s", collection, e)
            raise RemoteError(str(e), collection, "insert") from e
        finally:
            self.invalidate(collection)

        logger.info("inserted %s/%s", collection, ref.id)
        return {**data, "id": ref.id}

    def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply `changes` to an existing document; None when it does not exist."""
        changes = {k: v for k, v in changes.items() if k != "id"}
        try:
            ref = self.db.collection(collection).document(doc_id)
            if not ref.get().exists:
                return None
            if changes:
                ref.update(changes)
            updated = _row(ref.get())
        except REMOTE_ERRORS as e:
            logger.error("update %s/%s failed: %s", collection, doc_id, e)
            raise RemoteError(str(e), collection, "update") from e
        finally:
            self.invalidate(collection)

        logger.info("updated %s/%s", collection, doc_id)
        return updated

    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document; False when there was nothing to delete."""
        try:
            ref = self.db.collection(collection).document(doc_id)
            if not ref.get().exists:
                return False
            ref.delete()
        except REMOTE_ERRORS as e:
            logger.error("delete %s/%s failed: %s", collection, doc_id, e)
            raise RemoteError(str(e), collection, "delete") from e
        finally:
            self.invalidate(collection)

        logger.info("deleted %s/%s", collection, doc_id)
        return True
