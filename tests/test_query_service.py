from datetime import datetime, timezone

import pytest

from services.query_service import ListingStore, ReadQuery, Relation, RemoteError


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cached_store(db, clock):
    return ListingStore(db, ttl=30, clock=clock)


def seed_routes(db):
    db.seed("train_routes", "r1", train_type="Sharq", from_city="Tashkent", departure_time="08:00", status="published")
    db.seed("train_routes", "r2", train_type="Afrosiyob", from_city="Tashkent", departure_time="07:28", status="published")
    db.seed("train_routes", "r3", train_type="Afrosiyob", from_city="Bukhara", departure_time="09:10", status="draft")
    db.seed("train_routes", "r4", train_type="Afrosiyob", from_city="Bukhara", departure_time="06:00", status="published")


def test_select_filters_orders_and_limits(store, db):
    seed_routes(db)
    query = ReadQuery(
        collection="train_routes",
        filters=(("status", "published"),),
        order_by=(("train_type", False), ("from_city", False), ("departure_time", False))
    )
    assert [r["id"] for r in store.select(query)] == ["r4", "r2", "r1"]

    limited = ReadQuery(collection="train_routes", order_by=(("departure_time", True),), limit=2)
    assert [r["id"] for r in store.select(limited)] == ["r3", "r1"]


def test_select_one(store, db):
    seed_routes(db)
    row = store.select_one(ReadQuery(collection="train_routes", filters=(("status", "draft"),)))
    assert row["id"] == "r3"
    assert store.select_one(ReadQuery(collection="train_routes", filters=(("status", "archived"),))) is None


def test_relation_projects_only_named_fields(store, db):
    db.seed("cities", "c1", slug="khiva", name="Khiva", description="Itchan Kala")
    db.seed("tours", "t1", slug="walk", city_id="c1")
    db.seed("tours", "t2", slug="orphan", city_id="gone")
    db.seed("tours", "t3", slug="nowhere")

    rel  = Relation(field="city_id", collection="cities", alias="city", fields=("name", "slug"))
    rows = {r["id"]: r for r in store.select(ReadQuery(collection="tours", relations=(rel,)))}

    assert rows["t1"]["city"] == {"name": "Khiva", "slug": "khiva"}
    assert rows["t2"]["city"] is None
    assert rows["t3"]["city"] is None


def test_repeated_select_is_served_from_cache(cached_store, db):
    seed_routes(db)
    query = ReadQuery(collection="train_routes")
    cached_store.select(query)
    cached_store.select(query)
    assert db.reads.count("train_routes") == 1


def test_cache_expires_after_ttl(cached_store, db, clock):
    seed_routes(db)
    query = ReadQuery(collection="train_routes")
    cached_store.select(query)
    clock.now += 31
    cached_store.select(query)
    assert db.reads.count("train_routes") == 2


def test_callers_get_their_own_copies(cached_store, db):
    seed_routes(db)
    query = ReadQuery(collection="train_routes")
    first = cached_store.select(query)
    first[0]["train_type"] = "tampered"
    assert all(r["train_type"] != "tampered" for r in cached_store.select(query))


def test_write_invalidates_reads_of_the_collection(cached_store, db):
    seed_routes(db)
    query = ReadQuery(collection="train_routes")
    assert len(cached_store.select(query)) == 4

    cached_store.insert("train_routes", {"train_type": "Nasaf", "status": "published"})
    assert len(cached_store.select(query)) == 5
    assert db.reads.count("train_routes") == 2


def test_write_invalidates_reads_projecting_from_the_collection(cached_store, db):
    db.seed("cities", "c1", slug="khiva", name="Khiva")
    db.seed("tours", "t1", slug="walk", city_id="c1")
    rel   = Relation(field="city_id", collection="cities", alias="city", fields=("name",))
    query = ReadQuery(collection="tours", relations=(rel,))
    assert cached_store.select(query)[0]["city"]["name"] == "Khiva"

    cached_store.update("cities", "c1", {"name": "Xiva"})
    assert cached_store.select(query)[0]["city"]["name"] == "Xiva"


def test_write_leaves_unrelated_reads_cached(cached_store, db):
    seed_routes(db)
    query = ReadQuery(collection="train_routes")
    cached_store.select(query)
    cached_store.insert("bookings", {"status": "pending"})
    cached_store.select(query)
    assert db.reads.count("train_routes") == 1


def test_zero_ttl_disables_cache(db):
    seed_routes(db)
    store = ListingStore(db, ttl=0)
    query = ReadQuery(collection="train_routes")
    store.select(query)
    store.select(query)
    assert db.reads.count("train_routes") == 2


def test_insert_stamps_created_at_and_returns_id(store, db):
    row = store.insert("bookings", {"status": "pending", "id": "ignored"})
    assert row["id"] != "ignored"
    assert isinstance(row["created_at"], datetime)
    assert row["created_at"].tzinfo == timezone.utc
    assert "id" not in db.data["bookings"][row["id"]]


def test_insert_with_explicit_id(store, db):
    row = store.insert("profiles", {"full_name": "Nodira"}, doc_id="uid-7")
    assert row["id"] == "uid-7"
    assert db.data["profiles"]["uid-7"]["full_name"] == "Nodira"


def test_update_and_delete_missing_documents(store):
    assert store.update("tours", "nope", {"price": 1}) is None
    assert store.delete("tours", "nope") is False


def test_update_returns_the_merged_row(store, db):
    db.seed("tours", "t1", slug="walk", price=100)
    row = store.update("tours", "t1", {"price": 150})
    assert row["price"] == 150
    assert row["slug"] == "walk"


def test_get(store, db):
    db.seed("tours", "t1", slug="walk")
    assert store.get("tours", "t1")["slug"] == "walk"
    assert store.get("tours", "t2") is None
    assert store.get("tours", "") is None


def test_backend_failure_becomes_remote_error(store, db):
    db.failing.add("tours")
    with pytest.raises(RemoteError) as exc:
        store.select(ReadQuery(collection="tours"))
    assert "Missing or insufficient permissions." in exc.value.message
    assert exc.value.collection == "tours"
    assert exc.value.operation == "select"


def test_failed_write_still_invalidates(cached_store, db):
    seed_routes(db)
    query = ReadQuery(collection="train_routes")
    cached_store.select(query)
    db.failing.add("train_routes")
    with pytest.raises(RemoteError):
        cached_store.insert("train_routes", {"train_type": "Nasaf"})
    db.failing.clear()
    cached_store.select(query)
    assert db.reads.count("train_routes") == 2


def test_write_during_read_is_not_cached_over(cached_store, db):
    db.seed("tours", "t-a", slug="a")
    query = ReadQuery(collection="tours")
    db.mid_stream["tours"] = lambda: cached_store.insert("tours", {"slug": "b"})

    # this read saw the collection before the insert landed
    assert [r["slug"] for r in cached_store.select(query)] == ["a"]
    assert sorted(r["slug"] for r in cached_store.select(query)) == ["a", "b"]


def test_write_to_related_collection_during_read_is_not_cached_over(cached_store, db):
    db.seed("cities", "c1", slug="khiva", name="Khiva")
    db.seed("tours", "t1", slug="walk", city_id="c1")
    rel   = Relation(field="city_id", collection="cities", alias="city", fields=("name",))
    query = ReadQuery(collection="tours", relations=(rel,))
    db.mid_stream["tours"] = lambda: cached_store.update("cities", "c1", {"name": "Xiva"})

    cached_store.select(query)
    assert cached_store.select(query)[0]["city"]["name"] == "Xiva"
    assert db.reads.count("tours") == 2
