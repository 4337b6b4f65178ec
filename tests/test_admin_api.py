import pytest

from tests.conftest import bearer

ADMIN = bearer("admin-token")


@pytest.mark.parametrize("method, path", [
    ("get", "/admin/tours"),
    ("post", "/admin/cities"),
    ("get", "/admin/bookings"),
    ("delete", "/admin/train-routes/r1"),
    ("get", "/admin/train-ticket-requests")
])
def test_admin_routes_are_gated(client, method, path):
    assert client.request(method, path).status_code == 401
    assert client.request(method, path, headers=bearer("user-token")).status_code == 403


def test_admin_gate_fails_closed_when_role_lookup_fails(client, db):
    db.failing.add("user_roles")
    assert client.get("/admin/tours", headers=ADMIN).status_code == 403


def test_session_endpoint(client):
    assert client.get("/auth/session").json() == {"status": "anonymous", "user": None, "is_admin": False}

    state = client.get("/auth/session", headers=ADMIN).json()
    assert state["status"] == "authenticated"
    assert state["user"]["id"] == "u-admin"
    assert state["is_admin"] is True


def test_tour_crud(client, catalog):
    new = {
        "slug": "khiva-day", "title": {"en": "Khiva Day", "ru": "День в Хиве"},
        "price": 75, "duration": 1, "city_id": ""
    }
    r = client.post("/admin/tours", json=new, headers=ADMIN)
    assert r.status_code == 201
    tour = r.json()
    assert tour["city_id"] is None
    assert tour["images"] == []

    # the public listing sees the write immediately
    assert client.get("/tours/khiva-day").json()["title"] == "Khiva Day"

    r = client.put(f"/admin/tours/{tour['id']}", json={"title": "Khiva"}, headers=ADMIN)
    assert r.json()["title"] == "Khiva"
    assert r.json()["price"] == 75

    assert client.delete(f"/admin/tours/{tour['id']}", headers=ADMIN).status_code == 204
    assert client.get("/tours/khiva-day").status_code == 404
    assert client.delete(f"/admin/tours/{tour['id']}", headers=ADMIN).status_code == 404


def test_duplicate_slug_is_409(client, catalog):
    r = client.post("/admin/tours", json={"slug": "tour-1"}, headers=ADMIN)
    assert r.status_code == 409
    r = client.put("/admin/tours/t-2", json={"slug": "tour-1"}, headers=ADMIN)
    assert r.status_code == 409
    # keeping its own slug is fine
    assert client.put("/admin/tours/t-1", json={"slug": "tour-1"}, headers=ADMIN).status_code == 200


@pytest.mark.parametrize("body", [
    {"slug": "Bad Slug"},
    {"slug": "ok", "price": -1},
    {"slug": "ok", "duration": 0}
])
def test_invalid_tour_is_422(client, body):
    assert client.post("/admin/tours", json=body, headers=ADMIN).status_code == 422


def test_admin_tour_list_has_display_fields(client, catalog):
    rows = client.get("/admin/tours", params={"lang": "ru"}, headers=ADMIN).json()
    row  = next(r for r in rows if r["id"] == "t-0")
    assert row["title"] == {"en": "Tour 0", "ru": "Тур 0"}
    assert row["display_title"] == "Тур 0"
    assert row["city_name"] == "Самарканд"


def test_city_crud(client, catalog):
    r = client.post("/admin/cities", json={"slug": "khiva", "name": "Khiva"}, headers=ADMIN)
    assert r.status_code == 201
    assert client.post("/admin/cities", json={"slug": "khiva"}, headers=ADMIN).status_code == 409

    city_id = r.json()["id"]
    client.put(f"/admin/cities/{city_id}", json={"name": {"en": "Khiva", "ru": "Хива"}}, headers=ADMIN)
    assert client.get("/cities/khiva", params={"lang": "ru"}).json()["name"] == "Хива"

    assert client.delete(f"/admin/cities/{city_id}", headers=ADMIN).status_code == 204
    assert client.put("/admin/cities/missing", json={"name": "x"}, headers=ADMIN).status_code == 404


def test_booking_status_management(client, catalog):
    booking = client.post(
        "/bookings/", json={"tour_id": "t-0", "booking_date": "2099-01-01", "participants": 1},
        headers=bearer("user-token")
    ).json()

    rows = client.get("/admin/bookings", headers=ADMIN).json()
    assert rows[0]["customer_name"] == "Guest Person"
    assert rows[0]["tour_title"] == "Tour 0"

    r = client.patch(f"/admin/bookings/{booking['id']}", json={"status": "confirmed"}, headers=ADMIN)
    assert r.status_code == 200
    assert r.json()["status"] == "confirmed"

    mine = client.get("/bookings/mine", headers=bearer("user-token")).json()
    assert mine[0]["status_class"] == "positive"

    assert client.patch(f"/admin/bookings/{booking['id']}", json={"status": "lost"}, headers=ADMIN).status_code == 422
    assert client.patch("/admin/bookings/missing", json={"status": "confirmed"}, headers=ADMIN).status_code == 404


def test_image_upload(client, catalog, bucket):
    files = [
        ("files", ("front.JPG", b"\xff\xd8one", "image/jpeg")),
        ("files", ("back.png", b"\x89PNGtwo", "image/png"))
    ]
    r = client.post("/admin/tours/t-0/images", files=files, headers=ADMIN)
    assert r.status_code == 201

    images = r.json()["images"]
    assert images[0] == "https://img.example.test/0.jpg"
    assert len(images) == 3
    assert images[1].startswith("https://storage.example.test/tour-images/")
    assert images[1].endswith(".jpg")
    assert images[2].endswith(".png")
    assert len(bucket.objects) == 2


def test_standalone_image_upload(client, bucket):
    files = [("files", ("a.webp", b"data", "image/webp"))]
    r = client.post("/admin/tours/images", files=files, headers=ADMIN)
    assert r.status_code == 201
    (url,) = r.json()["urls"]
    key = url.replace("https://storage.example.test/", "")
    assert bucket.objects[key] == (b"data", "image/webp")


def test_image_upload_to_missing_tour(client, bucket):
    files = [("files", ("a.jpg", b"data", "image/jpeg"))]
    assert client.post("/admin/tours/nope/images", files=files, headers=ADMIN).status_code == 404
    assert bucket.objects == {}


def test_admin_write_failure_is_502(client, catalog):
    catalog.failing.add("cities")
    r = client.post("/admin/cities", json={"slug": "khiva"}, headers=ADMIN)
    assert r.status_code == 502
    assert "insufficient permissions" in r.json()["detail"]
