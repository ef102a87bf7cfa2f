"""Custom column pages through the Flask test client."""
from __future__ import annotations

import pytest
from flask import Flask

from calibre_catalog.routes import register_all


@pytest.fixture
def catalog(library, monkeypatch):
    books = {title: library.add_book(title) for title in ("Dune", "Emma", "Ulysses")}
    genre = library.add_column("genre", "text", name="Genre")
    scifi = library.link_value(genre, books["Dune"], "Sci-Fi")
    library.link_value(genre, books["Emma"], "Classic")
    read = library.add_column("read", "bool", name="Read")
    library.set_value(read, books["Dune"], 1)
    finished = library.add_column("finished", "datetime", name="Finished")
    library.set_value(finished, books["Emma"], "2023-06-15 10:00:00+00:00")
    review = library.add_column("review", "comments", name="Review")
    monkeypatch.setenv("CATALOG_CUSTOM_COLUMNS", "genre, read,review,missing")
    return {
        "books": books,
        "genre": genre,
        "scifi": scifi,
        "read": read,
        "finished": finished,
        "review": review,
    }


@pytest.fixture
def client(catalog):
    app = Flask(__name__)
    register_all(app)
    return app.test_client()


def test_index_lists_configured_columns(client, catalog):
    resp = client.get("/custom")

    assert resp.status_code == 200
    entries = resp.get_json()["entries"]
    assert [entry["title"] for entry in entries] == ["Genre", "Read"]
    assert entries[0]["links"] == [{"href": f"/custom/{catalog['genre']}"}]


def test_column_page_lists_values(client, catalog):
    resp = client.get(f"/custom/{catalog['genre']}")

    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["column"]["id"] == f"custom:{catalog['genre']}"
    assert [(e["title"], e["count"], e["content"]) for e in payload["entries"]] == [
        ("Classic", 1, "1 book"),
        ("Sci-Fi", 1, "1 book"),
    ]


def test_detail_page_lists_books(client, catalog):
    resp = client.get(f"/custom/{catalog['genre']}/{catalog['scifi']}")

    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["value"]["name"] == "Sci-Fi"
    assert payload["entry_id"] == f"custom:{catalog['genre']}:{catalog['scifi']}"
    assert [book["title"] for book in payload["books"]] == ["Dune"]


def test_detail_page_for_unset_bool(client, catalog):
    resp = client.get(f"/custom/{catalog['read']}/-1")

    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["value"]["known"] is False
    assert [book["title"] for book in payload["books"]] == ["Emma", "Ulysses"]


def test_detail_page_for_date(client, catalog):
    resp = client.get(f"/custom/{catalog['finished']}/2023-06-15")

    assert resp.status_code == 200
    assert [book["title"] for book in resp.get_json()["books"]] == ["Emma"]


def test_invalid_date_is_bad_request(client, catalog):
    resp = client.get(f"/custom/{catalog['finished']}/yesterday")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_value"


def test_unknown_value_is_not_found(client, catalog):
    assert client.get(f"/custom/{catalog['genre']}/9999").status_code == 404
    assert client.get(f"/custom/{catalog['read']}/2").status_code == 404


def test_unknown_column_is_not_found(client, catalog):
    resp = client.get("/custom/999")

    assert resp.status_code == 404
    assert resp.get_json()["error"] == "unknown_column"


def test_unsupported_column_is_not_found(client, catalog):
    resp = client.get(f"/custom/{catalog['review']}")

    assert resp.status_code == 404
    assert resp.get_json()["error"] == "unsupported_column"


def test_unknown_datatype_is_server_error(client, catalog, library):
    column_id = library.add_column("weird", "hologram")

    resp = client.get(f"/custom/{column_id}")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "unknown_datatype", "datatype": "hologram"}


def test_book_values_for_browse_columns(client, catalog):
    resp = client.get(f"/book/{catalog['books']['Ulysses']}/custom")

    assert resp.status_code == 200
    values = resp.get_json()["values"]
    assert [(v["column"], v["id"], v["name"], v["known"]) for v in values] == [
        ("Genre", None, "Not Set", False),
        ("Read", -1, "Not Set", False),
    ]


def test_healthz_reports_ok(client, catalog):
    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "db": True}


def test_register_is_idempotent(catalog):
    app = Flask(__name__)
    register_all(app)
    register_all(app)

    assert "custom_columns" in app.blueprints
    assert "babel" in app.extensions


def test_create_app_wires_catalog(catalog):
    from calibre_catalog.startup.wiring import create_app

    app = create_app({"TESTING": True})

    resp = app.test_client().get("/custom")
    assert resp.status_code == 200
    assert len(resp.get_json()["entries"]) == 2
