"""Rating columns: stored as 2x stars, always six browse slots."""
from __future__ import annotations

import pytest

from calibre_catalog.services.custom_columns import RatingColumnType, create_by_lookup
from calibre_catalog.services.custom_columns.rating import stars


@pytest.fixture
def rated(library):
    books = {title: library.add_book(title) for title in ("A", "B", "C", "D", "E")}
    column_id = library.add_column("myrating", "rating", name="My Rating")
    library.link_value(column_id, books["A"], 10)
    library.link_value(column_id, books["B"], 4)
    library.link_value(column_id, books["E"], 0)
    return {"column_id": column_id, "books": books}


def test_rating_always_yields_six_slots(store, rated):
    column = create_by_lookup(store, "myrating")

    counts = column.value_counts()

    assert isinstance(column, RatingColumnType)
    assert [v.value_id for v in counts] == [0, 2, 4, 6, 8, 10]
    assert [v.count for v in counts] == [3, 0, 1, 0, 0, 1]
    assert [v.label for v in counts] == ["0 stars", "1 star", "2 stars", "3 stars", "4 stars", "5 stars"]


def test_rating_counts_cover_every_book(store, rated):
    column = create_by_lookup(store, "myrating")

    assert sum(v.count for v in column.value_counts()) == len(rated["books"])


def test_rating_six_slots_for_sparse_data(store, library):
    for title in ("One", "Two"):
        library.add_book(title)
    library.add_column("sparse", "rating")

    counts = create_by_lookup(store, "sparse").value_counts()

    assert len(counts) == 6
    assert counts[0].count == 2
    assert all(v.count == 0 for v in counts[1:])


def test_rating_books_query_shapes(store, rated):
    column = create_by_lookup(store, "myrating")

    unrated = column.books_query(0)
    five_stars = column.books_query(10)

    assert unrated.params == {}
    assert five_stars.params == {"value": 10}
    assert str(unrated.statement) != str(five_stars.statement)


def test_rating_books_query_results(store, rated):
    column = create_by_lookup(store, "myrating")

    assert [row["title"] for row in column.books_query(0).execute(store)] == ["C", "D", "E"]
    assert [row["title"] for row in column.books_query("10").execute(store)] == ["A"]
    assert column.books_query(6).execute(store) == []


def test_rating_resolve_value_without_store_access(store, rated):
    column = create_by_lookup(store, "myrating")

    for value in column.value_counts():
        assert column.resolve_value(value.value_id).name == value.label
    assert column.resolve_value("4").value_id == 4


def test_rating_resolve_for_book(store, rated):
    column = create_by_lookup(store, "myrating")

    value = column.resolve_for_book(rated["books"]["A"])
    missing = column.resolve_for_book(rated["books"]["C"])

    assert (value.value_id, value.name) == (10, "5 stars")
    assert missing.known is False
    assert missing.value_id is None
    assert missing.name == "Not Set"


def test_rating_half_stars_for_book(store, library):
    book = library.add_book("Half")
    column_id = library.add_column("halves", "rating")
    library.link_value(column_id, book, 3)

    value = create_by_lookup(store, "halves").resolve_for_book(book)

    assert value.value_id == 3
    assert value.name == "1.5 stars"


def test_stars_helper():
    assert stars(8) == 4
    assert isinstance(stars(8), int)
    assert stars(7) == 3.5


def test_rating_description(store, rated):
    column = create_by_lookup(store, "myrating")

    assert column.description() == "Custom column with ratings from 0 to 5 stars"
    assert column.link_table_name() == f"books_custom_column_{rated['column_id']}_link"
