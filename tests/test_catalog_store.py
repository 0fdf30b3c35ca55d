"""Unit tests for catalog/store.py -- catalog query layer.

Covers:
- enriched lookups join the right publisher and author fields
- substring search is a contains-match, case-insensitive under SQLite's collation
- blank search terms raise ValidationError for every entity
- hostile input stays data: quotes, SQL fragments and LIKE wildcards
- deletes report whether a row was affected
- foreign keys: books must reference existing publishers and authors
"""

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

from catalog.models import Author, Book, Publisher
from catalog.store import CatalogStore
from core.errors import ValidationError
from tests.conftest import SeededCatalog, seed_catalog


@pytest.fixture
def seeded(catalog_store: CatalogStore) -> SeededCatalog:
    return seed_catalog(catalog_store)


class TestBookQueries:
    def test_get_book_enriched(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        book = catalog_store.get_book(seeded.dune_id)
        assert book is not None
        assert book.title == "Dune"
        assert book.price == pytest.approx(9.99)
        assert book.publisher == "Orbit Books"
        assert book.publisher_city == "New York"
        assert book.author_first == "Frank"
        assert book.author_last == "Herbert"

    def test_get_missing_book(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert catalog_store.get_book(99999) is None

    def test_list_books(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        titles = [b.title for b in catalog_store.list_books()]
        assert titles == ["Dune", "Dune Messiah", "Pride and Prejudice"]

    def test_search_is_contains_match(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert [b.title for b in catalog_store.search_books("Messiah")] == ["Dune Messiah"]
        assert [b.title for b in catalog_store.search_books("une")] == ["Dune", "Dune Messiah"]
        assert [b.title for b in catalog_store.search_books("Prejudice")] == ["Pride and Prejudice"]

    def test_search_keeps_surrounding_spaces(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert [b.title for b in catalog_store.search_books("Dune ")] == ["Dune Messiah"]

    def test_search_case_insensitive(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert len(catalog_store.search_books("DUNE")) == 2

    def test_search_no_match(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert catalog_store.search_books("Neuromancer") == []

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_search_blank_term(self, catalog_store: CatalogStore, term) -> None:
        with pytest.raises(ValidationError):
            catalog_store.search_books(term)

    def test_delete_book(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert catalog_store.delete_book(seeded.dune_id) is True
        assert catalog_store.get_book(seeded.dune_id) is None
        assert catalog_store.delete_book(seeded.dune_id) is False

    def test_book_requires_existing_publisher(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        with pytest.raises(IntegrityError):
            catalog_store.create_book(
                Book(title="Orphan", type="novel", price=1.0, publisher_id=999, author_id=seeded.herbert_id)
            )

    def test_book_requires_existing_author(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        with pytest.raises(IntegrityError):
            catalog_store.create_book(
                Book(title="Orphan", type="novel", price=1.0, publisher_id=seeded.orbit_id, author_id=999)
            )


class TestHostileInput:
    """Search terms are bound parameters; nothing the caller types reaches the SQL text."""

    def test_sql_fragment_is_plain_text(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert catalog_store.search_books("'; DROP TABLE books; --") == []
        assert "books" in inspect(catalog_store.engine).get_table_names()
        assert len(catalog_store.list_books()) == 3

    def test_quote_in_title_is_searchable(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        catalog_store.create_book(
            Book(
                title="Ender's Game",
                type="novel",
                price=7.0,
                publisher_id=seeded.orbit_id,
                author_id=seeded.herbert_id,
            )
        )
        assert [b.title for b in catalog_store.search_books("Ender's")] == ["Ender's Game"]

    def test_like_wildcards_are_literal(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert catalog_store.search_books("%") == []
        assert catalog_store.search_books("_") == []
        catalog_store.create_book(
            Book(title="100% Dune", type="essay", price=1.0, publisher_id=seeded.orbit_id, author_id=seeded.herbert_id)
        )
        assert [b.title for b in catalog_store.search_books("0%")] == ["100% Dune"]


class TestPublisherQueries:
    def test_search_publishers(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        results = catalog_store.search_publishers("orbit")
        assert [(p.id, p.name, p.city) for p in results] == [(seeded.orbit_id, "Orbit Books", "New York")]

    @pytest.mark.parametrize("term", ["", "  "])
    def test_search_blank_term(self, catalog_store: CatalogStore, term: str) -> None:
        with pytest.raises(ValidationError):
            catalog_store.search_publishers(term)

    def test_books_by_publisher_join_author(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        books = catalog_store.list_books_by_publisher(seeded.orbit_id)
        assert [b.title for b in books] == ["Dune", "Dune Messiah"]
        assert all(b.author_last == "Herbert" for b in books)
        assert all(b.publisher is None for b in books)

    def test_books_by_unknown_publisher(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert catalog_store.list_books_by_publisher(999) == []

    def test_delete_publisher(self, catalog_store: CatalogStore) -> None:
        pid = catalog_store.create_publisher(Publisher(name="Tiny Press", city="Leeds"))
        assert catalog_store.delete_publisher(pid) is True
        assert catalog_store.delete_publisher(pid) is False

    def test_delete_referenced_publisher_rejected(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        with pytest.raises(IntegrityError):
            catalog_store.delete_publisher(seeded.orbit_id)


class TestAuthorQueries:
    def test_search_matches_first_name(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert [a.last_name for a in catalog_store.search_authors("Fra")] == ["Herbert"]

    def test_search_matches_last_name(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        assert [a.first_name for a in catalog_store.search_authors("sten")] == ["Jane"]

    def test_search_matches_either_name(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        # "e" appears in Frank Herbert and Jane Austen
        assert len(catalog_store.search_authors("e")) == 2

    def test_search_blank_term(self, catalog_store: CatalogStore) -> None:
        with pytest.raises(ValidationError):
            catalog_store.search_authors(" ")

    def test_create_author_round_trip(self, catalog_store: CatalogStore) -> None:
        aid = catalog_store.create_author(
            Author(first_name="Ursula", last_name="Le Guin", country="USA", city="Portland", address="3 Earthsea Rd")
        )
        (author,) = catalog_store.search_authors("Le Guin")
        assert author.id == aid
        assert author.address == "3 Earthsea Rd"

    def test_books_by_author_join_publisher(self, catalog_store: CatalogStore, seeded: SeededCatalog) -> None:
        books = catalog_store.list_books_by_author(seeded.austen_id)
        assert [(b.title, b.publisher) for b in books] == [("Pride and Prejudice", "Penguin Classics")]
        assert books[0].author_first is None
