"""
catalog/store.py -- SQLAlchemy-backed persistence layer for the library catalog.

Uses SQLAlchemy Core (not ORM) so the domain dataclasses in catalog/models.py
remain the authoritative domain representation. Swapping SQLite for MySQL is
a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. CatalogStore is the repository (one clean
interface per entity). The _row_to_* functions are the mappers. Route
handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL. Substring
search goes through ColumnOperators.contains(autoescape=True), which renders
LIKE '%' || :param || '%' and escapes any % or _ the caller typed, so a
search term can never widen the match or reach the SQL text.

Not-found policy: get_book returns None, delete_* return False and list/
search methods return []. Routes translate those into 404s. Blank search
terms raise ValidationError here so every caller gets the same 400.

Usage:
    store = CatalogStore(engine)
    pub_id = store.create_publisher(Publisher(name="Penguin", city="London"))
    store.search_books("dune")
"""

from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer, MetaData, Numeric, String, Table, Text, or_, select
from sqlalchemy.engine import Engine

from catalog.models import Author, Book, BookDetail, Publisher
from core.errors import ValidationError


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_publishers = Table(
    "publishers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("city", String(100), nullable=False),
)

_authors = Table(
    "authors",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("country", String(100), nullable=False),
    Column("city", String(100), nullable=False),
    Column("address", Text, nullable=False),
)

_books = Table(
    "books",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("type", String(50), nullable=False),
    Column("price", Numeric(10, 2, asdecimal=False), nullable=False),
    Column("publisher_id", Integer, ForeignKey("publishers.id"), nullable=False),
    Column("author_id", Integer, ForeignKey("authors.id"), nullable=False),
)

# Column sets reused by the enriched-book queries.
_BOOK_COLUMNS = (
    _books.c.id,
    _books.c.title,
    _books.c.type,
    _books.c.price,
    _books.c.publisher_id,
    _books.c.author_id,
)
_PUBLISHER_COLUMNS = (
    _publishers.c.name.label("publisher"),
    _publishers.c.city.label("publisher_city"),
)
_AUTHOR_COLUMNS = (
    _authors.c.first_name.label("author_first"),
    _authors.c.last_name.label("author_last"),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _search_term(term: Optional[str]) -> str:
    """Return term unchanged, or raise ValidationError if it is empty or whitespace."""
    if term is None or not term.strip():
        raise ValidationError("Search query is required")
    return term


def _enriched_books():
    """SELECT over Book JOIN Publisher JOIN Author, unfiltered."""
    return select(*_BOOK_COLUMNS, *_PUBLISHER_COLUMNS, *_AUTHOR_COLUMNS).select_from(
        _books.join(_publishers, _books.c.publisher_id == _publishers.c.id).join(
            _authors, _books.c.author_id == _authors.c.id
        )
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CatalogStore:
    """Repository for Book, Publisher, and Author entities.

    Each public method issues exactly one statement on its own connection,
    so no multi-statement transaction is ever held open across a request.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    def get_book(self, book_id: int) -> Optional[BookDetail]:
        """Return the enriched record for book_id, or None if it does not exist."""
        stmt = _enriched_books().where(_books.c.id == book_id)
        with self.engine.connect() as conn:
            row = conn.execute(stmt).fetchone()
        return _row_to_book_detail(row) if row is not None else None

    def list_books(self) -> list[BookDetail]:
        """Return every book as an enriched record, ordered by id."""
        with self.engine.connect() as conn:
            rows = conn.execute(_enriched_books().order_by(_books.c.id)).fetchall()
        return [_row_to_book_detail(r) for r in rows]

    def search_books(self, term: Optional[str]) -> list[BookDetail]:
        """Return enriched books whose title contains term.

        Case sensitivity follows the database collation (case-insensitive for
        ASCII on SQLite and on MySQL's default collations).
        """
        needle = _search_term(term)
        stmt = _enriched_books().where(_books.c.title.contains(needle, autoescape=True)).order_by(_books.c.id)
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_book_detail(r) for r in rows]

    def create_book(self, book: Book) -> int:
        """Insert a book and return its ID.

        Raises sqlalchemy.exc.IntegrityError if publisher_id or author_id does
        not reference an existing row.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _books.insert().values(
                    title=book.title,
                    type=book.type,
                    price=book.price,
                    publisher_id=book.publisher_id,
                    author_id=book.author_id,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def delete_book(self, book_id: int) -> bool:
        """Delete a book. Returns True if a row was deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_books.delete().where(_books.c.id == book_id))
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Publishers
    # ------------------------------------------------------------------

    def search_publishers(self, term: Optional[str]) -> list[Publisher]:
        """Return publishers whose name contains term."""
        needle = _search_term(term)
        stmt = (
            _publishers.select()
            .where(_publishers.c.name.contains(needle, autoescape=True))
            .order_by(_publishers.c.id)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_publisher(r) for r in rows]

    def create_publisher(self, publisher: Publisher) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(_publishers.insert().values(name=publisher.name, city=publisher.city))
            conn.commit()
            return result.inserted_primary_key[0]

    def delete_publisher(self, publisher_id: int) -> bool:
        """Delete a publisher. Returns True if a row was deleted, False if not found.

        Raises sqlalchemy.exc.IntegrityError while books still reference it.
        """
        with self.engine.connect() as conn:
            result = conn.execute(_publishers.delete().where(_publishers.c.id == publisher_id))
            conn.commit()
        return result.rowcount > 0

    def list_books_by_publisher(self, publisher_id: int) -> list[BookDetail]:
        """Return the publisher's books joined with their authors."""
        stmt = (
            select(*_BOOK_COLUMNS, *_AUTHOR_COLUMNS)
            .select_from(_books.join(_authors, _books.c.author_id == _authors.c.id))
            .where(_books.c.publisher_id == publisher_id)
            .order_by(_books.c.id)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_book_detail(r) for r in rows]

    # ------------------------------------------------------------------
    # Authors
    # ------------------------------------------------------------------

    def search_authors(self, term: Optional[str]) -> list[Author]:
        """Return authors whose first OR last name contains term."""
        needle = _search_term(term)
        stmt = (
            _authors.select()
            .where(
                or_(
                    _authors.c.first_name.contains(needle, autoescape=True),
                    _authors.c.last_name.contains(needle, autoescape=True),
                )
            )
            .order_by(_authors.c.id)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_author(r) for r in rows]

    def create_author(self, author: Author) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(
                _authors.insert().values(
                    first_name=author.first_name,
                    last_name=author.last_name,
                    country=author.country,
                    city=author.city,
                    address=author.address,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def list_books_by_author(self, author_id: int) -> list[BookDetail]:
        """Return the author's books joined with their publishers."""
        stmt = (
            select(*_BOOK_COLUMNS, *_PUBLISHER_COLUMNS)
            .select_from(_books.join(_publishers, _books.c.publisher_id == _publishers.c.id))
            .where(_books.c.author_id == author_id)
            .order_by(_books.c.id)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return [_row_to_book_detail(r) for r in rows]

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_book_detail(row) -> BookDetail:
    # Joined columns are absent from the by-publisher / by-author projections.
    fields = row._mapping
    return BookDetail(
        id=row.id,
        title=row.title,
        type=row.type,
        price=row.price,
        publisher_id=row.publisher_id,
        author_id=row.author_id,
        publisher=fields.get("publisher"),
        publisher_city=fields.get("publisher_city"),
        author_first=fields.get("author_first"),
        author_last=fields.get("author_last"),
    )


def _row_to_publisher(row) -> Publisher:
    return Publisher(id=row.id, name=row.name, city=row.city)


def _row_to_author(row) -> Author:
    return Author(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        country=row.country,
        city=row.city,
        address=row.address,
    )
