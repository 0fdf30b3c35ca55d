"""
catalog/models.py -- Domain dataclasses for the library catalog.

These are pure data containers with zero logic. All query logic lives in
catalog/store.py. Referential integrity between Book and its Publisher and
Author is enforced by the database, not here.

id is None before the record is written to the database.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Publisher:
    name: str
    city: str
    id: Optional[int] = None


@dataclass
class Author:
    first_name: str
    last_name: str
    country: str
    city: str
    address: str
    id: Optional[int] = None


@dataclass
class Book:
    """A catalog entry. publisher_id and author_id must reference existing rows."""

    title: str
    type: str  # free-form category, e.g. "novel", "textbook"
    price: float
    publisher_id: int
    author_id: int
    id: Optional[int] = None


@dataclass
class BookDetail:
    """A Book joined with display fields from its Publisher and/or Author.

    Which of the joined fields are populated depends on the query:
      get_book / list_books / search_books -- publisher and author
      list_books_by_publisher              -- author only
      list_books_by_author                 -- publisher only
    """

    id: int
    title: str
    type: str
    price: float
    publisher_id: int
    author_id: int
    publisher: Optional[str] = None
    publisher_city: Optional[str] = None
    author_first: Optional[str] = None
    author_last: Optional[str] = None
