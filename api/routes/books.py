"""
api/routes/books.py -- Book catalog routes.

Routes:
  GET    /books               -- every book, enriched with publisher + author
  GET    /books/search?q=     -- title contains q; 400 blank q, 404 no match
  GET    /book/{book_id}      -- single enriched book; 404 if absent
  POST   /book                -- add a book (admin); 400 if a field is missing
  DELETE /book/{book_id}      -- delete a book (admin); 404 if absent

A book whose publisher or author does not exist is rejected by the database
foreign keys and reported as a 500 "Error adding book".
"""

from fastapi import APIRouter, Request

from api.models import BookCreate, BookCreatedResponse, BookResponse, MessageResponse
from api.routes.common import require_fields, store_errors
from auth.dependencies import ADMIN_ONLY
from catalog.models import Book
from catalog.store import CatalogStore
from core.errors import NotFoundError

# Auth policy:
# - GET    /books, /books/search, /book/{id}: public
# - POST   /book:                             token + admin (ADMIN_ONLY)
# - DELETE /book/{id}:                        token + admin (ADMIN_ONLY)
router = APIRouter()


@router.get("/books", response_model=list[BookResponse])
def list_books(request: Request) -> list[BookResponse]:
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Failed to fetch books"):
        books = catalog.list_books()
    return [BookResponse.model_validate(b) for b in books]


@router.get("/books/search", response_model=list[BookResponse])
def search_books(request: Request, q: str | None = None) -> list[BookResponse]:
    """Case-insensitive (per collation) substring match on the book title."""
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Search failed"):
        books = catalog.search_books(q)
    if not books:
        raise NotFoundError("No books found")
    return [BookResponse.model_validate(b) for b in books]


@router.get("/book/{book_id}", response_model=BookResponse)
def get_book(request: Request, book_id: int) -> BookResponse:
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Failed to fetch book"):
        book = catalog.get_book(book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return BookResponse.model_validate(book)


@router.post("/book", response_model=BookCreatedResponse, status_code=201, dependencies=ADMIN_ONLY)
def add_book(request: Request, body: BookCreate) -> BookCreatedResponse:
    require_fields(body.title, body.type, body.price, body.publisher_id, body.author_id)
    catalog: CatalogStore = request.app.state.catalog
    book = Book(
        title=body.title,
        type=body.type,
        price=body.price,
        publisher_id=body.publisher_id,
        author_id=body.author_id,
    )
    with store_errors("Error adding book"):
        book_id = catalog.create_book(book)
    return BookCreatedResponse(message="Book added successfully!", book_id=book_id)


@router.delete("/book/{book_id}", response_model=MessageResponse, dependencies=ADMIN_ONLY)
def delete_book(request: Request, book_id: int) -> MessageResponse:
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Error deleting book"):
        deleted = catalog.delete_book(book_id)
    if not deleted:
        raise NotFoundError("Book not found")
    return MessageResponse(message="Book deleted successfully!")
