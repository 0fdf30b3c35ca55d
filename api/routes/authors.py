"""
api/routes/authors.py -- Author routes.

Routes:
  GET  /authors/search?q=         -- first OR last name contains q
  POST /author                    -- add an author (admin); all five fields required
  GET  /author/{author_id}/books  -- the author's books with publishers
"""

from fastapi import APIRouter, Request

from api.models import AuthorCreate, AuthorCreatedResponse, AuthorResponse, BookResponse
from api.routes.common import require_fields, store_errors
from auth.dependencies import ADMIN_ONLY
from catalog.models import Author
from catalog.store import CatalogStore
from core.errors import NotFoundError

# Auth policy:
# - GET  /authors/search, /author/{id}/books: public
# - POST /author:                             token + admin (ADMIN_ONLY)
router = APIRouter()


@router.get("/authors/search", response_model=list[AuthorResponse])
def search_authors(request: Request, q: str | None = None) -> list[AuthorResponse]:
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Author search failed"):
        authors = catalog.search_authors(q)
    if not authors:
        raise NotFoundError("No authors found")
    return [AuthorResponse.model_validate(a) for a in authors]


@router.post("/author", response_model=AuthorCreatedResponse, status_code=201, dependencies=ADMIN_ONLY)
def add_author(request: Request, body: AuthorCreate) -> AuthorCreatedResponse:
    require_fields(body.first_name, body.last_name, body.country, body.city, body.address)
    catalog: CatalogStore = request.app.state.catalog
    author = Author(
        first_name=body.first_name,
        last_name=body.last_name,
        country=body.country,
        city=body.city,
        address=body.address,
    )
    with store_errors("Error adding author"):
        author_id = catalog.create_author(author)
    return AuthorCreatedResponse(message="Author added successfully!", author_id=author_id)


@router.get(
    "/author/{author_id}/books",
    response_model=list[BookResponse],
    response_model_exclude_none=True,
)
def books_by_author(request: Request, author_id: int) -> list[BookResponse]:
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Failed to fetch books by author"):
        books = catalog.list_books_by_author(author_id)
    if not books:
        raise NotFoundError("This author has no books")
    return [BookResponse.model_validate(b) for b in books]
