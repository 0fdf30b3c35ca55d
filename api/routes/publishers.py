"""
api/routes/publishers.py -- Publisher routes.

Routes:
  GET    /publishers/search?q=      -- name contains q; 400 blank q, 404 no match
  POST   /publisher                 -- add a publisher (admin)
  DELETE /publisher/{publisher_id}  -- delete a publisher (admin); 404 if absent
  GET    /publisher/{publisher_id}/books -- the publisher's books with authors
"""

from fastapi import APIRouter, Request

from api.models import BookResponse, MessageResponse, PublisherCreate, PublisherCreatedResponse, PublisherResponse
from api.routes.common import require_fields, store_errors
from auth.dependencies import ADMIN_ONLY
from catalog.models import Publisher
from catalog.store import CatalogStore
from core.errors import NotFoundError

# Auth policy:
# - GET    /publishers/search, /publisher/{id}/books: public
# - POST   /publisher, DELETE /publisher/{id}:        token + admin (ADMIN_ONLY)
router = APIRouter()


@router.get("/publishers/search", response_model=list[PublisherResponse])
def search_publishers(request: Request, q: str | None = None) -> list[PublisherResponse]:
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Publisher search failed"):
        publishers = catalog.search_publishers(q)
    if not publishers:
        raise NotFoundError("No publishers found")
    return [PublisherResponse.model_validate(p) for p in publishers]


@router.post("/publisher", response_model=PublisherCreatedResponse, status_code=201, dependencies=ADMIN_ONLY)
def add_publisher(request: Request, body: PublisherCreate) -> PublisherCreatedResponse:
    require_fields(body.name, body.city)
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Error adding publisher"):
        publisher_id = catalog.create_publisher(Publisher(name=body.name, city=body.city))
    return PublisherCreatedResponse(message="Publisher added successfully!", publisher_id=publisher_id)


@router.delete("/publisher/{publisher_id}", response_model=MessageResponse, dependencies=ADMIN_ONLY)
def delete_publisher(request: Request, publisher_id: int) -> MessageResponse:
    """Delete a publisher. Fails with 500 while any book still references it."""
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Error deleting publisher"):
        deleted = catalog.delete_publisher(publisher_id)
    if not deleted:
        raise NotFoundError("Publisher not found")
    return MessageResponse(message="Publisher deleted successfully!")


@router.get(
    "/publisher/{publisher_id}/books",
    response_model=list[BookResponse],
    response_model_exclude_none=True,
)
def books_by_publisher(request: Request, publisher_id: int) -> list[BookResponse]:
    catalog: CatalogStore = request.app.state.catalog
    with store_errors("Failed to fetch books by publisher"):
        books = catalog.list_books_by_publisher(publisher_id)
    if not books:
        raise NotFoundError("This publisher has no books")
    return [BookResponse.model_validate(b) for b in books]
