"""
API request and response models for the E-Library REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two.

Request fields are all Optional on purpose: a missing or empty required
field is a 400 "Missing required fields" raised by the route, not a
framework-level schema error. Each field also accepts the PascalCase /
camelCase key existing clients send (PName, FName, pubId, ...).
"""

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RoleEnum(str, Enum):
    user = "user"
    admin = "admin"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class _RequestModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)


class SignupRequest(_RequestModel):
    """Request body for POST /signup.

    role is optional; absent, null or "" all mean "user". Any other value
    outside {"user", "admin"} fails validation.
    """

    username: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = None
    first_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("fName", "first_name", "FName"))
    last_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("lName", "last_name", "LName"))
    role: RoleEnum = RoleEnum.user

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, value):
        return value or RoleEnum.user


class SigninRequest(_RequestModel):
    username: Optional[str] = None
    password: Optional[str] = None


class BookCreate(_RequestModel):
    """Request body for POST /book. All five fields are required."""

    title: Optional[str] = Field(default=None, validation_alias=AliasChoices("title", "Title"))
    type: Optional[str] = Field(default=None, validation_alias=AliasChoices("type", "Type"))
    price: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("price", "Price"))
    publisher_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("pubId", "publisher_id", "PubId"))
    author_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("authorId", "author_id", "AuthorId"))


class PublisherCreate(_RequestModel):
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "PName"))
    city: Optional[str] = Field(default=None, validation_alias=AliasChoices("city", "City"))


class AuthorCreate(_RequestModel):
    first_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("first_name", "fName", "FName"))
    last_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("last_name", "lName", "LName"))
    country: Optional[str] = Field(default=None, validation_alias=AliasChoices("country", "Country"))
    city: Optional[str] = Field(default=None, validation_alias=AliasChoices("city", "City"))
    address: Optional[str] = Field(default=None, validation_alias=AliasChoices("address", "Address"))


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class SignupResponse(MessageResponse):
    user_id: int = Field(serialization_alias="userId")


class SigninResponse(MessageResponse):
    token: str
    role: RoleEnum


class BookCreatedResponse(MessageResponse):
    book_id: int = Field(serialization_alias="bookId")


class PublisherCreatedResponse(MessageResponse):
    publisher_id: int = Field(serialization_alias="pubId")


class AuthorCreatedResponse(MessageResponse):
    author_id: int = Field(serialization_alias="authorId")


class BookResponse(BaseModel):
    """An enriched book record.

    Serialized with the catalog's column names (Id, Title, Publisher,
    AuthorFirst, ...). Publisher and PublisherCity are omitted from
    GET /author/{id}/books, AuthorFirst and AuthorLast from
    GET /publisher/{id}/books: those queries join only the other side.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int = Field(serialization_alias="Id")
    title: str = Field(serialization_alias="Title")
    type: str = Field(serialization_alias="Type")
    price: float = Field(serialization_alias="Price")
    publisher_id: int = Field(serialization_alias="PubId")
    author_id: int = Field(serialization_alias="AuthorId")
    publisher: Optional[str] = Field(default=None, serialization_alias="Publisher")
    publisher_city: Optional[str] = Field(default=None, serialization_alias="PublisherCity")
    author_first: Optional[str] = Field(default=None, serialization_alias="AuthorFirst")
    author_last: Optional[str] = Field(default=None, serialization_alias="AuthorLast")


class PublisherResponse(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int = Field(serialization_alias="Id")
    name: str = Field(serialization_alias="PName")
    city: str = Field(serialization_alias="City")


class AuthorResponse(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int = Field(serialization_alias="Id")
    first_name: str = Field(serialization_alias="FName")
    last_name: str = Field(serialization_alias="LName")
    country: str = Field(serialization_alias="Country")
    city: str = Field(serialization_alias="City")


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    error: str
    detail: Optional[str] = None
