"""
API request and response models for Stockroom REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
items/models.py, which own the internal domain representation. Route handlers
map between the two.

Request models are lenient on purpose. Required fields are Optional here so a
missing value reaches the service layer and comes back as a 400 with a
domain message, instead of a schema error. price and quantity accept any JSON
value; items/service.py normalizes them.

No response model has a password or password_hash field.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from items.models import Item

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    username: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=320)
    password: Optional[str] = Field(default=None, max_length=1024)


class LoginRequest(BaseModel):
    """Request body for POST /login.

    The account may be named by identifier, username or email; the first
    non-empty one wins, in that order.
    """

    identifier: Optional[str] = Field(default=None, max_length=320)
    username: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=320)
    password: Optional[str] = Field(default=None, max_length=1024)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    username: str
    email: str


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


class ItemCreate(BaseModel):
    """Request body for POST /items. price and quantity are parse-or-default."""

    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    price: Any = None
    quantity: Any = None


class ItemUpdate(BaseModel):
    """Request body for PUT /items/{id}. Only name and description are writable."""

    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)


class ItemResponse(BaseModel):
    """Client view of an item. owner_id is implied by the token and not echoed."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: Optional[str]
    price: float
    quantity: int
    created_at: str

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        """Build an ItemResponse from a domain Item.

        The mapping lives here, colocated with the output model, rather than
        scattered across route handlers.
        """
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            price=item.price,
            quantity=item.quantity,
            created_at=item.created_at,
        )


class DeleteResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool = True
    id: int


# ---------------------------------------------------------------------------
# Errors and operational endpoints
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]


class DbPingResponse(BaseModel):
    """Response for GET /db-ping."""

    model_config = ConfigDict(frozen=True)

    db: bool
    error: Optional[str] = None
