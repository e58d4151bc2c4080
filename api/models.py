"""
API request and response models for the catalog REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models declare every field Optional: a missing field must produce the
400 {"error": ...} envelope from the handler, not FastAPI's 422 list.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from auth.models import User
from catalog.models import Product, Setting

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for POST /api/register and POST /api/login."""

    username: Optional[str] = None
    password: Optional[str] = None

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are absent or null.

        Empty strings count as present: any non-null password is accepted.
        """
        return [name for name in ("username", "password") if getattr(self, name) is None]


class ProductCreate(BaseModel):
    """Request body for POST /api/products.

    price is coerced to Decimal so 9.99 and "9.99" are stored identically.
    Strings are stored exactly as sent, surrounding whitespace included.
    """

    name: Optional[str] = None
    price: Optional[Decimal] = None
    description: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserOut(BaseModel):
    """Public view of a user. The password hash is never part of it."""

    id: int
    username: str
    is_admin: bool

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(id=user.id, username=user.username, is_admin=user.is_admin)


class AuthResponse(BaseModel):
    """Response body for a successful register or login."""

    success: bool = True
    user: UserOut


class ProductOut(BaseModel):
    """One product row. price serializes as a decimal string ("9.99")."""

    id: int
    name: str
    price: Decimal
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        """Factory Method -- the mapping lives here, colocated with the output model."""
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            description=product.description,
            created_at=product.created_at,
        )


class SettingOut(BaseModel):
    key: str
    value: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_setting(cls, setting: Setting) -> "SettingOut":
        return cls(key=setting.key, value=setting.value, updated_at=setting.updated_at)


class ErrorResponse(BaseModel):
    """Uniform error envelope returned by every failing endpoint."""

    error: str


class HealthResponse(BaseModel):
    status: str = "healthy"
