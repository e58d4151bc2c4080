"""
catalog/models.py -- Domain dataclasses for the product catalog.

These are pure data containers with zero logic. Persistence lives in
catalog/store.py; the HTTP contract lives in api/models.py.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Product:
    """A catalog entry.

    price is a fixed-point Decimal (NUMERIC(10,2) in the database), never a
    float. Names are not unique; the same name may be listed twice.

    id and created_at are None before the record is written to the database.
    """

    name: str
    price: Decimal
    description: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class Setting:
    """A key-value row. Seeded outside the application; read-only here."""

    key: str
    value: Optional[str] = None
    updated_at: Optional[datetime] = None
