"""
catalog/store.py -- SQLAlchemy-backed persistence for products and settings.

Pattern: Repository + Data Mapper. ProductStore and SettingsStore are the
repositories (one clean interface per entity). The _row_to_* functions are
the mappers. Route handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    products = ProductStore(engine)
    widget = products.create_product("Widget", Decimal("9.99"))
    newest_first = products.list_products()
    SettingsStore(engine).list_settings()
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy.engine import Engine

from catalog.models import Product, Setting
from core.database import products as _products
from core.database import settings as _settings


class ProductStore:
    """Repository for Product entities. Insert and list only."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def list_products(self) -> list[Product]:
        """Return every product, newest first.

        created_at has one-second resolution on some backends, so id breaks
        ties to keep the order stable for rows inserted in the same second.
        """
        with self.engine.connect() as conn:
            rows = conn.execute(
                _products.select().order_by(_products.c.created_at.desc(), _products.c.id.desc())
            ).fetchall()
        return [_row_to_product(r) for r in rows]

    def create_product(self, name: str, price: Decimal, description: Optional[str] = None) -> Product:
        """Insert a product and return the row as stored (id and created_at set).

        NOT NULL on name and price is the only check. Violations raise
        sqlalchemy.exc.IntegrityError.
        """
        with self.engine.begin() as conn:
            result = conn.execute(_products.insert().values(name=name, price=price, description=description))
            product_id = result.inserted_primary_key[0]
            row = conn.execute(_products.select().where(_products.c.id == product_id)).fetchone()
        return _row_to_product(row)


class SettingsStore:
    """Repository for Setting entities. Read-only."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def list_settings(self) -> list[Setting]:
        """Return every settings row in whatever order the database yields."""
        with self.engine.connect() as conn:
            rows = conn.execute(_settings.select()).fetchall()
        return [_row_to_setting(r) for r in rows]


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_product(row) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        price=row.price,
        description=row.description,
        created_at=row.created_at,
    )


def _row_to_setting(row) -> Setting:
    return Setting(key=row.key, value=row.value, updated_at=row.updated_at)
