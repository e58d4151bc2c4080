"""
api/routes/catalog.py -- Product and settings endpoints.

Routes:
  GET  /api/products  -- every product, newest first
  POST /api/products  -- insert a product, return the stored row
  GET  /api/settings  -- every settings row

No auth: the catalog is public, as is product creation.
Store errors (NOT NULL violations, connectivity) are turned into a 400 by the
SQLAlchemyError handler in api/main.py.
"""

from fastapi import APIRouter, HTTPException, Request

from api.models import ProductCreate, ProductOut, SettingOut
from catalog.store import ProductStore, SettingsStore

router = APIRouter()


@router.get("/products", response_model=list[ProductOut])
def list_products(request: Request) -> list[ProductOut]:
    product_store: ProductStore = request.app.state.product_store
    return [ProductOut.from_product(p) for p in product_store.list_products()]


@router.post("/products", response_model=ProductOut)
def create_product(request: Request, body: ProductCreate) -> ProductOut:
    """Insert a product. Only name and price are required; names may repeat."""
    missing = [name for name in ("name", "price") if getattr(body, name) is None]
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required field(s): {', '.join(missing)}")
    product_store: ProductStore = request.app.state.product_store
    product = product_store.create_product(body.name, body.price, body.description)
    return ProductOut.from_product(product)


@router.get("/settings", response_model=list[SettingOut])
def list_settings(request: Request) -> list[SettingOut]:
    settings_store: SettingsStore = request.app.state.settings_store
    return [SettingOut.from_setting(s) for s in settings_store.list_settings()]
