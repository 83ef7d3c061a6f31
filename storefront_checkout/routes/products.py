"""Product catalog routes"""

from fastapi import APIRouter, Depends, HTTPException

from ..models.product import Product
from ..services.commerce_client import CatalogClient, CatalogError
from .deps import get_catalog_client

router = APIRouter(prefix="/api/products", tags=["Products"])

ALL_CATEGORIES = "all"

CATEGORIES = [
    {"id": ALL_CATEGORIES, "name": "All Products"},
    {"id": "organic-food", "name": "Organic Food"},
    {"id": "handmade-crafts", "name": "Handmade Crafts"},
    {"id": "ethical-clothing", "name": "Ethical Clothing"},
]


@router.get("", response_model=list[Product])
async def list_products(
    category: str = ALL_CATEGORIES,
    catalog: CatalogClient = Depends(get_catalog_client),
):
    """List products, optionally filtered by category"""
    try:
        products = await catalog.fetch_products()
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if category == ALL_CATEGORIES:
        return products
    return [p for p in products if p.category == category]


@router.get("/categories")
async def get_categories():
    """Get the storefront categories"""
    return CATEGORIES
