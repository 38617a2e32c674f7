"""
Public catalog endpoints (no authentication required)
"""

import logging

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_services
from storefront.core.exceptions import StoreFailureError
from storefront.services.container import Services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["catalog"])


@router.get("")
async def list_products(services: Services = Depends(get_services)):
    """
    Every sellable product: admin-entered products first, then dealer
    uploads, in one uniform shape.

    **Response**:
    ```json
    {"success": true, "items": [{"id": "...", "name": "...", "price": 19.99, "image": "https://..."}]}
    ```
    """
    try:
        items = await services.catalog.list_catalog()
    except StoreFailureError as e:
        raise StoreFailureError("Failed to fetch products", details=e.details) from e
    return {"success": True, "items": items}


@router.get("/{product_id}")
async def get_product(product_id: str, services: Services = Depends(get_services)):
    """Single product; an admin product shadows a dealer product with the same id."""
    try:
        product = await services.catalog.get_product_by_id(product_id)
    except StoreFailureError as e:
        raise StoreFailureError("Failed to fetch product", details=e.details) from e
    return {"success": True, "product": product}
