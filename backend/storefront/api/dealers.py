"""
Dealer endpoints: registration, login, profile and dealer-owned products
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status

from storefront.api.dependencies import get_services
from storefront.models.requests import DealerLoginRequest, DealerRegistrationRequest
from storefront.repositories.document_store import decimal_to_float
from storefront.services.container import Services

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dealers"])


@router.post("/dealers")
async def register_dealer(request: DealerRegistrationRequest, services: Services = Depends(get_services)):
    dealer_id = await services.dealers.register(
        name=request.name,
        email=request.email,
        phone=request.phone,
        company=request.company,
        address=request.address,
    )
    return {"success": True, "message": "Dealer registered successfully", "dealerId": dealer_id}


@router.post("/dealers/login")
async def dealer_login(request: DealerLoginRequest, services: Services = Depends(get_services)):
    """Email + registered phone number; returns the dealerId on success."""
    dealer_id = await services.dealers.login(request.email, request.phone)
    return {"success": True, "message": "Login successful!", "dealerId": dealer_id}


@router.get("/dealers/{dealer_id}")
async def get_dealer(dealer_id: str, services: Services = Depends(get_services)):
    dealer = await services.dealers.get_dealer(dealer_id)
    return {"success": True, "dealer": dealer}


# ==================== DEALER PRODUCTS ====================

@router.post("/dealer/products", status_code=status.HTTP_201_CREATED)
async def add_dealer_product(
    dealer_id: Optional[str] = Form(None, alias="dealerId"),
    name: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    services: Services = Depends(get_services),
):
    product = await services.catalog.create_vendor_product(
        dealer_id=dealer_id,
        name=name,
        price=price,
        image=image,
        description=description,
        category=category,
        brand=brand,
    )
    return {
        "success": True,
        "message": "Product uploaded successfully by dealer",
        "product": decimal_to_float(product),
    }


@router.get("/dealer/products/{dealer_id}")
async def list_dealer_products(dealer_id: str, services: Services = Depends(get_services)):
    products = await services.catalog.list_dealer_products(dealer_id)
    return {"success": True, "products": products}


@router.put("/dealer/products/{product_id}")
async def update_dealer_product(
    product_id: str,
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
):
    # TODO: check that the calling dealer owns this product once dealers carry a session token
    product = await services.catalog.update_vendor_product(product_id, body)
    return {
        "success": True,
        "message": "Product updated successfully.",
        "product": decimal_to_float(product),
    }


@router.delete("/dealer/products/{product_id}")
async def delete_dealer_product(product_id: str, services: Services = Depends(get_services)):
    await services.catalog.delete_vendor_product(product_id)
    return {"success": True, "message": "Product deleted successfully."}
