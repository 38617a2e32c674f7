"""
Public form submissions (no authentication required)
"""

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_services
from storefront.models.requests import (
    BusinessOrderRequest,
    ContactRequest,
    MediaQueryRequest,
    ProductSurveyRequest,
)
from storefront.repositories.document_store import decimal_to_float
from storefront.services.container import Services

router = APIRouter(tags=["submissions"])


@router.post("/contact")
async def submit_contact(request: ContactRequest, services: Services = Depends(get_services)):
    item = await services.submissions.save_contact(request.name, request.email, request.message)
    return {"success": True, "message": "Message saved", "data": item}


@router.post("/business-orders")
async def submit_business_order(request: BusinessOrderRequest, services: Services = Depends(get_services)):
    item = await services.submissions.save_business_order(
        name=request.name,
        email=request.email,
        phone=request.phone,
        selected_products=request.selected_products,
        company=request.company,
        shipping_address=request.shipping_address,
        billing_address=request.billing_address,
        total=request.total,
    )
    return {"success": True, "message": "Business order saved", "data": decimal_to_float(item)}


@router.post("/product-survey", status_code=status.HTTP_201_CREATED)
async def submit_product_survey(request: ProductSurveyRequest, services: Services = Depends(get_services)):
    await services.submissions.save_product_survey(request.product_name, request.rating, request.feedback)
    return {"success": True, "message": "Survey saved successfully"}


@router.post("/media-queries")
async def submit_media_query(request: MediaQueryRequest, services: Services = Depends(get_services)):
    await services.submissions.save_media_query(request.name, request.email, request.query)
    return {"success": True, "message": "Media query saved"}
