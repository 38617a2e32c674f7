"""
Admin API Endpoints

Login is public; everything else requires an admin bearer token.

- Admin accounts (login, add, list, delete)
- Admin product CRUD with image upload
- Read/update/delete views over contacts, dealers, media queries, surveys
- Batch delete across those tables
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile, status

from storefront.api.dependencies import get_services
from storefront.core.security import get_current_admin
from storefront.models.requests import AddAdminRequest, AdminLoginRequest, BatchDeleteRequest
from storefront.repositories.document_store import decimal_to_float
from storefront.services.container import Services
from storefront.services.record_service import RecordService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _record_view(services: Services, view: str) -> RecordService:
    records = services.records.get(view)
    if records is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return records


# ==================== ACCOUNTS ====================

@router.post("/login", summary="Admin Login")
async def admin_login(login_request: AdminLoginRequest, services: Services = Depends(get_services)):
    """
    Authenticate with username and password.

    The configured super admin is checked first; other accounts are
    verified against their bcrypt hash in the admin table.

    **Example:**
    ```bash
    curl -X POST "http://localhost:5001/api/admin/login" \\
         -H "Content-Type: application/json" \\
         -d '{"username": "jane", "password": "your_password"}'
    ```
    """
    result = await services.admins.login(login_request.username, login_request.password)
    return {"success": True, **result}


@router.post("/add-user", status_code=status.HTTP_201_CREATED)
async def add_admin_user(
    request: AddAdminRequest,
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    username = await services.admins.add_admin(request.username, request.password)
    logger.info(f"Admin '{username}' created by {current_admin['username']}")
    return {"success": True, "message": f"Admin user '{username}' created."}


@router.get("/admins")
async def list_admins(
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    return {"success": True, "data": await services.admins.list_admins()}


@router.delete("/admins/{username}")
async def delete_admin(
    username: str,
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    await services.admins.delete_admin(username)
    return {"success": True, "message": "Item deleted successfully."}


# ==================== PRODUCTS ====================

@router.post("/products", status_code=status.HTTP_201_CREATED)
async def add_product(
    name: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    """Create an admin product from a multipart form with a single `image` file."""
    product = await services.catalog.create_admin_product(
        name=name,
        price=price,
        image=image,
        description=description,
        category=category,
        brand=brand,
    )
    return {
        "success": True,
        "message": "Product added successfully",
        "product": decimal_to_float(product),
    }


@router.get("/products")
async def list_admin_products(
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    return {"success": True, "data": await services.catalog.list_admin_products()}


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    await services.catalog.update_admin_product(product_id, body)
    return {"success": True, "message": "Item updated successfully."}


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    await services.catalog.delete_admin_product(product_id)
    return {"success": True, "message": "Item deleted successfully."}


# ==================== BATCH DELETE ====================

@router.post("/batch-delete")
async def batch_delete(
    request: BatchDeleteRequest,
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    """
    Delete many records from one table.

    **Body:** `{"tableName": "Products", "ids": ["p1", "p2"]}`

    `tableName` is the admin panel's display name: Products, Dealers,
    Admins, Contact Messages, Media Queries or Product Surveys.
    """
    deleted = await services.batch_delete.batch_delete(request.table_name, request.ids)
    return {"success": True, "message": f"{deleted} items deleted successfully."}


# ==================== TABLE VIEWS ====================
# Declared last so the specific /admins and /products routes above win

@router.get("/{view}")
async def list_records(
    view: str,
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    """contacts, dealers, media-queries or product-surveys"""
    records = _record_view(services, view)
    return {"success": True, "data": await records.list()}


@router.put("/{view}/{key}")
async def update_record(
    view: str,
    key: str,
    body: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    records = _record_view(services, view)
    await records.replace(key, body)
    return {"success": True, "message": "Item updated successfully."}


@router.delete("/{view}/{key}")
async def delete_record(
    view: str,
    key: str,
    services: Services = Depends(get_services),
    current_admin: dict = Depends(get_current_admin),
):
    records = _record_view(services, view)
    await records.delete(key)
    return {"success": True, "message": "Item deleted successfully."}
