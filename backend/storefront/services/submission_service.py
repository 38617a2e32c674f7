"""
Public form submissions: contact messages, business orders, product surveys
and media queries. Each is a single validated put into its own table.
"""

import logging
from typing import Any, Dict, List, Optional

from ulid import ULID

from storefront.core.exceptions import ValidationError
from storefront.repositories.document_store import DocumentStore
from storefront.services.catalog_service import utc_now_iso

logger = logging.getLogger(__name__)


def _new_record(**fields: Any) -> Dict[str, Any]:
    return {"id": str(ULID()), **fields, "createdAt": utc_now_iso()}


class SubmissionService:

    def __init__(
        self,
        contacts: DocumentStore,
        business_orders: DocumentStore,
        product_surveys: DocumentStore,
        media_queries: DocumentStore,
    ):
        self.contacts = contacts
        self.business_orders = business_orders
        self.product_surveys = product_surveys
        self.media_queries = media_queries

    async def save_contact(self, name: Optional[str], email: Optional[str], message: Optional[str]) -> Dict[str, Any]:
        if not name or not email or not message:
            raise ValidationError("Missing required fields")
        item = _new_record(name=name, email=email, message=message)
        return await self.contacts.put(item)

    async def save_business_order(
        self,
        name: Optional[str],
        email: Optional[str],
        phone: Optional[str],
        selected_products: Optional[List[Any]],
        company: Optional[str] = None,
        shipping_address: Any = None,
        billing_address: Any = None,
        total: Any = None,
    ) -> Dict[str, Any]:
        if not name or not email or not phone or not selected_products:
            raise ValidationError("Missing required fields")

        item = _new_record(
            name=name,
            email=email,
            phone=phone,
            company=company or "",
            selectedProducts=selected_products,
        )
        for field, value in (
            ("shippingAddress", shipping_address),
            ("billingAddress", billing_address),
            ("total", total),
        ):
            if value is not None:
                item[field] = value

        await self.business_orders.put(item)
        logger.info(f"Business order saved: {item['id']}")
        return item

    async def save_product_survey(self, product_name: Optional[str], rating: Any, feedback: Optional[str] = None) -> Dict[str, Any]:
        if not product_name or rating in (None, "", 0):
            raise ValidationError("Missing required fields: productName and rating are required.")
        item = _new_record(productName=product_name, rating=rating, feedback=feedback or "")
        await self.product_surveys.put(item)
        logger.info(f"Survey saved: {item['id']}")
        return item

    async def save_media_query(self, name: Optional[str], email: Optional[str], query: Optional[str]) -> Dict[str, Any]:
        if not name or not email or not query:
            raise ValidationError("Missing required fields")
        item = _new_record(name=name, email=email, query=query)
        return await self.media_queries.put(item)
