"""
Catalog Service

Merges the two product sources into the public catalog:
- admin products: entered from the admin panel
- vendor products: uploaded by dealers, carry an owning dealerId

The two tables share one logical shape but no identifier space; nothing
prevents the same productId from existing in both.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from fastapi import UploadFile
from ulid import ULID

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.models.product import (
    PRODUCT_KEY,
    parse_price,
    product_key,
    to_catalog_entry,
)
from storefront.repositories.document_store import DocumentStore
from storefront.repositories.object_store import ObjectStore

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Awaitable[Optional[Dict[str, Any]]]]


def generate_product_id() -> str:
    """Time-ordered unique id (ULID)."""
    return str(ULID())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def resolve_first_match(record_id: str, lookups: Sequence[Lookup]) -> Optional[Dict[str, Any]]:
    """
    Try each lookup in order and return the first hit.

    Later lookups are only issued when every earlier one missed.
    """
    for lookup in lookups:
        item = await lookup(record_id)
        if item is not None:
            return item
    return None


class CatalogService:
    """Public catalog reads plus admin/vendor product writes."""

    def __init__(
        self,
        admin_products: DocumentStore,
        vendor_products: DocumentStore,
        admin_images: ObjectStore,
        vendor_images: ObjectStore,
    ):
        self.admin_products = admin_products
        self.vendor_products = vendor_products
        self.admin_images = admin_images
        self.vendor_images = vendor_images

    # ------------------------------------------------------------------
    # Public catalog
    # ------------------------------------------------------------------

    async def list_catalog(self) -> List[Dict[str, Any]]:
        """
        Every admin product followed by every vendor product.

        Both scans run concurrently and are not snapshot-consistent with each
        other. If either fails the whole listing fails.
        """
        admin_items, vendor_items = await asyncio.gather(
            self.admin_products.scan(),
            self.vendor_products.scan(),
        )
        logger.debug(f"Catalog merge: {len(admin_items)} admin + {len(vendor_items)} vendor products")
        return [to_catalog_entry(item) for item in [*admin_items, *vendor_items]]

    async def _get_admin_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        return await self.admin_products.get(product_key(product_id))

    async def _get_vendor_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        return await self.vendor_products.get(product_key(product_id))

    async def get_product_by_id(self, product_id: str) -> Dict[str, Any]:
        """
        Single catalog entry. The admin table takes precedence: when both
        tables hold this id, the admin record is returned.

        Raises:
            NotFoundError: id is in neither table
        """
        item = await resolve_first_match(
            product_id,
            (self._get_admin_product, self._get_vendor_product),
        )
        if item is None:
            raise NotFoundError("Product not found", details={"product_id": product_id})
        return to_catalog_entry(item)

    # ------------------------------------------------------------------
    # Admin products
    # ------------------------------------------------------------------

    async def list_admin_products(self) -> List[Dict[str, Any]]:
        return await self.admin_products.scan()

    async def create_admin_product(
        self,
        name: Optional[str],
        price: Any,
        image: Optional[UploadFile],
        description: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Validate, upload the image, then write the product.

        All validation happens before the upload; an upload failure stops
        the write.
        """
        if not name or price in (None, ""):
            raise ValidationError("Product name and price are required.")
        price_value = parse_price(price)
        if image is None or not image.filename:
            raise ValidationError("Image upload failed.")

        image_url = await self._upload(self.admin_images, image)

        item = {
            PRODUCT_KEY: generate_product_id(),
            "name": name,
            "price": price_value,
            "description": description or "",
            "category": category or "",
            "brand": brand or "",
            "imageUrl": image_url,
            "createdAt": utc_now_iso(),
        }
        await self._put_after_upload(self.admin_products, item)
        logger.info(f"Admin product created: {item[PRODUCT_KEY]}")
        return item

    async def update_admin_product(self, product_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        item = self._normalized_replacement(product_id, body)
        await self.admin_products.put(item)
        return item

    async def delete_admin_product(self, product_id: str) -> None:
        await self.admin_products.delete(product_key(product_id))

    # ------------------------------------------------------------------
    # Vendor (dealer) products
    # ------------------------------------------------------------------

    async def list_dealer_products(self, dealer_id: str) -> List[Dict[str, Any]]:
        return await self.vendor_products.scan(filters={"dealerId": dealer_id})

    async def create_vendor_product(
        self,
        dealer_id: Optional[str],
        name: Optional[str],
        price: Any,
        image: Optional[UploadFile],
        description: Optional[str] = None,
        category: Optional[str] = None,
        brand: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not dealer_id or not name or price in (None, "") or image is None or not image.filename:
            raise ValidationError("Missing required fields.")
        price_value = parse_price(price)

        image_url = await self._upload(self.vendor_images, image)

        item = {
            PRODUCT_KEY: generate_product_id(),
            "dealerId": dealer_id,
            "name": name,
            "price": price_value,
            "imageUrl": image_url,
            "createdAt": utc_now_iso(),
        }
        # Vendor products keep unset optional fields absent
        for field, value in (("description", description), ("category", category), ("brand", brand)):
            if value is not None:
                item[field] = value

        await self._put_after_upload(self.vendor_products, item)
        logger.info(f"Vendor product created: {item[PRODUCT_KEY]} (dealer {dealer_id})")
        return item

    async def update_vendor_product(self, product_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        item = self._normalized_replacement(product_id, body)
        await self.vendor_products.put(item)
        return item

    async def delete_vendor_product(self, product_id: str) -> None:
        await self.vendor_products.delete(product_key(product_id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _normalized_replacement(product_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Full-record replacement; the path id wins over any id in the body."""
        item = dict(body)
        if "price" in item:
            item["price"] = parse_price(item["price"])
        item[PRODUCT_KEY] = product_id
        return item

    @staticmethod
    async def _upload(store: ObjectStore, image: UploadFile) -> str:
        data = await image.read()
        return await store.upload(data, image.filename, image.content_type)

    @staticmethod
    async def _put_after_upload(store: DocumentStore, item: Dict[str, Any]) -> None:
        try:
            await store.put(item)
        except Exception:
            # No rollback: the uploaded object stays in the bucket
            logger.error(
                f"Product write failed after image upload; orphaned image {item.get('imageUrl')}"
            )
            raise
