"""
Service wiring

Everything the routes need, built once from Settings at startup and kept on
app.state. Tests build the same container around fake stores.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict

from storefront.core.config import Settings
from storefront.core.database import AwsConnectionManager
from storefront.core.security import TokenIssuer
from storefront.repositories.document_store import DocumentStore
from storefront.repositories.object_store import ObjectStore
from storefront.services.admin_service import AdminService
from storefront.services.batch_delete import BatchDeleteDispatcher, TableRegistry
from storefront.services.catalog_service import CatalogService
from storefront.services.dealer_service import DealerService, normalize_dealer
from storefront.services.record_service import RecordService
from storefront.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

ADMIN_IMAGE_PREFIX = "products/"


@dataclass
class Services:
    catalog: CatalogService
    batch_delete: BatchDeleteDispatcher
    admins: AdminService
    dealers: DealerService
    submissions: SubmissionService
    # Admin table views keyed by URL segment
    records: Dict[str, RecordService]


def build_services(
    settings: Settings,
    token_issuer: TokenIssuer,
    store_factory: Callable[[str], DocumentStore],
    admin_images: ObjectStore,
    vendor_images: ObjectStore,
) -> Services:
    """Wire services around a store factory (physical table name -> DocumentStore)."""
    stores: Dict[str, DocumentStore] = {}

    def store(table_name: str) -> DocumentStore:
        if table_name not in stores:
            stores[table_name] = store_factory(table_name)
        return stores[table_name]

    registry = TableRegistry.from_settings(settings)

    records = {
        "contacts": RecordService(store(settings.DYNAMODB_CONTACT_TABLE), "id"),
        "dealers": RecordService(
            store(settings.DYNAMODB_DEALER_TABLE), "dealerId", normalize=normalize_dealer,
        ),
        "media-queries": RecordService(store(settings.DYNAMODB_MEDIA_QUERIES_TABLE), "id"),
        "product-surveys": RecordService(store(settings.DYNAMODB_PRODUCT_SURVEY_TABLE), "id"),
    }

    return Services(
        catalog=CatalogService(
            admin_products=store(settings.DYNAMODB_PRODUCT_TABLE),
            vendor_products=store(settings.DYNAMODB_VENDOR_PRODUCT_TABLE),
            admin_images=admin_images,
            vendor_images=vendor_images,
        ),
        batch_delete=BatchDeleteDispatcher(
            registry=registry,
            store_factory=store,
            batch_limit=settings.BATCH_WRITE_LIMIT,
        ),
        admins=AdminService(store(settings.DYNAMODB_ADMIN_TABLE), token_issuer, settings),
        dealers=DealerService(store(settings.DYNAMODB_DEALER_TABLE)),
        submissions=SubmissionService(
            contacts=store(settings.DYNAMODB_CONTACT_TABLE),
            business_orders=store(settings.DYNAMODB_BUSINESS_ORDERS_TABLE),
            product_surveys=store(settings.DYNAMODB_PRODUCT_SURVEY_TABLE),
            media_queries=store(settings.DYNAMODB_MEDIA_QUERIES_TABLE),
        ),
        records=records,
    )


def build_aws_services(settings: Settings, token_issuer: TokenIssuer) -> Services:
    """Production wiring: DynamoDB tables and S3 buckets."""
    connections = AwsConnectionManager(settings)
    dynamodb = connections.get_dynamodb()
    s3_client = connections.get_s3_client()

    def image_store(bucket: str, prefix: str) -> ObjectStore:
        return ObjectStore(
            s3_client,
            bucket=bucket,
            region=settings.AWS_REGION,
            key_prefix=prefix,
            max_size_bytes=settings.MAX_IMAGE_SIZE_BYTES,
            endpoint_url=settings.S3_ENDPOINT,
        )

    return build_services(
        settings,
        token_issuer,
        store_factory=lambda table_name: DocumentStore(dynamodb, table_name),
        admin_images=image_store(settings.S3_BUCKET_NAME, ADMIN_IMAGE_PREFIX),
        vendor_images=image_store(settings.S3_VENDOR_BUCKET_NAME, ""),
    )
