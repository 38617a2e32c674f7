"""
Storefront Test Configuration and Fixtures

This module provides:
- Test settings (no .env, fixed JWT secret, fast bcrypt)
- An in-memory document store standing in for DynamoDB tables
- Mocked DynamoDB / S3 clients for repository tests
- The FastAPI app wired around the in-memory stores, plus a TestClient
- Admin tokens and auth headers
"""

import os
import sys
from typing import Any, Dict, Generator, List, Optional, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test_secret_key_for_testing_only_32chars!"
os.environ["AWS_REGION"] = "eu-north-1"

from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.core.exceptions import ConflictError
from storefront.core.security import TokenIssuer
from storefront.main import create_app
from storefront.repositories.document_store import DocumentStore
from storefront.repositories.object_store import ObjectStore
from storefront.services.container import build_services

TEST_JWT_SECRET = "test_secret_key_for_testing_only_32chars!"
SUPER_ADMIN_USERNAME = "root"
SUPER_ADMIN_PASSWORD = "root-password"


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: every table named, cheap bcrypt, known secret."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        JWT_SECRET=TEST_JWT_SECRET,
        SUPER_ADMIN_USERNAME=SUPER_ADMIN_USERNAME,
        SUPER_ADMIN_PASSWORD=SUPER_ADMIN_PASSWORD,
        BCRYPT_ROUNDS=4,
        DYNAMODB_PRODUCT_TABLE="products-test",
        DYNAMODB_VENDOR_PRODUCT_TABLE="vendor-products-test",
        DYNAMODB_ADMIN_TABLE="admins-test",
        DYNAMODB_DEALER_TABLE="dealers-test",
        DYNAMODB_CONTACT_TABLE="contacts-test",
        DYNAMODB_MEDIA_QUERIES_TABLE="media-queries-test",
        DYNAMODB_PRODUCT_SURVEY_TABLE="product-surveys-test",
        DYNAMODB_BUSINESS_ORDERS_TABLE="business-orders-test",
        S3_BUCKET_NAME="product-images-test",
        S3_VENDOR_BUCKET_NAME="vendor-images-test",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def token_issuer(test_settings) -> TokenIssuer:
    return TokenIssuer.from_settings(test_settings)


# =============================================================================
# In-memory Document Store
# =============================================================================

class InMemoryDocumentStore:
    """
    Same async surface as DocumentStore, backed by a list.

    Records every batch_delete call so tests can check chunking and key
    attributes.
    """

    def __init__(self, table_name: str, key_attribute: str):
        self.table_name = table_name
        self.key_attribute = key_attribute
        self.items: List[Dict[str, Any]] = []
        self.batch_calls: List[Dict[str, Any]] = []

    def _index_of(self, key: Dict[str, Any]) -> Optional[int]:
        for i, item in enumerate(self.items):
            if all(item.get(k) == v for k, v in key.items()):
                return i
        return None

    async def get(self, key):
        index = self._index_of(key)
        return dict(self.items[index]) if index is not None else None

    async def put(self, item, condition_expression=None):
        index = self._index_of({self.key_attribute: item.get(self.key_attribute)})
        if index is not None:
            if condition_expression:
                raise ConflictError(details={"table": self.table_name})
            self.items[index] = dict(item)
        else:
            self.items.append(dict(item))
        return item

    async def scan(self, filters=None):
        filters = filters or {}
        return [
            dict(item) for item in self.items
            if all(item.get(k) == v for k, v in filters.items())
        ]

    async def delete(self, key):
        index = self._index_of(key)
        if index is not None:
            self.items.pop(index)

    async def batch_delete(self, key_attribute: str, ids: Sequence[str], chunk_size: int = 25) -> int:
        self.batch_calls.append({"key_attribute": key_attribute, "ids": list(ids), "chunk_size": chunk_size})
        self.items = [item for item in self.items if item.get(key_attribute) not in set(ids)]
        return len(ids)


def key_attribute_for_table(table_name: str) -> str:
    if "products" in table_name:
        return "productId"
    if table_name.startswith("admins"):
        return "username"
    if table_name.startswith("dealers"):
        return "dealerId"
    return "id"


@pytest.fixture
def memory_stores() -> Dict[str, InMemoryDocumentStore]:
    """Physical table name -> in-memory store, filled lazily by the factory."""
    return {}


@pytest.fixture
def memory_store_factory(memory_stores):
    def factory(table_name: str) -> InMemoryDocumentStore:
        if table_name not in memory_stores:
            memory_stores[table_name] = InMemoryDocumentStore(table_name, key_attribute_for_table(table_name))
        return memory_stores[table_name]
    return factory


# =============================================================================
# AWS Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_dynamodb():
    """Mock boto3 DynamoDB resource."""
    mock = MagicMock()
    mock.Table.return_value = MagicMock()
    mock.batch_write_item.return_value = {"UnprocessedItems": {}}
    return mock


@pytest.fixture
def mock_s3_client():
    """Mock boto3 S3 client; put_object succeeds."""
    mock = MagicMock()
    mock.put_object.return_value = {"ETag": '"abc123"'}
    return mock


@pytest.fixture
def admin_images(mock_s3_client, test_settings) -> ObjectStore:
    return ObjectStore(
        mock_s3_client,
        bucket=test_settings.S3_BUCKET_NAME,
        region=test_settings.AWS_REGION,
        key_prefix="products/",
        max_size_bytes=test_settings.MAX_IMAGE_SIZE_BYTES,
    )


@pytest.fixture
def vendor_images(mock_s3_client, test_settings) -> ObjectStore:
    return ObjectStore(
        mock_s3_client,
        bucket=test_settings.S3_VENDOR_BUCKET_NAME,
        region=test_settings.AWS_REGION,
        max_size_bytes=test_settings.MAX_IMAGE_SIZE_BYTES,
    )


def make_mock_store(table_name: str = "test-table") -> MagicMock:
    """DocumentStore double with every operation as an AsyncMock."""
    store = MagicMock(spec=DocumentStore)
    store.table_name = table_name
    store.get = AsyncMock(return_value=None)
    store.put = AsyncMock(side_effect=lambda item, condition_expression=None: item)
    store.scan = AsyncMock(return_value=[])
    store.delete = AsyncMock(return_value=None)
    store.batch_delete = AsyncMock(side_effect=lambda key_attribute, ids, chunk_size=25: len(ids))
    return store


def make_upload(filename: str = "photo.jpg", data: bytes = b"\x89PNG fake image", content_type: str = "image/jpeg"):
    """Minimal UploadFile stand-in for service tests."""
    upload = MagicMock()
    upload.filename = filename
    upload.content_type = content_type
    upload.read = AsyncMock(return_value=data)
    return upload


@pytest.fixture
def mock_store():
    """Factory fixture: mock_store("table") -> DocumentStore double."""
    return make_mock_store


@pytest.fixture
def upload_file():
    """Factory fixture: upload_file(filename, data, content_type)."""
    return make_upload


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def services(test_settings, token_issuer, memory_store_factory, admin_images, vendor_images):
    return build_services(
        test_settings,
        token_issuer,
        store_factory=memory_store_factory,
        admin_images=admin_images,
        vendor_images=vendor_images,
    )


@pytest.fixture
def app(test_settings, services):
    """Create test application instance around in-memory stores."""
    return create_app(test_settings, services=services)


@pytest.fixture
def client(app) -> Generator:
    """Create synchronous test client."""
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Authentication Fixtures
# =============================================================================

@pytest.fixture
def test_admin_token(token_issuer):
    return token_issuer.create_admin_token("jane", "admin")


@pytest.fixture
def test_super_admin_token(token_issuer):
    return token_issuer.create_admin_token(SUPER_ADMIN_USERNAME, "superadmin")


@pytest.fixture
def auth_headers_admin(test_admin_token):
    return {"Authorization": f"Bearer {test_admin_token}"}


# =============================================================================
# Sample Data
# =============================================================================

@pytest.fixture
def sample_admin_product():
    return {
        "productId": "p1",
        "name": "Ceiling Fan",
        "price": 49.5,
        "imageUrl": "https://product-images-test.s3.eu-north-1.amazonaws.com/products/1_fan.jpg",
        "category": "Fans",
        "brand": "Breeze",
        "description": "Three blade ceiling fan",
        "createdAt": "2026-01-01T00:00:00+00:00",
    }


@pytest.fixture
def sample_vendor_product():
    return {
        "productId": "v1",
        "dealerId": "d1",
        "name": "Desk Lamp",
        "price": 12.0,
        "imageUrl": "https://vendor-images-test.s3.eu-north-1.amazonaws.com/2_lamp.jpg",
        "createdAt": "2026-01-02T00:00:00+00:00",
    }
