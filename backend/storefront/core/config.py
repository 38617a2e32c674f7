from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Storefront API"
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 5001

    # AWS Settings
    AWS_REGION: str = "eu-north-1"
    DYNAMODB_ENDPOINT: Optional[str] = None
    S3_ENDPOINT: Optional[str] = None

    # Boto client tuning
    BOTO_MAX_POOL_CONNECTIONS: int = 25
    BOTO_CONNECT_TIMEOUT: int = 5
    BOTO_READ_TIMEOUT: int = 30
    BOTO_MAX_RETRY_ATTEMPTS: int = 3
    BOTO_RETRY_MODE: str = "standard"

    # DynamoDB Tables
    DYNAMODB_CONTACT_TABLE: str = "storefront-contacts"
    DYNAMODB_DEALER_TABLE: str = "storefront-dealers"
    DYNAMODB_PRODUCT_TABLE: str = "storefront-products"
    DYNAMODB_PRODUCT_SURVEY_TABLE: str = "storefront-product-surveys"
    DYNAMODB_MEDIA_QUERIES_TABLE: str = "storefront-media-queries"
    DYNAMODB_ADMIN_TABLE: str = "storefront-admins"
    DYNAMODB_BUSINESS_ORDERS_TABLE: str = "storefront-business-orders"
    DYNAMODB_VENDOR_PRODUCT_TABLE: str = "storefront-vendor-products"

    # DynamoDB BatchWriteItem accepts at most 25 requests per call
    BATCH_WRITE_LIMIT: int = 25

    # S3 Buckets
    S3_BUCKET_NAME: str = "storefront-product-images"
    S3_VENDOR_BUCKET_NAME: str = "storefront-vendor-images"
    MAX_IMAGE_SIZE_BYTES: int = 5 * 1024 * 1024

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # JWT
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_ADMIN_TOKEN_EXPIRE_HOURS: int = 8

    # Super admin (bypasses the admin table)
    SUPER_ADMIN_USERNAME: Optional[str] = None
    SUPER_ADMIN_PASSWORD: Optional[str] = None

    BCRYPT_ROUNDS: int = 12

    # Logging
    LOG_LEVEL: Optional[str] = None
    LOG_FORMAT: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


def get_settings() -> Settings:
    """Build settings from the environment. Call once at process start."""
    return Settings()
