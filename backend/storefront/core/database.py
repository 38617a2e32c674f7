"""
AWS connection management for the Storefront API

Builds the boto3 DynamoDB resource and S3 client once, from Settings, with:
- Connection pooling
- AWS-recommended 'standard' retry mode
- Explicit connect/read timeouts
- Optional local endpoints (DynamoDB Local, MinIO/LocalStack)

Credentials are NOT configured here: boto3's default provider chain
(environment, shared credentials file, IAM role) is left to do its job.

Usage:
    manager = AwsConnectionManager(settings)
    products = manager.get_dynamodb().Table(settings.DYNAMODB_PRODUCT_TABLE)
    s3 = manager.get_s3_client()
"""

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config as BotoConfig

from storefront.core.config import Settings

logger = logging.getLogger(__name__)


def _create_boto_config(
    max_pool_connections: int = 25,
    connect_timeout: int = 5,
    read_timeout: int = 30,
    max_attempts: int = 3,
    retry_mode: str = 'standard'
) -> BotoConfig:
    """
    Create a boto3 Config object.

    Args:
        max_pool_connections: Maximum connections in the pool
        connect_timeout: Connection timeout in seconds
        read_timeout: Read timeout in seconds
        max_attempts: Maximum attempts including the initial call
        retry_mode: 'legacy', 'standard', or 'adaptive'

    Note:
        Region and credentials are deliberately left out of the config;
        region is passed separately and credentials come from the default chain.
    """
    return BotoConfig(
        max_pool_connections=max_pool_connections,
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        retries={
            'max_attempts': max_attempts,
            'mode': retry_mode
        }
    )


class AwsConnectionManager:
    """
    Owns the boto3 handles for one process.

    Thread Safety:
    - boto3 clients are thread-safe
    - boto3 resources are NOT thread-safe. The DynamoDB resource and its
      Table objects are built here, once, on the event-loop thread.
      Worker threads only call Table operations, which go through the
      shared low-level client (resource.meta.client). Nothing may create
      or mutate a resource from inside asyncio.to_thread.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._region = settings.AWS_REGION
        self._boto_config = _create_boto_config(
            max_pool_connections=settings.BOTO_MAX_POOL_CONNECTIONS,
            connect_timeout=settings.BOTO_CONNECT_TIMEOUT,
            read_timeout=settings.BOTO_READ_TIMEOUT,
            max_attempts=settings.BOTO_MAX_RETRY_ATTEMPTS,
            retry_mode=settings.BOTO_RETRY_MODE,
        )
        self._dynamodb_resource: Optional[Any] = None
        self._s3_client: Optional[Any] = None

    def _client_kwargs(self, endpoint: Optional[str]) -> Dict[str, Any]:
        kwargs = {
            'region_name': self._region,
            'config': self._boto_config
        }
        if endpoint:
            kwargs['endpoint_url'] = endpoint
        return kwargs

    def get_dynamodb(self):
        """Shared DynamoDB resource, created on first use."""
        if self._dynamodb_resource is None:
            endpoint = self._settings.DYNAMODB_ENDPOINT
            self._dynamodb_resource = boto3.resource('dynamodb', **self._client_kwargs(endpoint))
            logger.info(
                f"DynamoDB initialized: region={self._region}, "
                f"endpoint={'local' if endpoint else 'aws'}"
            )
        return self._dynamodb_resource

    def get_s3_client(self):
        """Shared S3 client, created on first use."""
        if self._s3_client is None:
            endpoint = self._settings.S3_ENDPOINT
            self._s3_client = boto3.client('s3', **self._client_kwargs(endpoint))
            logger.info(f"S3 client initialized: region={self._region}")
        return self._s3_client
