"""Storefront API: catalog, dealer and admin backend over DynamoDB and S3."""

__version__ = "1.0.0"
