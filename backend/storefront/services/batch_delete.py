"""
Admin batch delete

Maps the display names used by the admin panel ("Products", "Contact
Messages", ...) to a physical DynamoDB table and its primary-key attribute,
then deletes a list of ids in as few BatchWriteItem calls as possible.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Sequence

from storefront.core.config import Settings
from storefront.core.exceptions import (
    ConfigurationError,
    InvalidTableError,
    StoreFailureError,
    ValidationError,
)
from storefront.repositories.document_store import DocumentStore, MAX_BATCH_WRITE_ITEMS

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_KEY = "id"


class LogicalTable(str, Enum):
    """Record categories the admin panel can bulk-delete from."""
    PRODUCTS = "Products"
    DEALERS = "Dealers"
    ADMINS = "Admins"
    CONTACT_MESSAGES = "Contact Messages"
    MEDIA_QUERIES = "Media Queries"
    PRODUCT_SURVEYS = "Product Surveys"


# Tables whose key is not the generic "id"
PRIMARY_KEYS: Dict[str, str] = {
    LogicalTable.PRODUCTS.value: "productId",
    LogicalTable.DEALERS.value: "dealerId",
    LogicalTable.ADMINS.value: "username",
}


def primary_key_for(logical_name: str) -> str:
    """Declared key attribute, or "id" for any name not listed."""
    return PRIMARY_KEYS.get(logical_name, DEFAULT_PRIMARY_KEY)


def physical_tables_from_settings(settings: Settings) -> Dict[LogicalTable, str]:
    return {
        LogicalTable.PRODUCTS: settings.DYNAMODB_PRODUCT_TABLE,
        LogicalTable.DEALERS: settings.DYNAMODB_DEALER_TABLE,
        LogicalTable.ADMINS: settings.DYNAMODB_ADMIN_TABLE,
        LogicalTable.CONTACT_MESSAGES: settings.DYNAMODB_CONTACT_TABLE,
        LogicalTable.MEDIA_QUERIES: settings.DYNAMODB_MEDIA_QUERIES_TABLE,
        LogicalTable.PRODUCT_SURVEYS: settings.DYNAMODB_PRODUCT_SURVEY_TABLE,
    }


@dataclass(frozen=True)
class TableBinding:
    logical_name: LogicalTable
    physical_name: str
    key_attribute: str


class TableRegistry:
    """
    Logical table -> (physical table, key attribute).

    Built once at startup; every LogicalTable must be bound to a physical
    table or construction fails.
    """

    def __init__(self, physical_tables: Dict[LogicalTable, str]):
        missing = [t.value for t in LogicalTable if not physical_tables.get(t)]
        if missing:
            raise ConfigurationError(
                f"No physical table configured for: {', '.join(missing)}"
            )

        self._bindings: Dict[str, TableBinding] = {
            table.value: TableBinding(
                logical_name=table,
                physical_name=physical_tables[table],
                key_attribute=primary_key_for(table.value),
            )
            for table in LogicalTable
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "TableRegistry":
        return cls(physical_tables_from_settings(settings))

    def resolve(self, logical_name: Optional[str]) -> TableBinding:
        binding = self._bindings.get(logical_name) if logical_name else None
        if binding is None:
            raise InvalidTableError(details={"table_name": logical_name})
        return binding

    def __iter__(self):
        return iter(self._bindings.values())


class BatchDeleteDispatcher:
    """Deletes many records from one logical table in one call."""

    def __init__(
        self,
        registry: TableRegistry,
        store_factory: Callable[[str], DocumentStore],
        batch_limit: int = MAX_BATCH_WRITE_ITEMS,
    ):
        self.registry = registry
        self.store_factory = store_factory
        self.batch_limit = batch_limit

    async def batch_delete(self, logical_name: Optional[str], ids: Optional[Sequence[str]]) -> int:
        """
        Delete every id from the table behind logical_name.

        Returns:
            Number of ids submitted

        Raises:
            ValidationError: no ids, or an id that is not a non-empty string
            InvalidTableError: unknown logical table name
            StoreFailureError: the store rejected a batch
        """
        if not logical_name or not ids:
            raise ValidationError("Table name and a non-empty array of IDs are required.")
        if any(not isinstance(record_id, str) or not record_id for record_id in ids):
            raise ValidationError("Every ID must be a non-empty string.")

        binding = self.registry.resolve(logical_name)
        store = self.store_factory(binding.physical_name)

        try:
            deleted = await store.batch_delete(binding.key_attribute, ids, chunk_size=self.batch_limit)
        except StoreFailureError as e:
            raise StoreFailureError(
                "Failed to delete items.",
                details={"table_name": logical_name, **e.details},
            ) from e

        logger.info(
            f"Batch deleted {deleted} records from {binding.logical_name.value} "
            f"({binding.physical_name}) by {binding.key_attribute}"
        )
        return deleted
