"""
DynamoDB document store

Thin async wrapper around one DynamoDB table. Every call is a single store
operation (get / put / scan / delete / batch delete); blocking boto3 calls run
in a worker thread so request handlers stay cooperative.

Error translation:
- ConditionalCheckFailedException -> ConflictError
- any other ClientError / BotoCoreError -> StoreFailureError
"""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from storefront.core.exceptions import ConflictError, StoreFailureError

logger = logging.getLogger(__name__)

# DynamoDB BatchWriteItem hard limit
MAX_BATCH_WRITE_ITEMS = 25


def decimal_to_float(obj: Any) -> Any:
    """Convert Decimal values to float recursively for JSON serialization"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, dict):
        return {k: decimal_to_float(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [decimal_to_float(item) for item in obj]
    return obj


def float_to_decimal(obj: Any) -> Any:
    """Convert float values to Decimal recursively for DynamoDB compatibility"""
    if isinstance(obj, float):
        return Decimal(str(obj))
    elif isinstance(obj, dict):
        return {k: float_to_decimal(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [float_to_decimal(item) for item in obj]
    return obj


def chunked(values: Sequence[Any], size: int) -> List[Sequence[Any]]:
    return [values[i:i + size] for i in range(0, len(values), size)]


class DocumentStore:
    """
    One physical DynamoDB table.

    Reads return plain Python values (Decimal converted to float); writes
    accept floats and convert them to Decimal.
    """

    def __init__(self, dynamodb, table_name: str):
        self._dynamodb = dynamodb
        self.table_name = table_name
        self._table = dynamodb.Table(table_name)

    def _store_failure(self, operation: str, error: Exception) -> StoreFailureError:
        logger.error(f"DynamoDB {operation} failed on {self.table_name}: {error}")
        return StoreFailureError(
            details={"table": self.table_name, "operation": operation},
        )

    async def get(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            response = await asyncio.to_thread(self._table.get_item, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._store_failure("get_item", e) from e

        item = response.get('Item')
        return decimal_to_float(item) if item is not None else None

    async def put(self, item: Dict[str, Any], condition_expression: Optional[str] = None) -> Dict[str, Any]:
        params = {'Item': float_to_decimal(item)}
        if condition_expression:
            params['ConditionExpression'] = condition_expression

        try:
            await asyncio.to_thread(self._table.put_item, **params)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
                raise ConflictError(details={"table": self.table_name}) from e
            raise self._store_failure("put_item", e) from e
        except BotoCoreError as e:
            raise self._store_failure("put_item", e) from e

        return item

    async def scan(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Full table scan, following LastEvaluatedKey until exhausted.

        Args:
            filters: optional attribute -> value equality filters, ANDed
        """
        params: Dict[str, Any] = {}
        if filters:
            conditions = [Attr(name).eq(value) for name, value in filters.items()]
            expression = conditions[0]
            for condition in conditions[1:]:
                expression = expression & condition
            params['FilterExpression'] = expression

        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = await asyncio.to_thread(self._table.scan, **params)
                items.extend(response.get('Items', []))
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                params['ExclusiveStartKey'] = last_key
        except (ClientError, BotoCoreError) as e:
            raise self._store_failure("scan", e) from e

        return decimal_to_float(items)

    async def delete(self, key: Dict[str, Any]) -> None:
        try:
            await asyncio.to_thread(self._table.delete_item, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise self._store_failure("delete_item", e) from e

    async def batch_delete(
        self,
        key_attribute: str,
        ids: Sequence[str],
        chunk_size: int = MAX_BATCH_WRITE_ITEMS,
    ) -> int:
        """
        Delete records by primary key with BatchWriteItem, at most
        chunk_size requests per call. Chunks are sent sequentially and the
        first failing chunk aborts the rest.

        Returns:
            Number of ids submitted
        """
        chunk_size = max(1, min(chunk_size, MAX_BATCH_WRITE_ITEMS))

        for chunk in chunked(list(ids), chunk_size):
            delete_requests = [
                {'DeleteRequest': {'Key': {key_attribute: record_id}}}
                for record_id in chunk
            ]
            try:
                response = await asyncio.to_thread(
                    self._dynamodb.batch_write_item,
                    RequestItems={self.table_name: delete_requests},
                )
            except (ClientError, BotoCoreError) as e:
                raise self._store_failure("batch_write_item", e) from e

            unprocessed = (response or {}).get('UnprocessedItems', {}).get(self.table_name, [])
            if unprocessed:
                logger.warning(
                    f"{len(unprocessed)} delete requests left unprocessed on {self.table_name}"
                )

        return len(ids)
