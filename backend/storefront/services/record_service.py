"""
Generic admin access to one table: list, replace and delete by primary key
"""

from typing import Any, Callable, Dict, List, Optional

from storefront.repositories.document_store import DocumentStore

Normalizer = Callable[[Dict[str, Any]], Dict[str, Any]]


class RecordService:

    def __init__(self, store: DocumentStore, key_attribute: str, normalize: Optional[Normalizer] = None):
        self.store = store
        self.key_attribute = key_attribute
        self.normalize = normalize

    async def list(self) -> List[Dict[str, Any]]:
        return await self.store.scan()

    async def replace(self, key_value: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Overwrite the record with body; the key from the path always wins."""
        item = {**body, self.key_attribute: key_value}
        if self.normalize:
            item = self.normalize(item)
        return await self.store.put(item)

    async def delete(self, key_value: str) -> None:
        await self.store.delete({self.key_attribute: key_value})
