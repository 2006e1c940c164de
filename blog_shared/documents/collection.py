"""
Typed handle over one Motor collection.

Writes go through the collection's validation; reads come back as model
instances. Anything else (updates, aggregations, bulk writes) is done on
``raw``, the underlying ``AsyncIOMotorCollection``.
"""

from __future__ import annotations

from typing import Any, Generic, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection

from blog_shared.documents.collections import CollectionSchema
from blog_shared.documents.models import StoredDocument
from blog_shared.documents.validation import DocumentInput, validate_document

ModelT = TypeVar("ModelT", bound=StoredDocument)

SortSpec = Sequence[Tuple[str, int]]


class DocumentCollection(Generic[ModelT]):
    """Validated access to the collection declared by ``schema``."""

    def __init__(self, schema: CollectionSchema, collection: AsyncIOMotorCollection):
        self.schema = schema
        self._collection = collection

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def raw(self) -> AsyncIOMotorCollection:
        return self._collection

    def _to_model(self, document: Mapping[str, Any]) -> ModelT:
        return self.schema.model.model_validate(document)

    async def insert_one(self, document: DocumentInput) -> Any:
        """Validate and insert one document; returns its ``_id``."""
        result = await self._collection.insert_one(validate_document(self.schema, document))
        return result.inserted_id

    async def insert_many(self, documents: Iterable[DocumentInput]) -> List[Any]:
        """Validate every document first, then insert them in one call."""
        payload = [validate_document(self.schema, doc) for doc in documents]
        if not payload:
            return []
        result = await self._collection.insert_many(payload)
        return list(result.inserted_ids)

    async def find_one(self, filter: Optional[Mapping[str, Any]] = None) -> Optional[ModelT]:
        document = await self._collection.find_one(dict(filter or {}))
        if document is None:
            return None
        return self._to_model(document)

    async def find(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        *,
        sort: Optional[SortSpec] = None,
        limit: int = 0,
    ) -> List[ModelT]:
        cursor = self._collection.find(dict(filter or {}))
        if sort:
            cursor = cursor.sort(list(sort))
        if limit:
            cursor = cursor.limit(limit)
        documents = await cursor.to_list(length=None)
        return [self._to_model(doc) for doc in documents]

    async def count(self, filter: Optional[Mapping[str, Any]] = None) -> int:
        return await self._collection.count_documents(dict(filter or {}))
