"""Document store contract and its SQLAlchemy implementation"""
import uuid
from collections.abc import Mapping
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.errors import PersistenceFailure
from app.logging_setup import get_logger
from app.models.document import Document

logger = get_logger(__name__)

TRANSACTIONS = "transactions"
CATEGORIES = "categories"
MERCHANTS = "merchants"


class DocumentStore(Protocol):
    """
    Minimal document database contract.

    Documents are plain JSON-compatible dicts. Returned documents carry their
    id under the ``"id"`` key. There are no cross-document transactions.
    """

    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None: ...

    async def query(
        self, collection: str, filters: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    async def set(self, collection: str, document_id: str, document: Mapping[str, Any]) -> None: ...

    async def add(self, collection: str, document: Mapping[str, Any]) -> str: ...

    async def delete(self, collection: str, document_id: str) -> bool: ...


def _lookup(data: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted path (``"stats.visit_count"``) inside a document."""
    value: Any = data
    for part in path.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return None
        value = value[part]
    return value


def _payload(document_id: str, document: Mapping[str, Any]) -> dict[str, Any]:
    data = dict(document)
    data["id"] = document_id
    return data


class SqlDocumentStore:
    """DocumentStore backed by the ``documents`` table."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        try:
            async with self._session_maker() as db:
                row = await db.get(Document, {"collection": collection, "id": document_id})
                if row is None:
                    return None
                return _payload(row.id, row.data)
        except SQLAlchemyError as exc:
            raise self._failure("get", collection, exc) from exc

    async def query(
        self, collection: str, filters: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """
        Return all documents of ``collection`` matching every equality filter.

        ``user_id`` is filtered in SQL, other keys (dotted paths allowed) are
        matched against the decoded payload.
        """
        filters = dict(filters or {})
        query = select(Document).where(Document.collection == collection)
        if "user_id" in filters:
            query = query.where(Document.user_id == filters.pop("user_id"))
        query = query.order_by(Document.created_at, Document.id)

        try:
            async with self._session_maker() as db:
                result = await db.execute(query)
                rows = list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise self._failure("query", collection, exc) from exc

        documents = []
        for row in rows:
            if all(_lookup(row.data, key) == value for key, value in filters.items()):
                documents.append(_payload(row.id, row.data))
        return documents

    async def set(self, collection: str, document_id: str, document: Mapping[str, Any]) -> None:
        """Overwrite (or create) the whole document."""
        data = {k: v for k, v in document.items() if k != "id"}
        try:
            async with self._session_maker() as db:
                row = await db.get(Document, {"collection": collection, "id": document_id})
                if row is None:
                    db.add(Document(
                        collection=collection,
                        id=document_id,
                        user_id=data.get("user_id"),
                        data=data,
                    ))
                else:
                    row.user_id = data.get("user_id")
                    row.data = data
                await db.commit()
        except SQLAlchemyError as exc:
            raise self._failure("set", collection, exc) from exc

    async def add(self, collection: str, document: Mapping[str, Any]) -> str:
        """Insert a new document under a generated id."""
        document_id = uuid.uuid4().hex
        data = {k: v for k, v in document.items() if k != "id"}
        try:
            async with self._session_maker() as db:
                db.add(Document(
                    collection=collection,
                    id=document_id,
                    user_id=data.get("user_id"),
                    data=data,
                ))
                await db.commit()
        except SQLAlchemyError as exc:
            raise self._failure("add", collection, exc) from exc
        return document_id

    async def delete(self, collection: str, document_id: str) -> bool:
        try:
            async with self._session_maker() as db:
                row = await db.get(Document, {"collection": collection, "id": document_id})
                if row is None:
                    return False
                await db.delete(row)
                await db.commit()
                return True
        except SQLAlchemyError as exc:
            raise self._failure("delete", collection, exc) from exc

    @staticmethod
    def _failure(operation: str, collection: str, exc: SQLAlchemyError) -> PersistenceFailure:
        logger.error("Document store %s on %s failed: %s", operation, collection, exc)
        return PersistenceFailure(str(exc))
