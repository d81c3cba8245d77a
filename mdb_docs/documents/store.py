"""
Document store.

DocumentStore is the explicit client object every operation goes through.
Build one per process from a StoreConfig (or a plain settings mapping) and
pass it to whatever needs database access.

Usage:
    from mdb_docs import DocumentStore

    store = DocumentStore.from_config({"mongo_uri": "mongodb://localhost:27017",
                                       "db_name": "app"})
    await store.verify()

    page = await store.get_page("posts", page_index=2, order_by=("at_created", "desc"))
    user = await store.get_one("users", ("email", "==", "ada@example.com"))
    new_id = await store.insert_one("users", {"name": "Ada", "nickname": MISSING})
    await store.move("inbox", "archive", new_id)
"""

import functools
import logging
from collections.abc import Mapping
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from pymongo.results import UpdateResult

from ..constants import DEFAULT_PAGE_COUNT, MAX_SPECIFIC_IDS, MONGO_ID_KEY
from ..core.connection import ConnectionManager
from ..exceptions import DocumentNotFoundError, PartialMoveError, QueryConditionError
from ..observability import correlation_scope, store_context, timed_operation
from ..observability import get_logger as get_contextual_logger
from ..settings import StoreConfig
from .conditions import build_filter, build_sort
from .normalize import as_list, is_missing, replace_missing_with_none, shape_document, to_object_id

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


def _in_store_context(func):
    """Run a store operation with its database and collection in the logging context."""

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        if args:
            collection_name = args[0]
        else:
            collection_name = kwargs.get("collection_name", kwargs.get("from_collection"))
        with correlation_scope(), store_context(self.db_name, collection_name=collection_name):
            return await func(self, *args, **kwargs)

    return wrapper


class DocumentStore:
    """
    Paginated reads, lookups, inserts, upserts, moves and deletes over one
    MongoDB database.

    Documents are returned as ``{"documentId": <id>, **fields}``. Errors from
    the driver propagate unchanged.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        client: AsyncIOMotorClient | None = None,
        use_transactions: bool = True,
        connection: ConnectionManager | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            db: Database handle all collections are taken from
            client: Client handle, required for transactional moves
            use_transactions: Run move() inside a multi-document transaction
            connection: ConnectionManager that owns the client, closed by close()
        """
        self._db = db
        self._client = client
        self._use_transactions = use_transactions
        self._connection = connection

    @classmethod
    def from_config(cls, settings: StoreConfig | Mapping[str, Any] | None = None) -> "DocumentStore":
        """
        Create a store from a StoreConfig or settings mapping.

        Raises:
            ConfigurationError: If the configuration is invalid
            InitializationError: If the driver rejects the settings
        """
        config = StoreConfig.from_settings(settings)
        config.validate()
        connection = ConnectionManager(config)
        connection.connect()
        return cls(
            connection.db,
            client=connection.client,
            use_transactions=config.use_transactions,
            connection=connection,
        )

    @property
    def client(self) -> AsyncIOMotorClient | None:
        """The raw AsyncIOMotorClient handle."""
        return self._client

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """The raw AsyncIOMotorDatabase handle."""
        return self._db

    @property
    def db_name(self) -> str:
        return self._db.name

    @property
    def use_transactions(self) -> bool:
        return self._use_transactions

    def collection(self, collection_name: str) -> AsyncIOMotorCollection:
        return self._db[collection_name]

    async def ping(self) -> None:
        await self._db.command("ping")

    async def verify(self) -> None:
        """Ping the server through the owning ConnectionManager (or the db)."""
        if self._connection is not None:
            await self._connection.verify()
        else:
            await self.ping()

    def close(self) -> None:
        """Close the underlying client if this store owns it."""
        if self._connection is not None:
            self._connection.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @_in_store_context
    @timed_operation("documents.get_page")
    async def get_page(
        self,
        collection_name: str,
        page_index: int,
        count: int | None = None,
        where: Any = None,
        order_by: Any = None,
    ) -> list[dict[str, Any]]:
        """
        Get one page of documents using offset pagination.

        Args:
            collection_name: Collection to read
            page_index: 1-based page number
            count: Page size (defaults to 25 when falsy)
            where: Optional condition triple or list of triples
            order_by: Optional field name, ``(field, "asc" | "desc")`` pair,
                or a list of those. No ordering is applied when omitted.

        Returns:
            Shaped documents for the page (possibly empty)

        Raises:
            QueryConditionError: If page_index < 1 or a condition is invalid
        """
        count = count or DEFAULT_PAGE_COUNT
        if page_index < 1:
            raise QueryConditionError(
                f"page_index must be >= 1, got {page_index}", condition=page_index
            )
        if count < 0:
            raise QueryConditionError(f"count must be >= 0, got {count}", condition=count)

        offset = (page_index - 1) * count
        filter_doc = build_filter(where)
        sort = build_sort(order_by)

        cursor = self.collection(collection_name).find(filter_doc)
        cursor = cursor.skip(offset).limit(count)
        if sort:
            cursor = cursor.sort(sort)

        docs = await cursor.to_list(length=count)
        contextual_logger.debug(
            "Fetched page",
            extra={
                "collection_name": collection_name,
                "page_index": page_index,
                "offset": offset,
                "limit": count,
                "returned": len(docs),
            },
        )
        return [shape_document(doc) for doc in docs]

    @_in_store_context
    @timed_operation("documents.get_specifics")
    async def get_specifics(self, collection_name: str, ids: Any = None) -> list[dict[str, Any]]:
        """
        Get specific documents by id.

        Only the first 25 ids are looked up; the rest are ignored. Empty ids
        and ids with no document are skipped.

        Args:
            collection_name: Collection to read
            ids: A single id or a sequence of ids

        Returns:
            Found documents, in request order
        """
        ids = as_list(ids)
        if len(ids) > MAX_SPECIFIC_IDS:
            logger.debug(
                f"get_specifics received {len(ids)} ids for '{collection_name}'; "
                f"only the first {MAX_SPECIFIC_IDS} are fetched"
            )

        collection = self.collection(collection_name)
        found = []
        for document_id in ids[:MAX_SPECIFIC_IDS]:
            if is_missing(document_id):
                continue
            doc = await collection.find_one({MONGO_ID_KEY: to_object_id(document_id)})
            if doc is not None:
                found.append(shape_document(doc))
        return found

    async def _get_document(
        self, collection_name: str, where: Any = None, **kwargs: Any
    ) -> dict[str, Any] | None:
        """First document matching all conditions, or None."""
        return await self.collection(collection_name).find_one(build_filter(where), **kwargs)

    @_in_store_context
    @timed_operation("documents.get_one")
    async def get_one(self, collection_name: str, where: Any = None) -> dict[str, Any] | None:
        """
        Get the first document matching the conditions.

        Args:
            collection_name: Collection to read
            where: None, a condition triple, or a list of triples (ANDed)

        Returns:
            The shaped document, or None when nothing matches
        """
        return shape_document(await self._get_document(collection_name, where))

    @_in_store_context
    @timed_operation("documents.is_exist_doc")
    async def is_exist_doc(self, collection_name: str, where: Any = None) -> bool:
        """
        Check whether any document matches the conditions.
        """
        doc = await self._get_document(collection_name, where, projection={MONGO_ID_KEY: 1})
        return doc is not None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @_in_store_context
    @timed_operation("documents.insert_one")
    async def insert_one(self, collection_name: str, obj: Mapping[str, Any]) -> str:
        """
        Insert a document with an auto-assigned id.

        Returns:
            The new document id
        """
        result = await self.collection(collection_name).insert_one(replace_missing_with_none(obj))
        document_id = str(result.inserted_id)
        logger.debug(f"Inserted document {document_id} into '{collection_name}'")
        return document_id

    @_in_store_context
    @timed_operation("documents.set_one")
    async def set_one(
        self, collection_name: str, document_id: str, obj: Mapping[str, Any]
    ) -> UpdateResult:
        """
        Replace the document at ``document_id`` entirely, creating it if absent.

        Returns:
            The driver's UpdateResult acknowledgement
        """
        return await self.collection(collection_name).replace_one(
            {MONGO_ID_KEY: to_object_id(document_id)},
            replace_missing_with_none(obj),
            upsert=True,
        )

    @_in_store_context
    @timed_operation("documents.move")
    async def move(self, from_collection: str, to_collection: str, document_id: str) -> str:
        """
        Move a document to another collection.

        The fields are copied into ``to_collection`` under a new id and the
        source is deleted. With transactions enabled the read, insert and
        delete commit together or not at all.

        Returns:
            The id of the document in ``to_collection``

        Raises:
            DocumentNotFoundError: If the source document does not exist
            PartialMoveError: Without transactions, if the copy was written
                but the source could not be deleted
        """
        if self._use_transactions and self._client is not None:
            new_id = await self._move_in_transaction(from_collection, to_collection, document_id)
        else:
            new_id = await self._move_sequential(from_collection, to_collection, document_id)

        contextual_logger.debug(
            "Moved document",
            extra={
                "from_collection": from_collection,
                "to_collection": to_collection,
                "document_id": document_id,
                "new_document_id": new_id,
            },
        )
        return new_id

    async def _read_for_move(
        self, collection_name: str, document_id: str, **kwargs: Any
    ) -> dict[str, Any]:
        source = self.collection(collection_name)
        doc = await source.find_one({MONGO_ID_KEY: to_object_id(document_id)}, **kwargs)
        if doc is None:
            raise DocumentNotFoundError(collection_name=collection_name, document_id=document_id)
        fields = {key: value for key, value in doc.items() if key != MONGO_ID_KEY}
        return replace_missing_with_none(fields)

    async def _move_in_transaction(
        self, from_collection: str, to_collection: str, document_id: str
    ) -> str:
        source = self.collection(from_collection)
        target = self.collection(to_collection)
        async with await self._client.start_session() as session:
            async with session.start_transaction():
                data = await self._read_for_move(from_collection, document_id, session=session)
                result = await target.insert_one(data, session=session)
                await source.delete_one(
                    {MONGO_ID_KEY: to_object_id(document_id)}, session=session
                )
        return str(result.inserted_id)

    async def _move_sequential(
        self, from_collection: str, to_collection: str, document_id: str
    ) -> str:
        source = self.collection(from_collection)
        target = self.collection(to_collection)
        data = await self._read_for_move(from_collection, document_id)
        result = await target.insert_one(data)
        new_id = str(result.inserted_id)
        try:
            await source.delete_one({MONGO_ID_KEY: to_object_id(document_id)})
        except PyMongoError as e:
            logger.error(
                f"Copied {document_id} from '{from_collection}' to '{to_collection}' as "
                f"{new_id} but failed to delete the source: {e}",
                exc_info=True,
            )
            raise PartialMoveError(
                "Document copied but source not deleted",
                from_collection=from_collection,
                to_collection=to_collection,
                document_id=document_id,
                new_document_id=new_id,
            ) from e
        return new_id

    @_in_store_context
    @timed_operation("documents.remove_one")
    async def remove_one(self, collection_name: str, document_id: str) -> None:
        """
        Delete a document by id.

        Deleting an id that does not exist succeeds silently, so repeated
        calls never fail and callers cannot tell "already gone" from
        "just deleted".
        """
        result = await self.collection(collection_name).delete_one(
            {MONGO_ID_KEY: to_object_id(document_id)}
        )
        logger.debug(
            f"remove_one '{collection_name}/{document_id}' deleted {result.deleted_count}"
        )
