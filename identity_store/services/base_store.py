"""
Tenant-aware base of the MongoDB identity stores.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Generic, Optional, TypeVar

from bson import ObjectId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from identity_store.config import TenantStoreOptions
from identity_store.core.errors import (
    IdentityResult,
    StoreConfigurationError,
    StoreDisposedError,
    StoreError,
    StoreErrorCode,
)
from identity_store.database.connections import get_mongo_client
from identity_store.models.base import MongoEntity

EntityT = TypeVar("EntityT", bound=MongoEntity)
ValueT = TypeVar("ValueT")

TENANT_FIELD = "tenant_id"


class MongoStoreBase(Generic[EntityT]):
    """
    Persistence of one entity type in one MongoDB collection.

    When the bound options carry a tenant id, every filter-based read and
    write is narrowed to the entities of that tenant and new entities are
    stamped with it. Otherwise isolation, if any, comes from the database or
    collection names the options were resolved to.
    """

    entity_type: type[EntityT]
    entity_label: str = "entity"
    not_found_code: StoreErrorCode = StoreErrorCode.UNKNOWN_ERROR
    not_modified_code: StoreErrorCode = StoreErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        options: TenantStoreOptions,
        logger: Optional[logging.Logger] = None,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        """
        Initialize the store.

        Args:
            options: Options the store is bound to
            logger: Logger (defaults to the module logger of the store class)
            client: MongoDB client (defaults to the shared client of the connection string)
        """
        self.options = options
        self.logger = logger or logging.getLogger(type(self).__module__)
        self._client = client
        self._collection: Optional[AsyncIOMotorCollection] = None
        self._disposed = False

    @property
    def collection_name(self) -> str:
        raise NotImplementedError

    @property
    def database_name(self) -> Optional[str]:
        return self.options.database_name

    @property
    def disposed(self) -> bool:
        return self._disposed

    # =========================================================================
    # Connection
    # =========================================================================

    @property
    def client(self) -> AsyncIOMotorClient:
        self.throw_if_disposed()
        if self._client is None:
            self._client = get_mongo_client(
                self.options.connection_string,
                self.options.use_server_api_v1,
            )
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        self.throw_if_disposed()
        if not self.database_name or not self.database_name.strip():
            raise StoreConfigurationError("The database name was not configured")
        return self.client[self.database_name]

    @property
    def collection(self) -> AsyncIOMotorCollection:
        self.throw_if_disposed()
        if self._collection is None:
            self._collection = self.database[self.collection_name]
        return self._collection

    def throw_if_disposed(self) -> None:
        if self._disposed:
            raise StoreDisposedError(f"The {type(self).__name__} was disposed and cannot be accessed")

    def dispose(self) -> None:
        """Release the store. Any later operation raises StoreDisposedError."""
        self._disposed = True
        self._collection = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # =========================================================================
    # Logging
    # =========================================================================

    def _log(self, level: int, message: str, exc_info: Optional[BaseException] = None) -> None:
        if not self.logger.isEnabledFor(level):
            return

        context = f"{message} the collection '{self.collection_name}' of database '{self.database_name}'"
        if self.options.has_tenant_set:
            context += f" for tenant '{self.options.tenant_id}'"

        self.logger.log(level, context, exc_info=exc_info)

    def trace(self, message: str) -> None:
        self._log(logging.DEBUG, message)

    def warning(self, message: str) -> None:
        self._log(logging.WARNING, message)

    def error(self, error: BaseException, message: str) -> None:
        self._log(logging.ERROR, message, exc_info=error)

    # =========================================================================
    # Guards
    # =========================================================================

    def _guard(self, cancel_event: Optional[asyncio.Event]) -> None:
        self.throw_if_disposed()
        if cancel_event is not None and cancel_event.is_set():
            raise asyncio.CancelledError()

    async def _get(self, func: Callable[[], ValueT], cancel_event: Optional[asyncio.Event]) -> ValueT:
        """Read a value of an entity in memory."""
        self._guard(cancel_event)
        return func()

    async def _set(self, action: Callable[[], Any], cancel_event: Optional[asyncio.Event]) -> None:
        """Mutate an entity in memory; persisted by the next update."""
        self._guard(cancel_event)
        action()

    # =========================================================================
    # Filters
    # =========================================================================

    def normalize_filter(self, filter: dict[str, Any]) -> dict[str, Any]:
        """AND the filter with the tenant of the store, when one is set."""
        if self.options.has_tenant_set:
            return {"$and": [{TENANT_FIELD: self.options.tenant_id}, filter]}
        return filter

    def id_filter(self, object_id: ObjectId) -> dict[str, Any]:
        return self.normalize_filter({"_id": object_id})

    @staticmethod
    def parse_id(entity_id: Optional[str]) -> ObjectId:
        if not entity_id or not ObjectId.is_valid(entity_id):
            raise ValueError(f"The provided ID {entity_id} is not in a valid 24-digits format")
        return ObjectId(entity_id)

    # =========================================================================
    # Lookups
    # =========================================================================

    async def find_one(
        self,
        filter: dict[str, Any],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[EntityT]:
        """
        Find the first entity matching the filter.

        Returns:
            The entity, or None if none matches

        Raises:
            StoreError: If the storage system fails
        """
        self._guard(cancel_event)

        try:
            self.trace(f"Trying to find a {self.entity_label} in")

            document = await self.collection.find_one(self.normalize_filter(filter))

            if document is None:
                self.trace(f"None {self.entity_label} was found in")
                return None

            self.trace(f"A {self.entity_label} was found in")
            return self.entity_type.from_document(document)
        except (StoreConfigurationError, StoreDisposedError):
            raise
        except Exception as e:
            self.error(e, f"The {self.entity_label} could not be looked up in")
            raise StoreError(f"Error while looking up for the {self.entity_label}") from e

    async def find_all_matching(
        self,
        filter: dict[str, Any],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> list[EntityT]:
        """
        Find all the entities matching the filter.

        Returns:
            The matching entities (empty if none matches)

        Raises:
            StoreError: If the storage system fails
        """
        self._guard(cancel_event)

        try:
            self.trace(f"Trying to find all {self.entity_label}s in")

            cursor = self.collection.find(self.normalize_filter(filter))
            documents = await cursor.to_list(length=None)

            if not documents:
                self.trace(f"None {self.entity_label} was found in")
            else:
                self.trace(f"{len(documents)} {self.entity_label}(s) were found in")

            return [self.entity_type.from_document(doc) for doc in documents]
        except (StoreConfigurationError, StoreDisposedError):
            raise
        except Exception as e:
            self.error(e, f"It was not possible to retrieve the {self.entity_label}s in")
            raise StoreError(f"Error while getting {self.entity_label}s for a given filter") from e

    async def find_by_id(
        self,
        entity_id: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[EntityT]:
        """
        Find an entity by its identifier.

        Raises:
            ValueError: If the identifier is not a valid ObjectId string
        """
        object_id = self.parse_id(entity_id)

        self.trace(f"Trying to find a {self.entity_label} with ID '{entity_id}' in")

        return await self.find_one({"_id": object_id}, cancel_event)

    async def find_by_name(
        self,
        normalized_name: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[EntityT]:
        self.trace(f"Trying to find a {self.entity_label} named '{normalized_name}' in")

        return await self.find_one({"normalized_name": normalized_name}, cancel_event)

    # =========================================================================
    # Core CRUD
    # =========================================================================

    async def create(
        self,
        entity: EntityT,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> IdentityResult:
        """
        Insert a new entity.

        Stamps the creation time and, when the store filters by tenant, the
        tenant of the entity. A new identifier is assigned if missing.

        Raises:
            ValueError: If the entity is None or its identifier is malformed
        """
        if entity is None:
            raise ValueError(f"The {self.entity_label} is required")

        object_id = self.parse_id(entity.id) if entity.id else ObjectId()
        self._guard(cancel_event)

        try:
            self.trace(f"Creating a new {self.entity_label} in")

            entity.created_at = datetime.now(timezone.utc)

            if self.options.has_tenant_set:
                entity.tenant_id = self.options.tenant_id

            document = entity.to_document()
            document["_id"] = object_id

            await self.collection.insert_one(document, bypass_document_validation=True)
            entity.id = str(object_id)

            self.trace(f"New {self.entity_label} with ID '{entity.id}' created in")

            return IdentityResult.success()
        except (StoreConfigurationError, StoreDisposedError):
            raise
        except Exception as e:
            self.error(e, f"Could not create a new {self.entity_label} in")

            return IdentityResult.failed(
                StoreErrorCode.UNKNOWN_ERROR,
                f"The storage system failed persisting the {self.entity_label}",
            )

    async def update(
        self,
        entity: EntityT,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> IdentityResult:
        """
        Replace the stored entity with the given one.

        An entity that does not exist, or that belongs to another tenant,
        fails with the not-found code; an unchanged entity fails with the
        not-modified code.

        The tenant and, when the entity does not carry one, the creation time
        of the stored document are kept.
        """
        if entity is None:
            raise ValueError(f"The {self.entity_label} is required")

        object_id = self.parse_id(entity.id)
        self._guard(cancel_event)

        try:
            self.trace(f"Updating the {self.entity_label} with ID '{entity.id}' in")

            filter = self.id_filter(object_id)
            document = entity.to_document()

            if self.options.has_tenant_set:
                entity.tenant_id = self.options.tenant_id
                document[TENANT_FIELD] = self.options.tenant_id

            if document.get("created_at") is None:
                stored = await self.collection.find_one(filter, {"created_at": 1})
                if stored is not None:
                    entity.created_at = stored.get("created_at")
                    document["created_at"] = entity.created_at

            result = await self.collection.replace_one(filter, document, upsert=False)

            if result.matched_count == 0:
                self.warning(f"The {self.entity_label} with ID '{entity.id}' was not found in")

                return IdentityResult.failed(
                    self.not_found_code,
                    f"The {self.entity_label} with ID {entity.id} was not found and could not be updated",
                )

            if result.modified_count == 0:
                self.warning(f"The {self.entity_label} with ID '{entity.id}' was not modified in")

                return IdentityResult.failed(
                    self.not_modified_code,
                    f"The {self.entity_label} with ID {entity.id} was not updated",
                )

            self.trace(f"The {self.entity_label} with ID '{entity.id}' was successfully updated in")

            return IdentityResult.success()
        except (StoreConfigurationError, StoreDisposedError):
            raise
        except Exception as e:
            self.error(e, f"The {self.entity_label} with ID '{entity.id}' was not updated in")

            return IdentityResult.failed(
                StoreErrorCode.UNKNOWN_ERROR,
                f"Could not update the {self.entity_label} in the storage system",
            )

    async def delete(
        self,
        entity: EntityT,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> IdentityResult:
        """
        Delete the entity.

        An entity that does not exist, or that belongs to another tenant,
        fails with the not-found code.
        """
        if entity is None:
            raise ValueError(f"The {self.entity_label} is required")

        object_id = self.parse_id(entity.id)
        self._guard(cancel_event)

        try:
            self.trace(f"Deleting the {self.entity_label} with ID '{entity.id}' from")

            result = await self.collection.delete_one(self.id_filter(object_id))

            if result.deleted_count == 0:
                self.warning(f"Inconsistent delete: {self.entity_label} with ID '{entity.id}' was not removed from")

                return IdentityResult.failed(
                    self.not_found_code,
                    f"The {self.entity_label} was not deleted from the storage",
                )

            if result.deleted_count > 1:
                self.warning(
                    f"Inconsistent delete: more than one {self.entity_label} deleted "
                    f"while trying to remove the {self.entity_label} with ID '{entity.id}' from"
                )
            else:
                self.trace(f"The {self.entity_label} with ID '{entity.id}' was successfully deleted from")

            return IdentityResult.success()
        except (StoreConfigurationError, StoreDisposedError):
            raise
        except Exception as e:
            self.error(e, f"The {self.entity_label} '{entity.id}' was not deleted from")

            return IdentityResult.failed(
                StoreErrorCode.UNKNOWN_ERROR,
                f"Could not delete the {self.entity_label} from the storage system",
            )
