"""MongoDB implementation of the record-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.errors import BulkWriteError, DuplicateKeyError, PyMongoError

from pokedex_store.errors import DuplicateRecordError, StorageError
from pokedex_store.records.models import PokemonRecord, PokemonUpdate
from pokedex_store.storage.base import RecordStoreBase

if TYPE_CHECKING:
    from pokedex_store.config import Settings

logger = logging.getLogger(__name__)

ID_FIELD = "externalId"
DUPLICATE_KEY_CODE = 11000

# Mongo's ObjectId never leaves the store.
_PROJECTION = {"_id": False}


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Log and re-raise driver errors as :class:`StorageError`."""
    try:
        yield
    except DuplicateKeyError as exc:
        logger.error("%s failed: duplicate %s (%s)", operation, ID_FIELD, exc)
        raise DuplicateRecordError(f"{operation}: duplicate {ID_FIELD}") from exc
    except BulkWriteError as exc:
        write_errors = exc.details.get("writeErrors", [])
        if any(e.get("code") == DUPLICATE_KEY_CODE for e in write_errors):
            logger.error(
                "%s failed: %d write errors, duplicate %s", operation, len(write_errors), ID_FIELD
            )
            raise DuplicateRecordError(f"{operation}: duplicate {ID_FIELD}") from exc
        logger.exception("%s failed", operation)
        raise StorageError(f"{operation} failed: {exc}") from exc
    except PyMongoError as exc:
        logger.exception("%s failed", operation)
        raise StorageError(f"{operation} failed: {exc}") from exc


def _to_record(doc: dict[str, Any] | None) -> PokemonRecord | None:
    return PokemonRecord.model_validate(doc) if doc is not None else None


class MongoRecordStore(RecordStoreBase):
    """pymongo-backed record store.

    Parameters
    ----------
    url:
        MongoDB connection string.
    database:
        Database holding the collection.
    collection_name:
        Collection name; ``"pokemons"`` unless configured otherwise.
    client:
        Pre-built ``MongoClient`` (tests inject a mock here).
    """

    def __init__(
        self,
        url: str = "",
        *,
        database: str = "pokedex",
        collection_name: str = "pokemons",
        client: MongoClient | None = None,
    ) -> None:
        super().__init__(collection_name)
        if client is None:
            if not url:
                raise ValueError("MongoRecordStore needs a connection url or a client")
            client = MongoClient(url, serverSelectionTimeoutMS=5000)
        self._client = client
        self._collection = client[database][collection_name]

    @classmethod
    def from_settings(cls, settings: Settings) -> MongoRecordStore:
        return cls(
            settings.mongo_url,
            database=settings.mongo_database,
            collection_name=settings.mongo_collection,
        )

    # -- RecordStoreBase overrides --------------------------------------------

    def insert(self, record: PokemonRecord) -> PokemonRecord:
        with _storage_errors(f"insert {ID_FIELD}={record.external_id}"):
            # insert_one adds ``_id`` to the dict it is given
            self._collection.insert_one(record.to_document())
        return record

    def insert_many(self, records: list[PokemonRecord]) -> int:
        if not records:
            return 0
        with _storage_errors(f"insert_many ({len(records)} records)"):
            result = self._collection.insert_many(
                [r.to_document() for r in records], ordered=False
            )
        return len(result.inserted_ids)

    def list_all(self) -> list[PokemonRecord]:
        with _storage_errors("list_all"):
            docs = list(self._collection.find({}, _PROJECTION))
        return [PokemonRecord.model_validate(d) for d in docs]

    def get(self, external_id: int) -> PokemonRecord | None:
        with _storage_errors(f"get {ID_FIELD}={external_id}"):
            doc = self._collection.find_one({ID_FIELD: external_id}, _PROJECTION)
        return _to_record(doc)

    def update(self, external_id: int, changes: PokemonUpdate) -> PokemonRecord | None:
        fields = changes.changes()
        if not fields:
            return self.get(external_id)
        with _storage_errors(f"update {ID_FIELD}={external_id}"):
            doc = self._collection.find_one_and_update(
                {ID_FIELD: external_id},
                {"$set": fields},
                projection=_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        return _to_record(doc)

    def delete(self, external_id: int) -> PokemonRecord | None:
        with _storage_errors(f"delete {ID_FIELD}={external_id}"):
            doc = self._collection.find_one_and_delete(
                {ID_FIELD: external_id}, projection=_PROJECTION
            )
        return _to_record(doc)

    def count_caught(self) -> int:
        with _storage_errors("count_caught"):
            return self._collection.count_documents({"caught": True})

    def list_caught(self) -> list[PokemonRecord]:
        with _storage_errors("list_caught"):
            docs = list(self._collection.find({"caught": True}, _PROJECTION))
        return [PokemonRecord.model_validate(d) for d in docs]

    def health_check(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError:
            logger.warning("MongoDB health-check failed", exc_info=True)
            return False

    def ensure_indexes(self) -> None:
        with _storage_errors(f"create unique index on {ID_FIELD}"):
            self._collection.create_index([(ID_FIELD, ASCENDING)], unique=True)

    def close(self) -> None:
        self._client.close()
