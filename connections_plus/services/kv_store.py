"""
Key-Value Stores

The game store only needs four operations from its storage engine:
get, set, delete and prefix listing. Two engines implement them here:
MongoDB (one document per key) for deployments and a process-local dict
for development and tests.
"""

import re
import threading
from typing import Dict, List, Optional

from pymongo.errors import PyMongoError
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..utils.errors import StorageError
from ..utils.game_logger import game_logger


class KeyValueStore:
    """Interface shared by all storage engines."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def keys(self, prefix: str = "") -> List[str]:
        raise NotImplementedError

    def close(self) -> None:
        pass


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store. Data lives only as long as the process."""

    backend = 'memory'

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return sorted(key for key in self._data if key.startswith(prefix))


class MongoKeyValueStore(KeyValueStore):
    """
    MongoDB-backed store.

    Each key is a document ``{"_id": key, "value": <json string>}`` so every
    write is a single-document upsert and therefore atomic per key.
    """

    backend = 'mongo'

    def __init__(self, mongo_uri: str = None, db_name: str = 'connections_plus',
                 collection_name: str = 'kv', collection=None):
        """
        Initialize the store with a MongoDB connection.

        Args:
            mongo_uri: MongoDB connection string
            db_name: Database holding the key-value collection
            collection_name: Collection name
            collection: Pre-built collection, bypassing the connection (tests)
        """
        self.client = None
        if collection is not None:
            self.collection = collection
            return

        self.client = MongoClient(mongo_uri, server_api=ServerApi('1'))
        self.collection = self.client[db_name][collection_name]

        # Test connection
        try:
            self.client.admin.command('ping')
            game_logger.logger.info(f"Connected to MongoDB database '{db_name}'")
        except PyMongoError as e:
            game_logger.logger.error(f"MongoDB connection error: {e}")
            raise StorageError("Failed to connect to storage") from e

    def get(self, key: str) -> Optional[str]:
        try:
            document = self.collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to load '{key}'") from e
        if document is None:
            return None
        return document.get("value")

    def set(self, key: str, value: str) -> None:
        try:
            self.collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)
        except PyMongoError as e:
            raise StorageError(f"Failed to save '{key}'") from e

    def delete(self, key: str) -> bool:
        try:
            result = self.collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to delete '{key}'") from e
        return result.deleted_count > 0

    def keys(self, prefix: str = "") -> List[str]:
        query = {"_id": {"$regex": f"^{re.escape(prefix)}"}} if prefix else {}
        try:
            return sorted(document["_id"] for document in self.collection.find(query, {"_id": 1}))
        except PyMongoError as e:
            raise StorageError(f"Failed to list keys with prefix '{prefix}'") from e

    def close(self) -> None:
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()


def create_store(app_config) -> KeyValueStore:
    """Build the storage engine named by STORE_BACKEND."""
    backend = getattr(app_config, 'STORE_BACKEND', 'mongo')
    if backend == 'memory':
        return MemoryKeyValueStore()
    if backend == 'mongo':
        if not app_config.MONGO_URI:
            raise StorageError("MONGO_URI is not configured")
        return MongoKeyValueStore(
            app_config.MONGO_URI,
            db_name=app_config.MONGO_DB_NAME,
            collection_name=app_config.MONGO_COLLECTION,
        )
    raise StorageError(f"Unknown storage backend '{backend}'")
