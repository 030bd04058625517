# agrimarket/storage.py

import json
from typing import Dict, List, Optional
from pymongo import MongoClient
from .config import Settings, settings as default_settings
from .errors import StorageCorruption

USERS = "users"
CROPS = "crops"
ORDERS = "orders"
MESSAGES = "messages"
CURRENT_USER = "currentUser"

COLLECTIONS = (USERS, CROPS, ORDERS, MESSAGES)


class KeyValueStore:
    """String key to string value persistence, the shape of browser local storage."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str):
        raise NotImplementedError

    def remove_item(self, key: str):
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store for tests and demos."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str):
        self._data[key] = value

    def remove_item(self, key: str):
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class MongoKeyValueStore(KeyValueStore):
    """Keeps every key as one {key, value} document in a MongoDB collection."""

    def __init__(self, collection=None, config: Settings = default_settings):
        if collection is None:
            self.client = MongoClient(config.final_mongo_uri)
            self.db = self.client[config.db_name]
            collection = self.db[config.kv_collection]
        self.kv_collection = collection
        self.kv_collection.create_index("key", unique=True)
        print("---KV STORE: Connected to MongoDB---")

    def get_item(self, key: str) -> Optional[str]:
        doc = self.kv_collection.find_one({"key": key})
        if doc is None:
            return None
        return doc.get("value")

    def set_item(self, key: str, value: str):
        self.kv_collection.update_one(
            {"key": key},
            {"$set": {"key": key, "value": value}},
            upsert=True
        )

    def remove_item(self, key: str):
        self.kv_collection.delete_one({"key": key})

    def keys(self) -> List[str]:
        return [doc["key"] for doc in self.kv_collection.find({}, {"key": 1})]


def create_store(config: Settings = default_settings) -> KeyValueStore:
    """Builds the backend named by `storage_backend`."""
    backend = config.storage_backend.lower()
    if backend == "mongo":
        return MongoKeyValueStore(config=config)
    if backend == "memory":
        return InMemoryKeyValueStore()
    raise ValueError(f"Unknown storage backend: {config.storage_backend}")


class EntityStore:
    """Reads and writes whole collections as JSON arrays.

    A collection is replaced with a single write, so readers never see half of
    an update. Unreadable values are treated as empty instead of failing the
    caller. Nothing here spans more than one key, so a change that touches two
    collections is two independent writes.
    """

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def _decode(self, key: str, raw: str):
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise StorageCorruption(key, str(e)) from e

    def load(self, name: str) -> List[dict]:
        raw = self.kv.get_item(name)
        if raw is None:
            return []
        try:
            records = self._decode(name, raw)
            if not isinstance(records, list):
                raise StorageCorruption(name, f"expected a JSON array, got {type(records).__name__}")
        except StorageCorruption as e:
            print(f"---ENTITY STORE: {e}. Treating '{name}' as empty---")
            return []
        objects = [r for r in records if isinstance(r, dict)]
        if len(objects) != len(records):
            print(f"---ENTITY STORE: Dropped {len(records) - len(objects)} non-object entries from '{name}'---")
        return objects

    def counts(self) -> Dict[str, int]:
        """Number of stored records in each collection."""
        return {name: len(self.load(name)) for name in COLLECTIONS}

    def save(self, name: str, records: List[dict]):
        self.kv.set_item(name, json.dumps(list(records)))

    def load_record(self, key: str) -> Optional[dict]:
        raw = self.kv.get_item(key)
        if raw is None:
            return None
        try:
            record = self._decode(key, raw)
            if not isinstance(record, dict):
                raise StorageCorruption(key, f"expected a JSON object, got {type(record).__name__}")
        except StorageCorruption as e:
            print(f"---ENTITY STORE: {e}. Ignoring it---")
            return None
        return record

    def save_record(self, key: str, record: dict):
        self.kv.set_item(key, json.dumps(record))

    def remove(self, key: str):
        self.kv.remove_item(key)
