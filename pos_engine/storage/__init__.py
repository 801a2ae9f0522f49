from pos_engine.storage.dynamodb_store import DEFAULT_TABLE_NAME, STORAGE_PREFIX, DynamoDBStore
from pos_engine.storage.key_value_store import InMemoryStore, KeyValueStore

__all__ = [
    "DEFAULT_TABLE_NAME",
    "STORAGE_PREFIX",
    "DynamoDBStore",
    "InMemoryStore",
    "KeyValueStore",
]
