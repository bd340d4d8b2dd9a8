"""
Database module - MongoDB connections and identity indexes.
"""
from identity_store.database.connections import get_mongo_client, close_connections
from identity_store.database.indexes import create_identity_indexes

__all__ = [
    "get_mongo_client",
    "close_connections",
    "create_identity_indexes",
]
