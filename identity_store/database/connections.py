"""
MongoDB client management for the identity stores.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.server_api import ServerApi

from identity_store.core.errors import StoreConfigurationError

# Clients shared by all stores, keyed by connection string and server API flag
_mongo_clients: dict[tuple[str, bool], AsyncIOMotorClient] = {}


def get_mongo_client(
    connection_string: Optional[str],
    use_server_api_v1: bool = False,
) -> AsyncIOMotorClient:
    """
    Get or create the MongoDB client for a connection string.

    Args:
        connection_string: MongoDB connection string
        use_server_api_v1: Pin the Stable API version 1

    Returns:
        A client shared with every caller using the same settings

    Raises:
        StoreConfigurationError: If the connection string is not set
    """
    if not connection_string or not connection_string.strip():
        raise StoreConfigurationError("The connection string was not set")

    key = (connection_string, use_server_api_v1)
    client = _mongo_clients.get(key)
    if client is None:
        if use_server_api_v1:
            client = AsyncIOMotorClient(connection_string, server_api=ServerApi("1"))
        else:
            client = AsyncIOMotorClient(connection_string)
        _mongo_clients[key] = client
    return client


def close_connections() -> None:
    """Close all cached MongoDB clients."""
    for client in _mongo_clients.values():
        client.close()
    _mongo_clients.clear()
