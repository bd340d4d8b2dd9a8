"""
Index definitions of the identity collections.
"""
from motor.motor_asyncio import AsyncIOMotorDatabase

from identity_store.config import StoreOptions

USER_INDEXES = [
    {"keys": [("normalized_name", 1)]},
    {"keys": [("normalized_email", 1)]},
    {"keys": [("tenant_id", 1)]},
    {"keys": [("roles", 1)]},
    {"keys": [("logins.provider", 1), ("logins.login_key", 1)]},
]

ROLE_INDEXES = [
    {"keys": [("normalized_name", 1)]},
    {"keys": [("tenant_id", 1)]},
]


async def create_identity_indexes(db: AsyncIOMotorDatabase, options: StoreOptions) -> None:
    """
    Create the indexes of the users and roles collections.

    Args:
        db: Identity database (or the database of a tenant)
        options: Store options naming the collections
    """
    collections = {
        options.users_collection: USER_INDEXES,
        options.roles_collection: ROLE_INDEXES,
    }

    for collection_name, indexes in collections.items():
        collection = db[collection_name]
        for index_def in indexes:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            await collection.create_index(keys, **kwargs)
