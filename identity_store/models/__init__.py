"""
Entity models stored by the identity stores.
"""
from identity_store.models.base import MongoEntity
from identity_store.models.claim import MongoClaim, MongoUserLogin, MongoUserToken
from identity_store.models.role import MongoRole
from identity_store.models.user import MongoUser

__all__ = [
    "MongoEntity",
    "MongoClaim",
    "MongoUserLogin",
    "MongoUserToken",
    "MongoRole",
    "MongoUser",
]
