"""
Base model of the entities stored in MongoDB.
"""
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class MongoEntity(BaseModel):
    """
    An entity stored in a MongoDB collection.

    The identifier is exposed as a 24-hex-digit string and persisted as an
    ObjectId in the `_id` field.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    tenant_id: Optional[str] = Field(None, description="Tenant owning the entity")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp (UTC)")

    def to_document(self) -> dict[str, Any]:
        """Convert the entity to a MongoDB document (without `_id`)."""
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_document(cls, document: dict[str, Any]):
        """Build the entity from a MongoDB document."""
        document = dict(document)
        if isinstance(document.get("_id"), ObjectId):
            document["_id"] = str(document["_id"])
        return cls.model_validate(document)
