from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MedicalEmbeddingCreate(BaseModel):
    source: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    embedding: list[float]
    chapter: str | None = Field(None, max_length=128)
    section: str | None = Field(None, max_length=255)
    metadata: dict[str, Any] | None = None


class MedicalEmbeddingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    source: str
    chapter: str | None = None
    section: str | None = None
    content: str
    embedding: list[float] | None = None
    # ORM attribute is metadata_ (metadata is reserved on declarative models)
    metadata: dict[str, Any] | None = Field(None, validation_alias="metadata_")
    created_at: datetime | None = None
