"""Reference corpus chunk with its embedding vector. Independent of conversations."""
from sqlalchemy import Column, String, Text, DateTime, JSON

from app.database import Base
from app.utils.clock import utcnow
from app.utils.ids import new_id


class MedicalEmbedding(Base):
    __tablename__ = "medical_embeddings"

    id = Column(String(64), primary_key=True, default=lambda: new_id("emb"))
    source = Column(String(255), nullable=False)
    chapter = Column(String(128), nullable=True)
    section = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    embedding = Column(JSON, nullable=True)  # list[float]
    metadata_ = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
