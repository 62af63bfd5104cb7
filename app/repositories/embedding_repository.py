"""Reference corpus rows (MedicalEmbedding). Plain CRUD; no similarity search here."""
from typing import Any

from sqlalchemy.orm import Session

from app.models.medical_embedding import MedicalEmbedding
from app.repositories.store_guard import read_path, write_path
from app.utils.clock import utcnow


@write_path()
def create_medical_embedding(
    db: Session,
    source: str,
    content: str,
    embedding: list[float],
    chapter: str | None = None,
    section: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> MedicalEmbedding:
    row = MedicalEmbedding(
        source=source,
        chapter=chapter,
        section=section,
        content=content,
        embedding=[float(x) for x in embedding],
        metadata_=metadata,
        created_at=utcnow(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@read_path(lambda: None)
def get_medical_embedding(db: Session, embedding_id: str) -> MedicalEmbedding | None:
    return db.query(MedicalEmbedding).filter(MedicalEmbedding.id == embedding_id).first()
