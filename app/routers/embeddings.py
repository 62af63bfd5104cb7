"""
Reference corpus ingestion (admin only):
- POST /api/embeddings — store one chunk with its precomputed embedding vector
- GET  /api/embeddings/{id} — read a stored chunk back
Embedding generation and similarity search live outside this service.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.auth import get_current_user_admin
from app.database import get_db
from app.models.user import User
from app.repositories.embedding_repository import create_medical_embedding, get_medical_embedding
from app.schemas.embedding import MedicalEmbeddingCreate, MedicalEmbeddingOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/embeddings", tags=["embeddings"])


@router.post("", response_model=MedicalEmbeddingOut, status_code=status.HTTP_201_CREATED)
def create_embedding(
    body: MedicalEmbeddingCreate,
    admin: User = Depends(get_current_user_admin),
    db: Session | None = Depends(get_db),
):
    row = create_medical_embedding(
        db,
        body.source,
        body.content,
        body.embedding,
        chapter=body.chapter,
        section=body.section,
        metadata=body.metadata,
    )
    logger.info("Embedding stored: id=%s source=%s by=%s", row.id, row.source, admin.id)
    return MedicalEmbeddingOut.model_validate(row)


@router.get("/{embedding_id}", response_model=MedicalEmbeddingOut)
def get_embedding(
    embedding_id: str,
    _admin: User = Depends(get_current_user_admin),
    db: Session | None = Depends(get_db),
):
    row = get_medical_embedding(db, embedding_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Embedding not found")
    return MedicalEmbeddingOut.model_validate(row)
