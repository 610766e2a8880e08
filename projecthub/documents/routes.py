
from fastapi import APIRouter, Depends, Path
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
from projecthub.auth.deps import get_db, get_principal
from projecthub.core.errors import file_missing_error
from projecthub.core.logger import logger
from projecthub.documents.storage import DocumentStore, get_document_store
from projecthub.projects.service import get_document
from projecthub.schemas.auth import Principal

router = APIRouter(prefix="/projects", tags=["documents"])

@router.get("/{project_id}/documents/{document_id}")
def download_document(
    project_id: int = Path(gt=0),
    document_id: int = Path(gt=0),
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_document_store),
    principal: Principal = Depends(get_principal),
):
    doc = get_document(db, principal, project_id, document_id)
    if not store.exists(doc.file_path):
        logger.warning("Document {} of project {} is missing on disk", doc.id, project_id)
        raise file_missing_error()
    return FileResponse(
        doc.file_path,
        media_type=doc.mime_type or "application/octet-stream",
        filename=doc.original_name,
    )
