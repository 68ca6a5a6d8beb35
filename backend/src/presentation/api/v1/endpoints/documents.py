"""Generated document downloads."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from application.use_cases import ApplicationWorkflowService
from domain.enums import DocumentKind
from domain.value_objects import Actor
from infrastructure.config import get_logger
from infrastructure.reporting import LeaseDocumentGenerator
from presentation.api.v1.dependencies import get_actor, get_document_generator, get_workflow_service
from presentation.api.v1.errors import unwrap

router = APIRouter(prefix="/documents", tags=["documents"])
logger = get_logger(__name__)

KINDS_BY_SLUG = {kind.slug: kind for kind in DocumentKind}


@router.get("/{application_id}/{filename}")
async def download_document(
    application_id: UUID,
    filename: str,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
    documents: LeaseDocumentGenerator = Depends(get_document_generator),
) -> FileResponse:
    """Serve a generated document to anyone allowed to view the application."""
    kind = KINDS_BY_SLUG.get(filename.removesuffix(".pdf"))
    if kind is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown document")

    application = unwrap(await service.get_application(application_id, actor))
    if getattr(application, kind.value) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not generated yet")

    path = documents.document_path(application_id, kind)
    if not path.exists():
        logger.warning(f"Document {path} is claimed but missing on disk", extra={"application_id": application_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not available")
    return FileResponse(path, media_type="application/pdf", filename=f"{kind.slug}-{application_id}.pdf")
