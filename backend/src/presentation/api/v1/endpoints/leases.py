"""Lease signing endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from application.use_cases import ApplicationWorkflowService
from domain.value_objects import Actor
from presentation.api.v1.dependencies import get_actor, get_workflow_service
from presentation.api.v1.errors import unwrap
from presentation.schemas import LeaseSignatureResponse, SignLeaseRequestSchema, SignLeaseResponse

router = APIRouter(prefix="/applications/{application_id}/lease", tags=["leases"])


@router.post("/sign", response_model=SignLeaseResponse, status_code=status.HTTP_201_CREATED)
async def sign_lease(
    application_id: UUID,
    request: SignLeaseRequestSchema,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> SignLeaseResponse:
    """Sign the lease of an approved application as tenant or landlord."""
    result = await service.sign_lease(application_id, actor, request.to_request())
    return SignLeaseResponse.from_outcome(unwrap(result))


@router.get("/signatures", response_model=list[LeaseSignatureResponse])
async def get_signatures(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> list[LeaseSignatureResponse]:
    result = await service.get_signatures(application_id, actor)
    return [LeaseSignatureResponse.from_entity(signature) for signature in unwrap(result)]
