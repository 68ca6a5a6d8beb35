"""Application lifecycle endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from application.services import get_valid_next_statuses
from application.use_cases import ApplicationWorkflowService
from domain.enums import ApplicationStatus
from domain.value_objects import Actor
from presentation.api.v1.dependencies import get_actor, get_workflow_service
from presentation.api.v1.errors import unwrap
from presentation.schemas import (
    ApplicationResponse,
    AutosaveRequest,
    CreateApplicationRequest,
    NextStatusesResponse,
    PaymentRequestCreate,
    ScoreBreakdownResponse,
    StatusUpdateRequest,
)

router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    request: CreateApplicationRequest,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ApplicationResponse:
    """Start a draft application for a property."""
    result = await service.create_application(actor, request.property_id, request.sections())
    return ApplicationResponse.from_entity(unwrap(result))


@router.get("", response_model=list[ApplicationResponse])
async def list_applications(
    property_id: Optional[UUID] = None,
    user_id: Optional[UUID] = None,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> list[ApplicationResponse]:
    """List applications of a property, or of a user (defaults to the caller)."""
    if property_id is not None:
        result = await service.list_applications_for_property(property_id, actor)
    else:
        result = await service.list_applications_for_user(user_id or actor.user_id, actor)
    return [ApplicationResponse.from_entity(app) for app in unwrap(result)]


@router.get("/statuses/{current}/next", response_model=NextStatusesResponse)
async def get_next_statuses(current: ApplicationStatus) -> NextStatusesResponse:
    return NextStatusesResponse(status=current, next_statuses=get_valid_next_statuses(current))


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ApplicationResponse:
    result = await service.get_application(application_id, actor)
    return ApplicationResponse.from_entity(unwrap(result))


@router.patch("/{application_id}/autosave", response_model=ApplicationResponse)
async def autosave_application(
    application_id: UUID,
    request: AutosaveRequest,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ApplicationResponse:
    """Save draft progress without changing the status."""
    result = await service.autosave_application(application_id, actor, request.payload())
    return ApplicationResponse.from_entity(unwrap(result))


@router.post("/{application_id}/status", response_model=ApplicationResponse)
async def update_status(
    application_id: UUID,
    request: StatusUpdateRequest,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ApplicationResponse:
    result = await service.update_status(application_id, actor, request.to_transition())
    return ApplicationResponse.from_entity(unwrap(result))


@router.post("/{application_id}/payment/request", response_model=ApplicationResponse)
async def request_payment(
    application_id: UUID,
    request: PaymentRequestCreate,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ApplicationResponse:
    result = await service.request_payment(
        application_id, actor, request.amount, request.purpose, request.message, reason=request.reason
    )
    return ApplicationResponse.from_entity(unwrap(result))


@router.post("/{application_id}/payment/initiate", response_model=ApplicationResponse)
async def initiate_payment(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ApplicationResponse:
    result = await service.initiate_payment(application_id, actor)
    return ApplicationResponse.from_entity(unwrap(result))


@router.post("/{application_id}/payment/complete", response_model=ApplicationResponse)
async def complete_payment(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ApplicationResponse:
    result = await service.complete_payment(application_id, actor)
    return ApplicationResponse.from_entity(unwrap(result))


@router.post("/{application_id}/payment/verify", response_model=ApplicationResponse)
async def verify_payment(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ApplicationResponse:
    result = await service.verify_payment(application_id, actor)
    return ApplicationResponse.from_entity(unwrap(result))


@router.post("/{application_id}/score", response_model=ScoreBreakdownResponse)
async def calculate_score(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    service: ApplicationWorkflowService = Depends(get_workflow_service),
) -> ScoreBreakdownResponse:
    result = await service.calculate_application_score(application_id, actor)
    return ScoreBreakdownResponse.from_breakdown(unwrap(result))
