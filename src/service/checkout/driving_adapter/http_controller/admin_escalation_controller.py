from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.checkout.app.command.resolve_escalation_use_case import (
    ResolveEscalationUseCase,
)
from src.service.checkout.app.query.list_escalations_use_case import ListEscalationsUseCase
from src.service.checkout.domain.enum.escalation import EscalationStatus
from src.service.checkout.driving_adapter.http_controller.schema.admin_schema import (
    EscalationResponse,
    ResolveEscalationRequest,
)
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.driving_adapter.http_controller.auth.role_auth import require_operator


router = APIRouter()


@router.get('', response_model=List[EscalationResponse])
@Logger.io
async def list_escalations(
    escalation_status: Optional[EscalationStatus] = Query(default=None, alias='status'),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    current_operator: Operator = Depends(require_operator),
    use_case: ListEscalationsUseCase = Depends(ListEscalationsUseCase.depends),
) -> List[EscalationResponse]:
    escalations = await use_case.list_escalations(
        status=escalation_status, limit=limit, offset=offset
    )
    return [EscalationResponse.from_entity(escalation) for escalation in escalations]


@router.post('/{escalation_id}/resolve', response_model=EscalationResponse)
@Logger.io
async def resolve_escalation(
    escalation_id: UtilsUUID7,
    request: ResolveEscalationRequest,
    current_operator: Operator = Depends(require_operator),
    use_case: ResolveEscalationUseCase = Depends(ResolveEscalationUseCase.depends),
) -> EscalationResponse:
    escalation = await use_case.resolve(
        escalation_id=str(escalation_id), resolved_by=current_operator.email, note=request.note
    )
    return EscalationResponse.from_entity(escalation)
