import logging

from fastapi import APIRouter, Depends

from ..deps import get_workflow_generator
from ..errors import BadRequest, NotFound, ServiceError
from ..models import ApiResponse, ConversationRecord
from ..services.generator import WorkflowGeneratorService
from ..util.ids import parse_int_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/conversations/{conversation_id}",
    response_model=ApiResponse[ConversationRecord],
    response_model_exclude_none=True,
)
def get_conversation(conversation_id: str, service: WorkflowGeneratorService = Depends(get_workflow_generator)):
    cid = parse_int_id(conversation_id)
    if cid is None:
        raise BadRequest("Invalid conversation ID")

    try:
        conversation = service.get_conversation(cid)
    except Exception as exc:
        logger.exception("Get conversation error")
        raise ServiceError("Failed to fetch conversation") from exc

    if conversation is None:
        raise NotFound("Conversation not found")
    return ApiResponse(data=conversation)
