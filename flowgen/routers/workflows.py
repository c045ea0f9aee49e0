import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError

from ..deps import get_workflow_generator
from ..errors import BadRequest, FlowgenError, NotFound, ServiceError
from ..models import (
    ApiResponse,
    ComplexityAnalysis,
    GenerateWorkflowRequest,
    GenerationResponse,
    N8nWorkflow,
    ValidationReport,
    WorkflowBody,
    WorkflowRecord,
)
from ..services.generator import WorkflowGeneratorService
from ..util.ids import parse_int_id
from ..util.pagination import clamp_limit

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate-workflow", response_model=ApiResponse[GenerationResponse], response_model_exclude_none=True)
def generate_workflow(
    body: GenerateWorkflowRequest,
    service: WorkflowGeneratorService = Depends(get_workflow_generator),
):
    try:
        result = service.generate(body.prompt, body.conversation_id)
    except FlowgenError:
        raise
    except Exception as exc:
        logger.exception("Generate workflow error")
        raise ServiceError("Failed to generate workflow") from exc
    return ApiResponse(data=result)


# Declared before /workflows/{workflow_id} so "recent" is not read as an id.
@router.get("/workflows/recent", response_model=ApiResponse[List[WorkflowRecord]], response_model_exclude_none=True)
def recent_workflows(
    limit: Optional[int] = Query(default=None),
    service: WorkflowGeneratorService = Depends(get_workflow_generator),
):
    try:
        workflows = service.get_recent_workflows(clamp_limit(limit))
    except Exception as exc:
        logger.exception("Get recent workflows error")
        raise ServiceError("Failed to fetch recent workflows") from exc
    return ApiResponse(data=workflows)


@router.get("/workflows/{workflow_id}", response_model=ApiResponse[WorkflowRecord], response_model_exclude_none=True)
def get_workflow(workflow_id: str, service: WorkflowGeneratorService = Depends(get_workflow_generator)):
    wid = parse_int_id(workflow_id)
    if wid is None:
        raise BadRequest("Invalid workflow ID")

    try:
        workflow = service.get_workflow(wid)
    except Exception as exc:
        logger.exception("Get workflow error")
        raise ServiceError("Failed to fetch workflow") from exc

    if workflow is None:
        raise NotFound("Workflow not found")
    return ApiResponse(data=workflow)


@router.post("/validate-workflow", response_model=ApiResponse[ValidationReport])
def validate_workflow(body: WorkflowBody, service: WorkflowGeneratorService = Depends(get_workflow_generator)):
    if not body.workflow:
        raise BadRequest("Workflow data is required")

    try:
        report = service.validate_workflow(body.workflow)
    except Exception as exc:
        logger.exception("Validate workflow error")
        raise ServiceError("Failed to validate workflow") from exc
    return ApiResponse(data=report)


@router.post("/analyze-workflow", response_model=ApiResponse[ComplexityAnalysis])
def analyze_workflow(body: WorkflowBody, service: WorkflowGeneratorService = Depends(get_workflow_generator)):
    if not body.workflow:
        raise BadRequest("Workflow data is required")

    try:
        workflow = N8nWorkflow.model_validate(body.workflow)
    except ValidationError as exc:
        raise BadRequest("Invalid workflow structure") from exc

    return ApiResponse(data=service.analyze_workflow(workflow))
