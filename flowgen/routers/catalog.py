import logging
from typing import List, Optional

from fastapi import APIRouter, Depends

from ..data import nodes as catalog
from ..deps import get_workflow_generator
from ..errors import BadRequest, NotFound, ServiceError
from ..models import ApiResponse, NodeDescriptor, TemplateRecord
from ..services.generator import WorkflowGeneratorService
from ..util.ids import parse_int_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/nodes", response_model=ApiResponse[List[NodeDescriptor]], response_model_exclude_none=True)
def list_nodes(category: Optional[str] = None, search: Optional[str] = None):
    # category wins when both are given
    if category:
        items = catalog.get_nodes_by_category(category)
    elif search:
        items = catalog.search_nodes(search)
    else:
        items = catalog.list_nodes()
    return ApiResponse(data=items)


@router.get("/templates", response_model=ApiResponse[List[TemplateRecord]], response_model_exclude_none=True)
def list_templates(
    category: Optional[str] = None,
    service: WorkflowGeneratorService = Depends(get_workflow_generator),
):
    try:
        templates = service.get_templates(category)
    except Exception as exc:
        logger.exception("Get templates error")
        raise ServiceError("Failed to fetch templates") from exc
    return ApiResponse(data=templates)


@router.get("/templates/{template_id}", response_model=ApiResponse[TemplateRecord], response_model_exclude_none=True)
def get_template(template_id: str, service: WorkflowGeneratorService = Depends(get_workflow_generator)):
    tid = parse_int_id(template_id)
    if tid is None:
        raise BadRequest("Invalid template ID")

    template = service.get_template(tid)
    if template is None:
        raise NotFound("Template not found")
    return ApiResponse(data=template)
