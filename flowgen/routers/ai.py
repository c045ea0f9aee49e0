from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..deps import get_ia
from ..ia_client import IAClient
from ..models import ApiResponse

router = APIRouter()


@router.get("/ia/metrics", response_model=ApiResponse[Dict[str, Any]])
def ia_metrics(ia: IAClient = Depends(get_ia)):
    """Counters gathered by the metrics observer since start-up."""
    return ApiResponse(data=ia.get_metrics())
