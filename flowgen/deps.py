"""
FastAPI dependencies. Tests replace them through `app.dependency_overrides`.
"""
from functools import lru_cache

from fastapi import Depends

from .config import settings
from .ia_client import IAClient, get_ia_client
from .repository import WorkflowRepository, create_repository
from .services.generator import WorkflowGeneratorService


@lru_cache
def get_repository() -> WorkflowRepository:
    return create_repository(settings.storage_backend, settings.database_url)


def get_ia() -> IAClient:
    return get_ia_client()


def get_workflow_generator(
    repository: WorkflowRepository = Depends(get_repository),
    ia: IAClient = Depends(get_ia),
) -> WorkflowGeneratorService:
    return WorkflowGeneratorService(repository, ia)
