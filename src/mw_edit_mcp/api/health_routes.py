from typing import Annotated

from fastapi import APIRouter, Depends

from .dependencies import get_registry
from .models import HealthResponse, WikiSummary
from ..wiki.registry import WikiRegistry

router = APIRouter(tags=["health"])

@router.get("/health", response_model=HealthResponse)
def health(registry: Annotated[WikiRegistry, Depends(get_registry)]) -> HealthResponse:
    profile = registry.get_current_profile()
    return HealthResponse(
        wiki=WikiSummary(sitename=profile.site_name, server=profile.server)
    )
