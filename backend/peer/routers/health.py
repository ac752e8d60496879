from fastapi import APIRouter, Depends, Response

from peer.config import Settings
from peer.dependencies import get_app_settings
from peer.schemas import MessageResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=MessageResponse)
def health_check(response: Response, settings: Settings = Depends(get_app_settings)):
    """Liveness probe for load balancers and devices."""
    response.headers["Connection"] = "close"
    return MessageResponse(message=settings.health_message)
