from fastapi import APIRouter
from eventdekho.schemas import HealthOut

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthOut)
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        Status marker and which tier answered
    """
    return HealthOut(status="ok", env="backend")
