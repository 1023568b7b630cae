from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.auth import admin_required
from eventdekho.core.principal import Principal
from eventdekho.db.session import get_session
from eventdekho.schemas import (
    AdminStats,
    EmailDispatchResponse,
    MessageResponse,
    UserDetailOut,
    UserOut,
    VerifyRequest,
    VerifyResponse,
)
from eventdekho.services.admin_service import AdminService

# Every route in here is admin-only
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_required)])


def get_admin_service(session: AsyncSession = Depends(get_session)) -> AdminService:
    return AdminService(session)


@router.get("/users", response_model=List[UserDetailOut])
async def list_users(
    status: Optional[str] = Query(None, description="pending or verified organizers; omit for all users"),
    admin_service: AdminService = Depends(get_admin_service)
):
    return await admin_service.list_users(status)


@router.get("/stats", response_model=AdminStats)
async def get_stats(admin_service: AdminService = Depends(get_admin_service)):
    """
    Dashboard counters.

    Growth figures are whole percentages comparing the last 30 days with
    the 30 days before.
    """
    return await admin_service.stats()


@router.put("/users/{user_id}/verify", response_model=VerifyResponse)
async def verify_user(
    user_id: str,
    payload: VerifyRequest,
    background_tasks: BackgroundTasks,
    admin_service: AdminService = Depends(get_admin_service)
):
    """
    Verify or reject an account.

    Verifying emails the user after the response is sent; a failed email is
    logged and does not change the outcome.
    """
    user = await admin_service.set_verified(user_id, payload.verified, background_tasks)
    return VerifyResponse(
        message=f"User {'verified' if payload.verified else 'rejected'} successfully",
        user=UserOut.model_validate(user),
    )


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    admin: Principal = Depends(admin_required),
    admin_service: AdminService = Depends(get_admin_service)
):
    await admin_service.delete_user(admin, user_id)
    return MessageResponse(message="User and associated events deleted successfully")


@router.post("/test-email", response_model=EmailDispatchResponse)
async def send_test_email(admin_service: AdminService = Depends(get_admin_service)):
    message_id = await admin_service.send_test_email()
    return EmailDispatchResponse(message="Email sent", id=message_id)
