from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.auth import get_current_user
from eventdekho.core.principal import Principal
from eventdekho.db.session import get_session
from eventdekho.schemas import CommentCreate, CommentOut, CommentUpdate, MessageResponse, UserCommentOut
from eventdekho.services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["comments"])


def get_comment_service(session: AsyncSession = Depends(get_session)) -> CommentService:
    return CommentService(session)


@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    principal: Principal = Depends(get_current_user),
    comment_service: CommentService = Depends(get_comment_service)
):
    return await comment_service.create_comment(principal, payload)


@router.get("", response_model=List[CommentOut])
async def list_comments(
    event_id: Optional[str] = Query(None, alias="eventId"),
    comment_service: CommentService = Depends(get_comment_service)
):
    """Comments on one event, newest first."""
    return await comment_service.list_for_event(event_id)


@router.get("/user/{user_id}", response_model=List[UserCommentOut])
async def list_user_comments(
    user_id: str,
    comment_service: CommentService = Depends(get_comment_service)
):
    """A user's comments with the title of the event each was left on."""
    return await comment_service.list_for_user(user_id)


@router.put("/{comment_id}", response_model=CommentOut)
async def update_comment(
    comment_id: str,
    payload: CommentUpdate,
    principal: Principal = Depends(get_current_user),
    comment_service: CommentService = Depends(get_comment_service)
):
    return await comment_service.update_comment(principal, comment_id, payload.text)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: str,
    principal: Principal = Depends(get_current_user),
    comment_service: CommentService = Depends(get_comment_service)
):
    await comment_service.delete_comment(principal, comment_id)
    return MessageResponse(message="Comment deleted successfully")
