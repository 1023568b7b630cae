from typing import List

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventdekho.core.principal import Principal, principal_id
from eventdekho.db.models.comment import MAX_COMMENT_LENGTH, Comment
from eventdekho.db.repositories import (
    create_comment as db_create_comment,
    delete_comment as db_delete_comment,
    get_comment,
    get_event,
    increment_counter,
    list_comments_by_user,
    list_comments_for_event,
    update_comment_text,
)
from eventdekho.schemas import CommentCreate, CommentOut, UserCommentOut

DELETED_EVENT_TITLE = "Deleted Event"


def clean_text(text) -> str:
    text = (text or "").strip()
    if len(text) > MAX_COMMENT_LENGTH:
        raise HTTPException(status_code=400, detail=f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
    return text


class CommentService:
    """Comments on events; keeps ``Event.comments`` in step with the rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_comment(self, principal: Principal, payload: CommentCreate) -> Comment:
        text = clean_text(payload.text)
        if not text or not payload.event_id:
            raise HTTPException(status_code=400, detail="Text and eventId are required")

        ev = await get_event(self.session, payload.event_id)
        if not ev:
            raise HTTPException(status_code=404, detail="Event not found")

        comment = await db_create_comment(self.session, {
            "text": text,
            "user_id": principal_id(principal),
            "user_name": payload.user_name or principal.name,
            "user_avatar": payload.user_avatar or principal.avatar or "",
            "event_id": str(ev.id),
        })
        await increment_counter(self.session, str(ev.id), "comments", 1)
        return comment

    async def list_for_event(self, event_id: str) -> List[Comment]:
        if not event_id:
            raise HTTPException(status_code=400, detail="eventId is required")
        return await list_comments_for_event(self.session, event_id)

    async def list_for_user(self, user_id: str) -> List[UserCommentOut]:
        rows = await list_comments_by_user(self.session, user_id)
        return [
            UserCommentOut(
                **CommentOut.model_validate(comment).model_dump(),
                event_title=title or DELETED_EVENT_TITLE,
            )
            for comment, title in rows
        ]

    async def _get(self, comment_id: str) -> Comment:
        comment = await get_comment(self.session, comment_id)
        if not comment:
            raise HTTPException(status_code=404, detail="Comment not found")
        return comment

    async def update_comment(self, principal: Principal, comment_id: str, text) -> Comment:
        text = clean_text(text)
        if not text:
            raise HTTPException(status_code=400, detail="Comment text is required")

        comment = await self._get(comment_id)
        if comment.user_id != principal_id(principal):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to edit this comment")
        return await update_comment_text(self.session, comment, text)

    async def delete_comment(self, principal: Principal, comment_id: str) -> None:
        comment = await self._get(comment_id)
        if comment.user_id != principal_id(principal) and not principal.is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to delete this comment")

        event_id = comment.event_id
        await db_delete_comment(self.session, comment)
        await increment_counter(self.session, event_id, "comments", -1)
