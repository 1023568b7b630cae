from sqlalchemy import Column, String, ForeignKey, Index
from eventdekho.db.session import Base
from eventdekho.db.models.base import ID_LENGTH, TimestampMixin, id_column

MAX_COMMENT_LENGTH = 500


class Comment(TimestampMixin, Base):
    __tablename__ = "comments"
    id = id_column()
    text = Column(String(MAX_COMMENT_LENGTH), nullable=False)
    # Principal id: a user id or the system admin sentinel
    user_id = Column(String(64), nullable=False)
    user_name = Column(String(255), nullable=False)
    user_avatar = Column(String(1024), default="")
    event_id = Column(String(ID_LENGTH), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        Index("idx_comment_event", "event_id", "created_at"),
        Index("idx_comment_user", "user_id"),
    )
