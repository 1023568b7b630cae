from sqlalchemy import Column, String, ForeignKey, Index, UniqueConstraint
from eventdekho.db.session import Base
from eventdekho.db.models.base import ID_LENGTH, TimestampMixin, id_column


class Like(TimestampMixin, Base):
    __tablename__ = "likes"
    id = id_column()
    user_id = Column(String(64), nullable=False)
    event_id = Column(String(ID_LENGTH), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)

    # One like per (user, event); duplicate inserts fail here
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_like_user_event"),
        Index("idx_like_event", "event_id"),
    )
