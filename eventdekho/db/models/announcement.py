from sqlalchemy import Column, String, Boolean, Integer, DateTime, JSON, Index
from eventdekho.db.session import Base
from eventdekho.db.models.base import TimestampMixin, id_column
from eventdekho.db.models.enums import AnnouncementCategory, AnnouncementPriority, db_enum


class Announcement(TimestampMixin, Base):
    __tablename__ = "announcements"
    id = id_column()
    title = Column(String(100), nullable=False)
    content = Column(String(500), nullable=False)
    link = Column(String(1024), nullable=True)
    category = Column(db_enum(AnnouncementCategory), default=AnnouncementCategory.general, nullable=False)
    priority = Column(db_enum(AnnouncementPriority), default=AnnouncementPriority.medium, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    author_id = Column(String(64), nullable=False)
    author_name = Column(String(255), nullable=False)
    author_email = Column(String(255), nullable=False)
    views = Column(Integer, default=0, nullable=False)
    clicks = Column(Integer, default=0, nullable=False)
    tags = Column(JSON, default=list)
    expires_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_announcement_active", "is_active", "created_at"),
        Index("idx_announcement_category", "category", "priority"),
    )
