from sqlalchemy import Column, Integer, String, Text, Boolean, JSON, Index
from eventdekho.db.session import Base
from eventdekho.db.models.base import TimestampMixin, id_column
from eventdekho.db.models.enums import (
    EntryType,
    EventCategory,
    EventMode,
    ExperienceLevel,
    JobType,
    MediaType,
    SubjectExpertise,
    db_enum,
)

FREE_FEE = "Free"


class Event(TimestampMixin, Base):
    __tablename__ = "events"
    id = id_column()
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(db_enum(EventCategory), nullable=False)

    # A user id, the system admin sentinel, or NULL for platform-authored posts.
    # Deliberately not a foreign key: the system admin has no users row.
    organizer_id = Column(String(64), nullable=True)
    organizer_name = Column(String(255), nullable=False)
    organizer_avatar = Column(String(1024), default="")
    organizer_email = Column(String(255), default="")

    images = Column(JSON, default=list)
    video = Column(String(1024), default="")
    image = Column(String(1024), default="")
    media_type = Column(db_enum(MediaType), default=MediaType.image, nullable=False)

    location = Column(String(255), nullable=False)
    date = Column(String(32), nullable=False)  # ISO date string, compared lexically
    start_time = Column(String(16), nullable=True)
    end_time = Column(String(16), nullable=True)
    venue_link = Column(String(1024), nullable=True)

    # Denormalized engagement counters, only ever changed by atomic increments
    likes = Column(Integer, default=0, nullable=False)
    comments = Column(Integer, default=0, nullable=False)
    shares = Column(Integer, default=0, nullable=False)

    approved = Column(Boolean, default=False, nullable=False)
    is_sponsored = Column(Boolean, default=False, nullable=False)
    teaser = Column(String(150), nullable=True)
    sub_category_tags = Column(JSON, default=list)
    mode = Column(db_enum(EventMode), default=EventMode.offline, nullable=False)
    eligibility = Column(JSON, default=list)
    registration_fee = Column(String(64), default=FREE_FEE, nullable=False)
    prize_pool = Column(String(255), nullable=True)
    entry_type = Column(db_enum(EntryType), default=EntryType.individual, nullable=False)

    # Professional listings (teacher hiring etc.)
    subject_expertise = Column(db_enum(SubjectExpertise), default=SubjectExpertise.na, nullable=False)
    experience_required = Column(db_enum(ExperienceLevel), default=ExperienceLevel.na, nullable=False)
    job_type = Column(db_enum(JobType), default=JobType.na, nullable=False)

    __table_args__ = (
        Index("idx_event_organizer", "organizer_id"),
        Index("idx_event_created_at", "created_at"),
        Index("idx_event_category", "category"),
        Index("idx_event_date", "date"),
        Index("idx_event_approved", "approved"),
    )
