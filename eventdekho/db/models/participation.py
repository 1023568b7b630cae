from sqlalchemy import Column, String, Boolean, Text, JSON, ForeignKey, Index
from eventdekho.db.session import Base
from eventdekho.db.models.base import ID_LENGTH, TimestampMixin, id_column
from eventdekho.db.models.enums import ParticipantRole, TShirtSize, db_enum


class Participation(TimestampMixin, Base):
    """Registration snapshot; copies the registrant's profile at submit time."""
    __tablename__ = "participations"
    id = id_column()
    event_id = Column(String(ID_LENGTH), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), nullable=False)

    # Profile snapshot
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=False)
    grade = Column(String(8), nullable=True)
    school_name = Column(String(255), nullable=True)
    city = Column(String(255), nullable=True)

    # Participation details
    role = Column(db_enum(ParticipantRole), default=ParticipantRole.participant, nullable=False)
    is_team = Column(Boolean, default=False, nullable=False)
    team_name = Column(String(255), nullable=True)
    teammate_emails = Column(JSON, default=list)
    t_shirt_size = Column(db_enum(TShirtSize), default=TShirtSize.na, nullable=False)
    dietary_restrictions = Column(Text, nullable=True)

    # Verification & consent
    parental_consent = Column(Boolean, nullable=False)
    emergency_contact = Column(String(255), nullable=False)
    school_authorization = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("idx_participation_event", "event_id"),
        Index("idx_participation_user", "user_id"),
    )
