from sqlalchemy import Column, String, Boolean, Text, JSON
from eventdekho.db.session import Base
from eventdekho.db.models.base import TimestampMixin, id_column
from eventdekho.db.models.enums import (
    CommunicationChannel,
    Grade,
    OrganizationType,
    RoleEnum,
    UserSubtype,
    db_enum,
)


class User(TimestampMixin, Base):
    __tablename__ = "users"
    id = id_column()
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(db_enum(RoleEnum), default=RoleEnum.user, nullable=False)
    verified = Column(Boolean, default=False, nullable=False)

    # Organizer profile
    type = Column(db_enum(OrganizationType), nullable=True)
    designation = Column(String(255), default="")
    school_name = Column(String(255), default="")
    school_address = Column(Text, default="")
    verification_file = Column(String(1024), default="")
    principal_name = Column(String(255), default="")
    social_links = Column(JSON, default=lambda: {"instagram": "", "facebook": ""})
    preferred_communication = Column(db_enum(CommunicationChannel), default=CommunicationChannel.email)

    # Student / parent profile
    user_subtype = Column(db_enum(UserSubtype), nullable=True)
    grade = Column(db_enum(Grade), nullable=True)
    interests = Column(JSON, default=list)
    parental_consent = Column(Boolean, default=False)
    child_phone = Column(String(32), default="")

    # Public profile
    avatar = Column(String(1024), nullable=True)
    bio = Column(Text, default="")
    location = Column(String(255), default="")
    website = Column(String(1024), default="")
    phone = Column(String(32), default="")

    is_virtual = False

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.admin
