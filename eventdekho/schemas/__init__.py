from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime, timezone

from eventdekho.db.models.enums import (
    AdCategory,
    AnnouncementCategory,
    AnnouncementPriority,
    CommunicationChannel,
    EntryType,
    EventCategory,
    EventMode,
    ExperienceLevel,
    Grade,
    JobType,
    MediaType,
    OrganizationType,
    ParticipantRole,
    RoleEnum,
    SubjectExpertise,
    TShirtSize,
    UserSubtype,
)


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; reads ORM rows directly."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CamelModel):
    message: str


# ---------- Users & auth ----------

class SocialLinks(CamelModel):
    instagram: str = ""
    facebook: str = ""


class UserCreate(CamelModel):
    # Presence is checked by the auth service so it can answer with one message
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[RoleEnum] = None
    type: Optional[OrganizationType] = None
    designation: Optional[str] = None
    school_name: Optional[str] = None
    school_address: Optional[str] = None
    verification_file: Optional[str] = None
    principal_name: Optional[str] = None
    social_links: Optional[SocialLinks] = None
    preferred_communication: Optional[CommunicationChannel] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    user_subtype: Optional[UserSubtype] = None
    grade: Optional[Grade] = None
    interests: Optional[List[EventCategory]] = None
    parental_consent: Optional[bool] = None
    child_phone: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(CamelModel):
    email: Optional[str] = None


class ResetPasswordRequest(CamelModel):
    token: Optional[str] = None
    password: Optional[str] = None


class UserOut(CamelModel):
    id: str
    name: str
    email: str
    role: RoleEnum
    verified: bool
    type: Optional[OrganizationType] = None
    avatar: Optional[str] = None


class ProfileOut(UserOut):
    bio: Optional[str] = ""
    location: Optional[str] = ""
    website: Optional[str] = ""
    phone: Optional[str] = ""


class UserDetailOut(ProfileOut):
    """Everything an admin reviews before verifying an organizer."""
    designation: Optional[str] = ""
    school_name: Optional[str] = ""
    school_address: Optional[str] = ""
    verification_file: Optional[str] = ""
    principal_name: Optional[str] = ""
    social_links: Optional[SocialLinks] = None
    preferred_communication: Optional[CommunicationChannel] = None
    user_subtype: Optional[UserSubtype] = None
    grade: Optional[Grade] = None
    interests: List[EventCategory] = []
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    message: Optional[str] = None
    token: str
    user: UserOut


class ProfileResponse(CamelModel):
    message: Optional[str] = None
    user: ProfileOut


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None


# ---------- Events ----------

class EventBase(CamelModel):
    organizer_avatar: Optional[str] = ""
    organizer_email: Optional[str] = ""
    images: List[str] = []
    video: Optional[str] = ""
    media_type: Optional[MediaType] = None
    is_sponsored: bool = False
    teaser: Optional[str] = Field(None, max_length=150)
    sub_category_tags: List[str] = []
    mode: EventMode = EventMode.offline
    eligibility: List[Grade] = []
    registration_fee: str = "Free"
    prize_pool: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    venue_link: Optional[str] = None
    entry_type: EntryType = EntryType.individual
    subject_expertise: SubjectExpertise = SubjectExpertise.na
    experience_required: ExperienceLevel = ExperienceLevel.na
    job_type: JobType = JobType.na

    @field_validator("images", mode="before")
    @classmethod
    def single_image_as_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value else []
        return value


class EventCreate(EventBase):
    # Required, but checked by the event service after the verification gate
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[EventCategory] = None
    organizer_id: Optional[str] = None
    organizer_name: Optional[str] = None
    location: Optional[str] = None
    date: Optional[str] = None
    approved: Optional[bool] = None

    def missing_required(self) -> bool:
        required = (self.title, self.description, self.category, self.organizer_id,
                    self.organizer_name, self.location, self.date)
        return any(not value for value in required)


class EventUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[EventCategory] = None
    organizer_name: Optional[str] = None
    organizer_avatar: Optional[str] = None
    organizer_email: Optional[str] = None
    images: Optional[List[str]] = None
    video: Optional[str] = None
    media_type: Optional[MediaType] = None
    location: Optional[str] = None
    date: Optional[str] = None
    approved: Optional[bool] = None
    is_sponsored: Optional[bool] = None
    teaser: Optional[str] = Field(None, max_length=150)
    sub_category_tags: Optional[List[str]] = None
    mode: Optional[EventMode] = None
    eligibility: Optional[List[Grade]] = None
    registration_fee: Optional[str] = None
    prize_pool: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    venue_link: Optional[str] = None
    entry_type: Optional[EntryType] = None
    subject_expertise: Optional[SubjectExpertise] = None
    experience_required: Optional[ExperienceLevel] = None
    job_type: Optional[JobType] = None


class EventOut(EventBase):
    id: str
    title: str
    description: str
    category: EventCategory
    organizer_id: Optional[str] = None
    organizer_name: str
    image: Optional[str] = ""
    location: str
    date: str
    likes: int = 0
    comments: int = 0
    shares: int = 0
    approved: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LikeRequest(CamelModel):
    user_id: Optional[str] = None


class LikeToggleOut(CamelModel):
    liked: bool
    likes: int


class LikeStatusOut(CamelModel):
    liked: bool


class ShareOut(CamelModel):
    shares: int


# ---------- Comments ----------

class CommentCreate(CamelModel):
    text: Optional[str] = None
    event_id: Optional[str] = None
    user_name: Optional[str] = None
    user_avatar: Optional[str] = None


class CommentUpdate(CamelModel):
    text: Optional[str] = None


class CommentOut(CamelModel):
    id: str
    text: str
    user_id: str
    user_name: str
    user_avatar: Optional[str] = ""
    event_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCommentOut(CommentOut):
    event_title: str


# ---------- Participation ----------

class ParticipantIn(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    grade: Optional[str] = None
    school_name: Optional[str] = None
    city: Optional[str] = None
    role: ParticipantRole = ParticipantRole.participant
    is_team: bool = False
    team_name: Optional[str] = None
    teammate_emails: List[str] = []
    t_shirt_size: TShirtSize = TShirtSize.na
    dietary_restrictions: Optional[str] = None
    parental_consent: bool = False
    emergency_contact: Optional[str] = None
    school_authorization: bool = False


class ParticipationCreate(CamelModel):
    event_id: Optional[str] = None
    participant: Optional[ParticipantIn] = None


class ParticipationOut(CamelModel):
    id: str
    event_id: str
    user_id: str
    name: str
    email: str
    phone: str
    grade: Optional[str] = None
    school_name: Optional[str] = None
    city: Optional[str] = None
    role: ParticipantRole
    is_team: bool
    team_name: Optional[str] = None
    teammate_emails: List[str] = []
    t_shirt_size: TShirtSize
    dietary_restrictions: Optional[str] = None
    parental_consent: bool
    emergency_contact: str
    school_authorization: bool
    created_at: Optional[datetime] = None


# ---------- Admin ----------

class VerifyRequest(CamelModel):
    verified: bool


class VerifyResponse(CamelModel):
    message: str
    user: UserOut


class AdminStats(CamelModel):
    total_users: int
    verified_orgs: int
    events_posted: int
    registrations_growth: int
    event_creation_growth: int
    engagement_growth: int


class EmailDispatchResponse(CamelModel):
    message: str
    id: Optional[str] = None


# ---------- Sponsor ads ----------

class SponsorAdCreate(CamelModel):
    sponsor_name: str
    website_link: str
    images: List[str] = []
    headline: str = Field(..., max_length=50)
    description: str
    target_cities: List[str] = []
    category_label: AdCategory
    internal_ad_id: str
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def store_as_naive_utc(cls, value: datetime) -> datetime:
        return _naive_utc(value)


class SponsorAdOut(CamelModel):
    id: str
    sponsor_name: str
    website_link: str
    images: List[str] = []
    headline: str
    description: str
    target_cities: List[str] = []
    category_label: AdCategory
    internal_ad_id: str
    start_date: datetime
    end_date: datetime
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


# ---------- Announcements ----------

class AnnouncementFields(CamelModel):
    link: Optional[str] = None
    category: Optional[AnnouncementCategory] = None
    priority: Optional[AnnouncementPriority] = None
    tags: Optional[List[str]] = None
    expires_at: Optional[datetime] = None

    @field_validator("link")
    @classmethod
    def link_is_http_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.lower().startswith(("http://", "https://")):
            raise ValueError("Link must be a valid URL starting with http:// or https://")
        return value

    @field_validator("tags")
    @classmethod
    def tags_are_short(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value and any(len(tag) > 20 for tag in value):
            raise ValueError("Tags must be at most 20 characters")
        return value

    @field_validator("expires_at")
    @classmethod
    def store_as_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive_utc(value)


class AnnouncementCreate(AnnouncementFields):
    title: Optional[str] = Field(None, max_length=100)
    content: Optional[str] = Field(None, max_length=500)


class AnnouncementUpdate(AnnouncementFields):
    title: Optional[str] = Field(None, max_length=100)
    content: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class AnnouncementOut(CamelModel):
    id: str
    title: str
    content: str
    link: Optional[str] = None
    category: AnnouncementCategory
    priority: AnnouncementPriority
    is_active: bool
    author_id: str
    author_name: str
    author_email: str
    views: int
    clicks: int
    tags: List[str] = []
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------- Upload ----------

class UploadOut(CamelModel):
    url: str
    public_id: str


class HealthOut(BaseModel):
    status: str
    env: str
