"""Database models package."""
from eventdekho.db.models.enums import RoleEnum, EventCategory
from eventdekho.db.models.user import User
from eventdekho.db.models.event import Event
from eventdekho.db.models.comment import Comment
from eventdekho.db.models.like import Like
from eventdekho.db.models.participation import Participation
from eventdekho.db.models.sponsor_ad import SponsorAd
from eventdekho.db.models.announcement import Announcement
from eventdekho.db.models.password_reset_token import PasswordResetToken

__all__ = [
    "User",
    "RoleEnum",
    "Event",
    "EventCategory",
    "Comment",
    "Like",
    "Participation",
    "SponsorAd",
    "Announcement",
    "PasswordResetToken",
]
