from datetime import datetime, timedelta
from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from eventdekho.db.session import Base
from eventdekho.db.models.base import ID_LENGTH, id_column
from eventdekho.core.config import settings


def default_expiry() -> datetime:
    return datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"
    id = id_column()
    user_id = Column(String(ID_LENGTH), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token = Column(String(128), unique=True, nullable=False)
    expires_at = Column(DateTime, default=default_expiry, nullable=False)

    __table_args__ = (
        Index("idx_reset_token_expiry", "expires_at"),
    )

    @property
    def is_expired(self) -> bool:
        return self.expires_at < datetime.utcnow()
