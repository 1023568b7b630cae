import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String

ID_LENGTH = 36


def new_id() -> str:
    return str(uuid.uuid4())


def is_valid_id(value) -> bool:
    """True when ``value`` has the shape of a stored record id."""
    try:
        return str(uuid.UUID(str(value))) == str(value)
    except (ValueError, TypeError, AttributeError):
        return False


def id_column():
    return Column(String(ID_LENGTH), primary_key=True, default=new_id)


class TimestampMixin:
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
