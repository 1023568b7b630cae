from sqlalchemy import Column, String, Text, DateTime, JSON, Index
from eventdekho.db.session import Base
from eventdekho.db.models.base import ID_LENGTH, TimestampMixin, id_column
from eventdekho.db.models.enums import AdCategory, db_enum

MAX_HEADLINE_LENGTH = 50


class SponsorAd(TimestampMixin, Base):
    __tablename__ = "sponsor_ads"
    id = id_column()
    sponsor_name = Column(String(255), nullable=False)
    website_link = Column(String(1024), nullable=False)
    images = Column(JSON, default=list)
    headline = Column(String(MAX_HEADLINE_LENGTH), nullable=False)
    description = Column(Text, nullable=False)
    target_cities = Column(JSON, default=list)  # empty means all of India
    category_label = Column(db_enum(AdCategory), nullable=False)
    internal_ad_id = Column(String(128), unique=True, nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    created_by = Column(String(ID_LENGTH), nullable=True)

    __table_args__ = (
        Index("idx_sponsor_ad_window", "end_date", "start_date"),
    )
