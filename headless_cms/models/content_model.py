from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from headless_cms.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CmsContentModel(Base):
    """A user-defined content model; its field list is stored as JSON."""

    __tablename__ = "cms_content_models"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    model_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    fields = Column(JSON, nullable=False, default=list)
    deleted = Column(Boolean, nullable=False, default=False)
    created_on = Column(DateTime, default=_utcnow, nullable=False)


class ContentEntry(Base):
    """A record of a content model. Field values live in the ``values`` JSON column."""

    __tablename__ = "cms_content_entries"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    model_id = Column(String, nullable=False)
    values = Column(JSON, nullable=False, default=dict)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_on = Column(DateTime, default=_utcnow, nullable=False)
    updated_on = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)
    saved_on = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (Index("idx_content_entry_model", "model_id"),)
