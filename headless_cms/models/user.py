from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from headless_cms.database import Base


# User model; referenced by content entries through created_by / updated_by
class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, index=True)
    email = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
