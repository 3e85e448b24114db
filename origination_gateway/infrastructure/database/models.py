"""SQLAlchemy ORM models for application records"""

from sqlalchemy import Column, DateTime, Integer, JSON, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class CardApplicationRecord(Base):
    """One row per application; stage artifacts live in the JSON payload"""

    __tablename__ = "card_application"

    id = Column(Text, primary_key=True)
    status = Column(Text, nullable=False, index=True)
    version = Column(Integer, nullable=False, default=0)
    # Contains card number, CVV and PIN once activated; encrypt at rest in production
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
