"""Company (brand) model."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from catalog_admin.db.base import Base


class Company(Base):
    """Company or brand that owns catalog products and bounds user scope."""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
