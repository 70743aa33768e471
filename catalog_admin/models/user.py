"""User model."""

import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from catalog_admin.db.base import Base


class VerificationStatus(str, enum.Enum):
    pending = "pending"
    verified = "verified"


class User(Base):
    """Dashboard account. ``role_id`` may be null, which means no authority."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String(255), unique=True, nullable=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    company_ids_json = Column(Text, nullable=True)  # JSON list of company ids, empty = unrestricted
    verification_status = Column(
        Enum(VerificationStatus), default=VerificationStatus.pending, nullable=False
    )
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    role = relationship("Role", lazy="joined")
