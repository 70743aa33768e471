"""Pending invitation model."""

import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import relationship
from catalog_admin.db.base import Base


class InvitationStatus(str, enum.Enum):
    pending = "pending"


class Invitation(Base):
    """Role pre-assigned to an email that has not signed in yet.

    The row is deleted when the invitee first signs in; the unique email
    guarantees at most one pending invitation per address.
    """
    __tablename__ = "invitations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    company_ids_json = Column(Text, nullable=True)
    inviter_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(Enum(InvitationStatus), default=InvitationStatus.pending, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    role = relationship("Role", lazy="joined")
