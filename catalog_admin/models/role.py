"""Role model for RBAC."""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, func
from catalog_admin.db.base import Base


class Role(Base):
    """Role with hierarchical level, JSON permissions and allowed dashboard pages."""
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    level = Column(Integer, nullable=False, default=10)
    permissions_json = Column(Text, nullable=True)  # JSON list of permission keys
    allowed_pages_json = Column(Text, nullable=True)  # JSON list of page paths
    is_system = Column(Boolean, default=False, nullable=False)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
