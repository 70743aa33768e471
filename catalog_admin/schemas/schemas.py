"""Pydantic schemas for API request/response serialization."""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


# ---- Auth ----
class SessionRequest(BaseModel):
    id_token: str = Field(..., min_length=10)

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Optional[Dict[str, Any]] = None


# ---- Pages / Permissions ----
class PageOut(BaseModel):
    path: str
    name: str
    description: str
    category: str

    class Config:
        from_attributes = True

class PermissionOut(BaseModel):
    key: str
    name: str
    description: str
    category: str

    class Config:
        from_attributes = True


# ---- Role ----
class RoleOut(BaseModel):
    id: int
    name: str
    level: int
    permissions: List[str] = []
    allowed_pages: List[str] = []
    is_system: bool = False
    description: Optional[str] = None

class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    level: int = Field(..., ge=1)
    permissions: List[str] = []
    allowed_pages: List[str] = []
    description: Optional[str] = None

class RolePagesUpdate(BaseModel):
    allowed_pages: List[str]


# ---- User ----
class UserOut(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role_id: Optional[int] = None
    role: Optional[str] = None
    role_level: int = 0
    company_ids: List[int] = []
    verification_status: str
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

class CurrentUserOut(BaseModel):
    user: UserOut
    permissions: List[str] = []
    pages: List[PageOut] = []
    assignable_roles: List[RoleOut] = []

class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class RoleAssignRequest(BaseModel):
    role_id: int
    company_ids: Optional[List[int]] = None

class StatusUpdateRequest(BaseModel):
    is_active: bool


# ---- Invitation ----
class InviteRequest(BaseModel):
    email: str = Field(..., min_length=4)
    role_id: int
    company_ids: List[int] = []

class InvitationOut(BaseModel):
    id: int
    email: str
    role_id: int
    role: Optional[str] = None
    company_ids: List[int] = []
    inviter_id: Optional[int] = None
    status: str
    created_at: Optional[datetime] = None


# ---- Catalog ----
class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1)

class CompanyOut(BaseModel):
    id: int
    name: str
    is_active: bool

    class Config:
        from_attributes = True

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    company_id: Optional[int] = None
    is_active: bool = True

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    company_id: Optional[int] = None
    is_active: Optional[bool] = None

class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    company_id: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Generic ----
class MessageResponse(BaseModel):
    message: str
    detail: Optional[Any] = None
