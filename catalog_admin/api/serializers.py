"""ORM row -> response schema conversions shared by the routers."""

from catalog_admin.core.authorization import RoleRecord
from catalog_admin.db.json_columns import load_list
from catalog_admin.models.invitation import Invitation
from catalog_admin.models.user import User
from catalog_admin.schemas.schemas import InvitationOut, RoleOut, UserOut


def role_out(record: RoleRecord) -> RoleOut:
    return RoleOut(**record.to_dict())


def user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
        role_id=user.role_id,
        role=user.role.name if user.role else None,
        role_level=user.role.level if user.role else 0,
        company_ids=load_list(user.company_ids_json),
        verification_status=user.verification_status.value,
        is_active=user.is_active,
        last_login_at=user.last_login_at,
        created_at=user.created_at,
    )


def invitation_out(invitation: Invitation) -> InvitationOut:
    return InvitationOut(
        id=invitation.id,
        email=invitation.email,
        role_id=invitation.role_id,
        role=invitation.role.name if invitation.role else None,
        company_ids=load_list(invitation.company_ids_json),
        inviter_id=invitation.inviter_id,
        status=invitation.status.value,
        created_at=invitation.created_at,
    )
