"""User service — sign-in, invitations and role administration."""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_admin.core.authorization import can_assign, can_manage, is_in_scope
from catalog_admin.core.exceptions import (
    AuthenticationError, ForbiddenError, OutOfScopeError,
    ResourceConflictError, ResourceNotFoundError,
)
from catalog_admin.core.security import Actor
from catalog_admin.db.json_columns import dump_list, load_list
from catalog_admin.models.invitation import Invitation
from catalog_admin.models.user import User, VerificationStatus
from catalog_admin.services.role_service import role_service

logger = logging.getLogger("catalog_admin.users")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Handles sign-in, invitations and user management."""

    @staticmethod
    def sign_in(
        db: Session,
        email: str,
        external_id: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> User:
        """Record a successful external authentication.

        A first sign-in consumes the pending invitation for the email, if any,
        and creates a verified user carrying the invited role and companies.
        Without an invitation the new user has no role.

        Raises:
            AuthenticationError: If the account is deactivated.
        """
        email = normalize_email(email)
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = UserService._create_on_first_sign_in(
                db, email,
                external_id=external_id,
                first_name=first_name,
                last_name=last_name,
                profile_image_url=profile_image_url,
            )

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        if user.verification_status != VerificationStatus.verified:
            user.verification_status = VerificationStatus.verified
        if external_id and not user.external_id:
            user.external_id = external_id
        if first_name and not user.first_name:
            user.first_name = first_name
        if last_name and not user.last_name:
            user.last_name = last_name
        if profile_image_url:
            user.profile_image_url = profile_image_url
        user.last_login_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def _create_on_first_sign_in(db: Session, email: str, **profile) -> User:
        role_id = None
        company_ids_json = None

        invitation = db.query(Invitation).filter(Invitation.email == email).first()
        if invitation is not None:
            # Conditional delete: only the sign-in that removes the row gets its role.
            claimed = (
                db.query(Invitation)
                .filter(Invitation.id == invitation.id)
                .delete(synchronize_session=False)
            )
            if claimed:
                role_id = invitation.role_id
                company_ids_json = invitation.company_ids_json
            else:
                existing = db.query(User).filter(User.email == email).first()
                if existing is not None:
                    return existing

        user = User(
            email=email,
            role_id=role_id,
            company_ids_json=company_ids_json,
            verification_status=VerificationStatus.verified,
            is_active=True,
            **profile,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Concurrent first sign-in for the same email already created the user
            db.rollback()
            user = db.query(User).filter(User.email == email).first()
            if user is None:
                raise
            return user

        db.refresh(user)
        if role_id is not None:
            logger.info("Promoted invitation for %s to user %s (role %s)", email, user.id, role_id)
        else:
            logger.info("Created user %s for %s without a role", user.id, email)
        return user

    @staticmethod
    def _check_company_grant(actor: Actor, company_ids: Iterable[int]) -> None:
        """A scoped actor may only grant a non-empty subset of its own companies."""
        company_ids = list(company_ids)
        if not actor.company_ids:
            return
        if not company_ids:
            raise OutOfScopeError("You can only grant access to your assigned companies")
        outside = [c for c in company_ids if not is_in_scope(actor.company_ids, c)]
        if outside:
            raise OutOfScopeError(
                f"Companies outside your scope: {', '.join(str(c) for c in sorted(outside))}"
            )

    @staticmethod
    def _require_role(actor: Actor) -> None:
        if actor.role is None:
            raise ForbiddenError("Forbidden: No role assigned")

    @staticmethod
    def invite_user(
        db: Session,
        actor: Actor,
        email: str,
        role_id: int,
        company_ids: Optional[Iterable[int]] = None,
    ) -> Invitation:
        """Pre-assign a role to an email address that has not signed in yet."""
        UserService._require_role(actor)
        email = normalize_email(email)
        company_ids = list(company_ids or [])

        role = role_service.get_role(db, role_id)
        records = role_service.list_records(db)
        if not can_assign(actor.role, role_service.to_record(role), records):
            raise ForbiddenError("Forbidden: Cannot assign this role")
        UserService._check_company_grant(actor, company_ids)

        if db.query(User).filter(User.email == email).first():
            raise ResourceConflictError("User with this email already exists")
        if db.query(Invitation).filter(Invitation.email == email).first():
            raise ResourceConflictError("An invitation for this email is already pending")

        invitation = Invitation(
            email=email,
            role_id=role.id,
            company_ids_json=dump_list(company_ids),
            inviter_id=actor.id,
        )
        db.add(invitation)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ResourceConflictError("An invitation for this email is already pending")
        db.refresh(invitation)
        logger.info("User %s invited %s as %s", actor.id, email, role.name)
        return invitation

    @staticmethod
    def list_invitations(db: Session) -> List[Invitation]:
        return db.query(Invitation).order_by(Invitation.created_at.desc(), Invitation.id.desc()).all()

    @staticmethod
    def revoke_invitation(db: Session, actor: Actor, invitation_id: int) -> str:
        """Delete a pending invitation. The inviter or anyone able to grant its role may revoke."""
        UserService._require_role(actor)
        invitation = db.query(Invitation).filter(Invitation.id == invitation_id).first()
        if not invitation:
            raise ResourceNotFoundError(f"Invitation {invitation_id} not found")

        if invitation.inviter_id != actor.id:
            records = role_service.list_records(db)
            if not can_assign(actor.role, role_service.to_record(invitation.role), records):
                raise ForbiddenError("Forbidden: Cannot revoke this invitation")

        email = invitation.email
        db.delete(invitation)
        db.commit()
        return email

    @staticmethod
    def change_role(
        db: Session,
        actor: Actor,
        target_id: int,
        role_id: int,
        company_ids: Optional[Iterable[int]] = None,
    ) -> User:
        """Assign a new role (and optionally a new company scope) to another user.

        Raises:
            ForbiddenError: If the actor has no role, does not outrank the
                target, or may not grant the requested role.
            OutOfScopeError: If the resulting scope exceeds the actor's own.
            ResourceNotFoundError: If the user or role does not exist.
        """
        UserService._require_role(actor)
        target = UserService.get_user(db, target_id)

        if not can_manage(actor.role, role_service.to_record(target.role)):
            raise ForbiddenError("Forbidden: Cannot manage this user")

        role = role_service.get_role(db, role_id)
        records = role_service.list_records(db)
        if not can_assign(actor.role, role_service.to_record(role), records):
            raise ForbiddenError("Forbidden: Cannot assign this role")

        if company_ids is None:
            company_ids = load_list(target.company_ids_json)
        company_ids = list(company_ids)
        UserService._check_company_grant(actor, company_ids)

        target.role_id = role.id
        target.company_ids_json = dump_list(company_ids)
        db.commit()
        db.refresh(target)
        logger.info("User %s set role of user %s to %s", actor.id, target.id, role.name)
        return target

    @staticmethod
    def set_active(db: Session, actor: Actor, target_id: int, is_active: bool) -> User:
        """Activate or deactivate a user the actor outranks."""
        UserService._require_role(actor)
        target = UserService.get_user(db, target_id)
        if not can_manage(actor.role, role_service.to_record(target.role)):
            raise ForbiddenError("Forbidden: Cannot manage this user")
        target.is_active = is_active
        db.commit()
        db.refresh(target)
        return target

    @staticmethod
    def update_profile(
        db: Session,
        actor: Actor,
        target_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> User:
        if actor.id != target_id:
            raise ForbiddenError("You can only update your own profile")
        user = UserService.get_user(db, target_id)
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """Get a user by id."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")
        return user

    @staticmethod
    def list_users(db: Session, page: int = 1, page_size: int = 20):
        """List all users with pagination."""
        total = db.query(User).count()
        users = (
            db.query(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return {"users": users, "total": total, "page": page}


user_service = UserService()
