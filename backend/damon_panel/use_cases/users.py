"""Staff account management."""
from __future__ import annotations

from sqlalchemy.orm import Session

from ..auth import hash_password, validate_new_password
from ..database import locked_write
from ..domain_errors import not_found, validation_error
from ..models import User
from ..schemas import StaffMember, UserCreate, UserResponse
from .audit import ClientInfo, record_audit


def list_users_use_case(*, db: Session) -> list[UserResponse]:
    users = db.query(User).order_by(User.created_at).all()
    return [UserResponse.model_validate(u) for u in users]


def list_staff_use_case(*, db: Session) -> list[StaffMember]:
    """Active users, safe to show to every authenticated user."""
    users = db.query(User).filter(User.is_active.is_(True)).order_by(User.full_name).all()
    return [StaffMember.model_validate(u) for u in users]


def create_user_use_case(*, db: Session, payload: UserCreate, current_user: User, client: ClientInfo) -> User:
    if not payload.username or not payload.password:
        raise validation_error("Username/Password required")

    policy_error = validate_new_password(new_password=payload.password, username=payload.username)
    if policy_error:
        raise validation_error(policy_error)

    user = User(
        username=payload.username,
        full_name=payload.full_name or payload.username,
        role=payload.role,
        password_hash=hash_password(payload.password),
        is_active=True,
    )
    with locked_write(db):
        if db.query(User.id).filter(User.username == payload.username).first():
            raise validation_error("Username already exists", username=payload.username)
        db.add(user)
        record_audit(
            db,
            actor=current_user,
            action="CREATE_USER",
            client=client,
            meta={"target_user": payload.username, "role": payload.role},
        )
    return user


def delete_user_use_case(*, db: Session, user_id: str, current_user: User, client: ClientInfo) -> None:
    if user_id == current_user.id:
        raise validation_error("Cannot delete your own account")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise not_found("User not found")

    username = user.username
    with locked_write(db):
        db.delete(user)
        record_audit(
            db,
            actor=current_user,
            action="DELETE_USER",
            client=client,
            meta={"target_id": user_id, "target_user": username},
        )
