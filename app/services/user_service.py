from typing import List

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import AdminUserProtected, EmailAlreadyExists, UserHasOrders, UserNotFound
from app.models.order import Order
from app.models.user import User
from app.schemas.user import UserUpdate

logger = structlog.get_logger()


class UserService:
    """Admin management of accounts. Admin accounts can be neither edited nor deleted here."""

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def update_user(db: Session, user_id: int, user_in: UserUpdate) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFound()
        if user.is_admin:
            raise AdminUserProtected("modify")

        if user_in.email and user_in.email != user.email:
            taken = db.query(User).filter(User.email == user_in.email, User.id != user.id).first()
            if taken:
                raise EmailAlreadyExists()
            user.email = user_in.email
        if user_in.name:
            user.name = user_in.name.strip()

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise EmailAlreadyExists()
        db.refresh(user)
        logger.info("user_updated", user_id=user.id)
        return user

    @staticmethod
    def delete_user(db: Session, user_id: int) -> None:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise UserNotFound()
        if user.is_admin:
            logger.warning("admin_user_delete_rejected", user_id=user.id)
            raise AdminUserProtected("delete")

        if db.query(Order.id).filter(Order.user_id == user.id).first() is not None:
            raise UserHasOrders()

        db.delete(user)
        db.commit()
        logger.info("user_deleted", user_id=user_id)

    @staticmethod
    def serialize(user: User) -> dict:
        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "is_admin": user.is_admin,
            "created_at": user.created_at,
        }
