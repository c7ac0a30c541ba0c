from typing import Optional, Tuple

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    EmailAlreadyExists,
    Forbidden,
    InvalidCredentials,
    Unauthenticated,
)
from app.core.security import (
    burn_password_check,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.models.user import User
from app.schemas.token import SessionClaims
from app.schemas.user import UserCreate

logger = structlog.get_logger()


class AuthService:

    @staticmethod
    def signup(db: Session, user_in: UserCreate) -> User:
        """Create a customer account. Emails are unique."""
        existing_user = db.query(User).filter(User.email == user_in.email).first()
        if existing_user:
            raise EmailAlreadyExists()

        user = User(
            name=user_in.name,
            email=user_in.email,
            password_hash=hash_password(user_in.password),
            is_admin=False,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            db.rollback()
            raise EmailAlreadyExists()
        db.refresh(user)

        logger.info("user_registered", user_id=user.id)
        return user

    @staticmethod
    def issue(db: Session, email: str, password: str) -> Tuple[str, User]:
        """Verify credentials and return a signed 24h session credential."""
        user = db.query(User).filter(User.email == email.lower()).first()

        if not user:
            burn_password_check(password)
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            logger.info("login_failed", reason="bad_password", user_id=user.id)
            raise InvalidCredentials()

        token = create_access_token(
            data={
                "sub": str(user.id),
                "email": user.email,
                "is_admin": bool(user.is_admin),
            }
        )
        logger.info("login_succeeded", user_id=user.id)
        return token, user

    @staticmethod
    def validate(token: Optional[str]) -> SessionClaims:
        if not token:
            raise Unauthenticated()

        payload = decode_token(token)
        try:
            return SessionClaims(
                user_id=int(payload.get("sub")),
                email=payload.get("email") or "",
                is_admin=bool(payload.get("is_admin", False)),
            )
        except (TypeError, ValueError):
            raise Unauthenticated("Invalid authentication credentials")

    @staticmethod
    def require_admin(claims: SessionClaims) -> None:
        if not claims.is_admin:
            raise Forbidden()
