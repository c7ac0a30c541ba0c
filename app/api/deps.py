import structlog
from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, UserNotFound
from app.db.session import get_db
from app.models.user import User
from app.schemas.token import SessionClaims
from app.services.auth_service import AuthService

logger = structlog.get_logger()


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_claims(request: Request) -> SessionClaims:
    """Validate the bearer credential and expose its claims to the handler."""
    claims = AuthService.validate(_bearer_token(request))
    request.state.user_id = claims.user_id
    return claims


def get_current_user(
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == claims.user_id).first()
    if not user:
        raise UserNotFound()
    return user


def require_admin(
    request: Request,
    claims: SessionClaims = Depends(get_current_claims),
) -> SessionClaims:
    action_name = f"{request.method} {request.url.path}"
    try:
        AuthService.require_admin(claims)
    except Forbidden:
        logger.warning(
            "admin_access_denied",
            action=action_name,
            user_id=claims.user_id,
        )
        raise

    logger.info(
        "admin_action",
        action=action_name,
        admin_user_id=claims.user_id,
    )
    return claims
