from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.rate_limiter import limiter
from app.db.session import get_db
from app.schemas.user import UserCreate, UserLogin
from app.services.auth_service import AuthService
from app.services.user_service import UserService
from app.utils.response import success

router = APIRouter()


@router.post(
    "/signup",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Register user account",
    description="""
Creates a new customer account.

Validation:
1. Email must be unique
2. Password is hashed with bcrypt before persistence
""",
    responses={
        201: {"description": "User created"},
        400: {"description": "Validation error"},
        409: {"description": "Email already registered"},
    },
)
@limiter.limit("10/minute")
def signup(request: Request, user_in: UserCreate, db: Session = Depends(get_db)):
    user = AuthService.signup(db, user_in)
    return success(data=UserService.serialize(user), message="User created successfully")


@router.post(
    "/login",
    response_model=dict,
    summary="Login user",
    description="""
Verifies credentials and returns a bearer session credential valid for 24 hours.
The credential carries the user id, email and admin flag.
""",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    },
)
@limiter.limit("10/minute")
def login(request: Request, credentials: UserLogin, db: Session = Depends(get_db)):
    token, user = AuthService.issue(db, credentials.email, credentials.password)
    return success(
        data={
            "token": token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            "user": UserService.serialize(user),
        },
        message="Login successful",
    )
