from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr, field_validator

from ..models import get_db
from ..auth import (
    MIN_PASSWORD_LENGTH,
    authenticate_user,
    create_user,
    get_current_active_user,
    issue_token,
)
from ..activity_tracker import log_user_activity
from ..navigation import DASHBOARD_PATH, ONBOARDING_PATH
from ..profiles import has_profile

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
    responses={404: {"description": "Not found"}},
)


class Credentials(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        return value


class Token(BaseModel):
    access_token: str
    token_type: str
    user_info: dict
    redirect: str


class AuthResponse(BaseModel):
    data: Token
    message: str = "Success"
    status: str = "success"


def _client_details(request: Request):
    client_ip = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    return client_ip, user_agent


def _token_for(user, redirect: str) -> Token:
    return Token(
        access_token=issue_token(user),
        token_type="bearer",
        user_info={"id": user.id, "email": user.email},
        redirect=redirect,
    )


@router.post("/signup", response_model=AuthResponse)
async def sign_up(
    credentials: Credentials, request: Request, db: Session = Depends(get_db)
):
    """Create an account; the new user continues to onboarding"""

    user = create_user(db=db, email=credentials.email, password=credentials.password)

    client_ip, user_agent = _client_details(request)
    log_user_activity(
        db=db,
        user=user,
        activity_type="user_signup",
        activity_data={"signup_method": "email_password"},
        ip_address=client_ip,
        user_agent=user_agent,
    )

    return AuthResponse(
        data=_token_for(user, ONBOARDING_PATH),
        message="Account created. Welcome! Let's set up your profile.",
    )


@router.post("/signin", response_model=AuthResponse)
async def sign_in(
    credentials: Credentials, request: Request, db: Session = Depends(get_db)
):
    """Authenticate user and return token"""

    user = authenticate_user(db, credentials.email, credentials.password)

    client_ip, user_agent = _client_details(request)
    log_user_activity(
        db=db,
        user=user,
        activity_type="user_signin",
        activity_data={"signin_method": "email_password"},
        ip_address=client_ip,
        user_agent=user_agent,
    )

    redirect = DASHBOARD_PATH if has_profile(db, user) else ONBOARDING_PATH
    return AuthResponse(data=_token_for(user, redirect), message="Welcome back!")


@router.get("/me")
async def read_current_user(
    current_user=Depends(get_current_active_user), db: Session = Depends(get_db)
):
    """Get current user information"""

    return {
        "id": current_user.id,
        "email": current_user.email,
        "is_active": current_user.is_active,
        "has_profile": has_profile(db, current_user),
        "member_since": current_user.created_at.isoformat()
        if current_user.created_at
        else None,
    }


@router.post("/logout")
async def logout_user(
    current_user=Depends(get_current_active_user), db: Session = Depends(get_db)
):
    """Logout user"""

    log_user_activity(
        db=db,
        user=current_user,
        activity_type="user_logout",
        activity_data={"logout_method": "api_call"},
    )

    return {"message": "Successfully logged out"}
