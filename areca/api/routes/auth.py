from __future__ import annotations

from fastapi import APIRouter, Depends, status

from areca.core.auth import CurrentUser, DbSession, get_bearer_token
from areca.core.rate_limit import rate_limit
from areca.schemas.common import MessageResponse
from areca.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserOut, UserResponse
from areca.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("auth"))],
)
def register(payload: RegisterRequest, db: DbSession) -> AuthResponse:
    """Create an account and return a bearer token for it.

    Raises:
        ConflictAppError: 400 ``user_exists`` when the email or username is taken.
    """
    user, token = AuthService(db).register(payload)
    return AuthResponse(
        message="User registered successfully",
        user=UserOut.model_validate(user),
        token=token,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    dependencies=[Depends(rate_limit("auth"))],
)
def login(payload: LoginRequest, db: DbSession) -> AuthResponse:
    """Exchange email and password for a bearer token.

    Raises:
        AuthenticationAppError: 401 for unknown email, wrong password or a
            deactivated account.
    """
    user, token = AuthService(db).login(payload.email, payload.password)
    return AuthResponse(message="Login successful", user=UserOut.model_validate(user), token=token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    user: CurrentUser,
    db: DbSession,
    token: str = Depends(get_bearer_token),
) -> MessageResponse:
    """Revoke the session behind the presented token."""
    AuthService(db).logout(token)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse)
def me(user: CurrentUser) -> UserResponse:
    return UserResponse(user=UserOut.model_validate(user))
