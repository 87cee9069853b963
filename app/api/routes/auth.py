from fastapi import APIRouter, Depends

from app.core.dependencies import get_auth_service
from app.schemas.users import LoginRequest, UserPublic
from app.services.auth_service import AuthenticationService

router = APIRouter(prefix="/authentication", tags=["Authentication"])


@router.post(
    "/login",
    response_model=UserPublic,
    responses={
        403: {"description": "Wrong email or password"},
        429: {"description": "Too many failed attempts; see Retry-After"},
    },
)
async def login(
    payload: LoginRequest,
    auth: AuthenticationService = Depends(get_auth_service),
) -> UserPublic:
    """Log in with email and password.

    After `APP_LOGIN_MAX_FAILURES` consecutive failures (5 by default) the
    email is locked out for `APP_LOGIN_LOCKOUT_SECONDS` (30 minutes);
    a successful login clears the failure count.
    """
    return await auth.login(payload.email, payload.password)
