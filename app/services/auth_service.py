"""Login flow: throttle gate, credential check, outcome recording."""

from __future__ import annotations

import logging

from app.core.errors import InvalidCredentialsError, TooManyAttemptsError
from app.core.logging import hash_identity
from app.schemas.users import UserPublic
from app.services.login_throttle import LoginThrottle
from app.services.users_service import UsersService

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Authenticates users by email and password behind a login throttle."""

    def __init__(self, users: UsersService, throttle: LoginThrottle) -> None:
        self._users = users
        self._throttle = throttle

    async def login(self, email: str, password: str) -> UserPublic:
        """Authenticate and return the user's public profile.

        A locked-out email is rejected before its credentials are looked at.

        Raises:
            TooManyAttemptsError: While the email is locked out.
            InvalidCredentialsError: If the email/password pair does not match.
            StoreUnavailableError: If the user store fails.
        """
        email_hash = hash_identity(email)

        decision = self._throttle.check(email)
        if not decision.allowed:
            retry_after = decision.retry_after_seconds or self._throttle.lockout_seconds
            logger.warning(
                "auth.login_blocked",
                extra={"email_hash": email_hash, "retry_after_s": retry_after},
            )
            raise TooManyAttemptsError(
                code="too_many_attempts",
                message=(
                    "Too many login attempts. Please try again after "
                    f"{_format_wait(self._throttle.lockout_seconds)}."
                ),
                details={"retry_after": retry_after, "max_failures": self._throttle.max_failures},
                retry_after_seconds=retry_after,
            )

        user = await self._users.verify_credentials(email, password)
        if user is None:
            decision = self._throttle.record_failure(email)
            logger.warning(
                "auth.login_failed",
                extra={
                    "email_hash": email_hash,
                    "failure_count": decision.failure_count,
                    "locked": not decision.allowed,
                },
            )
            raise InvalidCredentialsError(
                code="invalid_credentials",
                message="Wrong email or password. Please try again.",
            )

        self._throttle.record_success(email)
        logger.info("auth.login_succeeded", extra={"user_id": user.id})
        return user


def _format_wait(seconds: int) -> str:
    if seconds % 60 == 0:
        minutes = seconds // 60
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{seconds} seconds"
