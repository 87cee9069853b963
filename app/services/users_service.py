"""User management service.

Owns the ``users`` collection: listing, CRUD, password changes and the
credential check used by authentication. Passwords are stored as passlib
hashes and never leave this module; callers only see ``UserPublic``.
"""

from __future__ import annotations

import logging

from app.adapters.store.base import AbstractDocumentStore, translate_store_errors
from app.core.errors import AuthenticationAppError, ConflictError, NotFoundError
from app.core.logging import hash_identity
from app.core.passwords import hash_password, password_matched
from app.schemas.listing import ListEnvelope
from app.schemas.users import UserPublic
from app.services.listing import normalize, paginate

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"

# Listing may only search and sort on what UserPublic exposes
USER_LIST_FIELDS = frozenset(UserPublic.model_fields)


def _user_not_found(user_id: str) -> NotFoundError:
    return NotFoundError(
        code="user_not_found",
        message="Unknown user",
        details={"resource": "user", "resource_id": user_id},
    )


class UsersService:
    """CRUD and credential checks over the users collection."""

    def __init__(self, store: AbstractDocumentStore) -> None:
        self._store = store

    async def list_users(
        self,
        *,
        page_number: int | str,
        page_size: int | str,
        search: str | None = None,
        sort: str | None = None,
    ) -> ListEnvelope[UserPublic]:
        """Search, sort and paginate users through the shared listing engine."""
        match_filter, sort_spec = normalize(search, sort, USER_LIST_FIELDS)
        return await paginate(
            self._store,
            USERS_COLLECTION,
            match_filter,
            sort_spec,
            page_number,
            page_size,
            UserPublic.from_document,
        )

    async def get_user(self, user_id: str) -> UserPublic:
        with translate_store_errors("get", USERS_COLLECTION):
            document = await self._store.get(USERS_COLLECTION, user_id)
        if document is None:
            raise _user_not_found(user_id)
        return UserPublic.from_document(document)

    async def email_is_registered(self, email: str) -> bool:
        with translate_store_errors("find_one", USERS_COLLECTION):
            document = await self._store.find_one(USERS_COLLECTION, {"email": email})
        return document is not None

    async def create_user(self, name: str, email: str, password: str) -> UserPublic:
        """Create a user with a hashed password.

        Raises:
            ConflictError: If the email is already registered.
        """
        # Check-then-insert; a shared backend needs a unique index on email
        # to close the window between the two calls.
        if await self.email_is_registered(email):
            raise ConflictError(
                code="email_already_registered",
                message="Email already exists",
                details={"field": "email"},
            )

        with translate_store_errors("insert", USERS_COLLECTION):
            user_id = await self._store.insert(
                USERS_COLLECTION,
                {"name": name, "email": email, "password": hash_password(password)},
            )

        logger.info("users.created", extra={"user_id": user_id, "email_hash": hash_identity(email)})
        return UserPublic(id=user_id, name=name, email=email)

    async def update_user(self, user_id: str, name: str, email: str) -> UserPublic:
        """Change a user's name and email.

        Raises:
            NotFoundError: If the user does not exist.
            ConflictError: If the new email belongs to another user.
        """
        current = await self.get_user(user_id)

        # Same check-then-write window as create_user
        if email != current.email and await self.email_is_registered(email):
            raise ConflictError(
                code="email_already_registered",
                message="Email already exists",
                details={"field": "email"},
            )

        with translate_store_errors("update", USERS_COLLECTION):
            updated = await self._store.update(USERS_COLLECTION, user_id, {"name": name, "email": email})
        if not updated:
            raise _user_not_found(user_id)

        logger.info("users.updated", extra={"user_id": user_id})
        return UserPublic(id=user_id, name=name, email=email)

    async def delete_user(self, user_id: str) -> None:
        with translate_store_errors("delete", USERS_COLLECTION):
            deleted = await self._store.delete(USERS_COLLECTION, user_id)
        if not deleted:
            raise _user_not_found(user_id)
        logger.info("users.deleted", extra={"user_id": user_id})

    async def check_password(self, user_id: str, password: str) -> bool:
        with translate_store_errors("get", USERS_COLLECTION):
            document = await self._store.get(USERS_COLLECTION, user_id)
        if document is None:
            raise _user_not_found(user_id)
        return password_matched(password, document.get("password"))

    async def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        """Replace a user's password after verifying the current one.

        Raises:
            NotFoundError: If the user does not exist.
            AuthenticationAppError: If old_password is wrong.
        """
        if not await self.check_password(user_id, old_password):
            raise AuthenticationAppError(
                code="wrong_password",
                message="Wrong password",
            )

        with translate_store_errors("update", USERS_COLLECTION):
            updated = await self._store.update(
                USERS_COLLECTION, user_id, {"password": hash_password(new_password)}
            )
        if not updated:
            raise _user_not_found(user_id)
        logger.info("users.password_changed", extra={"user_id": user_id})

    async def verify_credentials(self, email: str, password: str) -> UserPublic | None:
        """Return the user's public profile if the email/password pair matches."""
        with translate_store_errors("find_one", USERS_COLLECTION):
            document = await self._store.find_one(USERS_COLLECTION, {"email": email})

        # Unknown emails still pay for one hash verification
        if document is None:
            password_matched(password, _DUMMY_HASH)
            return None
        if not password_matched(password, document.get("password")):
            return None
        return UserPublic.from_document(document)


_DUMMY_HASH = hash_password("not-a-real-password")
