"""
Registration, login and session management.

Passwords are stored as passlib bcrypt_sha256 hashes. Only a SHA-256 digest
of each session token is kept in the workspace.
"""

import logging

from parley.errors import InvalidInput
from parley.models.api_responses import AuthResponse
from parley.models.chat import Session, User
from parley.services.datastore import DataStore, transactional
from parley.services.directory import Directory
from parley.services.stats import StatsTracker
from parley.utils.helpers import (
    generate_handle,
    hash_token,
    is_valid_email,
    new_token,
    password_context,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 50


def check_name(name: str, label: str) -> None:
    if not 1 <= len(name) <= MAX_NAME_LENGTH:
        raise InvalidInput(f"{label} must be between 1 and {MAX_NAME_LENGTH} characters")


class AuthService:
    def __init__(self, store: DataStore, directory: Directory, stats: StatsTracker):
        self.store = store
        self.directory = directory
        self.stats = stats
        self.passwords = password_context(store.settings.password_hash_rounds)

    def _open_session(self, user_id: int) -> AuthResponse:
        token = new_token()
        self.store.workspace.sessions.append(
            Session(token_hash=hash_token(token), user_id=user_id)
        )
        return AuthResponse(token=token, auth_user_id=user_id)

    @transactional
    def register(
        self, email: str, password: str, name_first: str, name_last: str
    ) -> AuthResponse:
        """
        Create a user and log them in.

        The first user to register becomes the global owner.
        """
        if not is_valid_email(email):
            raise InvalidInput("Invalid email address")
        if self.directory.find_user_by_email(email) is not None:
            raise InvalidInput("Email address is already in use")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        check_name(name_first, "First name")
        check_name(name_last, "Last name")

        workspace = self.store.workspace
        user = User(
            user_id=workspace.user_ids.take(),
            email=email,
            name_first=name_first,
            name_last=name_last,
            handle=generate_handle(name_first, name_last, (u.handle for u in workspace.users)),
            global_owner=not workspace.users,
            password_hash=self.passwords.hash(password),
        )
        workspace.users.append(user)
        self.stats.track_user(user.user_id)
        logger.info(f"Registered user {user.user_id} as @{user.handle}")
        return self._open_session(user.user_id)

    @transactional
    def login(self, email: str, password: str) -> AuthResponse:
        user = self.directory.find_user_by_email(email)
        if user is None:
            raise InvalidInput("No user with that email address")
        if not self.passwords.verify(password, user.password_hash):
            logger.warning(f"Failed login for user {user.user_id}")
            raise InvalidInput("Incorrect password")
        return self._open_session(user.user_id)

    @transactional
    def logout(self, token: str) -> None:
        user_id = self.directory.resolve_token(token)
        token_hash = hash_token(token)
        workspace = self.store.workspace
        workspace.sessions = [s for s in workspace.sessions if s.token_hash != token_hash]
        logger.info(f"User {user_id} logged out")
