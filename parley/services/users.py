"""
User profiles.

Channels and DMs reference users by id, so profile updates touch only the
user record and every read sees the current name, email and handle.
"""

import logging
from typing import List

from parley.errors import InvalidInput
from parley.models.api_responses import UserProfile
from parley.models.chat import User
from parley.services.auth import check_name
from parley.services.datastore import DataStore, transactional
from parley.services.directory import Directory
from parley.utils.helpers import is_valid_email, is_valid_handle

logger = logging.getLogger(__name__)


def public_profile(user: User) -> UserProfile:
    return UserProfile(
        user_id=user.user_id,
        email=user.email,
        name_first=user.name_first,
        name_last=user.name_last,
        handle=user.handle,
    )


class UserService:
    def __init__(self, store: DataStore, directory: Directory):
        self.store = store
        self.directory = directory

    @transactional
    def profile(self, user_id: int) -> UserProfile:
        return public_profile(self.directory.get_user(user_id))

    @transactional
    def all(self) -> List[UserProfile]:
        return [public_profile(u) for u in self.store.workspace.users]

    @transactional
    def set_name(self, user_id: int, name_first: str, name_last: str) -> None:
        check_name(name_first, "First name")
        check_name(name_last, "Last name")
        user = self.directory.get_user(user_id)
        user.name_first = name_first
        user.name_last = name_last
        logger.info(f"User {user_id} changed name")

    @transactional
    def set_email(self, user_id: int, email: str) -> None:
        if not is_valid_email(email):
            raise InvalidInput("Invalid email address")
        if self.directory.find_user_by_email(email) is not None:
            raise InvalidInput("Email address is already in use")
        self.directory.get_user(user_id).email = email
        logger.info(f"User {user_id} changed email")

    @transactional
    def set_handle(self, user_id: int, handle: str) -> None:
        if not is_valid_handle(handle):
            raise InvalidInput("Handle must be 3-20 alphanumeric characters")
        if self.directory.find_user_by_handle(handle) is not None:
            raise InvalidInput("Handle is already in use")
        user = self.directory.get_user(user_id)
        logger.info(f"User {user_id} changed handle @{user.handle} -> @{handle}")
        user.handle = handle
