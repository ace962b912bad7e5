"""
Handle Tagger

Resolves @handle mentions in a message body to members of the target
channel or DM.

Rules, applied to each mention in order of appearance:
- The token runs from after "@" to the next whitespace or "@"
- Exact, case-sensitive handle match; unknown handles are ignored
- Users who are not members of the target are ignored
- Each user is tagged at most once per message
"""

import logging
from typing import List, Optional

from parley.models.chat import ContainerRef
from parley.services.directory import Directory
from parley.utils.helpers import excerpt, find_mentions

logger = logging.getLogger(__name__)


class HandleTagger:
    def __init__(self, directory: Directory, excerpt_length: Optional[int] = None):
        self.directory = directory
        self.excerpt_length = excerpt_length or directory.store.settings.tag_excerpt_length

    def tagged_members(self, ref: ContainerRef, body: str) -> List[int]:
        """
        Scan a body for mentions of members of the target container.

        Args:
            ref: Channel or DM the message is sent to
            body: Message text

        Returns:
            User ids in order of first valid mention
        """
        tagged: List[int] = []
        for token in find_mentions(body):
            user = self.directory.find_user_by_handle(token)
            if user is None or user.user_id in tagged:
                continue
            if not self.directory.is_member(user.user_id, ref):
                logger.debug(f"Ignoring tag of non-member @{token} in {ref}")
                continue
            tagged.append(user.user_id)
        return tagged

    def excerpt(self, body: str) -> str:
        return excerpt(body, self.excerpt_length)
