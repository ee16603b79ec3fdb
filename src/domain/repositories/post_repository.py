"""Post repository protocol."""

from typing import Protocol
from uuid import UUID


class IPostRepository(Protocol):
    """Repository interface for posts authored by users."""

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every post authored by a user and return how many went."""
        ...
