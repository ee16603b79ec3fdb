"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile, ProfileWithOwner


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get_by_user(self, user_id: UUID, for_update: bool = False) -> Profile | None:
        """Get the profile owned by a user.

        With ``for_update`` the row stays locked until the transaction ends.
        """
        ...

    async def get_by_user_with_owner(self, user_id: UUID) -> ProfileWithOwner | None:
        """Get a user's profile together with the owner's account."""
        ...

    async def get_all_with_owner(self) -> list[ProfileWithOwner]:
        """Get every profile together with its owner's account."""
        ...

    async def create(self, profile: Profile) -> Profile | None:
        """Create a new profile, or return None if the owner already has one."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        ...

    async def delete_by_user(self, user_id: UUID) -> bool:
        """Delete a user's profile and return success status."""
        ...
