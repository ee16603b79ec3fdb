"""Profile service layer with business logic."""

from collections.abc import Mapping
from typing import Any, Callable, List
from uuid import UUID

import structlog

from core.exceptions import (
    EducationNotFoundError,
    ExperienceNotFoundError,
    ProfileNotFoundError,
)
from domain.entities.profile import (
    EducationEntry,
    ExperienceEntry,
    Profile,
    ProfileWithOwner,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.profile_projector import (
    EDUCATION_FIELDS,
    EDUCATION_REQUIRED_FIELDS,
    EXPERIENCE_FIELDS,
    EXPERIENCE_REQUIRED_FIELDS,
    PROFILE_REQUIRED_FIELDS,
    project_entry_fields,
    project_profile_fields,
    require_fields,
)

logger = structlog.get_logger()


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_for_user(self, user_id: UUID) -> ProfileWithOwner:
        """Get the profile of the given user, with owner name and avatar."""
        async with self._uow_factory() as uow:
            result = await uow.profiles.get_by_user_with_owner(user_id)
            if not result:
                raise ProfileNotFoundError(str(user_id))
            return result

    async def get_by_user_id(self, raw_user_id: str) -> ProfileWithOwner:
        """Public lookup by a path-supplied id. Malformed ids are simply not found."""
        try:
            user_id = UUID(raw_user_id)
        except ValueError:
            raise ProfileNotFoundError(raw_user_id) from None
        return await self.get_for_user(user_id)

    async def get_all(self) -> List[ProfileWithOwner]:
        """Get every profile with owner name and avatar."""
        async with self._uow_factory() as uow:
            return await uow.profiles.get_all_with_owner()  # type: ignore[no-any-return]

    async def upsert(self, user_id: UUID, raw: Mapping[str, Any]) -> Profile:
        """Create the user's profile, or merge the present fields into it."""
        require_fields(raw, PROFILE_REQUIRED_FIELDS)
        fields = project_profile_fields(raw)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_by_user(user_id, for_update=True)

            if profile is None:
                created = Profile(user_id=user_id, status=fields["status"])
                created.apply(fields)
                saved = await uow.profiles.create(created)
                if saved is not None:
                    await uow.commit()
                    logger.info("profile_created", user_id=str(user_id))
                    return saved

                # A concurrent request created it first: merge into that row
                profile = await self._require_profile(uow, user_id)

            profile.apply(fields)
            saved = await uow.profiles.update(profile)
            await uow.commit()
            logger.info("profile_updated", user_id=str(user_id), fields=sorted(fields))
            return saved

    async def delete_account(self, user_id: UUID) -> None:
        """Delete the user's posts, profile and account in one transaction."""
        async with self._uow_factory() as uow:
            posts_deleted = await uow.posts.delete_all_for_user(user_id)
            await uow.profiles.delete_by_user(user_id)
            await uow.users.delete(user_id)
            await uow.commit()

        logger.info("account_deleted", user_id=str(user_id), posts_deleted=posts_deleted)

    async def add_experience(self, user_id: UUID, raw: Mapping[str, Any]) -> Profile:
        """Add an experience entry at the head of the user's list."""
        require_fields(raw, EXPERIENCE_REQUIRED_FIELDS)
        entry = ExperienceEntry(**project_entry_fields(raw, EXPERIENCE_FIELDS))

        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            profile.add_experience(entry)
            saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def remove_experience(self, user_id: UUID, experience_id: str) -> Profile:
        """Remove an experience entry by id."""
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            if profile.remove_experience(experience_id) is None:
                raise ExperienceNotFoundError(experience_id)
            saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def add_education(self, user_id: UUID, raw: Mapping[str, Any]) -> Profile:
        """Add an education entry at the head of the user's list."""
        require_fields(raw, EDUCATION_REQUIRED_FIELDS)
        entry = EducationEntry(**project_entry_fields(raw, EDUCATION_FIELDS))

        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            profile.add_education(entry)
            saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def remove_education(self, user_id: UUID, education_id: str) -> Profile:
        """Remove an education entry by id."""
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            if profile.remove_education(education_id) is None:
                raise EducationNotFoundError(education_id)
            saved = await uow.profiles.update(profile)
            await uow.commit()
            return saved

    async def _require_profile(self, uow: IUnitOfWork, user_id: UUID) -> Profile:
        """Load the user's profile for modification, locking its row."""
        profile = await uow.profiles.get_by_user(user_id, for_update=True)
        if not profile:
            raise ProfileNotFoundError(str(user_id))
        return profile
