"""SQLAlchemy implementation of Profile repository."""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import (
    EducationEntry,
    ExperienceEntry,
    Profile,
    ProfileWithOwner,
)
from domain.entities.user import User
from infrastructure.database.models import ProfileModel, UserModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user(self, user_id: UUID, for_update: bool = False) -> Profile | None:
        """Get the profile owned by a user, optionally locking the row."""
        stmt = select(ProfileModel).where(ProfileModel.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user_with_owner(self, user_id: UUID) -> ProfileWithOwner | None:
        """Get a user's profile joined with the owner's account."""
        stmt = (
            select(ProfileModel, UserModel)
            .outerjoin(UserModel, ProfileModel.user_id == UserModel.id)
            .where(ProfileModel.user_id == user_id)
        )
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        if not row:
            return None
        profile_model, user_model = row
        return self._to_profile_with_owner(profile_model, user_model)

    async def get_all_with_owner(self) -> list[ProfileWithOwner]:
        """Get every profile joined with its owner's account."""
        stmt = (
            select(ProfileModel, UserModel)
            .outerjoin(UserModel, ProfileModel.user_id == UserModel.id)
            .order_by(ProfileModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [
            self._to_profile_with_owner(profile_model, user_model)
            for profile_model, user_model in result
        ]

    async def create(self, profile: Profile) -> Profile | None:
        """Insert a new profile unless the owner already has one.

        Returns None when the owner's profile already exists, for instance
        when a concurrent request inserted it first.
        """
        stmt = (
            self._insert(ProfileModel)
            .values(**self._to_row(profile))
            .on_conflict_do_nothing(index_elements=[ProfileModel.user_id])
            .returning(ProfileModel.id)
        )
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is None:
            return None
        return await self.get_by_user(profile.user_id)

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile, replacing its embedded lists."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        model.company = profile.company
        model.website = profile.website
        model.location = profile.location
        model.bio = profile.bio
        model.status = profile.status
        model.github_username = profile.github_username
        model.skills = list(profile.skills)
        model.social = dict(profile.social)
        model.experience = [self._experience_to_json(e) for e in profile.experience]
        model.education = [self._education_to_json(e) for e in profile.education]
        model.updated_at = profile.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete_by_user(self, user_id: UUID) -> bool:
        """Delete a user's profile."""
        stmt = delete(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    def _to_profile_with_owner(
        self, profile_model: ProfileModel, user_model: UserModel | None
    ) -> ProfileWithOwner:
        owner = None
        if user_model:
            owner = User(
                id=user_model.id,
                name=user_model.name,
                email=user_model.email,
                avatar=user_model.avatar,
                created_at=user_model.created_at,
            )
        return ProfileWithOwner(profile=self._to_entity(profile_model), owner=owner)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            user_id=model.user_id,
            company=model.company,
            website=model.website,
            location=model.location,
            bio=model.bio,
            status=model.status,
            github_username=model.github_username,
            skills=list(model.skills or []),
            social=dict(model.social or {}),
            experience=[self._experience_from_json(e) for e in model.experience or []],
            education=[self._education_from_json(e) for e in model.education or []],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _insert(self, table: type[ProfileModel]) -> Any:
        """INSERT construct for the bound dialect, which carries ON CONFLICT."""
        if self._session.get_bind().dialect.name == "postgresql":
            return postgresql.insert(table)
        return sqlite.insert(table)

    def _to_row(self, entity: Profile) -> dict[str, Any]:
        """Convert domain entity to column values."""
        return {
            "id": entity.id,
            "user_id": entity.user_id,
            "company": entity.company,
            "website": entity.website,
            "location": entity.location,
            "bio": entity.bio,
            "status": entity.status,
            "github_username": entity.github_username,
            "skills": list(entity.skills),
            "social": dict(entity.social),
            "experience": [self._experience_to_json(e) for e in entity.experience],
            "education": [self._education_to_json(e) for e in entity.education],
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
        }

    @staticmethod
    def _experience_to_json(entry: ExperienceEntry) -> dict[str, Any]:
        return {
            "id": str(entry.id),
            "title": entry.title,
            "company": entry.company,
            "location": entry.location,
            "from_date": entry.from_date.isoformat(),
            "to_date": entry.to_date.isoformat() if entry.to_date else None,
            "current": entry.current,
            "description": entry.description,
        }

    @staticmethod
    def _experience_from_json(data: dict[str, Any]) -> ExperienceEntry:
        return ExperienceEntry(
            id=UUID(data["id"]),
            title=data["title"],
            company=data["company"],
            location=data.get("location"),
            from_date=date.fromisoformat(data["from_date"]),
            to_date=date.fromisoformat(data["to_date"]) if data.get("to_date") else None,
            current=data.get("current", False),
            description=data.get("description"),
        )

    @staticmethod
    def _education_to_json(entry: EducationEntry) -> dict[str, Any]:
        return {
            "id": str(entry.id),
            "school": entry.school,
            "degree": entry.degree,
            "field_of_study": entry.field_of_study,
            "from_date": entry.from_date.isoformat(),
            "to_date": entry.to_date.isoformat() if entry.to_date else None,
            "current": entry.current,
            "description": entry.description,
        }

    @staticmethod
    def _education_from_json(data: dict[str, Any]) -> EducationEntry:
        return EducationEntry(
            id=UUID(data["id"]),
            school=data["school"],
            degree=data["degree"],
            field_of_study=data["field_of_study"],
            from_date=date.fromisoformat(data["from_date"]),
            to_date=date.fromisoformat(data["to_date"]) if data.get("to_date") else None,
            current=data.get("current", False),
            description=data.get("description"),
        )
