"""Profile domain entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any, Protocol, TypeVar
from uuid import UUID, uuid4

from domain.entities.user import User


class SocialNetwork(StrEnum):
    """Social links a profile may carry."""

    YOUTUBE = "youtube"
    FACEBOOK = "facebook"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    LINKEDIN = "linkedin"


@dataclass
class ExperienceEntry:
    """A job held by the profile owner."""

    title: str
    company: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    location: str | None = None
    to_date: date | None = None
    current: bool = False
    description: str | None = None


@dataclass
class EducationEntry:
    """A school attended by the profile owner."""

    school: str
    degree: str
    field_of_study: str
    from_date: date
    id: UUID = field(default_factory=uuid4)
    to_date: date | None = None
    current: bool = False
    description: str | None = None


class _Identified(Protocol):
    id: UUID


EntryT = TypeVar("EntryT", bound=_Identified)


def prepend_entry(entries: list[EntryT], entry: EntryT) -> None:
    """Insert ``entry`` at the head so the newest entry is always first."""
    entries.insert(0, entry)


def remove_entry(entries: list[EntryT], entry_id: str) -> EntryT | None:
    """Remove the first entry whose id matches ``entry_id``.

    Any spelling of the UUID matches. Returns the removed entry, or None when
    nothing matched (list untouched).
    """
    try:
        wanted = UUID(entry_id)
    except ValueError:
        return None
    for index, entry in enumerate(entries):
        if entry.id == wanted:
            return entries.pop(index)
    return None


@dataclass
class Profile:
    """Domain entity for a developer profile. One per user."""

    user_id: UUID
    status: str
    id: UUID = field(default_factory=uuid4)
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    github_username: str | None = None
    skills: list[str] = field(default_factory=list)
    social: dict[str, str] = field(default_factory=dict)
    experience: list[ExperienceEntry] = field(default_factory=list)
    education: list[EducationEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def apply(self, fields: dict[str, Any]) -> None:
        """Merge a projected partial update. Absent fields are left as they are."""
        for name, value in fields.items():
            if name == "social":
                self.social = {**self.social, **value}
            else:
                setattr(self, name, value)
        self.updated_at = datetime.utcnow()

    def add_experience(self, entry: ExperienceEntry) -> None:
        prepend_entry(self.experience, entry)
        self.updated_at = datetime.utcnow()

    def add_education(self, entry: EducationEntry) -> None:
        prepend_entry(self.education, entry)
        self.updated_at = datetime.utcnow()

    def remove_experience(self, entry_id: str) -> ExperienceEntry | None:
        removed = remove_entry(self.experience, entry_id)
        if removed is not None:
            self.updated_at = datetime.utcnow()
        return removed

    def remove_education(self, entry_id: str) -> EducationEntry | None:
        removed = remove_entry(self.education, entry_id)
        if removed is not None:
            self.updated_at = datetime.utcnow()
        return removed


@dataclass(frozen=True, slots=True)
class ProfileWithOwner:
    """Read-only value object: a Profile bundled with its owner's account."""

    profile: Profile
    owner: User | None
