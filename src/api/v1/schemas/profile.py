"""Pydantic schemas for Profile API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Request bodies only check types here. Required fields are checked by the
# service so that every missing field is reported together.


class ProfileUpsert(BaseModel):
    """Schema for creating or updating the caller's profile."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "Developer",
                "skills": "Python, FastAPI, PostgreSQL",
                "company": "Acme",
                "github_username": "octocat",
                "twitter": "https://twitter.com/octocat",
            }
        },
    )

    status: str | None = None
    skills: str | None = Field(None, description="Comma separated list of skills")
    company: str | None = Field(None, max_length=255)
    website: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=255)
    bio: str | None = None
    github_username: str | None = Field(None, max_length=100)
    youtube: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    linkedin: str | None = None


class ExperienceCreate(BaseModel):
    """Schema for adding an experience entry."""

    title: str | None = None
    company: str | None = None
    location: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    current: bool = False
    description: str | None = None


class EducationCreate(BaseModel):
    """Schema for adding an education entry."""

    school: str | None = None
    degree: str | None = None
    field_of_study: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    current: bool = False
    description: str | None = None


class OwnerSummary(BaseModel):
    """Public part of the owner's account embedded in a profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    avatar: str | None = None


class ExperienceResponse(BaseModel):
    """Schema for an experience entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    company: str
    location: str | None = None
    from_date: date
    to_date: date | None = None
    current: bool = False
    description: str | None = None


class EducationResponse(BaseModel):
    """Schema for an education entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    school: str
    degree: str
    field_of_study: str
    from_date: date
    to_date: date | None = None
    current: bool = False
    description: str | None = None


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    user: OwnerSummary | None = None
    status: str
    company: str | None = None
    website: str | None = None
    location: str | None = None
    bio: str | None = None
    github_username: str | None = None
    skills: list[str] = []
    social: dict[str, str] = {}
    experience: list[ExperienceResponse] = []
    education: list[EducationResponse] = []
    created_at: datetime
    updated_at: datetime


class ProfileListResponse(BaseModel):
    """Schema for list of Profiles."""

    data: list[ProfileResponse]


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse
