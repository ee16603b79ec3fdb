"""Profile API routes."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_github_service, get_profile_service
from api.v1.schemas.common import ErrorResponse, MessageResponse, ValidationErrorResponse
from api.v1.schemas.profile import (
    EducationCreate,
    ExperienceCreate,
    OwnerSummary,
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpsert,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.profile import Profile
from domain.entities.user import User
from domain.services.github_service import GitHubService
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profiles"])


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get my profile",
    responses={
        200: {"description": "Profile of the authenticated user"},
        404: {"model": ErrorResponse, "description": "User has no profile yet"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the authenticated user's profile with their name and avatar."""
    result = await service.get_for_user(user.id)
    return ProfileDetailResponse(data=_build_profile_response(result.profile, result.owner))


@router.post(
    "",
    response_model=ProfileDetailResponse,
    summary="Create or update my profile",
    responses={
        200: {"description": "Profile created or updated"},
        400: {"model": ValidationErrorResponse, "description": "Status or skills missing"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upsert_profile(
    request: Request,
    user: CurrentUser,
    body: ProfileUpsert | None = None,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """
    Create the authenticated user's profile, or update it if it exists.

    `skills` is a comma separated string. Only supplied fields are written;
    anything left out keeps its current value.
    """
    profile = await service.upsert(user.id, _fields_of(body))
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="List all profiles",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_profiles(
    request: Request,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileListResponse:
    """Get every profile with its owner's name and avatar. Public."""
    results = await service.get_all()
    return ProfileListResponse(
        data=[_build_profile_response(r.profile, r.owner) for r in results]
    )


@router.get(
    "/user/{user_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile by user ID",
    responses={
        200: {"description": "Profile of the given user"},
        404: {
            "model": ErrorResponse,
            "description": "No profile for this user, or malformed user ID",
        },
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile_by_user(
    request: Request,
    user_id: str,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get any user's profile. Public."""
    result = await service.get_by_user_id(user_id)
    return ProfileDetailResponse(data=_build_profile_response(result.profile, result.owner))


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Delete my account",
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_account(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    """Delete the authenticated user's posts, profile and account."""
    await service.delete_account(user.id)
    return MessageResponse(message="User deleted")


@router.put(
    "/experience",
    response_model=ProfileDetailResponse,
    summary="Add an experience entry",
    responses={
        400: {
            "model": ValidationErrorResponse,
            "description": "Title, company or from_date missing",
        },
        404: {"model": ErrorResponse, "description": "User has no profile yet"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_experience(
    request: Request,
    user: CurrentUser,
    body: ExperienceCreate | None = None,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Add an experience entry. The newest entry is listed first."""
    profile = await service.add_experience(user.id, _fields_of(body))
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.delete(
    "/experience/{exp_id}",
    response_model=ProfileDetailResponse,
    summary="Remove an experience entry",
    responses={
        404: {
            "model": ErrorResponse,
            "description": "Profile or experience entry not found",
        },
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_experience(
    request: Request,
    exp_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Remove an experience entry from the authenticated user's profile."""
    profile = await service.remove_experience(user.id, exp_id)
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.put(
    "/education",
    response_model=ProfileDetailResponse,
    summary="Add an education entry",
    responses={
        400: {
            "model": ValidationErrorResponse,
            "description": "School, degree, field_of_study or from_date missing",
        },
        404: {"model": ErrorResponse, "description": "User has no profile yet"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def add_education(
    request: Request,
    user: CurrentUser,
    body: EducationCreate | None = None,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Add an education entry. The newest entry is listed first."""
    profile = await service.add_education(user.id, _fields_of(body))
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.delete(
    "/education/{edu_id}",
    response_model=ProfileDetailResponse,
    summary="Remove an education entry",
    responses={
        404: {
            "model": ErrorResponse,
            "description": "Profile or education entry not found",
        },
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def remove_education(
    request: Request,
    edu_id: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Remove an education entry from the authenticated user's profile."""
    profile = await service.remove_education(user.id, edu_id)
    return ProfileDetailResponse(data=_build_profile_response(profile))


@router.get(
    "/github/{username}",
    response_model=None,
    summary="List a user's GitHub repositories",
    responses={
        200: {"description": "GitHub's response body, unchanged"},
        404: {"model": ErrorResponse, "description": "No GitHub profile found"},
        502: {"model": ErrorResponse, "description": "GitHub could not be reached"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_github_repos(
    request: Request,
    username: str,
    service: GitHubService = Depends(get_github_service),
) -> Any:
    """Relay the five oldest repositories of a GitHub user. Public."""
    return await service.get_repos(username)


def _build_profile_response(profile: Profile, owner: User | None = None) -> ProfileResponse:
    """Convert domain entities to the response schema."""
    response = ProfileResponse.model_validate(profile)
    if owner:
        response.user = OwnerSummary.model_validate(owner)
    return response


def _fields_of(body: BaseModel | None) -> dict[str, Any]:
    """Submitted fields. A missing or null body counts as an empty object."""
    return body.model_dump() if body is not None else {}
