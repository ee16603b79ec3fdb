"""Map raw request fields onto partial profile updates.

Everything in here is pure: no I/O, no repositories. A field counts as
present when it is neither ``None`` nor the empty string.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from core.exceptions import FieldValidationError
from domain.entities.profile import SocialNetwork

PROFILE_REQUIRED_FIELDS = {
    "status": "Status is required",
    "skills": "Skills is required",
}

EXPERIENCE_REQUIRED_FIELDS = {
    "title": "Title is required",
    "company": "Company is required",
    "from_date": "From date is required",
}

EDUCATION_REQUIRED_FIELDS = {
    "school": "School is required",
    "degree": "Degree is required",
    "from_date": "From date is required",
    "field_of_study": "Field of study is required",
}

EXPERIENCE_FIELDS = (
    "title",
    "company",
    "location",
    "from_date",
    "to_date",
    "current",
    "description",
)

EDUCATION_FIELDS = (
    "school",
    "degree",
    "field_of_study",
    "from_date",
    "to_date",
    "current",
    "description",
)

PROFILE_SCALAR_FIELDS = (
    "company",
    "website",
    "location",
    "bio",
    "status",
    "github_username",
)


def is_present(value: Any) -> bool:
    return value is not None and value != ""


def require_fields(raw: Mapping[str, Any], required: Mapping[str, str]) -> None:
    """Raise FieldValidationError listing every missing required field."""
    errors = [
        {"field": name, "message": message}
        for name, message in required.items()
        if not is_present(raw.get(name))
    ]
    if errors:
        raise FieldValidationError(errors)


def split_skills(raw: str) -> list[str]:
    """Split a comma separated skill list, trimming each token.

    Order is kept and empty tokens are not dropped: ``"a,,b"`` gives
    ``["a", "", "b"]``.
    """
    return [skill.strip() for skill in raw.split(",")]


def project_profile_fields(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Build a partial profile update from the present fields of ``raw``."""
    fields: dict[str, Any] = {
        name: raw[name] for name in PROFILE_SCALAR_FIELDS if is_present(raw.get(name))
    }

    if is_present(raw.get("skills")):
        fields["skills"] = split_skills(raw["skills"])

    social = {
        network.value: raw[network.value]
        for network in SocialNetwork
        if is_present(raw.get(network.value))
    }
    if social:
        fields["social"] = social

    return fields


def project_entry_fields(raw: Mapping[str, Any], names: Iterable[str]) -> dict[str, Any]:
    """Keep only the present values of ``names`` for a new list entry."""
    return {name: raw[name] for name in names if is_present(raw.get(name))}
