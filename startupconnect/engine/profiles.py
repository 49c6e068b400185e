"""
startupconnect.engine.profiles — Role-Tagged Profile Variants
===============================================================

A member's profile is a tagged variant: the ``kind`` tag is derived from
the member's :class:`~startupconnect.database.models.UserRole` and decides
which fields are valid.  Founders describe their startup, investors (angels
and VCs alike) their investment focus, experts their area of expertise.
All three share the base fields (bio, location, website, picture, language).

Profiles are validated with pydantic; unknown fields are rejected, so a
founder payload can never be stored on an investor account.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from startupconnect.constants import (
    EXPERTISE_AREAS,
    FUNDING_STAGES,
    INDUSTRIES,
    LANGUAGES,
)
from startupconnect.database.models import UserRole
from startupconnect.errors import InvalidProfile

__all__ = [
    "BaseProfile",
    "ExpertProfile",
    "FounderProfile",
    "InvestorProfile",
    "Profile",
    "ROLE_PROFILE_KIND",
    "display_domains",
    "parse_profile",
    "profile_kind_for",
    "profile_to_json",
]


# ---------------------------------------------------------------------------
# Vocabulary checks
# ---------------------------------------------------------------------------
def _one_of(value: str, allowed: tuple[str, ...], label: str) -> str:
    if value not in allowed:
        raise ValueError(f"unknown {label} {value!r}")
    return value


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------
class BaseProfile(BaseModel):
    """Fields every member has regardless of role."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    bio: str | None = Field(default=None, max_length=1000)
    location: str | None = Field(default=None, max_length=100)
    website: HttpUrl | None = None
    profile_picture_url: HttpUrl | None = None
    language: str = "en"

    @field_validator("website", "profile_picture_url", mode="before")
    @classmethod
    def _blank_url_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("language")
    @classmethod
    def _known_language(cls, value: str) -> str:
        if value not in LANGUAGES:
            raise ValueError(f"unsupported language {value!r}")
        return value


class FounderProfile(BaseProfile):
    kind: Literal["founder"] = "founder"
    startup_name: str = Field(min_length=1, max_length=100)
    industry: str
    funding_stage: str
    traction: str | None = None
    needs: str | None = None

    @field_validator("industry")
    @classmethod
    def _industry(cls, value: str) -> str:
        return _one_of(value, INDUSTRIES, "industry")

    @field_validator("funding_stage")
    @classmethod
    def _stage(cls, value: str) -> str:
        return _one_of(value, FUNDING_STAGES, "funding stage")


class InvestorProfile(BaseProfile):
    """Shared by Angel Investors and Venture Capitalists."""

    kind: Literal["investor"] = "investor"
    investment_focus: list[str] = Field(min_length=1)
    funding_range: str | None = None
    portfolio_highlights: str | None = None
    fund_size: str | None = None
    preferred_funding_stages: list[str] = Field(default_factory=list)

    @field_validator("investment_focus")
    @classmethod
    def _focus(cls, value: list[str]) -> list[str]:
        return [_one_of(v, INDUSTRIES, "industry") for v in dict.fromkeys(value)]

    @field_validator("preferred_funding_stages")
    @classmethod
    def _stages(cls, value: list[str]) -> list[str]:
        return [_one_of(v, FUNDING_STAGES, "funding stage") for v in dict.fromkeys(value)]


class ExpertProfile(BaseProfile):
    kind: Literal["expert"] = "expert"
    area_of_expertise: str
    years_of_experience: int = Field(ge=0, le=80)
    services_offered: str | None = None

    @field_validator("area_of_expertise")
    @classmethod
    def _area(cls, value: str) -> str:
        return _one_of(value, EXPERTISE_AREAS, "expertise area")


Profile = Annotated[
    FounderProfile | InvestorProfile | ExpertProfile,
    Field(discriminator="kind"),
]

_profile_adapter: TypeAdapter[Profile] = TypeAdapter(Profile)


# ---------------------------------------------------------------------------
# Role → variant
# ---------------------------------------------------------------------------
ROLE_PROFILE_KIND: dict[UserRole, str] = {
    UserRole.FOUNDER: "founder",
    UserRole.ANGEL_INVESTOR: "investor",
    UserRole.VENTURE_CAPITALIST: "investor",
    UserRole.INDUSTRY_EXPERT: "expert",
}


def profile_kind_for(role: UserRole | str) -> str:
    """Return the profile tag valid for *role*.

    Raises :class:`InvalidProfile` for a role outside :class:`UserRole`.
    """
    try:
        return ROLE_PROFILE_KIND[UserRole(role)]
    except ValueError:
        raise InvalidProfile("role", f"unknown role {role!r}") from None


def parse_profile(role: UserRole | str, data: dict[str, Any]) -> Profile:
    """Validate *data* as the profile variant belonging to *role*.

    The tag is injected from the role; a payload carrying a different tag is
    rejected rather than silently re-tagged.
    """
    kind = profile_kind_for(role)
    payload = dict(data)
    given = payload.pop("kind", None)
    if given is not None and given != kind:
        raise InvalidProfile("kind", f"a {role} profile cannot be of kind {given!r}")
    payload["kind"] = kind

    try:
        return _profile_adapter.validate_python(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = [str(part) for part in first["loc"]]
        if loc and loc[0] == kind:
            loc = loc[1:]
        raise InvalidProfile(".".join(loc) or "profile", first["msg"]) from None


def profile_to_json(profile: Profile) -> dict[str, Any]:
    """JSON-safe dict for the ``users.profile`` column (URLs as strings)."""
    return profile.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------
def display_domains(profile: Profile) -> str:
    """A member's headline domains, e.g. ``"(B2B SaaS, Climate Tech)"``.

    Investors show at most two focus industries.  Returns ``""`` when the
    profile has nothing to show.
    """
    if isinstance(profile, FounderProfile):
        domains = [profile.industry]
    elif isinstance(profile, InvestorProfile):
        domains = profile.investment_focus[:2]
    elif isinstance(profile, ExpertProfile):
        domains = [profile.area_of_expertise]
    else:
        raise TypeError(f"not a profile variant: {type(profile).__name__}")

    domains = [d for d in domains if d]
    if not domains:
        return ""
    return f"({', '.join(domains)})"
