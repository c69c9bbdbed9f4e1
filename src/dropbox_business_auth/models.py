"""
Pydantic models for the Dropbox team API and the normalized profile.

TeamMemberPage and TeamMember mirror the JSON returned by
/2/team/members/list and /2/team/members/list/continue; unknown fields are
ignored. NormalizedProfile is the provider-neutral record handed to the
application's verify callback.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TEAM_ADMIN = "team_admin"


class MemberRole(BaseModel):
    """Member role; ``tag`` holds the ``.tag`` discriminator (e.g. team_admin)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    tag: str = Field(alias=".tag")


class TeamMember(BaseModel):
    """One entry of the ``members`` array; ``profile`` is kept as the raw mapping."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    role: MemberRole
    profile: Dict[str, Any]

    @property
    def is_team_admin(self) -> bool:
        """True when the member carries the team_admin role."""
        return self.role.tag == TEAM_ADMIN


class TeamMemberPage(BaseModel):
    """One page of team members with the cursor for the next page."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    members: List[TeamMember]
    has_more: bool
    cursor: Optional[str] = None


class AdminName(BaseModel):
    """Name fields of a member profile."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    display_name: str
    surname: str
    given_name: str


class AdminProfile(BaseModel):
    """The subset of a member profile we normalize from."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    account_id: str
    name: AdminName
    email: str


class _ProfileModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ProfileName(_ProfileModel):
    given_name: str
    family_name: str
    middle_name: str = ""


class ProfileEmail(_ProfileModel):
    value: str


class NormalizedProfile(_ProfileModel):
    """Canonical user profile. ``id`` is the Dropbox account id of the team admin."""

    provider: str
    id: str
    display_name: str
    name: ProfileName
    emails: List[ProfileEmail]
    raw: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Return the profile with camelCase keys (displayName, givenName, ...)."""
        return self.model_dump(by_alias=True)
