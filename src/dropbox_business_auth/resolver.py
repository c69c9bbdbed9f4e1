"""
Team admin lookup against the Dropbox v2 team API.

The admin is found by walking /2/team/members/list and its /continue variant
page by page until a member with the team_admin role shows up. Each page needs
the cursor of the previous one, so pages are fetched one after the other. The
request capability (an OAuth2Transport) and the access token are passed in
explicitly; nothing here keeps state between calls.
"""

import copy
import json
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Mapping

from pydantic import ValidationError

from dropbox_business_auth.errors import NotFoundError, ParseError
from dropbox_business_auth.models import (
    AdminProfile,
    NormalizedProfile,
    ProfileEmail,
    ProfileName,
    TeamMemberPage,
)
from dropbox_business_auth.protocol import OAuth2Transport

logger = logging.getLogger(__name__)

PROVIDER = "dropbox"
MEMBERS_LIST_URL = "https://api.dropboxapi.com/2/team/members/list"
MEMBERS_CONTINUE_URL = f"{MEMBERS_LIST_URL}/continue"


def _parse_page(body: str) -> TeamMemberPage:
    try:
        page = TeamMemberPage.model_validate_json(body)
    except ValidationError as exc:
        raise ParseError(f"Invalid team members response: {exc}") from exc
    if page.has_more and not page.cursor:
        raise ParseError("Team members response has more pages but no cursor")
    return page


async def iter_member_pages(
    transport: OAuth2Transport, access_token: str
) -> AsyncIterator[TeamMemberPage]:
    """
    Yield team member pages in order, starting from the first page.

    The next page is only requested once the consumer asks for it, so breaking
    out of the loop stops pagination. Iteration ends after a page reporting
    has_more = false.
    """
    headers = {"Authorization": transport.build_auth_header(access_token)}
    url, body = MEMBERS_LIST_URL, json.dumps(None)
    page_number = 0

    while True:
        page_number += 1
        raw = await transport.request("POST", url, headers, body, access_token)
        page = _parse_page(raw)
        logger.debug(
            "Fetched team members page",
            extra={
                "provider": PROVIDER,
                "page": page_number,
                "members": len(page.members),
                "has_more": page.has_more,
            },
        )
        yield page

        if not page.has_more:
            return
        url, body = MEMBERS_CONTINUE_URL, json.dumps({"cursor": page.cursor})


async def find_team_admin(transport: OAuth2Transport, access_token: str) -> Dict[str, Any]:
    """Return the raw profile of the first team_admin member across all pages."""
    async with aclosing(iter_member_pages(transport, access_token)) as pages:
        async for page in pages:
            admin = next((m for m in page.members if m.is_team_admin), None)
            if admin is not None:
                return admin.profile

    raise NotFoundError("Unable to find member with role team_admin")


def normalize_profile(raw: Mapping[str, Any]) -> NormalizedProfile:
    """Map a Dropbox member profile to a NormalizedProfile; raise ParseError on missing fields."""
    try:
        admin = AdminProfile.model_validate(raw)
    except ValidationError as exc:
        raise ParseError(f"Invalid team admin profile: {exc}") from exc

    return NormalizedProfile(
        provider=PROVIDER,
        id=admin.account_id,
        display_name=admin.name.display_name,
        name=ProfileName(
            given_name=admin.name.given_name,
            family_name=admin.name.surname,
            middle_name="",
        ),
        emails=[ProfileEmail(value=admin.email)],
        raw=copy.deepcopy(dict(raw)),
    )
