import copy
import json

import pytest

from dropbox_business_auth import resolver
from dropbox_business_auth.errors import NotFoundError, ParseError, TransportError
from dropbox_business_auth.resolver import (
    MEMBERS_CONTINUE_URL,
    MEMBERS_LIST_URL,
    find_team_admin,
    iter_member_pages,
    normalize_profile,
)
from tests.fakes import ADMIN_PROFILE, FakeTransport, member, member_profile, page


@pytest.mark.asyncio
async def test_single_page_with_admin_makes_one_call():
    transport = FakeTransport(
        [
            page(
                [
                    member("member_only", member_profile(1)),
                    member("team_admin", ADMIN_PROFILE),
                    member("user_management_admin", member_profile(2)),
                ]
            )
        ]
    )

    profile = await find_team_admin(transport, "at-1")

    assert profile == ADMIN_PROFILE
    assert len(transport.calls) == 1
    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == MEMBERS_LIST_URL
    assert call["body"] == "null"
    assert call["headers"] == {"Authorization": "Bearer at-1"}
    assert call["access_token"] == "at-1"


@pytest.mark.asyncio
async def test_admin_on_later_page_follows_cursor():
    transport = FakeTransport(
        [
            page([member("member_only", member_profile(1))], has_more=True, cursor="c1"),
            page([member("support_admin", member_profile(2))], has_more=True, cursor="c2"),
            page([member("team_admin", ADMIN_PROFILE)], has_more=True, cursor="c3"),
        ]
    )

    profile = await find_team_admin(transport, "at")

    assert profile == ADMIN_PROFILE
    assert [c["url"] for c in transport.calls] == [
        MEMBERS_LIST_URL,
        MEMBERS_CONTINUE_URL,
        MEMBERS_CONTINUE_URL,
    ]
    assert json.loads(transport.calls[1]["body"]) == {"cursor": "c1"}
    assert json.loads(transport.calls[2]["body"]) == {"cursor": "c2"}


@pytest.mark.asyncio
async def test_first_team_admin_wins():
    second_admin = dict(ADMIN_PROFILE, account_id="dbid:other")
    transport = FakeTransport(
        [page([member("team_admin", ADMIN_PROFILE), member("team_admin", second_admin)])]
    )

    profile = await find_team_admin(transport, "at")

    assert profile["account_id"] == "dbid:123"


@pytest.mark.asyncio
async def test_exhausted_pagination_raises_not_found():
    transport = FakeTransport(
        [
            page([member("member_only", member_profile(1))], has_more=True, cursor="c1"),
            page([member("member_only", member_profile(2))], has_more=False),
        ]
    )

    with pytest.raises(NotFoundError):
        await find_team_admin(transport, "at")

    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_empty_team_raises_not_found():
    transport = FakeTransport([page([])])

    with pytest.raises(NotFoundError, match="team_admin"):
        await find_team_admin(transport, "at")


@pytest.mark.asyncio
async def test_malformed_body_stops_pagination():
    transport = FakeTransport(
        [
            page([member("member_only", member_profile(1))], has_more=True, cursor="c1"),
            "<html>502 Bad Gateway</html>",
            page([member("team_admin", ADMIN_PROFILE)]),
        ]
    )

    with pytest.raises(ParseError):
        await find_team_admin(transport, "at")

    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_body_missing_members_is_parse_error():
    transport = FakeTransport([json.dumps({"has_more": False})])

    with pytest.raises(ParseError):
        await find_team_admin(transport, "at")


@pytest.mark.asyncio
async def test_has_more_without_cursor_is_parse_error():
    transport = FakeTransport([page([member("member_only", member_profile(1))], has_more=True)])

    with pytest.raises(ParseError):
        await find_team_admin(transport, "at")

    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_transport_error_propagates_unchanged():
    error = TransportError("POST failed with status 401", status_code=401)
    transport = FakeTransport([error])

    with pytest.raises(TransportError) as exc_info:
        await find_team_admin(transport, "at")

    assert exc_info.value is error


@pytest.mark.asyncio
async def test_pages_are_requested_lazily():
    transport = FakeTransport(
        [
            page([member("member_only", member_profile(1))], has_more=True, cursor="c1"),
            page([member("member_only", member_profile(2))]),
        ]
    )

    pages = iter_member_pages(transport, "at")
    first = await pages.__anext__()

    assert first.cursor == "c1"
    assert len(transport.calls) == 1

    rest = [p async for p in pages]

    assert len(rest) == 1
    assert len(transport.calls) == 2


def test_normalize_profile_maps_fields():
    raw = {
        "account_id": "dbid:123",
        "name": {"display_name": "Jane Doe", "surname": "Doe", "given_name": "Jane"},
        "email": "jane@co.com",
    }

    profile = normalize_profile(raw)

    assert profile.id == "dbid:123"
    assert profile.raw == raw
    result = profile.to_dict()
    result.pop("raw")
    assert result == {
        "provider": "dropbox",
        "id": "dbid:123",
        "displayName": "Jane Doe",
        "name": {"givenName": "Jane", "familyName": "Doe", "middleName": ""},
        "emails": [{"value": "jane@co.com"}],
    }


def test_normalize_profile_keeps_unmapped_fields_in_raw():
    profile = normalize_profile(ADMIN_PROFILE)

    assert profile.raw["team_member_id"] == "dbmid:admin"


@pytest.mark.parametrize(
    "raw",
    [
        {"name": {"display_name": "J", "surname": "D", "given_name": "J"}, "email": "j@co.com"},
        {"account_id": "dbid:1", "email": "j@co.com"},
        {"account_id": "dbid:1", "name": {"display_name": "J"}, "email": "j@co.com"},
        {"account_id": "dbid:1", "name": {"display_name": "J", "surname": "D", "given_name": "J"}},
    ],
)
def test_normalize_profile_missing_fields_is_parse_error(raw):
    with pytest.raises(ParseError):
        normalize_profile(raw)


def test_normalized_profile_raw_is_detached_from_input():
    raw = copy.deepcopy(ADMIN_PROFILE)

    profile = normalize_profile(raw)
    raw["name"]["display_name"] = "Someone Else"
    raw["email"] = "other@co.com"

    assert profile.raw["name"]["display_name"] == "Jane Doe"
    assert profile.raw["email"] == "jane@co.com"
    assert profile.display_name == "Jane Doe"


@pytest.mark.asyncio
async def test_page_iterator_closed_once_admin_found(monkeypatch):
    closed = []
    iter_pages = resolver.iter_member_pages

    async def tracking_pages(transport, access_token):
        try:
            async for p in iter_pages(transport, access_token):
                yield p
        finally:
            closed.append(True)

    monkeypatch.setattr(resolver, "iter_member_pages", tracking_pages)
    transport = FakeTransport(
        [page([member("team_admin", ADMIN_PROFILE)], has_more=True, cursor="c1")]
    )

    profile = await find_team_admin(transport, "at")

    assert profile == ADMIN_PROFILE
    assert closed == [True]
    assert len(transport.calls) == 1
