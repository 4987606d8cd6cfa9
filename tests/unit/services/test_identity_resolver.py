from uuid import uuid4

import pytest

from src.app.repositories.identity_link_repository import IdentityLinkConflictError
from src.app.services.identity_resolver import (
    IdentityResolver,
    find_directory_user_by_email,
    list_all_directory_users,
    make_random_password,
    merge_provider_metadata,
)
from src.domain.entities import IdentityLink, Profile
from tests.utils.fakes import FakeIdentityProvider


def test_merge_provider_metadata_keeps_existing_providers():
    merged = merge_provider_metadata({"providers": ["github", 3, ""], "tier": "pro"})

    assert merged["providers"] == ["github", "keycloak", "email"]
    assert merged["provider"] == "keycloak"
    assert merged["tier"] == "pro"


def test_merge_provider_metadata_is_stable():
    once = merge_provider_metadata(None)

    assert merge_provider_metadata(once) == once


def test_random_password_has_requested_length():
    assert len(make_random_password()) == 40
    assert make_random_password() != make_random_password()


@pytest.mark.asyncio
async def test_creates_both_accounts_and_links_them(mock_uow, idp, directory):
    """Unknown email: realm and directory accounts are created and linked"""
    # Act
    resolver = IdentityResolver(mock_uow, idp, directory)
    result = await resolver.ensure_linked_user("  New.User@Example.com ", "  Ada Lovelace ")

    # Assert
    assert result.is_ok()
    linked = result.value
    assert linked.email == "new.user@example.com"
    assert linked.created is True
    assert linked.directory_created is True

    directory_user = directory.find("new.user@example.com")
    assert directory_user.id == linked.user_id
    assert directory_user.app_metadata["provider"] == "keycloak"
    assert idp.users[linked.external_user_id].required_actions == ["UPDATE_PASSWORD"]

    mock_uow.identity_links.upsert.assert_awaited_once_with(
        user_id=linked.user_id,
        external_user_id=linked.external_user_id,
        email="new.user@example.com",
        display_name="Ada Lovelace",
        issuer=idp.issuer,
    )
    mock_uow.profiles.upsert.assert_awaited_once_with(
        linked.user_id, "new.user@example.com", "Ada Lovelace"
    )
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_existing_accounts_are_linked_not_recreated(mock_uow, idp, directory):
    # Arrange
    existing_directory_user = directory.add("known@example.com", providers=["github"])
    existing_realm_user, _ = await idp.ensure_user("known@example.com")

    # Act
    resolver = IdentityResolver(mock_uow, idp, directory)
    result = await resolver.ensure_linked_user("KNOWN@example.com")

    # Assert
    assert result.is_ok()
    assert result.value.created is False
    assert result.value.directory_created is False
    assert result.value.user_id == existing_directory_user.id
    assert result.value.external_user_id == existing_realm_user.id
    assert existing_directory_user.app_metadata["providers"] == ["github", "keycloak", "email"]
    assert len(directory.users) == 1
    assert len(idp.users) == 1


@pytest.mark.asyncio
async def test_second_resolution_is_idempotent(mock_uow, idp, directory):
    resolver = IdentityResolver(mock_uow, idp, directory)

    first = await resolver.ensure_linked_user("repeat@example.com")
    second = await resolver.ensure_linked_user("repeat@example.com")

    assert first.value.created is True
    assert second.value.created is False
    assert second.value.user_id == first.value.user_id
    assert second.value.external_user_id == first.value.external_user_id
    assert len(directory.users) == 1


@pytest.mark.asyncio
async def test_blank_email_is_rejected(mock_uow, idp, directory):
    result = await IdentityResolver(mock_uow, idp, directory).ensure_linked_user("   ")

    assert result.is_err()
    assert result.error.code == "INVALID_ARGUMENT"
    assert idp.users == {}


@pytest.mark.asyncio
async def test_unconfigured_realm_rolls_back(mock_uow, directory):
    idp = FakeIdentityProvider(configured=False)

    result = await IdentityResolver(mock_uow, idp, directory).ensure_linked_user("a@example.com")

    assert result.is_err()
    assert result.error.code == "IDP_NOT_CONFIGURED"
    mock_uow.rollback.assert_awaited_once()
    mock_uow.commit.assert_not_awaited()
    assert directory.users == {}


@pytest.mark.asyncio
async def test_relinking_external_identity_is_a_conflict(mock_uow, idp, directory):
    mock_uow.identity_links.upsert.side_effect = IdentityLinkConflictError("kc-x", uuid4())

    result = await IdentityResolver(mock_uow, idp, directory).ensure_linked_user("b@example.com")

    assert result.is_err()
    assert result.error.code == "CONFLICT"
    mock_uow.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_directory_scan_walks_pages_until_short_page(directory):
    for index in range(5):
        directory.add(f"user{index}@example.com")

    users = await list_all_directory_users(directory, per_page=2)

    assert len(users) == 5
    assert directory.list_calls == 3


@pytest.mark.asyncio
async def test_directory_scan_stops_at_page_cap(directory):
    for index in range(6):
        directory.add(f"user{index}@example.com")

    users = await list_all_directory_users(directory, per_page=2, max_pages=2)

    assert len(users) == 4
    assert directory.list_calls == 2


@pytest.mark.asyncio
async def test_find_directory_user_matches_case_insensitively(directory):
    target = directory.add("Mixed.Case@Example.com")

    found = await find_directory_user_by_email(directory, " mixed.case@example.COM ")

    assert found is target
    assert await find_directory_user_by_email(directory, "") is None


@pytest.mark.asyncio
async def test_resolve_external_user_id_prefers_existing_link(mock_uow, idp, directory):
    user_id = uuid4()
    mock_uow.identity_links.get_by_user_id.return_value = IdentityLink(
        user_id=user_id, external_user_id="kc-linked", email="linked@example.com"
    )

    result = await IdentityResolver(mock_uow, idp, directory).resolve_external_user_id(user_id)

    assert result.value == "kc-linked"
    assert idp.users == {}


@pytest.mark.asyncio
async def test_resolve_external_user_id_links_by_profile_email(mock_uow, idp, directory):
    directory_user = directory.add("profiled@example.com")
    mock_uow.profiles.get_by_id.return_value = Profile(
        id=directory_user.id, email="profiled@example.com", display_name="Pro Filed"
    )

    result = await IdentityResolver(mock_uow, idp, directory).resolve_external_user_id(
        directory_user.id
    )

    assert result.is_ok()
    assert result.value in idp.users


@pytest.mark.asyncio
async def test_resolve_external_user_id_unknown_user(mock_uow, idp, directory):
    result = await IdentityResolver(mock_uow, idp, directory).resolve_external_user_id(uuid4())

    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"
