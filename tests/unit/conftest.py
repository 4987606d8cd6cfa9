import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.workspaces = MagicMock()
    uow.workspaces.get_by_id = AsyncMock(return_value=None)
    uow.workspaces.get_names = AsyncMock(return_value={})
    uow.workspaces.get_group = AsyncMock(return_value=None)

    uow.memberships = MagicMock()
    uow.memberships.get_by_user_and_workspace = AsyncMock(return_value=None)
    uow.memberships.get_by_user_id = AsyncMock(return_value=[])
    uow.memberships.get_by_user_ids = AsyncMock(return_value=[])
    uow.memberships.get_by_workspace_id = AsyncMock(return_value=[])
    uow.memberships.upsert = AsyncMock()
    uow.memberships.delete_by_user_id = AsyncMock(return_value=0)

    uow.invites = MagicMock()
    uow.invites.get_by_token = AsyncMock(return_value=None)
    uow.invites.get_pending_by_workspace_and_email = AsyncMock(return_value=[])
    uow.invites.get_pending_by_email = AsyncMock(return_value=[])
    uow.invites.get_sent_since = AsyncMock(return_value=[])
    uow.invites.create = AsyncMock(side_effect=lambda invite: invite)
    uow.invites.update = AsyncMock(side_effect=lambda invite: invite)

    uow.profiles = MagicMock()
    uow.profiles.get_by_id = AsyncMock(return_value=None)
    uow.profiles.get_by_email = AsyncMock(return_value=None)
    uow.profiles.get_many = AsyncMock(return_value={})
    uow.profiles.upsert = AsyncMock()
    uow.profiles.delete = AsyncMock()

    uow.super_admins = MagicMock()
    uow.super_admins.is_super_admin = AsyncMock(return_value=False)
    uow.super_admins.list_user_ids = AsyncMock(return_value=[])
    uow.super_admins.list_all = AsyncMock(return_value=[])
    uow.super_admins.add = AsyncMock()
    uow.super_admins.remove = AsyncMock()

    uow.identity_links = MagicMock()
    uow.identity_links.get_by_user_id = AsyncMock(return_value=None)
    uow.identity_links.get_by_external_id = AsyncMock(return_value=None)
    uow.identity_links.upsert = AsyncMock()
    uow.identity_links.delete_by_user_id = AsyncMock()

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock(side_effect=lambda event: event)

    return uow
