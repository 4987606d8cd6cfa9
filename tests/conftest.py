import pytest

from src.adapter.services.keycloak_admin_client import AdminTokenCache
from src.app.services.reserve_admin import ReserveAdminBootstrap
from tests.utils.fakes import FakeEmailSender, FakeIdentityProvider, FakeUserDirectory


@pytest.fixture
def idp():
    return FakeIdentityProvider()


@pytest.fixture
def directory():
    return FakeUserDirectory()


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture(autouse=True)
def reset_process_state():
    """Token cache and reserve-admin memo are process-wide"""
    AdminTokenCache.clear()
    ReserveAdminBootstrap.reset()
    yield
    AdminTokenCache.clear()
    ReserveAdminBootstrap.reset()
