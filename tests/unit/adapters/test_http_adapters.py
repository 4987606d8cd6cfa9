import json
from uuid import uuid4

import httpx
import pytest

from src.adapter.services.gotrue_user_directory import (
    DirectorySettings,
    GoTrueUserDirectory,
    directory_user_from_payload,
)
from src.adapter.services.resend_email_sender import EmailSettings, ResendEmailSender
from src.app.services.errors import (
    DirectoryNotConfiguredError,
    EmailNotConfiguredError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)


class Recorder:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responses.pop(0)


def make_directory(recorder, **overrides):
    settings = dict(base_url="http://directory.test", service_key="service-key")
    settings.update(overrides)
    return GoTrueUserDirectory(
        DirectorySettings(**settings), transport=httpx.MockTransport(recorder)
    )


def test_directory_payload_is_parsed():
    user_id = uuid4()

    user = directory_user_from_payload(
        {
            "id": str(user_id),
            "email": "a@example.com",
            "created_at": "2024-05-01T10:00:00Z",
            "last_sign_in_at": "2024-05-02T08:30:00+02:00",
            "app_metadata": {"provider": "email"},
        }
    )

    assert user.id == user_id
    assert user.created_at.tzinfo is None
    assert user.created_at.hour == 10
    assert user.last_sign_in_at.hour == 6
    assert user.app_metadata == {"provider": "email"}


@pytest.mark.asyncio
async def test_directory_lists_users_with_service_key():
    # Arrange
    payload = {"users": [{"id": str(uuid4()), "email": "a@example.com"}], "aud": "authenticated"}
    recorder = Recorder(httpx.Response(200, json=payload))

    # Act
    users = await make_directory(recorder).list_users(page=2, per_page=50)

    # Assert
    assert [user.email for user in users] == ["a@example.com"]
    request = recorder.requests[0]
    assert request.url.path == "/auth/v1/admin/users"
    assert request.url.params["page"] == "2"
    assert request.url.params["per_page"] == "50"
    assert request.headers["apikey"] == "service-key"
    assert request.headers["Authorization"] == "Bearer service-key"


@pytest.mark.asyncio
async def test_directory_get_missing_user_is_none():
    recorder = Recorder(httpx.Response(404, json={"msg": "User not found"}))

    assert await make_directory(recorder).get_user(uuid4()) is None


@pytest.mark.asyncio
async def test_directory_create_user_sends_confirmed_account():
    user_id = uuid4()
    recorder = Recorder(httpx.Response(200, json={"id": str(user_id), "email": "new@example.com"}))

    user = await make_directory(recorder).create_user(
        "new@example.com", "pw", app_metadata={"provider": "keycloak"}
    )

    assert user.id == user_id
    body = json.loads(recorder.requests[0].content)
    assert body == {
        "email": "new@example.com",
        "password": "pw",
        "email_confirm": True,
        "app_metadata": {"provider": "keycloak"},
    }


@pytest.mark.asyncio
async def test_directory_update_sends_only_given_fields():
    user_id = uuid4()
    recorder = Recorder(httpx.Response(200, json={"user": {"id": str(user_id)}}))

    user = await make_directory(recorder).update_user(user_id, password="new-pw")

    assert user.id == user_id
    assert recorder.requests[0].method == "PUT"
    assert json.loads(recorder.requests[0].content) == {"password": "new-pw"}


@pytest.mark.asyncio
async def test_directory_rejection_message_is_passed_through():
    recorder = Recorder(httpx.Response(422, json={"msg": "Password should be at least 6 characters"}))

    with pytest.raises(UpstreamRejectedError) as exc_info:
        await make_directory(recorder).create_user("a@example.com", "x")

    assert exc_info.value.message == "Password should be at least 6 characters"


@pytest.mark.asyncio
async def test_directory_without_service_key_is_not_configured():
    recorder = Recorder()

    with pytest.raises(DirectoryNotConfiguredError):
        await make_directory(recorder, service_key="").list_users(page=1, per_page=10)

    assert recorder.requests == []


def make_sender(recorder, api_key="re_test"):
    return ResendEmailSender(
        EmailSettings(api_url="http://email.test/emails", api_key=api_key, sender="Team <team@example.com>"),
        transport=httpx.MockTransport(recorder),
    )


@pytest.mark.asyncio
async def test_email_is_posted_to_provider():
    recorder = Recorder(httpx.Response(200, json={"id": "email-1"}))

    await make_sender(recorder).send(["guest@example.com"], "Hello", "<p>Hi</p>")

    request = recorder.requests[0]
    assert request.headers["Authorization"] == "Bearer re_test"
    assert json.loads(request.content) == {
        "from": "Team <team@example.com>",
        "to": ["guest@example.com"],
        "subject": "Hello",
        "html": "<p>Hi</p>",
    }


@pytest.mark.asyncio
async def test_email_without_key_is_not_configured():
    recorder = Recorder()

    with pytest.raises(EmailNotConfiguredError) as exc_info:
        await make_sender(recorder, api_key="").send(["a@example.com"], "s", "b")

    assert exc_info.value.message == "Invite email skipped: email provider is not configured."
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_email_provider_outage_is_unavailable():
    recorder = Recorder(httpx.Response(503, json={"message": "provider timeout"}))

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await make_sender(recorder).send(["a@example.com"], "s", "b")

    assert exc_info.value.message == "Invite email failed: provider timeout"


@pytest.mark.asyncio
async def test_directory_html_body_is_bad_gateway():
    recorder = Recorder(httpx.Response(200, text="<html>proxy login</html>"))

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        await make_directory(recorder).get_user(uuid4())

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_directory_update_can_change_email():
    user_id = uuid4()
    recorder = Recorder(
        httpx.Response(200, json={"id": str(user_id), "email": "new@example.com"})
    )

    user = await make_directory(recorder).update_user(
        user_id, email="new@example.com", email_confirm=True
    )

    assert user.email == "new@example.com"
    assert json.loads(recorder.requests[0].content) == {
        "email": "new@example.com",
        "email_confirm": True,
    }


@pytest.mark.asyncio
async def test_directory_delete_user():
    user_id = uuid4()
    recorder = Recorder(httpx.Response(200, json={}))

    await make_directory(recorder).delete_user(user_id)

    assert recorder.requests[0].method == "DELETE"
    assert recorder.requests[0].url.path == f"/auth/v1/admin/users/{user_id}"
