"""Tests for notifier implementations."""

import json
import logging

import httpx
import pytest

from modules.notifications.interfaces import INotifier
from modules.notifications.models import Notification, NotificationKind
from modules.notifications.service import (
    InMemoryNotifier,
    LoggingNotifier,
    VeilMailNotifier,
    create_notifier,
)
from shared.config import Settings


@pytest.fixture
def mail_settings() -> Settings:
    return Settings(
        veilmail_api_key="veil_test_key",
        veilmail_api_url="https://mail.example.com/",
        mail_from="auth@example.com",
    )


@pytest.fixture
def welcome() -> Notification:
    return Notification(
        kind=NotificationKind.WELCOME,
        recipient="ann@example.com",
        payload={"name": "Ann"},
    )


def notifier_with(settings: Settings, handler) -> VeilMailNotifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VeilMailNotifier(settings, client=client)


class TestVeilMailNotifier:
    def test_implements_interface(self, mail_settings):
        assert isinstance(VeilMailNotifier(mail_settings), INotifier)

    def test_build_request_body(self, mail_settings, welcome):
        body = VeilMailNotifier(mail_settings).build_request_body(welcome)
        assert body == {
            "from": "auth@example.com",
            "to": ["ann@example.com"],
            "subject": "Welcome!",
            "html": "<p>Welcome, Ann! Your account is active.</p>",
            "tags": ["auth", "welcome"],
            "type": "transactional",
        }

    @pytest.mark.asyncio
    async def test_send_posts_to_emails_endpoint(self, mail_settings, welcome):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "email_123"})

        assert await notifier_with(mail_settings, handler).send(welcome) is True

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://mail.example.com/v1/emails"
        assert request.headers["Authorization"] == "Bearer veil_test_key"
        assert json.loads(request.content)["to"] == ["ann@example.com"]

    @pytest.mark.asyncio
    async def test_send_reports_rejection(self, mail_settings, welcome, caplog):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"error": "invalid recipient"})

        with caplog.at_level(logging.WARNING):
            assert await notifier_with(mail_settings, handler).send(welcome) is False
        assert "Failed to deliver welcome email" in caplog.text

    @pytest.mark.asyncio
    async def test_send_reports_transport_errors(self, mail_settings, welcome):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        assert await notifier_with(mail_settings, handler).send(welcome) is False

    @pytest.mark.asyncio
    async def test_never_sends_more_than_once(self, mail_settings, welcome):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        await notifier_with(mail_settings, handler).send(welcome)
        assert len(calls) == 1


class TestInMemoryNotifier:
    @pytest.mark.asyncio
    async def test_records_messages(self, welcome):
        notifier = InMemoryNotifier()
        assert await notifier.send(welcome) is True
        assert notifier.sent == [welcome]
        assert notifier.rendered[0].subject == "Welcome!"
        assert notifier.last(NotificationKind.WELCOME, "ann@example.com") == welcome
        assert notifier.last(NotificationKind.VERIFICATION) is None

    @pytest.mark.asyncio
    async def test_failing_mode(self, welcome):
        notifier = InMemoryNotifier(fail=True)
        assert await notifier.send(welcome) is False
        assert notifier.sent == []


class TestCreateNotifier:
    def test_with_api_key(self, mail_settings):
        assert isinstance(create_notifier(mail_settings), VeilMailNotifier)

    def test_without_api_key(self):
        assert isinstance(create_notifier(Settings(veilmail_api_key="")), LoggingNotifier)

    @pytest.mark.asyncio
    async def test_logging_notifier_does_not_log_payload(self, caplog):
        code = Notification(
            kind=NotificationKind.PASSWORD_RESET,
            recipient="ann@example.com",
            payload={"url": "https://app.example.com/auth/reset_password?token=s3cr3t"},
        )
        with caplog.at_level(logging.INFO):
            assert await LoggingNotifier().send(code) is True
        assert "Reset your password" in caplog.text
        assert "s3cr3t" not in caplog.text
