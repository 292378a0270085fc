"""Shared fixtures: settings factory and an in-memory mail sender."""

from contextlib import asynccontextmanager

import pytest

from gmail_mcp.config import Settings


class FakeSession:
    def __init__(self, sender: "FakeSender"):
        self.sender = sender

    async def send(self, envelope):
        self.sender.sent.append(envelope)
        if self.sender.send_error is not None:
            raise self.sender.send_error
        return "<fake-1@example.com>"

    async def verify(self):
        self.sender.verify_calls += 1
        if self.sender.verify_error is not None:
            raise self.sender.verify_error
        return True


class FakeSender:
    """Records every session, envelope and verify call."""

    def __init__(self, session_error=None, send_error=None, verify_error=None):
        self.session_error = session_error
        self.send_error = send_error
        self.verify_error = verify_error
        self.sessions = []
        self.sent = []
        self.verify_calls = 0

    @property
    def calls(self) -> int:
        return len(self.sessions) + len(self.sent) + self.verify_calls

    @asynccontextmanager
    async def create_session(self, account, secret):
        self.sessions.append((account, secret))
        if self.session_error is not None:
            raise self.session_error
        yield FakeSession(self)


def make_settings(**overrides) -> Settings:
    values = {
        "gmail_user": "sender@gmail.com",
        "gmail_app_password": "abcd efgh ijkl mnop",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def unconfigured() -> Settings:
    return make_settings(gmail_user="", gmail_app_password="")


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()
