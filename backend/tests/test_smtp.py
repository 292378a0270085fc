"""Tests for the aiosmtplib-backed mail sender."""

import asyncio
from unittest import mock

import aiosmtplib
import pytest

from conftest import make_settings
from gmail_mcp.errors import AuthError, TransportError
from gmail_mcp.models import Envelope, HtmlBody, PlainTextBody
from gmail_mcp.services.oauth import xoauth2_string
from gmail_mcp.services.smtp import AccessToken, AppPassword, SMTPMailSender, build_message


def _run(coro):
    return asyncio.run(coro)


def _fake_smtp() -> mock.AsyncMock:
    smtp = mock.AsyncMock()
    smtp.is_connected = True
    smtp.close = mock.MagicMock()
    return smtp


def _envelope(body) -> Envelope:
    return Envelope(sender="sender@gmail.com", to="bob@example.com", subject="Hi", body=body)


def test_build_message_plain_text():
    msg = build_message(_envelope(PlainTextBody("Hello Bob")))
    assert msg["From"] == "sender@gmail.com"
    assert msg["To"] == "bob@example.com"
    assert msg["Subject"] == "Hi"
    assert msg.get_content_type() == "text/plain"
    assert msg.get_content().rstrip("\n") == "Hello Bob"
    assert msg["Message-ID"].endswith("@gmail.com>")


def test_build_message_html():
    msg = build_message(_envelope(HtmlBody("<b>Hello</b>")))
    assert msg.get_content_type() == "text/html"
    assert msg.get_content().rstrip("\n") == "<b>Hello</b>"


def test_build_message_ids_are_unique():
    env = _envelope(PlainTextBody("x"))
    assert build_message(env)["Message-ID"] != build_message(env)["Message-ID"]


async def _send(sender, secret, envelope):
    async with sender.create_session("sender@gmail.com", secret) as session:
        return await session.send(envelope)


async def _verify(sender, secret):
    async with sender.create_session("sender@gmail.com", secret) as session:
        return await session.verify()


def test_send_with_app_password():
    smtp = _fake_smtp()
    with mock.patch("aiosmtplib.SMTP", return_value=smtp) as smtp_cls:
        message_id = _run(_send(SMTPMailSender(make_settings()), AppPassword("pw"), _envelope(PlainTextBody("x"))))

    smtp_cls.assert_called_once_with(
        hostname="smtp.gmail.com", port=465, use_tls=True, start_tls=False, timeout=30
    )
    smtp.connect.assert_awaited_once()
    smtp.login.assert_awaited_once_with("sender@gmail.com", "pw")
    sent = smtp.send_message.await_args.args[0]
    assert sent["Message-ID"] == message_id
    smtp.quit.assert_awaited_once()


def test_starttls_port():
    sender = SMTPMailSender(make_settings(smtp_port=587))
    assert sender.use_tls is False
    assert sender.use_starttls is True


def test_login_rejected_raises_auth_error():
    smtp = _fake_smtp()
    smtp.login.side_effect = aiosmtplib.SMTPAuthenticationError(535, "5.7.8 Username and Password not accepted")
    with mock.patch("aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(AuthError, match="535 5.7.8 Username and Password not accepted"):
            _run(_send(SMTPMailSender(make_settings()), AppPassword("bad"), _envelope(PlainTextBody("x"))))

    smtp.send_message.assert_not_awaited()
    smtp.quit.assert_awaited_once()


def test_connect_failure_raises_transport_error():
    smtp = _fake_smtp()
    smtp.connect.side_effect = aiosmtplib.SMTPConnectError("Error connecting to smtp.gmail.com on port 465")
    smtp.is_connected = False
    with mock.patch("aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(TransportError, match="Error connecting to smtp.gmail.com"):
            _run(_verify(SMTPMailSender(make_settings()), AppPassword("pw")))

    smtp.login.assert_not_awaited()


def test_send_failure_raises_transport_error():
    smtp = _fake_smtp()
    smtp.send_message.side_effect = aiosmtplib.SMTPResponseException(550, "5.1.1 No such user")
    with mock.patch("aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(TransportError, match="550 5.1.1 No such user"):
            _run(_send(SMTPMailSender(make_settings()), AppPassword("pw"), _envelope(PlainTextBody("x"))))


def test_xoauth2_login():
    smtp = _fake_smtp()
    smtp.execute_command.return_value = aiosmtplib.SMTPResponse(235, "2.7.0 Accepted")
    with mock.patch("aiosmtplib.SMTP", return_value=smtp):
        assert _run(_verify(SMTPMailSender(make_settings()), AccessToken("ya29.token"))) is True

    smtp.login.assert_not_awaited()
    smtp.execute_command.assert_awaited_once_with(
        b"AUTH", b"XOAUTH2", xoauth2_string("sender@gmail.com", "ya29.token").encode("ascii")
    )
    smtp.noop.assert_awaited_once()


def test_xoauth2_rejected():
    smtp = _fake_smtp()
    smtp.execute_command.side_effect = [
        aiosmtplib.SMTPResponse(334, "eyJzdGF0dXMiOiI0MDAifQ=="),
        aiosmtplib.SMTPResponse(535, "5.7.8 Username and Password not accepted"),
    ]
    with mock.patch("aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(AuthError, match="^535 5.7.8"):
            _run(_verify(SMTPMailSender(make_settings()), AccessToken("expired")))

    assert smtp.execute_command.await_args_list[-1] == mock.call(b"")


def test_verify_failure_raises_transport_error():
    smtp = _fake_smtp()
    smtp.noop.side_effect = aiosmtplib.SMTPServerDisconnected("Connection lost")
    with mock.patch("aiosmtplib.SMTP", return_value=smtp):
        with pytest.raises(TransportError, match="Connection lost"):
            _run(_verify(SMTPMailSender(make_settings()), AppPassword("pw")))


def test_quit_failure_closes_socket():
    smtp = _fake_smtp()
    smtp.quit.side_effect = aiosmtplib.SMTPServerDisconnected("gone")
    with mock.patch("aiosmtplib.SMTP", return_value=smtp):
        assert _run(_verify(SMTPMailSender(make_settings()), AppPassword("pw"))) is True
    smtp.close.assert_called_once()
