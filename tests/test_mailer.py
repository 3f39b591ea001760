"""
Tests for the SMTP mail transport.
aiosmtplib.send is mocked; no network connections are made.
"""
import asyncio
from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest

from portfolio.core.config import Settings
from portfolio.core.mailer import MailDeliveryError, MailError, MailTimeoutError, Mailer


def make_mailer(**overrides) -> Mailer:
    values = {
        "smtp_host": "smtp.example.com",
        "smtp_port": 587,
        "smtp_user": "relay-user",
        "smtp_pass": "relay-pass",
        "to_email": "owner@example.com",
        "from_email": "site@example.com",
        "smtp_timeout": 5.0,
    }
    values.update(overrides)
    return Mailer(Settings(_env_file=None, **values))


async def send_sample(mailer: Mailer):
    return await mailer.send(
        from_addr=mailer.sender,
        to_addr=mailer.to_email,
        reply_to="jane@x.com",
        subject="[Portfolio] Hello",
        html="<p>Hi</p>",
    )


class TestMailer:

    def test_sender_header(self):
        assert make_mailer().sender == "Portfolio Contact <site@example.com>"

    def test_configured(self):
        assert make_mailer().configured
        assert not make_mailer(smtp_host=None).configured

    def test_build_message(self):
        msg = make_mailer().build_message(
            "Portfolio Contact <site@example.com>",
            "owner@example.com",
            "jane@x.com",
            "[Portfolio] Hello",
            "<p>Hi</p>",
        )

        assert msg["From"] == "Portfolio Contact <site@example.com>"
        assert msg["To"] == "owner@example.com"
        assert msg["Reply-To"] == "jane@x.com"
        assert msg["Subject"] == "[Portfolio] Hello"
        assert msg.get_content_type() == "text/html"
        assert "<p>Hi</p>" in msg.get_content()

    @pytest.mark.asyncio
    async def test_send_uses_relay_settings(self):
        mailer = make_mailer()

        with patch("portfolio.core.mailer.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            mock_send.return_value = ({}, "OK")
            await send_sample(mailer)

        mock_send.assert_awaited_once()
        kwargs = mock_send.await_args.kwargs
        assert kwargs["hostname"] == "smtp.example.com"
        assert kwargs["port"] == 587
        assert kwargs["username"] == "relay-user"
        assert kwargs["password"] == "relay-pass"
        assert kwargs["use_tls"] is False
        msg = mock_send.await_args.args[0]
        assert msg["Reply-To"] == "jane@x.com"

    @pytest.mark.asyncio
    async def test_implicit_tls_on_port_465(self):
        mailer = make_mailer(smtp_port=465)

        with patch("portfolio.core.mailer.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            await send_sample(mailer)

        assert mock_send.await_args.kwargs["use_tls"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            aiosmtplib.SMTPAuthenticationError(535, "authentication failed"),
            aiosmtplib.SMTPRecipientsRefused([]),
            ConnectionRefusedError("connection refused"),
        ],
    )
    async def test_smtp_errors_become_delivery_errors(self, error):
        mailer = make_mailer()

        with patch("portfolio.core.mailer.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            mock_send.side_effect = error
            with pytest.raises(MailDeliveryError) as exc_info:
                await send_sample(mailer)

        assert isinstance(exc_info.value, MailError)
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_hung_relay_times_out(self):
        mailer = make_mailer(smtp_timeout=0.05)

        async def hang(*args, **kwargs):
            await asyncio.sleep(5)

        with patch("portfolio.core.mailer.aiosmtplib.send", side_effect=hang):
            with pytest.raises(MailTimeoutError):
                await send_sample(mailer)

    @pytest.mark.asyncio
    async def test_client_timeout_is_a_timeout(self):
        mailer = make_mailer()

        with patch("portfolio.core.mailer.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            mock_send.side_effect = aiosmtplib.SMTPConnectTimeoutError("timed out connecting")
            with pytest.raises(MailTimeoutError):
                await send_sample(mailer)
