"""Tests for the SMTP and SMS channels."""

from __future__ import annotations

import smtplib
from types import SimpleNamespace

import pytest

from adapters.notifications import EmailChannel, TwilioChannel
from adapters.notifications.twilio_client import TwilioConfig
from domains.notifications import ChannelConfigurationError, ChannelDeliveryError, Recipient

from tests.utils.notifications import make_settings


class _FakeSMTP:
    instances: list = []

    def __init__(self, host, port, **kwargs):
        self.host = host
        self.port = port
        self.kwargs = kwargs
        self.sent = []
        self.logged_in = None
        self.tls = False
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        pass

    def starttls(self, context=None):
        self.tls = True

    def login(self, username, password):
        self.logged_in = (username, password)

    def send_message(self, msg):
        self.sent.append(msg)


class _RefusingSMTP(_FakeSMTP):
    def send_message(self, msg):
        raise smtplib.SMTPRecipientsRefused({"ada@example.com": (550, b"no such user")})


@pytest.fixture(autouse=True)
def _clear_smtp():
    _FakeSMTP.instances.clear()


def _email_settings(**overrides):
    options = {
        "smtp_host": "smtp.example",
        "smtp_port": 2525,
        "username": "mailer",
        "password": "pw",
        "use_tls": True,
        "from_email": "noreply@example.com",
    }
    options.update(overrides)
    settings = make_settings(enabled=("database", "email"), options={"email": options}, app_name="Relay")
    return lambda: settings


def test_email_sends_multipart_message(recipient):
    channel = EmailChannel(_email_settings(), smtp_factory=_FakeSMTP, smtp_ssl_factory=_FakeSMTP)

    result = channel.send(recipient, "invite", "Welcome", "Your account is ready", {"action_url": "https://app/login"})

    server = _FakeSMTP.instances[0]
    assert (server.host, server.port, server.tls) == ("smtp.example", 2525, True)
    assert server.logged_in == ("mailer", "pw")

    msg = server.sent[0]
    assert msg["To"] == "ada@example.com"
    assert msg["Subject"] == "Welcome"
    assert msg.is_multipart()
    assert "https://app/login" in msg.get_body(preferencelist=("plain",)).get_content()
    assert result == {"email": "ada@example.com", "message_id": msg["Message-ID"], "sent": True}


def test_email_requires_address():
    channel = EmailChannel(_email_settings(), smtp_factory=_FakeSMTP)

    with pytest.raises(ChannelConfigurationError):
        channel.send(Recipient(id="3"), "info", "t", "m")
    assert channel.is_available_for(Recipient(id="3")) is False


def test_smtp_failure_is_a_delivery_error(recipient):
    channel = EmailChannel(_email_settings(), smtp_factory=_RefusingSMTP)

    with pytest.raises(ChannelDeliveryError):
        channel.send(recipient, "info", "t", "m")


def _twilio_settings(**overrides):
    options = {"account_sid": "AC1", "auth_token": "tok", "from_number": "+15550001111"}
    options.update(overrides)
    settings = make_settings(enabled=("database", "twilio"), options={"twilio": options})
    return lambda: settings


def test_twilio_prefers_user_phone_setting():
    created = []

    class _Messages:
        def create(self, **kwargs):
            created.append(kwargs)
            return SimpleNamespace(sid="SM123")

    configs = []

    def factory(config: TwilioConfig):
        configs.append(config)
        return SimpleNamespace(messages=_Messages())

    channel = TwilioChannel(_twilio_settings(), client_factory=factory)
    user = Recipient(id="5", phone="+15559990000", settings={"notifications": {"twilio_phone_number": "+15551234567"}})

    result = channel.send(user, "info", "Alert", "Pump offline")

    assert result == {"sid": "SM123", "to": "+15551234567", "sent": True}
    assert created == [{"to": "+15551234567", "body": "Alert\n\nPump offline", "from_": "+15550001111"}]
    assert configs[0].account_sid == "AC1"


def test_twilio_messaging_service_wins_over_from_number():
    config = TwilioConfig(account_sid="AC", auth_token="t", from_number="+1", messaging_service_sid="MG9")

    assert config.sender_params() == {"messaging_service_sid": "MG9"}


def test_twilio_without_phone_is_not_configured():
    channel = TwilioChannel(_twilio_settings(), client_factory=lambda cfg: None)

    assert channel.is_available_for(Recipient(id="5")) is False
    with pytest.raises(ChannelConfigurationError, match="Phone number"):
        channel.send(Recipient(id="5"), "info", "t", "m")
