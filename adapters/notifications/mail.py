"""SMTP email channel."""

from __future__ import annotations

import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
from html import escape
from typing import Any, Callable, Dict, Mapping, Optional

from app_platform.config.notifications import NotificationSettings
from domains.notifications import ChannelConfigurationError, ChannelDeliveryError, Recipient
from logging_lib import get_logger


logger = get_logger("notifications.email")


def build_email_message(
    recipient: Recipient,
    title: str,
    message: str,
    data: Mapping[str, Any],
    *,
    app_name: str,
    from_email: Optional[str],
) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = title
    msg["To"] = recipient.email
    if from_email:
        msg["From"] = from_email
    msg["Message-ID"] = make_msgid()

    greeting = f"Hi {recipient.name}," if recipient.name else "Hi,"
    action_url = data.get("action_url") or ""
    action_text = data.get("action_text") or "Open"

    text_lines = [greeting, "", message]
    html_parts = [f"<p>{escape(greeting)}</p>", f"<p>{escape(message)}</p>"]
    if action_url:
        text_lines += ["", f"{action_text}: {action_url}"]
        html_parts.append(f'<p><a href="{escape(action_url, quote=True)}">{escape(action_text)}</a></p>')
    text_lines += ["", app_name]
    html_parts.append(f"<p>{escape(app_name)}</p>")

    msg.set_content("\n".join(text_lines))
    msg.add_alternative("".join(html_parts), subtype="html")
    return msg


class EmailChannel:
    channel_id = "email"

    def __init__(
        self,
        settings_provider: Callable[[], NotificationSettings],
        *,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
        smtp_ssl_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP_SSL,
    ) -> None:
        self._settings_provider = settings_provider
        self._smtp_factory = smtp_factory
        self._smtp_ssl_factory = smtp_ssl_factory

    def send(
        self,
        recipient: Recipient,
        type: str,
        title: str,
        message: str,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not recipient.email:
            raise ChannelConfigurationError("Email address not configured for user")

        settings = self._settings_provider()
        cfg = settings.channel(self.channel_id)
        host = cfg.option("smtp_host")
        port = int(cfg.option("smtp_port", 587))
        if not host:
            raise ChannelConfigurationError("SMTP host is not configured")

        msg = build_email_message(
            recipient,
            title,
            message,
            data or {},
            app_name=settings.app_name,
            from_email=cfg.option("from_email"),
        )

        username = cfg.option("username")
        password = cfg.option("password")
        timeout = settings.http_timeout_s

        try:
            context = ssl.create_default_context()
            if cfg.option("use_tls", True):
                with self._smtp_factory(host, port, timeout=timeout) as server:
                    server.ehlo()
                    server.starttls(context=context)
                    server.ehlo()
                    if username and password:
                        server.login(username, password)
                    server.send_message(msg)
            else:
                with self._smtp_ssl_factory(host, port, context=context, timeout=timeout) as server:
                    if username and password:
                        server.login(username, password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("email_send_failed", user_id=recipient.id, notification_type=type, error=str(exc))
            raise ChannelDeliveryError(f"Failed to send email via SMTP: {exc}") from exc

        logger.info("email_sent", user_id=recipient.id, notification_type=type)

        return {"email": recipient.email, "message_id": msg["Message-ID"], "sent": True}

    def is_available_for(self, recipient: Recipient) -> bool:
        return bool(recipient.email) and self._settings_provider().is_enabled(self.channel_id)
