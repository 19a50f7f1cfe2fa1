"""
OTP mail delivery over SMTP.

Builds a plain-text + HTML message and sends it with smtplib; delivery
failures are mapped to user-facing messages.
"""
from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

SMTP_TIMEOUT = 30
OTP_SUBJECT = "Your OTP Code - DayFlow"

OTP_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #2563eb;">DayFlow Password Reset</h2>
  <p>Your verification code is:</p>
  <div style="background-color: #f3f4f6; padding: 20px; text-align: center; font-size: 32px; font-weight: bold; letter-spacing: 8px; color: #2563eb; border-radius: 8px; margin: 20px 0;">
    {otp}
  </div>
  <p style="color: #6b7280; font-size: 14px;">This code will expire in {minutes} minutes.</p>
  <p style="color: #6b7280; font-size: 14px;">If you didn't request this code, please ignore this email.</p>
</div>
"""


class MailError(DomainError):
    """Base class for mail delivery problems."""


class MailNotConfiguredError(MailError):
    """Raised when no SMTP credentials are configured."""


class MailDeliveryError(MailError):
    """Raised when the SMTP server rejected or could not take the message."""


class Mailer(Protocol):
    def send_otp(self, to: str, otp: str, *, ttl_minutes: int) -> None:
        raise NotImplementedError


class SmtpMailer(Mailer):
    """Sends OTP emails via a configurable SMTP server."""

    def __init__(self, host, port, username, password, sender_email, use_tls=True):
        self.host = host
        self.port = int(port)
        self.username = username
        self.password = password
        self.sender_email = sender_email or username
        self.use_tls = use_tls

    @classmethod
    def from_config(cls, mail_config: dict) -> Optional["SmtpMailer"]:
        """Build a mailer from the MAIL_CONFIG settings dict.

        Returns:
            SmtpMailer instance, or None if credentials are not configured.
        """
        username = mail_config.get("username")
        password = mail_config.get("password")
        if not username or not password:
            logger.warning("Email credentials not configured - OTP emails will not be sent")
            return None

        return cls(
            host=mail_config.get("host", "smtp.gmail.com"),
            port=mail_config.get("port", 587),
            username=username,
            password=password,
            sender_email=mail_config.get("sender"),
            use_tls=bool(mail_config.get("use_tls", True)),
        )

    def build_message(self, to: str, otp: str, *, ttl_minutes: int) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = OTP_SUBJECT
        msg["From"] = self.sender_email
        msg["To"] = to
        msg.attach(MIMEText(f"Your OTP is: {otp}. It expires in {ttl_minutes} minutes.", "plain"))
        msg.attach(MIMEText(OTP_HTML.format(otp=otp, minutes=ttl_minutes), "html"))
        return msg

    def send_otp(self, to: str, otp: str, *, ttl_minutes: int) -> None:
        msg = self.build_message(to, otp, ttl_minutes=ttl_minutes)
        logger.info("Sending OTP email to %s via %s:%s", to, self.host, self.port)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT) as server:
                if self.use_tls:
                    server.starttls()
                server.login(self.username, self.password)
                server.sendmail(self.sender_email, [to], msg.as_string())
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed for %s: %s", self.username, e)
            raise MailDeliveryError(
                "Email authentication failed. Please check MAIL_USERNAME and MAIL_PASSWORD"
            ) from e
        except smtplib.SMTPResponseException as e:
            logger.error("SMTP error sending OTP to %s: %s %s", to, e.smtp_code, e.smtp_error)
            raise MailDeliveryError(f"Email server error: {e.smtp_code}") from e
        except smtplib.SMTPException as e:
            logger.error("Error sending OTP to %s: %s", to, e)
            raise MailDeliveryError("Failed to send OTP email") from e
        except OSError as e:
            logger.error("Could not reach SMTP server %s:%s: %s", self.host, self.port, e)
            raise MailDeliveryError(
                "Could not connect to email server. Please check your internet connection."
            ) from e

        logger.info("OTP email sent successfully to %s", to)
