"""SMTP adapter for MailerPort.

Sends OTP and password-reset emails over STARTTLS (Gmail defaults).
Transient connection failures are retried with exponential backoff; every
other failure is logged and reported as False. Nothing is raised to the
caller.

Without mail credentials the adapter runs in dev mode and only logs.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from utils.settings import Settings

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30
SMTP_MAX_ATTEMPTS = 3

_TRANSIENT_ERRORS = (
    smtplib.SMTPConnectError,
    smtplib.SMTPServerDisconnected,
    ConnectionError,
    TimeoutError,
)

OTP_HTML = """\
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.5;">
    <h2>Your OTP Code</h2>
    <p>Hello,</p>
    <p>Here is your OTP code to complete the process:</p>
    <h3 style="color: #4CAF50; font-size: 24px;">{code}</h3>
    <p>Use the code above to verify your identity.</p>
    <p>If you did not request this, please ignore this message.</p>
    <br />
    <p>Best regards,</p>
    <p><strong>{sender}</strong></p>
  </body>
</html>
"""

RESET_HTML = """\
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6;">
    <h2 style="color: #333;">Password Reset Request</h2>
    <p>Hello,</p>
    <p>We received a request to reset the password for your account. You can reset your password by clicking the link below:</p>
    <p>
      <a href="{url}"
         style="display: inline-block; padding: 10px 20px; color: #fff; background-color: #007BFF; text-decoration: none; border-radius: 5px;">
        Reset Password
      </a>
    </p>
    <p>If the button above does not work, copy and paste this link into your browser:</p>
    <p style="word-wrap: break-word;">{url}</p>
    <p>The link expires in one hour. If you did not request this, you can safely ignore this email.</p>
    <br />
    <p>Best regards,</p>
    <p><strong>{sender}</strong></p>
  </body>
</html>
"""


def redact_email(email: str) -> str:
    """Keep enough of an address to correlate logs without storing PII."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class SmtpMailer:
    """MailerPort implementation backed by smtplib."""

    def __init__(self, settings: Settings):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.mail_username
        self._password = settings.mail_password
        self.from_name = settings.mail_from_name
        self.is_configured = settings.mail_configured

    def send_otp_email(self, to: str, code: str) -> bool:
        return self._send(
            to,
            subject="Your OTP Code",
            text=f"Your OTP code is {code}. Use it to verify your email address.",
            html=OTP_HTML.format(code=code, sender=self.from_name),
        )

    def send_reset_link(self, to: str, url: str) -> bool:
        return self._send(
            to,
            subject="Password Reset Request",
            text=f"Reset your password using this link (valid for one hour):\n{url}",
            html=RESET_HTML.format(url=url, sender=self.from_name),
        )

    def _build_message(self, to: str, subject: str, text: str, html: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.username}>"
        msg["To"] = to
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")
        return msg

    def _send(self, to: str, subject: str, text: str, html: str) -> bool:
        if not self.is_configured:
            logger.info("Mail not configured, skipping send", extra={
                "to": redact_email(to),
                "subject": subject,
            })
            return True

        msg = self._build_message(to, subject, text, html)
        try:
            self._deliver(msg)
        except _TRANSIENT_ERRORS as e:
            logger.error("Email delivery failed after retries", extra={
                "to": redact_email(to),
                "subject": subject,
                "error": str(e),
            })
            return False
        except (smtplib.SMTPException, ssl.SSLError, OSError) as e:
            logger.error("Email delivery failed", extra={
                "to": redact_email(to),
                "subject": subject,
                "error_type": type(e).__name__,
                "error": str(e),
            })
            return False

        logger.info("Email sent", extra={"to": redact_email(to), "subject": subject})
        return True

    @retry(
        stop=stop_after_attempt(SMTP_MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    def _deliver(self, msg: EmailMessage) -> None:
        context = ssl.create_default_context()
        with smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS) as server:
            server.starttls(context=context)
            server.login(self.username, self._password)
            server.send_message(msg)
