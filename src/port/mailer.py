"""Mailer port — outbound interface for transactional email."""

from typing import Protocol


class MailerPort(Protocol):
    """Port for sending account emails.

    Sends are best-effort: implementations report failure through the
    return value and never raise into the calling flow.
    """

    def send_otp_email(self, to: str, code: str) -> bool: ...

    def send_reset_link(self, to: str, url: str) -> bool: ...
