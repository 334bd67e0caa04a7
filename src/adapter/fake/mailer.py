"""In-memory implementation of MailerPort for testing."""

from dataclasses import dataclass


@dataclass
class SentMail:
    kind: str
    to: str
    payload: str


class FakeMailer:
    """Records every send instead of delivering it."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[SentMail] = []

    def send_otp_email(self, to: str, code: str) -> bool:
        self.sent.append(SentMail(kind='otp', to=to, payload=code))
        return not self.fail

    def send_reset_link(self, to: str, url: str) -> bool:
        self.sent.append(SentMail(kind='reset', to=to, payload=url))
        return not self.fail

    def last(self, kind: str) -> SentMail | None:
        for mail in reversed(self.sent):
            if mail.kind == kind:
                return mail
        return None
