"""Fire-and-forget mail dispatch.

Wraps a MailerPort so each send is handed to a task runner and the calling
flow continues immediately. In the API the runner is FastAPI's
BackgroundTasks.add_task, so mail goes out after the response is sent.
"""

import logging
from typing import Any, Callable

from port.mailer import MailerPort

logger = logging.getLogger(__name__)

Submit = Callable[..., Any]


class BackgroundMailer:
    """MailerPort that defers delivery to `submit`."""

    def __init__(self, mailer: MailerPort, submit: Submit):
        self._mailer = mailer
        self._submit = submit

    def send_otp_email(self, to: str, code: str) -> bool:
        self._submit(_deliver, self._mailer.send_otp_email, 'otp', to, code)
        return True

    def send_reset_link(self, to: str, url: str) -> bool:
        self._submit(_deliver, self._mailer.send_reset_link, 'reset', to, url)
        return True


def _deliver(send: Callable[[str, str], bool], kind: str, to: str, payload: str) -> None:
    # Runs detached from the request; failures end here.
    try:
        if not send(to, payload):
            logger.warning("Background email not delivered", extra={"kind": kind})
    except Exception:
        logger.exception("Background email raised", extra={"kind": kind})
