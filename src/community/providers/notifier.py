"""Administrator notification over SMTP."""

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from community.models.approval import ApprovalRequest
from community.models.user import User

logger = logging.getLogger(__name__)


class AdminNotifier:
    """Sends pending-registration notices to administrators."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        sender: str,
        recipients: list[str],
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender
        self.recipients = recipients

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.recipients)

    def build_message(self, user: User, request: ApprovalRequest) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = f"New {request.requested_role.value} registration pending approval"
        msg["From"] = self.sender
        msg["To"] = ", ".join(self.recipients)
        msg.set_content(
            f"{user.name} <{user.email}> registered as {request.requested_role.value}.\n"
            f"Approval request: {request.id}\n\n"
            "Review it in the admin dashboard."
        )
        return msg

    async def notify_pending_registration(self, user: User, request: ApprovalRequest) -> None:
        """
        Email administrators about a pending request.

        Raises whatever the SMTP transport raises; callers dispatch this as a
        background task and only log failures.
        """
        if not self.enabled:
            logger.info(
                f"Admin notification disabled; request {request.id} for {user.email} not mailed"
            )
            return

        msg = self.build_message(user, request)
        await asyncio.to_thread(self._send, msg)
        logger.info(f"Admin notification sent for request {request.id}")

    def _send(self, msg: EmailMessage) -> None:
        with smtplib.SMTP_SSL(self.host, self.port) as smtp:
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)
