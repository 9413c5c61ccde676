"""
Notification Service - Application decision messages.

Two decision templates:
- shortlisted -> "invitation" (type INTERVIEW)
- rejected    -> "regret"     (type REJECTION)

Delivery goes through exactly one NotificationChannel, chosen by the
NOTIFICATION_CHANNEL setting:
- in_app: a record in the notifications collection
- email:  SendGrid v3 mail/send over httpx

No retries. A channel failure raises DispatchFailureException.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx
from loguru import logger

from hireflow.core.config import get_settings, Settings
from hireflow.core.exceptions import DispatchFailureException, InvalidRequestException, HireFlowException
from hireflow.schemas.schemas import ApplicationStatus, NotificationType
from hireflow.services.mongo_service import NotificationService


# ============================================================
# TEMPLATES
# ============================================================

INVITATION_SUBJECT = "Interview Invitation – {job_title}"
INVITATION_BODY = """Dear {candidate_name},

Congratulations! We are pleased to invite you for an interview for the {job_title} position at {company_name}.
Our HR team will contact you shortly with the details, so please keep an eye on your inbox.

Regards,
{signature}"""

REGRET_SUBJECT = "Application Update – {job_title}"
REGRET_BODY = """Dear {candidate_name},

Thank you for applying for the {job_title} position at {company_name}.
After careful consideration, we regret to inform you that you were not selected.

We wish you all the best.

Regards,
{signature}"""

TEMPLATES = {
    ApplicationStatus.shortlisted: ("invitation", NotificationType.interview, INVITATION_SUBJECT, INVITATION_BODY),
    ApplicationStatus.rejected: ("regret", NotificationType.rejection, REGRET_SUBJECT, REGRET_BODY),
}

# Statuses that trigger a notification when the status actually changes
NOTIFY_STATUSES = frozenset(TEMPLATES)


@dataclass
class Recipient:
    user_id: str
    email: Optional[str]
    name: str


@dataclass
class DecisionMessage:
    recipient: Recipient
    template: str
    type: NotificationType
    subject: str
    body: str


def render_decision_message(
    recipient: Recipient,
    outcome: ApplicationStatus,
    job_title: str,
    company_name: str,
    hr_name: str = None
) -> DecisionMessage:
    """Build the templated message for a shortlist / reject decision."""
    if outcome not in TEMPLATES:
        raise InvalidRequestException(f"No notification template for status '{outcome.value}'")

    template, notification_type, subject, body = TEMPLATES[outcome]
    signature = f"{hr_name}\n{company_name} HR Team" if hr_name else f"{company_name} HR Team"
    values = {
        "candidate_name": recipient.name or "Candidate",
        "job_title": job_title,
        "company_name": company_name,
        "signature": signature,
    }
    return DecisionMessage(
        recipient=recipient,
        template=template,
        type=notification_type,
        subject=subject.format(**values),
        body=body.format(**values),
    )


# ============================================================
# CHANNELS
# ============================================================

class NotificationChannel(ABC):
    """Delivers one DecisionMessage. Raises DispatchFailureException on failure."""

    name: str = "channel"

    @abstractmethod
    def send(self, message: DecisionMessage) -> None:
        ...


class InAppNotificationChannel(NotificationChannel):
    """Stores the message as an unread notification for the candidate."""

    name = "in_app"

    def __init__(self, notifications: NotificationService):
        self.notifications = notifications

    def send(self, message: DecisionMessage) -> None:
        try:
            self.notifications.create(
                user_id=message.recipient.user_id,
                title=message.subject,
                message=message.body,
                notification_type=message.type.value,
            )
        except HireFlowException as e:
            raise DispatchFailureException(self.name, e.message)


class EmailNotificationChannel(NotificationChannel):
    """Sends a plain-text email through the SendGrid v3 API."""

    name = "email"

    def __init__(
        self,
        api_key: str,
        from_email: str,
        api_url: str = "https://api.sendgrid.com/v3/mail/send",
        timeout: float = 10.0,
        client: httpx.Client = None
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.api_url = api_url
        self.timeout = timeout
        self.client = client

    def _payload(self, message: DecisionMessage) -> dict:
        return {
            "personalizations": [{"to": [{"email": message.recipient.email, "name": message.recipient.name}]}],
            "from": {"email": self.from_email},
            "subject": message.subject,
            "content": [{"type": "text/plain", "value": message.body}],
        }

    def send(self, message: DecisionMessage) -> None:
        if not message.recipient.email:
            raise DispatchFailureException(self.name, "recipient has no email address")
        if not self.api_key or not self.from_email:
            raise DispatchFailureException(self.name, "SendGrid API key or sender address not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            if self.client is not None:
                response = self.client.post(self.api_url, json=self._payload(message), headers=headers)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.api_url, json=self._payload(message), headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DispatchFailureException(
                self.name, f"provider returned {e.response.status_code}: {e.response.text[:200]}"
            )
        except httpx.HTTPError as e:
            raise DispatchFailureException(self.name, str(e))


# ============================================================
# DISPATCHER
# ============================================================

class NotificationDispatcher:
    """Renders one decision message and sends it once through the channel."""

    def __init__(self, channel: NotificationChannel):
        self.channel = channel

    def dispatch(
        self,
        recipient: Recipient,
        outcome: ApplicationStatus,
        job_title: str,
        company_name: str,
        hr_name: str = None
    ) -> DecisionMessage:
        message = render_decision_message(recipient, outcome, job_title, company_name, hr_name)
        self.channel.send(message)
        logger.info(
            f"Sent '{message.template}' notification via {self.channel.name} "
            f"to user {recipient.user_id} for '{job_title}'"
        )
        return message


def get_notification_channel(settings: Settings = None) -> NotificationChannel:
    settings = settings or get_settings()
    if settings.notification_channel == "email":
        return EmailNotificationChannel(
            api_key=settings.sendgrid_api_key,
            from_email=settings.sendgrid_from_email,
            api_url=settings.sendgrid_api_url,
            timeout=settings.email_timeout_seconds,
        )
    return InAppNotificationChannel(NotificationService())


def get_notification_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(get_notification_channel())
