"""
Application Status Transition Service

Flow for one request:
    validate -> fetch application -> (same status? no-op) -> write status
    -> (shortlisted / rejected? dispatch one notification) -> result

Any status may be set from any other. There is no concurrency control:
two concurrent requests both decide whether to notify from the status
they read, and the last write wins. The status write is never rolled back
when the dispatch fails.
"""

from dataclasses import dataclass
from typing import Optional, Union

from loguru import logger

from hireflow.core.auth import CallerIdentity
from hireflow.core.exceptions import NotFoundException, InvalidRequestException
from hireflow.schemas.schemas import ApplicationStatus, UserRole
from hireflow.services.mongo_service import ApplicationService, HiringPostService, UserService
from hireflow.services.notification_service import (
    NotificationDispatcher, DecisionMessage, Recipient, NOTIFY_STATUSES, get_notification_dispatcher
)


@dataclass
class NotificationContext:
    """Denormalized values a caller may send so no lookup is needed."""
    candidate_email: Optional[str] = None
    candidate_name: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    hr_name: Optional[str] = None


@dataclass
class StatusTransitionResult:
    application_id: str
    status: ApplicationStatus
    changed: bool
    notified: bool = False
    notification: Optional[DecisionMessage] = None

    @property
    def message(self) -> str:
        if not self.changed:
            return "Status unchanged"
        if self.notified and self.status == ApplicationStatus.shortlisted:
            return "Status updated to 'shortlisted'. Interview invitation sent."
        if self.notified and self.status == ApplicationStatus.rejected:
            return "Status updated to 'rejected'. Rejection notice sent."
        return f"Status updated to '{self.status.value}'"


def parse_status(value: Union[str, ApplicationStatus]) -> ApplicationStatus:
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise InvalidRequestException(f"Invalid status '{value}'. Allowed: {allowed}")


class ApplicationStatusService:

    def __init__(
        self,
        applications: ApplicationService,
        posts: HiringPostService,
        users: UserService,
        dispatcher: NotificationDispatcher
    ):
        self.applications = applications
        self.posts = posts
        self.users = users
        self.dispatcher = dispatcher

    def update_status(
        self,
        application_id: str,
        status: Union[str, ApplicationStatus],
        caller: CallerIdentity = None,
        context: NotificationContext = None
    ) -> StatusTransitionResult:
        """
        Change an application's status and notify the candidate if needed.

        Raises:
            InvalidRequestException: status is not one of the four values
            NotFoundException: unknown id, or an HR caller who does not own it
            StorageFailureException: the status write was rejected
            DispatchFailureException: the notification channel rejected the send
        """
        target = parse_status(status)

        application = self.applications.get_by_id(application_id)
        if not application:
            raise NotFoundException("Application", application_id)
        if caller is not None and caller.role == UserRole.hr.value and application.get("hrId") != caller.user_id:
            raise NotFoundException("Application", application_id)

        # Plain equality: repeated identical requests never re-notify
        if application.get("status") == target.value:
            logger.debug(f"Application {application_id} already '{target.value}', nothing to do")
            return StatusTransitionResult(application_id=application_id, status=target, changed=False)

        if not self.applications.set_status(application_id, target.value):
            raise NotFoundException("Application", application_id)
        logger.info(
            f"Application {application_id}: '{application.get('status')}' -> '{target.value}'"
            + (f" by {caller.user_id}" if caller else "")
        )

        result = StatusTransitionResult(application_id=application_id, status=target, changed=True)
        if target in NOTIFY_STATUSES:
            result.notification = self._notify(application, target, context or NotificationContext())
            result.notified = True
        return result

    def _notify(self, application: dict, target: ApplicationStatus, context: NotificationContext) -> DecisionMessage:
        recipient = Recipient(
            user_id=application["candidateId"],
            email=context.candidate_email or application.get("candidateEmail"),
            name=context.candidate_name or application.get("candidateName", ""),
        )
        job_title = context.job_title or application.get("jobTitle", "")

        company_name = context.company_name
        hr_name = context.hr_name
        if not company_name or not hr_name:
            post = self.posts.get_by_id(application.get("postId", "")) or {}
            hr = self.users.get_by_id(application.get("hrId", "")) or {}
            company_name = company_name or post.get("companyName") or hr.get("companyName") or "our company"
            hr_name = hr_name or hr.get("name")

        return self.dispatcher.dispatch(recipient, target, job_title, company_name, hr_name)


def get_status_service() -> ApplicationStatusService:
    return ApplicationStatusService(
        applications=ApplicationService(),
        posts=HiringPostService(),
        users=UserService(),
        dispatcher=get_notification_dispatcher(),
    )
