"""
Service providers for route injection.
"""
from hireflow.services.mongo_service import (
    HiringPostService, ApplicationService, NotificationService
)


def get_post_service() -> HiringPostService:
    return HiringPostService()


def get_application_service() -> ApplicationService:
    return ApplicationService()


def get_notification_service() -> NotificationService:
    return NotificationService()
