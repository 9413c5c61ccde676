"""
Notification Routes

GET /notifications - Get my notifications with unread count
PUT /notifications/{notification_id}/read - Mark as read
"""

from fastapi import APIRouter, HTTPException, Depends

from hireflow.api.dependencies import get_notification_service
from hireflow.core.auth import CallerIdentity, get_current_user
from hireflow.schemas.schemas import NotificationResponse, NotificationListResponse, MessageResponse
from hireflow.services.mongo_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    user: CallerIdentity = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service)
):
    items = [NotificationResponse.model_validate(n) for n in notifications.get_by_user(user.user_id)]
    return NotificationListResponse(
        notifications=items,
        unread_count=sum(1 for n in items if not n.read)
    )


@router.put("/{notification_id}/read", response_model=MessageResponse)
def mark_notification_read(
    notification_id: str,
    user: CallerIdentity = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service)
):
    notification = notifications.get_by_id(notification_id)
    if not notification or notification["userId"] != user.user_id:
        raise HTTPException(status_code=404, detail="Notification not found")

    notifications.mark_as_read(notification_id)
    return MessageResponse(message="Notification marked as read")
