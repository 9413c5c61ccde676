"""
Application Routes

POST /applications - Apply to a hiring post (candidate only)
GET /applications/mine - Get my applications (candidate only)
GET /applications - Get applications received (HR only)
PUT /applications/{application_id}/status - Update status, notify candidate (HR only)
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional

from loguru import logger

from hireflow.api.dependencies import get_post_service, get_application_service
from hireflow.core.auth import CallerIdentity, get_current_candidate, get_current_hr, get_user_service
from hireflow.schemas.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationStatus, ApplicationStatusUpdate,
    StatusUpdateResponse
)
from hireflow.services.mongo_service import HiringPostService, ApplicationService, UserService
from hireflow.services.status_service import (
    ApplicationStatusService, NotificationContext, get_status_service
)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=201)
def apply_to_post(
    data: ApplicationCreate,
    candidate: CallerIdentity = Depends(get_current_candidate),
    posts: HiringPostService = Depends(get_post_service),
    applications: ApplicationService = Depends(get_application_service),
    users: UserService = Depends(get_user_service)
):
    """Submit an application. It starts as `pending`."""
    post = posts.get_by_id(data.post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Hiring post not found")
    if post.get("status") != "active":
        raise HTTPException(status_code=400, detail="This post is no longer accepting applications")

    if applications.exists_for_candidate(candidate.user_id, data.post_id):
        raise HTTPException(status_code=400, detail="You have already applied to this post")

    profile = users.get_by_id(candidate.user_id)
    created = applications.create(profile, post, data.resume_url, data.candidate_phone)
    logger.info(f"Application {created['id']} submitted by {candidate.user_id} for post {data.post_id}")
    return ApplicationResponse.model_validate(created)


@router.get("/mine", response_model=List[ApplicationResponse])
def get_my_applications(
    candidate: CallerIdentity = Depends(get_current_candidate),
    applications: ApplicationService = Depends(get_application_service)
):
    return [ApplicationResponse.model_validate(a) for a in applications.get_by_candidate(candidate.user_id)]


@router.get("", response_model=List[ApplicationResponse])
def get_received_applications(
    status: Optional[ApplicationStatus] = Query(None),
    post_id: Optional[str] = Query(None),
    hr: CallerIdentity = Depends(get_current_hr),
    applications: ApplicationService = Depends(get_application_service)
):
    """Get all applications for the recruiter's posts, newest first."""
    results = applications.get_by_hr(hr.user_id, status=status.value if status else None, post_id=post_id)
    return [ApplicationResponse.model_validate(a) for a in results]


@router.put("/{application_id}/status", response_model=StatusUpdateResponse)
def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    hr: CallerIdentity = Depends(get_current_hr),
    service: ApplicationStatusService = Depends(get_status_service)
):
    """
    Update status of an application.

    Moving to `shortlisted` or `rejected` notifies the candidate once.
    Repeating the current status is a successful no-op.
    """
    context = NotificationContext(
        candidate_email=update.candidate_email,
        candidate_name=update.candidate_name,
        job_title=update.job_title,
        company_name=update.company_name,
        hr_name=update.hr_name,
    )
    result = service.update_status(application_id, update.status, caller=hr, context=context)

    return StatusUpdateResponse(message=result.message, status=result.status, notified=result.notified)
