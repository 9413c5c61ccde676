"""
Hiring Post Routes

POST /posts - Create hiring post (HR only)
GET /posts - List active posts
GET /posts/mine - List own posts (HR only)
GET /posts/{post_id} - Get post details
DELETE /posts/{post_id} - Delete post and its applications (HR owner only)
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from loguru import logger

from hireflow.api.dependencies import get_post_service, get_application_service
from hireflow.core.auth import CallerIdentity, get_current_hr, get_user_service
from hireflow.schemas.schemas import HiringPostCreate, HiringPostResponse, MessageResponse
from hireflow.services.mongo_service import HiringPostService, ApplicationService, UserService

router = APIRouter(prefix="/posts", tags=["Hiring Posts"])


@router.post("", response_model=HiringPostResponse, status_code=201)
def create_post(
    post: HiringPostCreate,
    hr: CallerIdentity = Depends(get_current_hr),
    posts: HiringPostService = Depends(get_post_service),
    users: UserService = Depends(get_user_service)
):
    """Create a hiring post under the recruiter's company."""
    profile = users.get_by_id(hr.user_id) or {}
    company_name = profile.get("companyName")
    if not company_name:
        raise HTTPException(status_code=400, detail="Set a company name on your profile first")

    created = posts.create(hr.user_id, company_name, post.model_dump(by_alias=True, exclude_none=True))
    logger.info(f"Hiring post {created['id']} created by {hr.user_id}")
    return HiringPostResponse.model_validate(created)


@router.get("", response_model=List[HiringPostResponse])
def list_active_posts(posts: HiringPostService = Depends(get_post_service)):
    """List all active hiring posts, newest first."""
    return [HiringPostResponse.model_validate(p) for p in posts.get_active()]


@router.get("/mine", response_model=List[HiringPostResponse])
def list_my_posts(
    hr: CallerIdentity = Depends(get_current_hr),
    posts: HiringPostService = Depends(get_post_service)
):
    """List the recruiter's own posts, newest first."""
    return [HiringPostResponse.model_validate(p) for p in posts.get_by_hr(hr.user_id)]


@router.get("/{post_id}", response_model=HiringPostResponse)
def get_post(post_id: str, posts: HiringPostService = Depends(get_post_service)):
    post = posts.get_by_id(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Hiring post not found")
    return HiringPostResponse.model_validate(post)


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str,
    hr: CallerIdentity = Depends(get_current_hr),
    posts: HiringPostService = Depends(get_post_service),
    applications: ApplicationService = Depends(get_application_service)
):
    """Delete a post. Applications against it are deleted too."""
    post = posts.get_by_id(post_id)
    if not post or post["hrId"] != hr.user_id:
        raise HTTPException(status_code=404, detail="Hiring post not found")

    removed = applications.delete_by_post(post_id)
    posts.delete(post_id)

    return MessageResponse(message=f"Post deleted along with {removed} application(s)")
