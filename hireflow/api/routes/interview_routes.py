"""
Mock Interview Routes

POST /interviews - Start a session (AI-generated questions)
POST /interviews/resume-text - Extract resume text to tailor a session
GET /interviews - List my sessions
GET /interviews/analytics - Score history and skill breakdown
GET /interviews/{session_id} - Get one session
POST /interviews/{session_id}/complete - Submit answers for AI evaluation
"""

from fastapi import APIRouter, Depends, UploadFile, File
from typing import List

from hireflow.core.auth import CallerIdentity, get_current_user
from hireflow.schemas.schemas import (
    InterviewCreate, InterviewComplete, InterviewSessionResponse, AnalyticsResponse,
    ResumeTextResponse
)
from hireflow.services.interview_service import InterviewService, get_interview_service
from hireflow.utils.file_upload import extract_text_from_file

router = APIRouter(prefix="/interviews", tags=["Mock Interviews"])


@router.post("", response_model=InterviewSessionResponse, status_code=201)
def create_interview(
    data: InterviewCreate,
    user: CallerIdentity = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service)
):
    """
    Start a mock interview.

    Questions are generated for the role, difficulty and round type.
    Time per question: beginner 180s, intermediate 150s, advanced 120s.
    """
    session = service.create_session(
        caller=user,
        job_role=data.job_role.value,
        difficulty=data.difficulty.value,
        round_type=data.round_type.value,
        question_count=data.question_count,
        answer_mode=data.answer_mode.value,
        resume_content=data.resume_content,
    )
    return InterviewSessionResponse.model_validate(session)


@router.post("/resume-text", response_model=ResumeTextResponse)
async def extract_resume_text(
    file: UploadFile = File(...),
    user: CallerIdentity = Depends(get_current_user)
):
    """Extract text from a PDF/DOCX/TXT resume; send it back as resumeContent."""
    text, filename = await extract_text_from_file(file)
    return ResumeTextResponse(filename=filename, resume_content=text)


@router.get("", response_model=List[InterviewSessionResponse])
def list_interviews(
    user: CallerIdentity = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service)
):
    return [InterviewSessionResponse.model_validate(s) for s in service.list_sessions(user)]


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    user: CallerIdentity = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service)
):
    return AnalyticsResponse.model_validate(service.get_analytics(user))


@router.get("/{session_id}", response_model=InterviewSessionResponse)
def get_interview(
    session_id: str,
    user: CallerIdentity = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service)
):
    return InterviewSessionResponse.model_validate(service.get_session(user, session_id))


@router.post("/{session_id}/complete", response_model=InterviewSessionResponse)
def complete_interview(
    session_id: str,
    data: InterviewComplete,
    user: CallerIdentity = Depends(get_current_user),
    service: InterviewService = Depends(get_interview_service)
):
    """Evaluate every answer, apply time bonuses and store the total score."""
    submissions = [a.model_dump() for a in data.answers]
    session = service.complete_session(user, session_id, submissions)
    return InterviewSessionResponse.model_validate(session)
