"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Field names are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    candidate = "candidate"
    hr = "HR"


class ApplicationStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    shortlisted = "shortlisted"
    rejected = "rejected"


class NotificationType(str, Enum):
    interview = "INTERVIEW"
    rejection = "REJECTION"


class PostStatus(str, Enum):
    active = "active"
    closed = "closed"


class JobRole(str, Enum):
    software_engineer = "software-engineer"
    data_analyst = "data-analyst"
    product_manager = "product-manager"
    hr_manager = "hr-manager"
    marketing_manager = "marketing-manager"
    sales_representative = "sales-representative"
    ux_designer = "ux-designer"
    devops_engineer = "devops-engineer"


class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class RoundType(str, Enum):
    technical = "technical"
    behavioral = "behavioral"
    situational = "situational"
    mixed = "mixed"


class AnswerMode(str, Enum):
    text = "text"
    voice = "voice"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=2, max_length=100)


class HRRegisterRequest(RegisterRequest):
    company_name: str = Field(..., min_length=2, max_length=200)
    company_size: str
    hr_role: str
    company_website: Optional[str] = None
    linkedin: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    avatar: Optional[str] = None
    about: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    portfolio: Optional[str] = None
    skills: Optional[str] = None
    company_name: Optional[str] = None
    company_website: Optional[str] = None


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    role: str
    avatar: Optional[str] = None
    about: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    portfolio: Optional[str] = None
    skills: Optional[str] = None
    company_name: Optional[str] = None
    company_size: Optional[str] = None
    hr_role: Optional[str] = None
    company_website: Optional[str] = None
    total_interviews: int = 0
    average_score: float = 0
    streak_days: int = 0
    badges: List[str] = []
    created_at: datetime


# ============================================================
# HIRING POST SCHEMAS
# ============================================================

class HiringPostCreate(CamelModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str
    location: str
    job_type: str
    salary_range: Optional[str] = None
    requirements: List[str] = []
    responsibilities: List[str] = []
    image_url: Optional[str] = None


class HiringPostResponse(CamelModel):
    id: str
    hr_id: str
    company_name: str
    title: str
    description: str
    location: str
    job_type: str
    salary_range: Optional[str] = None
    requirements: List[str] = []
    responsibilities: List[str] = []
    image_url: Optional[str] = None
    status: PostStatus
    created_at: datetime


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(CamelModel):
    post_id: str
    resume_url: str
    candidate_phone: Optional[str] = None


class ApplicationStatusUpdate(CamelModel):
    """
    Status update request.

    Only `status` is required. The remaining fields are an optional
    denormalized payload; when present they are used for the notification
    instead of looking the values up.
    """
    status: ApplicationStatus
    candidate_email: Optional[EmailStr] = None
    candidate_name: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    hr_name: Optional[str] = None


class StatusUpdateResponse(CamelModel):
    success: bool = True
    message: str
    status: ApplicationStatus
    notified: bool = False


class ApplicationResponse(CamelModel):
    id: str
    candidate_id: str
    candidate_name: str
    candidate_email: str
    candidate_phone: Optional[str] = None
    job_title: str
    post_id: str
    hr_id: str
    status: ApplicationStatus
    resume_url: str
    created_at: datetime
    updated_at: Optional[datetime] = None


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationResponse(CamelModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    read: bool = False
    created_at: datetime


class NotificationListResponse(CamelModel):
    notifications: List[NotificationResponse]
    unread_count: int


# ============================================================
# INTERVIEW SCHEMAS
# ============================================================

class InterviewQuestion(CamelModel):
    id: str
    question: str
    type: RoundType
    expected_topics: List[str] = []
    answer_mode: AnswerMode = AnswerMode.text
    time_limit: int


class QuestionFeedback(CamelModel):
    question_id: str
    score: float = Field(..., ge=0, le=10)
    clarity: float = Field(..., ge=0, le=10)
    relevance: float = Field(..., ge=0, le=10)
    technical_accuracy: Optional[float] = Field(None, ge=0, le=10)
    communication: float = Field(..., ge=0, le=10)
    strengths: List[str] = []
    weaknesses: List[str] = []
    improvements: List[str] = []
    time_taken: int = 0
    time_bonus: float = 0
    adjusted_score: float = 0


class InterviewCreate(CamelModel):
    job_role: JobRole
    difficulty: Difficulty
    round_type: RoundType
    question_count: int = Field(5, ge=1, le=10)
    answer_mode: AnswerMode = AnswerMode.text
    resume_content: Optional[str] = None


class AnswerSubmission(CamelModel):
    question_id: str
    answer: str
    time_taken: int = Field(0, ge=0)


class InterviewComplete(CamelModel):
    answers: List[AnswerSubmission]


class InterviewSessionResponse(CamelModel):
    id: str
    user_id: str
    job_role: JobRole
    difficulty: Difficulty
    round_type: RoundType
    questions: List[InterviewQuestion]
    answers: Dict[str, str] = {}
    feedback: List[QuestionFeedback] = []
    total_score: float = 0
    created_at: datetime
    completed_at: Optional[datetime] = None


class ScorePoint(BaseModel):
    date: str
    score: float


class SkillScore(BaseModel):
    skill: str
    score: float


class AnalyticsResponse(CamelModel):
    total_sessions: int
    average_score: float
    score_history: List[ScorePoint]
    skill_breakdown: List[SkillScore]


class ResumeTextResponse(CamelModel):
    filename: str
    resume_content: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class UploadResponse(BaseModel):
    url: str


class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    detail: str
    success: bool = False
