"""
Authentication Routes

POST /auth/register - Register candidate
POST /auth/register/hr - Register HR recruiter with company details
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user profile
PUT /auth/me - Update current user profile
"""

from fastapi import APIRouter, HTTPException, Depends

from hireflow.core.auth import (
    CallerIdentity, hash_password, verify_password, create_access_token,
    get_current_user, get_user_service
)
from hireflow.schemas.schemas import (
    RegisterRequest, HRRegisterRequest, LoginRequest, TokenResponse, UserResponse,
    ProfileUpdate, MessageResponse, UserRole
)
from hireflow.services.mongo_service import UserService

router = APIRouter(prefix="/auth", tags=["Authentication"])

HR_ONLY_FIELDS = {"companyName", "companyWebsite"}


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(request: RegisterRequest, users: UserService = Depends(get_user_service)):
    """Register a candidate account. Login afterwards to get a token."""
    users.create(
        email=request.email,
        password_hash=hash_password(request.password),
        name=request.name,
        role=UserRole.candidate.value,
    )
    return MessageResponse(message="Registered successfully as candidate. Please login.")


@router.post("/register/hr", response_model=MessageResponse, status_code=201)
def register_hr(request: HRRegisterRequest, users: UserService = Depends(get_user_service)):
    """Register an HR recruiter account with company details."""
    users.create(
        email=request.email,
        password_hash=hash_password(request.password),
        name=request.name,
        role=UserRole.hr.value,
        companyName=request.company_name,
        companySize=request.company_size,
        hrRole=request.hr_role,
        companyWebsite=request.company_website,
        linkedin=request.linkedin,
    )
    return MessageResponse(message="Registered successfully as HR. Please login.")


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, users: UserService = Depends(get_user_service)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = users.get_by_email(request.email)

    if not user or not verify_password(request.password, user["passwordHash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.get("isActive", True):
        raise HTTPException(status_code=403, detail="Account deactivated")

    token = create_access_token(data={"sub": user["id"], "role": user["role"]})

    return TokenResponse(access_token=token, user_id=user["id"], role=user["role"])


@router.get("/me", response_model=UserResponse)
def get_me(user: CallerIdentity = Depends(get_current_user), users: UserService = Depends(get_user_service)):
    """Get current authenticated user's profile."""
    return UserResponse.model_validate(users.get_by_id(user.user_id))


@router.put("/me", response_model=UserResponse)
def update_me(
    data: ProfileUpdate,
    user: CallerIdentity = Depends(get_current_user),
    users: UserService = Depends(get_user_service)
):
    """Update profile. Only provided fields are updated."""
    updates = data.model_dump(exclude_none=True, by_alias=True)
    if user.role != UserRole.hr.value:
        updates = {k: v for k, v in updates.items() if k not in HR_ONLY_FIELDS}

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    users.update_profile(user.user_id, updates)
    return UserResponse.model_validate(users.get_by_id(user.user_id))
