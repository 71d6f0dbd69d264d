"""Authentication API endpoints."""

from fastapi import APIRouter, status

from community.dependencies import AccountServiceDep, AuthenticatedSessionDep, SessionDep
from community.models.api import LoginRequest, RegisterRequest, SessionResponse, UserResponse

router = APIRouter()


@router.post(
    "/auth/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    request: RegisterRequest,
    session: SessionDep,
    account_service: AccountServiceDep,
):
    """
    Create an account and sign it in.

    Volunteer and admin applicants are signed in unapproved until an
    administrator decides their request.
    """
    await account_service.register(
        session,
        name=request.name,
        email=request.email,
        password=request.password,
        requested_role=request.role,
    )
    return SessionResponse.from_session(session)


@router.post("/auth/login", response_model=SessionResponse)
async def login(
    request: LoginRequest,
    session: SessionDep,
    account_service: AccountServiceDep,
):
    """Sign in with email and password."""
    await account_service.login(session, request.email, request.password)
    return SessionResponse.from_session(session)


@router.post("/auth/logout")
async def logout(session: SessionDep, account_service: AccountServiceDep):
    """Sign out. Succeeds for anonymous callers too."""
    await account_service.logout(session)
    return {"message": "Signed out"}


@router.get("/auth/me", response_model=UserResponse)
async def get_current_user_info(session: AuthenticatedSessionDep):
    """Current user, including approval status."""
    return UserResponse.from_user(session.user)
