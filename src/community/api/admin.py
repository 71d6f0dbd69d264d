"""Admin API endpoints for approval requests and users."""

from fastapi import APIRouter, Query

from community.dependencies import AccountServiceDep, AuthenticatedSessionDep
from community.models.api import ApprovalRequestListResponse, UserListResponse, UserResponse
from community.models.approval import ApprovalDecision, ApprovalRequest, ApprovalStatus

router = APIRouter()


@router.get("/admin/requests", response_model=ApprovalRequestListResponse)
async def list_approval_requests(
    session: AuthenticatedSessionDep,
    account_service: AccountServiceDep,
    status_filter: ApprovalStatus | None = Query(None, description="Filter by status"),
    limit: int = Query(100, ge=1, le=1000),
):
    """
    Get approval requests, newest first (admin only).

    Args:
        status_filter: Optional status filter (pending/approved/rejected)
        limit: Maximum number of requests to return (default: 100, max: 1000)
    """
    requests = await account_service.list_approval_requests(
        session, status_filter=status_filter, limit=limit
    )
    return ApprovalRequestListResponse(requests=requests, total=len(requests))


@router.post("/admin/requests/{request_id}/approve", response_model=ApprovalRequest)
async def approve_request(
    request_id: str,
    session: AuthenticatedSessionDep,
    account_service: AccountServiceDep,
):
    """Approve a pending request and grant its role (admin only)."""
    return await account_service.decide_approval_request(
        session, request_id, ApprovalDecision.APPROVE
    )


@router.post("/admin/requests/{request_id}/reject", response_model=ApprovalRequest)
async def reject_request(
    request_id: str,
    session: AuthenticatedSessionDep,
    account_service: AccountServiceDep,
):
    """Reject a pending request (admin only)."""
    return await account_service.decide_approval_request(
        session, request_id, ApprovalDecision.REJECT
    )


@router.get("/admin/users", response_model=UserListResponse)
async def list_users(
    session: AuthenticatedSessionDep,
    account_service: AccountServiceDep,
    limit: int = Query(100, ge=1, le=1000),
):
    """Get list of users, newest first (admin only)."""
    users = await account_service.list_users(session, limit=limit)
    return UserListResponse(
        users=[UserResponse.from_user(user) for user in users],
        total=len(users),
    )
