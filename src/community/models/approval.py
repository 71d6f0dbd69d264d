"""Approval request model for elevated role registration."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from community.models.user import RoleName


class ApprovalStatus(str, Enum):
    """Approval request status. Approved and rejected are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalDecision(str, Enum):
    """Admin decision on a pending request."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def resulting_status(self) -> ApprovalStatus:
        if self is ApprovalDecision.APPROVE:
            return ApprovalStatus.APPROVED
        return ApprovalStatus.REJECTED


class ApprovalRequest(BaseModel):
    """Request by a user to hold an elevated role."""

    id: str = Field(..., description="Firestore document ID")
    user_id: str = Field(..., description="UID of the requesting user")
    requested_role: RoleName = Field(..., description="Role to grant on approval")
    status: ApprovalStatus = Field(default=ApprovalStatus.PENDING)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    decided_by: str | None = Field(None, description="UID of deciding admin")

    @property
    def is_pending(self) -> bool:
        return self.status is ApprovalStatus.PENDING

    def to_firestore(self) -> dict:
        """Convert to Firestore document."""
        data = self.model_dump(mode="json", exclude={"id", "requested_role"})
        data["role"] = self.requested_role.value
        return data

    @classmethod
    def from_firestore(cls, doc_id: str, data: dict) -> "ApprovalRequest":
        """Create from Firestore document."""
        data = dict(data)
        data["id"] = doc_id
        data["requested_role"] = data.pop("role")
        return cls.model_validate(data)
