"""Client session model."""

from datetime import datetime

from pydantic import BaseModel

from community.models.user import User


class Session(BaseModel):
    """
    The currently authenticated user, as held by one client.

    Populated at sign-in, emptied at sign-out, restored from its persisted
    record by ``SessionStore.restore``. Passed explicitly into every service
    operation instead of living in process-wide state.
    """

    token: str | None = None
    user: User | None = None
    created_at: datetime | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def clear(self) -> None:
        """Drop the user and token."""
        self.token = None
        self.user = None
        self.created_at = None
