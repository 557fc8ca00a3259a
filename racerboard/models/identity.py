"""Identity lookup models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LookupStatus(str, Enum):
    """Outcome of a single upstream username lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNRECOGNIZED = "unrecognized"
    REJECTED = "rejected"  # upstream answered with an error status or undecodable body
    FAILED = "failed"  # upstream unreachable


class UsernameLookup(BaseModel):
    """
    Tagged parse result of an upstream identity response.

    Keeps a malformed or failed response distinguishable from a
    legitimate "no username" answer, even though both resolve to None.
    """
    model_config = ConfigDict(frozen=True)

    status: LookupStatus
    username: Optional[str] = None
    flagged: bool = Field(default=False, description="Upstream set hasUsername or exists")
    error: Optional[str] = None

    @property
    def resolved(self) -> Optional[str]:
        return self.username if self.status == LookupStatus.FOUND else None


class UsernameCheckResponse(BaseModel):
    """Response of the username check endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    hasUsername: bool
    username: Optional[str] = None
    error: Optional[str] = Field(default=None, description="Upstream error, if the lookup failed")
