"""
Background job event names and payload models.

Payloads arrive from the job service in camelCase (the producer side is a
JavaScript/HTTP client); models accept both camelCase and snake_case.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DIAGNOSIS_REQUESTED = "ai/diagnosis.requested"
DIAGNOSIS_COMPLETED = "ai/diagnosis.completed"
DIAGNOSIS_FAILED = "ai/diagnosis.failed"
USAGE_LIMIT_EXCEEDED = "ai/usage.limit.exceeded"
TEST_EVENT = "test/event"


class _EventData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class DiagnosisRequested(_EventData):
    session_id: str = Field(alias="sessionId")
    user_id: str = Field(alias="userId")
    symptoms: List[str] = Field(default_factory=list)
    age: Optional[int] = None
    gender: Optional[str] = None
    duration: Optional[str] = None
    severity: Optional[str] = None
    additional_notes: Optional[str] = Field(default=None, alias="additionalNotes")
    priority: Literal["normal", "high", "emergency"] = "normal"
    retry_count: int = Field(default=0, alias="retryCount", ge=0)


class DiagnosisFailed(_EventData):
    session_id: str = Field(alias="sessionId")
    user_id: str = Field(alias="userId")
    error: str = ""
    retry_count: int = Field(default=0, alias="retryCount", ge=0)
    max_retries: int = Field(default=3, alias="maxRetries", ge=0)


class UsageLimitExceeded(_EventData):
    user_id: str = Field(alias="userId")
    limit_type: Literal["daily", "monthly", "per_request"] = Field(alias="limitType")
    current_usage: int = Field(alias="currentUsage", ge=0)
    limit: int = Field(ge=0)
    session_id: Optional[str] = Field(default=None, alias="sessionId")
