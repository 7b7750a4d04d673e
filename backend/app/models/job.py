"""
Background job log model (system_db.jobs).
"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Job(BaseModel):
    """One execution of a scheduled or manually triggered job."""
    id: Optional[str] = Field(None, alias="_id")
    type: str = Field(..., description="Upper-cased job name")
    status: JobStatus = JobStatus.PENDING
    payload: dict[str, Any] = Field(default={})
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
        use_enum_values = True
