from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from schemas.common import NaiveUtcDatetime

JobType = Literal["full-time", "part-time", "contract", "freelance"]


class JobIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    company: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=200)
    job_type: JobType
    category: str = Field(min_length=1, max_length=100)
    salary: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    expires_at: Optional[NaiveUtcDatetime] = None
    is_active: bool = True


class JobCreate(JobIn):
    poster_id: str


class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    job_type: Optional[JobType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    salary: Optional[str] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    expires_at: Optional[NaiveUtcDatetime] = None
    is_active: Optional[bool] = None


class JobOut(JobCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
