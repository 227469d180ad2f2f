# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class MemberCreate(BaseModel):
    # Presence is checked by MemberService so a missing field is a 400, not a 422
    name: Optional[str] = Field(default=None, examples=["Jimin"])
    email: Optional[str] = Field(default=None, examples=["jimin@example.com"])


class MemberCreated(BaseModel):
    id: str
    message: str


class MemberDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
    request_id: Optional[str] = None
