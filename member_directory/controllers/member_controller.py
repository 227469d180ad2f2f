# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Member endpoints — register, find, update, remove.
Routing and status codes only; the rules live in MemberService.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from member_directory.core.dependencies import get_member_service
from member_directory.models.domain import MemberErrorKind
from member_directory.schemas import (
    ErrorResponse, MemberCreate, MemberCreated, MemberDetail, MessageResponse,
)
from member_directory.services.member_service import MemberService

router = APIRouter(prefix="/api/v1", tags=["Members"])

ERROR_STATUS_CODES: Dict[MemberErrorKind, int] = {
    MemberErrorKind.MISSING_FIELDS: 400,
    MemberErrorKind.MISSING_NAME: 400,
    MemberErrorKind.MISSING_PARAMETERS: 400,
    MemberErrorKind.DISALLOWED_SCRIPT: 400,
    MemberErrorKind.INVALID_EMAIL_SHAPE: 400,
    MemberErrorKind.TOO_SOON: 403,
    MemberErrorKind.NOT_FOUND: 404,
    MemberErrorKind.STORE_FAILURE: 500,
}

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/members", response_model=MemberCreated, status_code=201,
             responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
def register_member(payload: Optional[MemberCreate] = None,
                    service: MemberService = Depends(get_member_service)):
    """Register a new member. Not idempotent: each call creates a record."""
    payload = payload or MemberCreate()
    return service.register(payload.name, payload.email)


@router.get("/members", responses={200: {"model": MemberDetail}, **_ERRORS})
def find_member(name: Optional[str] = Query(default=None, description="Exact member name"),
                service: MemberService = Depends(get_member_service)):
    return service.find_by_name(name)


@router.put("/members", response_model=MessageResponse, responses=_ERRORS)
def update_member(name: Optional[str] = Query(default=None, description="Exact member name"),
                  updates: Optional[Dict[str, Any]] = Body(default=None),
                  service: MemberService = Depends(get_member_service)):
    """Merge-patch the first member with this name."""
    return service.update_by_name(name, updates)


@router.delete("/members", response_model=MessageResponse,
               responses={403: {"model": ErrorResponse}, **_ERRORS})
def remove_member(name: Optional[str] = Query(default=None, description="Exact member name"),
                  service: MemberService = Depends(get_member_service)):
    """Remove a member registered at least one minute ago."""
    return service.remove_by_name(name)
