"""
Signup sheet, slot generation and signup endpoints for API v1.

These routes rely on ``SignupService`` for the window, capacity and
one-slot-per-member rules; handlers only clamp path parameters and
map service errors to HTTP status codes.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, status

from course_signup_api.app.api.v1.endpoints.courses import parse_course_key
from course_signup_api.app.core.errors import ServiceError
from course_signup_api.app.core.validation import clamp_int, clip_string
from course_signup_api.app.schemas.common import MessageResponse
from course_signup_api.app.schemas.signup_sheet import (
    SignupCreate,
    SignupSheetCreate,
    SignupSheetCreated,
    SignupSheetRead,
    SlotRead,
    SlotsCreate,
    SlotsCreated,
    SlotSignupResult,
)
from course_signup_api.app.services.course_service import MEMBER_ID_LENGTH
from course_signup_api.app.services.signup_service import MAX_ID, SignupService

router = APIRouter()


@router.post("/signupsheets", response_model=SignupSheetCreated, status_code=status.HTTP_201_CREATED)
async def create_signup_sheet(sheet: SignupSheetCreate) -> SignupSheetCreated:
    """Create a signup sheet for a course section.

    Responds 400 for missing fields, unparsable timestamps or a window
    whose ``notBefore`` is not before ``notAfter``, and 404 when the
    course does not exist.
    """
    try:
        return await SignupService.create_sheet(sheet)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e


@router.delete("/signupsheets/{sheet_id}", response_model=MessageResponse)
async def delete_signup_sheet(sheet_id: str = Path(..., description="ID of the signup sheet")) -> MessageResponse:
    """Delete a signup sheet with all of its slots and signups."""
    try:
        await SignupService.delete_sheet(clamp_int(sheet_id, 1, MAX_ID))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e
    return MessageResponse(message="Signup sheet deleted successfully")


@router.get("/courses/{term_code}/signupsheets", response_model=List[SignupSheetRead])
@router.get("/courses/{term_code}/{section}/signupsheets", response_model=List[SignupSheetRead])
async def list_signup_sheets(term_code: str, section: Optional[str] = None) -> List[SignupSheetRead]:
    return await SignupService.list_sheets(*parse_course_key(term_code, section))


@router.post("/signupsheets/{sheet_id}/slots", response_model=SlotsCreated, status_code=status.HTTP_201_CREATED)
async def add_slots(
    payload: SlotsCreate,
    sheet_id: str = Path(..., description="ID of the signup sheet"),
) -> SlotsCreated:
    """Generate ``numSlots`` back-to-back slots of ``slotDuration`` minutes from ``start``."""
    try:
        return await SignupService.add_slots(clamp_int(sheet_id, 1, MAX_ID), payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e


@router.get("/signupsheets/{sheet_id}/slots", response_model=List[SlotRead])
async def list_slots(sheet_id: str = Path(..., description="ID of the signup sheet")) -> List[SlotRead]:
    return await SignupService.list_slots(clamp_int(sheet_id, 1, MAX_ID))


@router.post(
    "/signupsheets/{sheet_id}/signup",
    response_model=SlotSignupResult,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    payload: SignupCreate,
    sheet_id: str = Path(..., description="ID of the signup sheet"),
) -> SlotSignupResult:
    """Sign a member up for one slot of the sheet.

    Fails with 400 outside the signup window, when the member already
    holds a slot on this sheet or when the slot is full.
    """
    try:
        return await SignupService.signup(clamp_int(sheet_id, 1, MAX_ID), payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e


@router.delete("/signupsheets/{sheet_id}/signup/{member_id}", response_model=SlotSignupResult)
async def remove_signup(
    sheet_id: str = Path(..., description="ID of the signup sheet"),
    member_id: str = Path(..., description="Eight-character member id"),
) -> SlotSignupResult:
    """Cancel a member's signup.  Allowed at any time, even after the window closed."""
    try:
        return await SignupService.remove_signup(
            clamp_int(sheet_id, 1, MAX_ID), clip_string(member_id, MEMBER_ID_LENGTH)
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e
