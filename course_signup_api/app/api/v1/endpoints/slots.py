"""
Slot endpoints for API v1.

Slots are created through their signup sheet; these routes address a
single slot by its own id.
"""

from fastapi import APIRouter, HTTPException, Path

from course_signup_api.app.core.errors import ServiceError
from course_signup_api.app.core.validation import clamp_int
from course_signup_api.app.schemas.signup_sheet import SlotMembers, SlotUpdate, SlotUpdated
from course_signup_api.app.services.signup_service import MAX_ID, SignupService

router = APIRouter()


@router.put("/{slot_id}", response_model=SlotUpdated, response_model_exclude_none=True)
async def update_slot(
    updates: SlotUpdate,
    slot_id: str = Path(..., description="ID of the slot"),
) -> SlotUpdated:
    """Update ``startTime``, ``duration`` and/or ``maxMembers`` of a slot.

    Lowering ``maxMembers`` below the current number of occupants is
    rejected with 400 and the occupant list in ``signedUpMembers``.
    """
    try:
        return await SignupService.update_slot(clamp_int(slot_id, 1, MAX_ID), updates)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e


@router.get("/{slot_id}/members", response_model=SlotMembers)
async def list_slot_members(slot_id: str = Path(..., description="ID of the slot")) -> SlotMembers:
    """Return the slot with the roster details of each member signed up for it."""
    try:
        return await SignupService.list_slot_members(clamp_int(slot_id, 1, MAX_ID))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e
