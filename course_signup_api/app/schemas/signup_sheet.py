"""
Pydantic models for signup sheets, slots and signups.

A signup sheet is a time window (``notBefore`` .. ``notAfter``) during
which members of a course may book one slot each.  Slots carry a
capacity (``maxMembers``) and the ordered list of member ids that
booked them.
"""

from typing import Any, List

from pydantic import BaseModel, Field


class SignupSheetCreate(BaseModel):
    term_code: Any = Field(None, alias="termCode", examples=[1251])
    section: Any = Field(1, examples=[1])
    assignment_name: Any = Field(None, alias="assignmentName", examples=["HW1"])
    not_before: Any = Field(None, alias="notBefore", examples=["2025-01-15T09:00:00Z"])
    not_after: Any = Field(None, alias="notAfter", examples=["2025-01-20T17:00:00Z"])

    model_config = {"populate_by_name": True}


class SignupSheetRead(BaseModel):
    id: int
    term_code: int = Field(..., alias="termCode")
    section: int
    assignment_name: str = Field(..., alias="assignmentName")
    not_before: str = Field(..., alias="notBefore")
    not_after: str = Field(..., alias="notAfter")
    created_at: str | None = Field(None, alias="createdAt")

    model_config = {"populate_by_name": True}


class SignupSheetCreated(BaseModel):
    message: str
    signup_sheet: SignupSheetRead = Field(..., alias="signupSheet")

    model_config = {"populate_by_name": True}


class SlotsCreate(BaseModel):
    """Request to generate ``numSlots`` back-to-back slots from ``start``."""

    start: Any = Field(None, examples=["2025-01-16T10:00:00Z"])
    slot_duration: Any = Field(None, alias="slotDuration", examples=[30])
    num_slots: Any = Field(None, alias="numSlots", examples=[3])
    max_members: Any = Field(None, alias="maxMembers", examples=[1])

    model_config = {"populate_by_name": True}


class SlotRead(BaseModel):
    id: int
    signup_sheet_id: int = Field(..., alias="signupSheetId")
    start_time: str = Field(..., alias="startTime")
    duration: int
    max_members: int = Field(..., alias="maxMembers")
    signed_up_members: List[str] = Field(default_factory=list, alias="signedUpMembers")
    created_at: str | None = Field(None, alias="createdAt")

    model_config = {"populate_by_name": True}


class SlotsCreated(BaseModel):
    message: str
    slots: List[SlotRead]


class SlotUpdate(BaseModel):
    """Partial slot update; omitted (or null) fields stay unchanged."""

    start_time: Any = Field(None, alias="startTime")
    duration: Any = None
    max_members: Any = Field(None, alias="maxMembers")

    model_config = {"populate_by_name": True}


class SlotUpdated(BaseModel):
    message: str
    slot: SlotRead
    # Present only when the slot has occupants.
    signed_up_members: List[str] | None = Field(None, alias="signedUpMembers")

    model_config = {"populate_by_name": True}


class SignupCreate(BaseModel):
    slot_id: Any = Field(None, alias="slotId", examples=[1])
    member_id: Any = Field(None, alias="memberId", examples=["12345678"])

    model_config = {"populate_by_name": True}


class SlotSignupResult(BaseModel):
    message: str
    slot: SlotRead


class SlotMemberRead(BaseModel):
    member_id: str = Field(..., alias="memberId")
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    role: str = "unknown"

    model_config = {"populate_by_name": True}


class SlotMembers(BaseModel):
    slot: SlotRead
    members: List[SlotMemberRead]
