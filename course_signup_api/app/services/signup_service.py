"""
Business logic for signup sheets, slots and signups.

A signup sheet belongs to one course section and is open between
``notBefore`` and ``notAfter``.  Its slots are generated back to back
and each holds up to ``maxMembers`` member ids.  Rules enforced here:

* a member occupies at most one slot per sheet;
* a slot never holds more than ``maxMembers`` members, and its
  capacity cannot be lowered below the current occupancy;
* signing up is only possible inside the sheet's window (both bounds
  inclusive), while removing a signup is always allowed.

Every change to a slot's ``signedUpMembers`` is mirrored in the
document's ``signups`` list within the same write.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from course_signup_api.app.core.db import open_document, read_document
from course_signup_api.app.core.errors import InvalidInput, NotFound
from course_signup_api.app.core.validation import (
    clamp_int,
    clip_string,
    format_timestamp,
    parse_timestamp,
    utcnow,
)
from course_signup_api.app.schemas.signup_sheet import (
    SignupCreate,
    SignupSheetCreate,
    SignupSheetCreated,
    SignupSheetRead,
    SlotMemberRead,
    SlotMembers,
    SlotRead,
    SlotsCreate,
    SlotsCreated,
    SlotSignupResult,
    SlotUpdate,
    SlotUpdated,
)
from course_signup_api.app.services.course_service import (
    MAX_SECTION,
    MAX_TERM_CODE,
    MEMBER_ID_LENGTH,
    course_exists,
)

logger = logging.getLogger(__name__)

MAX_ID = 999999
MAX_SLOT_DURATION = 240
MAX_SLOTS = 99
MAX_MEMBERS = 99


def _find_sheet(doc: Dict[str, Any], sheet_id: int) -> Optional[Dict[str, Any]]:
    return next((s for s in doc["signupSheets"] if s["id"] == sheet_id), None)


def _find_slot(doc: Dict[str, Any], slot_id: int) -> Optional[Dict[str, Any]]:
    return next((s for s in doc["slots"] if s["id"] == slot_id), None)


class SignupService:
    """Service for signup sheets, their slots and member signups."""

    # ------------------------------------------------------------------
    # Signup sheets
    # ------------------------------------------------------------------
    @classmethod
    async def create_sheet(cls, data: SignupSheetCreate) -> SignupSheetCreated:
        """Create a signup sheet for an existing course.

        Raises ``InvalidInput`` when a field is missing or malformed or
        when ``notBefore`` is not strictly earlier than ``notAfter``,
        and ``NotFound`` when the course does not exist.
        """
        if not data.term_code or not data.assignment_name or not data.not_before or not data.not_after:
            raise InvalidInput("Missing required parameters")

        term_code = clamp_int(data.term_code, 1, MAX_TERM_CODE)
        section = clamp_int(data.section, 1, MAX_SECTION, 1)
        assignment_name = clip_string(data.assignment_name, 100)

        if term_code == 0:
            raise InvalidInput("Invalid term code")
        if not assignment_name:
            raise InvalidInput("Assignment name cannot be empty")

        not_before = parse_timestamp(data.not_before)
        not_after = parse_timestamp(data.not_after)
        if not_before is None or not_after is None:
            raise InvalidInput("Invalid timestamp format")
        if not_before >= not_after:
            raise InvalidInput("Not-before must be earlier than not-after")

        if not course_exists(term_code, section):
            raise NotFound(f"Course with term code {term_code} and section {section} does not exist")

        with open_document("signups") as doc:
            sheet = {
                "id": doc["nextSheetId"],
                "termCode": term_code,
                "section": section,
                "assignmentName": assignment_name,
                "notBefore": format_timestamp(not_before),
                "notAfter": format_timestamp(not_after),
                "createdAt": format_timestamp(utcnow()),
            }
            doc["signupSheets"].append(sheet)
            doc["nextSheetId"] += 1

        logger.info(
            "Signup sheet %s '%s' created for course %s-%s", sheet["id"], assignment_name, term_code, section
        )
        return SignupSheetCreated(
            message="Signup sheet created successfully",
            signup_sheet=SignupSheetRead.model_validate(sheet),
        )

    @classmethod
    async def delete_sheet(cls, sheet_id: int) -> None:
        """Delete a sheet along with its slots and signup records."""
        with open_document("signups") as doc:
            sheet = _find_sheet(doc, sheet_id)
            if sheet is None:
                raise NotFound("Signup sheet not found")
            doc["signupSheets"].remove(sheet)
            doc["slots"] = [s for s in doc["slots"] if s["signupSheetId"] != sheet_id]
            doc["signups"] = [s for s in doc["signups"] if s["signupSheetId"] != sheet_id]
        logger.info("Signup sheet %s deleted", sheet_id)

    @classmethod
    async def list_sheets(cls, term_code: int, section: int) -> List[SignupSheetRead]:
        data = read_document("signups")
        return [
            SignupSheetRead.model_validate(s)
            for s in data.get("signupSheets", [])
            if s.get("termCode") == term_code and s.get("section") == section
        ]

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------
    @classmethod
    async def add_slots(cls, sheet_id: int, data: SlotsCreate) -> SlotsCreated:
        """Generate ``numSlots`` consecutive slots on a sheet.

        Slot ``i`` starts ``i * slotDuration`` minutes after ``start``.
        Slot times are not checked against the sheet's signup window.
        """
        if not data.start or not data.slot_duration or not data.num_slots or not data.max_members:
            raise InvalidInput("Missing required parameters")

        duration = clamp_int(data.slot_duration, 1, MAX_SLOT_DURATION)
        num_slots = clamp_int(data.num_slots, 1, MAX_SLOTS)
        max_members = clamp_int(data.max_members, 1, MAX_MEMBERS)
        if 0 in (duration, num_slots, max_members):
            raise InvalidInput("slotDuration, numSlots and maxMembers must be numbers")

        start = parse_timestamp(data.start)
        if start is None:
            raise InvalidInput("Invalid timestamp format")

        created: List[Dict[str, Any]] = []
        with open_document("signups") as doc:
            if _find_sheet(doc, sheet_id) is None:
                raise NotFound("Signup sheet not found")
            for i in range(num_slots):
                slot = {
                    "id": doc["nextSlotId"],
                    "signupSheetId": sheet_id,
                    "startTime": format_timestamp(start + timedelta(minutes=i * duration)),
                    "duration": duration,
                    "maxMembers": max_members,
                    "signedUpMembers": [],
                    "createdAt": format_timestamp(utcnow()),
                }
                doc["slots"].append(slot)
                doc["nextSlotId"] += 1
                created.append(slot)

        logger.info("Added %d slot(s) of %d min to signup sheet %s", num_slots, duration, sheet_id)
        return SlotsCreated(
            message="Slots added successfully",
            slots=[SlotRead.model_validate(s) for s in created],
        )

    @classmethod
    async def list_slots(cls, sheet_id: int) -> List[SlotRead]:
        data = read_document("signups")
        return [SlotRead.model_validate(s) for s in data.get("slots", []) if s.get("signupSheetId") == sheet_id]

    @classmethod
    async def update_slot(cls, slot_id: int, data: SlotUpdate) -> SlotUpdated:
        """Update a slot's start time, duration and/or capacity.

        Each field is applied only when present and usable.  Lowering
        ``maxMembers`` below the number of occupants raises
        ``InvalidInput`` carrying the occupant list, and nothing is
        saved.
        """
        with open_document("signups") as doc:
            slot = _find_slot(doc, slot_id)
            if slot is None:
                raise NotFound("Slot not found")

            start_time = parse_timestamp(data.start_time) if data.start_time else None
            if start_time is not None:
                slot["startTime"] = format_timestamp(start_time)

            if data.duration is not None:
                duration = clamp_int(data.duration, 1, MAX_SLOT_DURATION)
                if duration:
                    slot["duration"] = duration

            if data.max_members is not None:
                new_max = clamp_int(data.max_members, 1, MAX_MEMBERS)
                if new_max:
                    if len(slot["signedUpMembers"]) > new_max:
                        raise InvalidInput(
                            "Cannot reduce max members below current signup count",
                            signedUpMembers=list(slot["signedUpMembers"]),
                        )
                    slot["maxMembers"] = new_max

        logger.info("Slot %s updated", slot_id)
        occupants = list(slot["signedUpMembers"])
        return SlotUpdated(
            message="Slot updated successfully",
            slot=SlotRead.model_validate(slot),
            signed_up_members=occupants or None,
        )

    @classmethod
    async def list_slot_members(cls, slot_id: int) -> SlotMembers:
        """Return a slot and its occupants joined with the course roster."""
        signups = read_document("signups")
        slot = _find_slot(signups, slot_id)
        if slot is None:
            raise NotFound("Slot not found")

        roster: Dict[str, Dict[str, Any]] = {}
        sheet = _find_sheet(signups, slot["signupSheetId"])
        if sheet is not None:
            courses = read_document("courses")
            roster = {
                m["memberId"]: m
                for m in courses.get("members", [])
                if m.get("termCode") == sheet["termCode"] and m.get("section") == sheet["section"]
            }

        members = []
        for member_id in slot["signedUpMembers"]:
            record = roster.get(member_id)
            if record is None:
                members.append(SlotMemberRead(member_id=member_id))
            else:
                members.append(SlotMemberRead.model_validate(record))
        return SlotMembers(slot=SlotRead.model_validate(slot), members=members)

    # ------------------------------------------------------------------
    # Signups
    # ------------------------------------------------------------------
    @classmethod
    async def signup(cls, sheet_id: int, data: SignupCreate, now: Optional[datetime] = None) -> SlotSignupResult:
        """Sign a member up for a slot of a sheet.

        Checks run in this order: the sheet exists, the slot exists on
        that sheet, the window has opened, the window has not closed,
        the member holds no slot on the sheet yet, the slot has room.
        """
        if not data.slot_id or not data.member_id:
            raise InvalidInput("Missing required parameters")

        slot_id = clamp_int(data.slot_id, 1, MAX_ID)
        member_id = clip_string(data.member_id, MEMBER_ID_LENGTH)
        if len(member_id) != MEMBER_ID_LENGTH:
            raise InvalidInput("Invalid member ID format")

        now = now or utcnow()
        with open_document("signups") as doc:
            sheet = _find_sheet(doc, sheet_id)
            if sheet is None:
                raise NotFound("Signup sheet not found")

            slot = next(
                (s for s in doc["slots"] if s["id"] == slot_id and s["signupSheetId"] == sheet_id),
                None,
            )
            if slot is None:
                raise NotFound("Slot not found in this signup sheet")

            if now < parse_timestamp(sheet["notBefore"]):
                raise InvalidInput("Signup period has not started yet")
            if now > parse_timestamp(sheet["notAfter"]):
                raise InvalidInput("Signup period has ended")

            already = any(
                s["signupSheetId"] == sheet_id and member_id in s["signedUpMembers"] for s in doc["slots"]
            )
            if already:
                raise InvalidInput("Member has already signed up for this assignment")

            if len(slot["signedUpMembers"]) >= slot["maxMembers"]:
                raise InvalidInput("This slot is full")

            slot["signedUpMembers"].append(member_id)
            doc["signups"].append(
                {
                    "signupSheetId": sheet_id,
                    "slotId": slot_id,
                    "memberId": member_id,
                    "signedUpAt": format_timestamp(now),
                }
            )

        logger.info("Member %s signed up for slot %s on sheet %s", member_id, slot_id, sheet_id)
        return SlotSignupResult(message="Successfully signed up for slot", slot=SlotRead.model_validate(slot))

    @classmethod
    async def remove_signup(cls, sheet_id: int, member_id: str) -> SlotSignupResult:
        """Remove a member's signup from a sheet, regardless of the signup window."""
        with open_document("signups") as doc:
            slot = next(
                (s for s in doc["slots"] if s["signupSheetId"] == sheet_id and member_id in s["signedUpMembers"]),
                None,
            )
            if slot is None:
                raise NotFound("Signup not found")
            slot["signedUpMembers"] = [m for m in slot["signedUpMembers"] if m != member_id]
            doc["signups"] = [
                s for s in doc["signups"] if not (s["signupSheetId"] == sheet_id and s["memberId"] == member_id)
            ]

        logger.info("Member %s removed from slot %s on sheet %s", member_id, slot["id"], sheet_id)
        return SlotSignupResult(message="Signup removed successfully", slot=SlotRead.model_validate(slot))
