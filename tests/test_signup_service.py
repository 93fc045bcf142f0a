"""
Tests for SignupService rules, driven directly with a controlled clock
"""
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from course_signup_api.app.core.db import read_document
from course_signup_api.app.core.errors import InvalidInput, NotFound
from course_signup_api.app.schemas.course import CourseCreate
from course_signup_api.app.schemas.signup_sheet import (
    SignupCreate,
    SignupSheetCreate,
    SlotsCreate,
    SlotUpdate,
)
from course_signup_api.app.services.course_service import CourseService
from course_signup_api.app.services.signup_service import SignupService

NOT_BEFORE = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
NOT_AFTER = datetime(2025, 3, 1, 17, 0, tzinfo=timezone.utc)
INSIDE = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def sheet():
    await CourseService.create_course(CourseCreate(term_code=1251, course_name="Systems"))
    created = await SignupService.create_sheet(
        SignupSheetCreate(
            term_code=1251,
            assignment_name="HW1",
            not_before="2025-03-01T09:00:00Z",
            not_after="2025-03-01T17:00:00Z",
        )
    )
    return created.signup_sheet


@pytest_asyncio.fixture
async def slot_ids(sheet):
    created = await SignupService.add_slots(
        sheet.id, SlotsCreate(start="2025-03-02T10:00:00Z", slot_duration=15, num_slots=3, max_members=2)
    )
    return [s.id for s in created.slots]


def _signup(slot_id, member_id="12345678"):
    return SignupCreate(slot_id=slot_id, member_id=member_id)


class TestCreateSheet:

    @pytest.mark.asyncio
    async def test_timestamps_are_normalized(self, sheet):
        assert sheet.not_before == "2025-03-01T09:00:00.000Z"
        assert sheet.not_after == "2025-03-01T17:00:00.000Z"
        assert sheet.id == 1

    @pytest.mark.asyncio
    async def test_window_must_be_increasing(self, sheet):
        with pytest.raises(InvalidInput):
            await SignupService.create_sheet(
                SignupSheetCreate(
                    term_code=1251,
                    assignment_name="HW2",
                    not_before="2025-03-01T17:00:00Z",
                    not_after="2025-03-01T17:00:00Z",
                )
            )

    @pytest.mark.asyncio
    async def test_unknown_course(self):
        with pytest.raises(NotFound):
            await SignupService.create_sheet(
                SignupSheetCreate(
                    term_code=4242,
                    assignment_name="HW1",
                    not_before="2025-03-01T09:00:00Z",
                    not_after="2025-03-01T17:00:00Z",
                )
            )

    @pytest.mark.asyncio
    async def test_ids_are_never_reused(self, sheet):
        await SignupService.delete_sheet(sheet.id)
        again = await SignupService.create_sheet(
            SignupSheetCreate(
                term_code=1251,
                assignment_name="HW1",
                not_before="2025-03-01T09:00:00Z",
                not_after="2025-03-01T17:00:00Z",
            )
        )
        assert again.signup_sheet.id == sheet.id + 1


class TestSlots:

    @pytest.mark.asyncio
    async def test_slots_are_back_to_back(self, sheet):
        created = await SignupService.add_slots(
            sheet.id, SlotsCreate(start="2025-03-02T10:00:00Z", slot_duration=45, num_slots=4, max_members=1)
        )
        starts = [s.start_time for s in created.slots]
        start = datetime(2025, 3, 2, 10, 0, tzinfo=timezone.utc)
        expected = [
            (start + timedelta(minutes=45 * i)).strftime("%Y-%m-%dT%H:%M:%S.000Z") for i in range(4)
        ]
        assert starts == expected
        assert [s.id for s in created.slots] == [1, 2, 3, 4]
        assert all(s.signed_up_members == [] for s in created.slots)

    @pytest.mark.asyncio
    async def test_slot_times_outside_window_are_accepted(self, sheet):
        created = await SignupService.add_slots(
            sheet.id, SlotsCreate(start="2030-01-01T00:00:00Z", slot_duration=10, num_slots=1, max_members=1)
        )
        assert created.slots[0].start_time == "2030-01-01T00:00:00.000Z"

    @pytest.mark.asyncio
    async def test_non_numeric_counts_are_rejected(self, sheet):
        with pytest.raises(InvalidInput):
            await SignupService.add_slots(
                sheet.id, SlotsCreate(start="2025-03-02T10:00:00Z", slot_duration="abc", num_slots=2, max_members=1)
            )

    @pytest.mark.asyncio
    async def test_unknown_sheet(self):
        with pytest.raises(NotFound):
            await SignupService.add_slots(
                99, SlotsCreate(start="2025-03-02T10:00:00Z", slot_duration=10, num_slots=2, max_members=1)
            )

    @pytest.mark.asyncio
    async def test_update_fields_independently(self, slot_ids):
        updated = await SignupService.update_slot(
            slot_ids[0], SlotUpdate(start_time="not a time", duration=60, max_members=None)
        )
        assert updated.slot.duration == 60
        assert updated.slot.start_time == "2025-03-02T10:00:00.000Z"
        assert updated.slot.max_members == 2
        assert updated.signed_up_members is None

    @pytest.mark.asyncio
    async def test_cannot_shrink_below_occupancy(self, sheet, slot_ids):
        await SignupService.signup(sheet.id, _signup(slot_ids[0], "12345678"), now=INSIDE)
        await SignupService.signup(sheet.id, _signup(slot_ids[0], "87654321"), now=INSIDE)

        with pytest.raises(InvalidInput) as excinfo:
            await SignupService.update_slot(slot_ids[0], SlotUpdate(duration=90, max_members=1))
        assert excinfo.value.extra["signedUpMembers"] == ["12345678", "87654321"]

        slot = (await SignupService.list_slots(sheet.id))[0]
        assert slot.max_members == 2
        assert slot.duration == 15
        assert slot.signed_up_members == ["12345678", "87654321"]

    @pytest.mark.asyncio
    async def test_update_echoes_occupants(self, sheet, slot_ids):
        await SignupService.signup(sheet.id, _signup(slot_ids[0]), now=INSIDE)
        updated = await SignupService.update_slot(slot_ids[0], SlotUpdate(max_members=1))
        assert updated.slot.max_members == 1
        assert updated.signed_up_members == ["12345678"]

    @pytest.mark.asyncio
    async def test_update_unknown_slot(self):
        with pytest.raises(NotFound):
            await SignupService.update_slot(5, SlotUpdate(duration=10))


class TestSignupWindow:

    @pytest.mark.asyncio
    async def test_before_window(self, sheet, slot_ids):
        with pytest.raises(InvalidInput, match="not started"):
            await SignupService.signup(sheet.id, _signup(slot_ids[0]), now=NOT_BEFORE - timedelta(seconds=1))

    @pytest.mark.asyncio
    async def test_after_window(self, sheet, slot_ids):
        with pytest.raises(InvalidInput, match="ended"):
            await SignupService.signup(sheet.id, _signup(slot_ids[0]), now=NOT_AFTER + timedelta(seconds=1))

    @pytest.mark.asyncio
    async def test_window_bounds_are_inclusive(self, sheet, slot_ids):
        await SignupService.signup(sheet.id, _signup(slot_ids[0], "12345678"), now=NOT_BEFORE)
        await SignupService.signup(sheet.id, _signup(slot_ids[1], "87654321"), now=NOT_AFTER)

    @pytest.mark.asyncio
    async def test_gate_order_sheet_then_slot_then_window(self, sheet, slot_ids):
        with pytest.raises(NotFound, match="Signup sheet not found"):
            await SignupService.signup(99, _signup(slot_ids[0]), now=NOT_AFTER + timedelta(days=1))
        with pytest.raises(NotFound, match="Slot not found"):
            await SignupService.signup(sheet.id, _signup(999), now=NOT_AFTER + timedelta(days=1))


class TestSignupCapacity:

    @pytest.mark.asyncio
    async def test_one_slot_per_member_per_sheet(self, sheet, slot_ids):
        await SignupService.signup(sheet.id, _signup(slot_ids[0]), now=INSIDE)
        with pytest.raises(InvalidInput, match="already signed up"):
            await SignupService.signup(sheet.id, _signup(slot_ids[1]), now=INSIDE)

    @pytest.mark.asyncio
    async def test_full_slot(self, sheet, slot_ids):
        await SignupService.signup(sheet.id, _signup(slot_ids[0], "11111111"), now=INSIDE)
        await SignupService.signup(sheet.id, _signup(slot_ids[0], "22222222"), now=INSIDE)
        with pytest.raises(InvalidInput, match="full"):
            await SignupService.signup(sheet.id, _signup(slot_ids[0], "33333333"), now=INSIDE)

    @pytest.mark.asyncio
    async def test_slot_of_another_sheet_is_not_found(self, sheet, slot_ids):
        other = await SignupService.create_sheet(
            SignupSheetCreate(
                term_code=1251,
                assignment_name="HW2",
                not_before="2025-03-01T09:00:00Z",
                not_after="2025-03-01T17:00:00Z",
            )
        )
        with pytest.raises(NotFound):
            await SignupService.signup(other.signup_sheet.id, _signup(slot_ids[0]), now=INSIDE)

    @pytest.mark.asyncio
    async def test_invalid_member_id(self, sheet, slot_ids):
        with pytest.raises(InvalidInput, match="member ID"):
            await SignupService.signup(sheet.id, _signup(slot_ids[0], "123"), now=INSIDE)


class TestSignupRecords:

    @pytest.mark.asyncio
    async def test_signup_records_mirror_slot_members(self, sheet, slot_ids):
        await SignupService.signup(sheet.id, _signup(slot_ids[1]), now=INSIDE)
        doc = read_document("signups")
        assert doc["signups"] == [
            {
                "signupSheetId": sheet.id,
                "slotId": slot_ids[1],
                "memberId": "12345678",
                "signedUpAt": "2025-03-01T12:00:00.000Z",
            }
        ]

        result = await SignupService.remove_signup(sheet.id, "12345678")
        assert result.slot.id == slot_ids[1]
        assert result.slot.signed_up_members == []
        assert read_document("signups")["signups"] == []

    @pytest.mark.asyncio
    async def test_removal_ignores_window(self, sheet, slot_ids):
        # Signed up in the window; removal happens long after it closed.
        await SignupService.signup(sheet.id, _signup(slot_ids[0]), now=INSIDE)
        result = await SignupService.remove_signup(sheet.id, "12345678")
        assert result.slot.signed_up_members == []

    @pytest.mark.asyncio
    async def test_remove_unknown_signup(self, sheet):
        with pytest.raises(NotFound):
            await SignupService.remove_signup(sheet.id, "12345678")

    @pytest.mark.asyncio
    async def test_delete_sheet_cascades(self, sheet, slot_ids):
        await SignupService.signup(sheet.id, _signup(slot_ids[0]), now=INSIDE)
        await SignupService.delete_sheet(sheet.id)
        doc = read_document("signups")
        assert doc["signupSheets"] == []
        assert doc["slots"] == []
        assert doc["signups"] == []
        assert doc["nextSlotId"] == 4
        with pytest.raises(NotFound):
            await SignupService.delete_sheet(sheet.id)
