"""
Business logic for courses and their rosters.

Courses and members share the ``courses`` document.  A course is keyed
by ``(termCode, section)`` and deleting it removes every member of
that section.  Bulk member operations never fail because of individual
entries: rejected ids are reported back instead.
"""

import logging
from typing import Any, List, Optional

from course_signup_api.app.core.db import open_document, read_document
from course_signup_api.app.core.errors import Conflict, InvalidInput, NotFound
from course_signup_api.app.core.validation import clamp_int, clip_string, format_timestamp, utcnow
from course_signup_api.app.schemas.course import (
    CourseCreate,
    CourseCreated,
    CourseRead,
    MemberRead,
    MembersAdded,
    MembersDeleted,
)

logger = logging.getLogger(__name__)

MAX_TERM_CODE = 9999
MAX_SECTION = 99
MEMBER_ID_LENGTH = 8


def _same_course(record: dict, term_code: int, section: int) -> bool:
    return record.get("termCode") == term_code and record.get("section") == section


def course_exists(term_code: int, section: int) -> bool:
    data = read_document("courses")
    return any(_same_course(c, term_code, section) for c in data["courses"])


class CourseService:
    """Service for managing courses and course members."""

    @classmethod
    async def create_course(cls, data: CourseCreate) -> CourseCreated:
        """Create a course keyed by ``(termCode, section)``.

        ``section`` defaults to 1.  Raises ``InvalidInput`` when the
        term code or course name is missing or unusable and
        ``Conflict`` when the key is already taken.
        """
        if not data.term_code or not data.course_name:
            raise InvalidInput("Missing required parameters: termCode and courseName are required")

        term_code = clamp_int(data.term_code, 1, MAX_TERM_CODE)
        course_name = clip_string(data.course_name, 100)
        section = clamp_int(data.section, 1, MAX_SECTION, 1)

        if term_code == 0:
            raise InvalidInput(f"Invalid term code. Must be between 1 and {MAX_TERM_CODE}")
        if not course_name:
            raise InvalidInput("Course name cannot be empty")

        with open_document("courses") as doc:
            if any(_same_course(c, term_code, section) for c in doc["courses"]):
                raise Conflict(
                    f"Course with term code {term_code} and section {section} already exists"
                )
            record = {
                "termCode": term_code,
                "courseName": course_name,
                "section": section,
                "createdAt": format_timestamp(utcnow()),
            }
            doc["courses"].append(record)

        logger.info("Course %s-%s '%s' created", term_code, section, course_name)
        return CourseCreated(message="Course created successfully", course=CourseRead.model_validate(record))

    @classmethod
    async def list_courses(cls) -> List[CourseRead]:
        data = read_document("courses")
        return [CourseRead.model_validate(c) for c in data.get("courses", [])]

    @classmethod
    async def delete_course(cls, term_code: int, section: int) -> None:
        """Delete a course together with its members.

        Signup sheets that reference the course are left in place.
        """
        with open_document("courses") as doc:
            index = next(
                (i for i, c in enumerate(doc["courses"]) if _same_course(c, term_code, section)),
                None,
            )
            if index is None:
                raise NotFound(f"Course with term code {term_code} and section {section} does not exist")
            del doc["courses"][index]
            before = len(doc["members"])
            doc["members"] = [m for m in doc["members"] if not _same_course(m, term_code, section)]
            removed = before - len(doc["members"])

        logger.info("Course %s-%s deleted with %d member(s)", term_code, section, removed)

    @classmethod
    async def add_members(cls, term_code: int, section: int, members: Any) -> MembersAdded:
        """Add members to a course roster.

        Entries whose ``memberId`` is not exactly eight characters after
        trimming, or that are already on the roster, are skipped and
        reported in ``ignoredIds``.
        """
        if not isinstance(members, list) or not members:
            raise InvalidInput("Members array is required and must not be empty")

        added_count = 0
        ignored_ids: List[Any] = []
        with open_document("courses") as doc:
            if not any(_same_course(c, term_code, section) for c in doc["courses"]):
                raise NotFound(f"Course with term code {term_code} and section {section} does not exist")

            for member in members:
                if not isinstance(member, dict):
                    member = {}
                member_id = clip_string(member.get("memberId"), MEMBER_ID_LENGTH)
                if len(member_id) != MEMBER_ID_LENGTH:
                    ignored_ids.append(member.get("memberId") or "invalid")
                    continue

                exists = any(
                    _same_course(m, term_code, section) and m.get("memberId") == member_id
                    for m in doc["members"]
                )
                if exists:
                    ignored_ids.append(member_id)
                    continue

                doc["members"].append(
                    {
                        "termCode": term_code,
                        "section": section,
                        "memberId": member_id,
                        "firstName": clip_string(member.get("firstName"), 200),
                        "lastName": clip_string(member.get("lastName"), 200),
                        "role": clip_string(member.get("role"), 10) or "student",
                        "addedAt": format_timestamp(utcnow()),
                    }
                )
                added_count += 1

        if ignored_ids:
            logger.info("Course %s-%s: ignored member ids %s", term_code, section, ignored_ids)
        logger.info("Course %s-%s: %d member(s) added", term_code, section, added_count)
        return MembersAdded(
            message=f"{added_count} member(s) added successfully",
            added_count=added_count,
            ignored_ids=ignored_ids,
        )

    @classmethod
    async def list_members(cls, term_code: int, section: int, role: Optional[str] = None) -> List[MemberRead]:
        """List a course's members, optionally only those with ``role`` (case-insensitive)."""
        data = read_document("courses")
        members = [m for m in data.get("members", []) if _same_course(m, term_code, section)]
        wanted = clip_string(role, 10).lower()
        if wanted:
            members = [m for m in members if str(m.get("role", "")).lower() == wanted]
        return [MemberRead.model_validate(m) for m in members]

    @classmethod
    async def delete_members(cls, term_code: int, section: int, member_ids: Any) -> MembersDeleted:
        if not isinstance(member_ids, list) or not member_ids:
            raise InvalidInput("memberIds array is required and must not be empty")

        targets = {m for m in member_ids if isinstance(m, str)}
        with open_document("courses") as doc:
            before = len(doc["members"])
            doc["members"] = [
                m
                for m in doc["members"]
                if not (_same_course(m, term_code, section) and m.get("memberId") in targets)
            ]
            deleted_count = before - len(doc["members"])

        logger.info("Course %s-%s: %d member(s) deleted", term_code, section, deleted_count)
        return MembersDeleted(
            message=f"{deleted_count} member(s) deleted successfully",
            deleted_count=deleted_count,
        )
