"""
Course and roster endpoints for API v1.

The section segment of every course path is optional and defaults to
1, so ``/courses/1251/members`` and ``/courses/1251/1/members`` name
the same roster.  Member routes are registered before the course
delete route so that ``DELETE /courses/1251/members`` is never read as
a course with section ``members``.
"""

from typing import List, Optional, Tuple

from fastapi import APIRouter, HTTPException, Query, status

from course_signup_api.app.core.errors import ServiceError
from course_signup_api.app.core.validation import clamp_int
from course_signup_api.app.schemas.common import MessageResponse
from course_signup_api.app.schemas.course import (
    CourseCreate,
    CourseCreated,
    CourseRead,
    MemberRead,
    MembersAdd,
    MembersAdded,
    MembersDelete,
    MembersDeleted,
)
from course_signup_api.app.services.course_service import MAX_SECTION, MAX_TERM_CODE, CourseService

router = APIRouter()


def parse_course_key(term_code: str, section: Optional[str] = None) -> Tuple[int, int]:
    """Clamp raw path segments into a ``(termCode, section)`` key."""
    return clamp_int(term_code, 1, MAX_TERM_CODE), clamp_int(section, 1, MAX_SECTION, 1)


@router.post("", response_model=CourseCreated, status_code=status.HTTP_201_CREATED)
async def create_course(course: CourseCreate) -> CourseCreated:
    """Create a course.

    Responds 400 when ``termCode`` or ``courseName`` is missing or
    unusable and 409 when the ``(termCode, section)`` pair exists.
    """
    try:
        return await CourseService.create_course(course)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e


@router.get("", response_model=List[CourseRead])
async def list_courses() -> List[CourseRead]:
    return await CourseService.list_courses()


@router.post("/{term_code}/members", response_model=MembersAdded, status_code=status.HTTP_201_CREATED)
@router.post("/{term_code}/{section}/members", response_model=MembersAdded, status_code=status.HTTP_201_CREATED)
async def add_members(term_code: str, payload: MembersAdd, section: Optional[str] = None) -> MembersAdded:
    """Add members to a course roster.

    Invalid or duplicate member ids do not fail the request; they are
    listed in ``ignoredIds``.
    """
    key = parse_course_key(term_code, section)
    try:
        return await CourseService.add_members(*key, payload.members)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e


@router.get("/{term_code}/members", response_model=List[MemberRead])
@router.get("/{term_code}/{section}/members", response_model=List[MemberRead])
async def list_members(
    term_code: str,
    section: Optional[str] = None,
    role: Optional[str] = Query(None, description="Only members with this role (case-insensitive)"),
) -> List[MemberRead]:
    return await CourseService.list_members(*parse_course_key(term_code, section), role=role)


@router.delete("/{term_code}/members", response_model=MembersDeleted)
@router.delete("/{term_code}/{section}/members", response_model=MembersDeleted)
async def delete_members(term_code: str, payload: MembersDelete, section: Optional[str] = None) -> MembersDeleted:
    """Remove the listed member ids from a roster; unknown ids are skipped."""
    key = parse_course_key(term_code, section)
    try:
        return await CourseService.delete_members(*key, payload.member_ids)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e


@router.delete("/{term_code}", response_model=MessageResponse)
@router.delete("/{term_code}/{section}", response_model=MessageResponse)
async def delete_course(term_code: str, section: Optional[str] = None) -> MessageResponse:
    """Delete a course and every member on its roster."""
    try:
        await CourseService.delete_course(*parse_course_key(term_code, section))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_body()) from e
    return MessageResponse(message="Course deleted successfully")
