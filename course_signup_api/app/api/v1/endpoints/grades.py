"""
Grade endpoints for API v1.
"""

from fastapi import APIRouter, HTTPException, status

from course_signup_api.app.core.validation import clamp_int, clip_string
from course_signup_api.app.schemas.grade import GradeRead, GradeSaved, GradeSubmit
from course_signup_api.app.services.course_service import MEMBER_ID_LENGTH
from course_signup_api.app.services.grade_service import GradeService
from course_signup_api.app.services.signup_service import MAX_ID

router = APIRouter()


@router.post("", response_model=GradeSaved, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def submit_grade(grade: GradeSubmit) -> GradeSaved:
    """Record a grade for a member on a signup sheet.

    Submitting again for the same member and sheet overwrites the
    stored grade; the response then includes ``originalGrade``.
    """
    return await GradeService.upsert_grade(grade)


@router.get("/{member_id}/{sheet_id}", response_model=GradeRead)
async def get_grade(member_id: str, sheet_id: str) -> GradeRead:
    grade = await GradeService.get_grade(clip_string(member_id, MEMBER_ID_LENGTH), clamp_int(sheet_id, 1, MAX_ID))
    if grade is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Grade not found")
    return grade
