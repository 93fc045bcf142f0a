"""
Business logic for grades.

Grades live in their own document and are keyed by
``(memberId, signupSheetId)``.  Neither key is checked against the
roster or the signup sheets.
"""

import logging
from typing import Optional

from course_signup_api.app.core.db import open_document, read_document
from course_signup_api.app.core.validation import clamp_int, clip_string, format_timestamp, utcnow
from course_signup_api.app.schemas.grade import GradeRead, GradeSaved, GradeSubmit
from course_signup_api.app.services.course_service import MEMBER_ID_LENGTH
from course_signup_api.app.services.signup_service import MAX_ID

logger = logging.getLogger(__name__)

MAX_GRADE = 100


class GradeService:
    """Service for recording and looking up grades."""

    @classmethod
    async def upsert_grade(cls, data: GradeSubmit) -> GradeSaved:
        """Store a grade, overwriting any previous grade for the same key.

        When a grade is overwritten the previous value is returned as
        ``original_grade``.
        """
        member_id = clip_string(data.member_id, MEMBER_ID_LENGTH)
        sheet_id = clamp_int(data.signup_sheet_id, 1, MAX_ID)
        record = {
            "memberId": member_id,
            "signupSheetId": sheet_id,
            "grade": clamp_int(data.grade, 0, MAX_GRADE),
            "comment": clip_string(data.comment, 500),
            "gradedAt": format_timestamp(utcnow()),
        }

        original_grade: Optional[int] = None
        replaced = False
        with open_document("grades") as doc:
            existing = next(
                (
                    g
                    for g in doc["grades"]
                    if g.get("memberId") == member_id and g.get("signupSheetId") == sheet_id
                ),
                None,
            )
            if existing is None:
                doc["grades"].append(record)
            else:
                original_grade = existing.get("grade")
                replaced = True
                existing.update(record)

        if not replaced:
            logger.info("Grade %s recorded for member %s on sheet %s", record["grade"], member_id, sheet_id)
            message = "Grade saved successfully"
        else:
            logger.info(
                "Grade for member %s on sheet %s changed from %s to %s",
                member_id,
                sheet_id,
                original_grade,
                record["grade"],
            )
            message = "Grade updated successfully"
        return GradeSaved(message=message, grade=GradeRead.model_validate(record), original_grade=original_grade)

    @classmethod
    async def get_grade(cls, member_id: str, sheet_id: int) -> Optional[GradeRead]:
        data = read_document("grades")
        for g in data.get("grades", []):
            if g.get("memberId") == member_id and g.get("signupSheetId") == sheet_id:
                return GradeRead.model_validate(g)
        return None
