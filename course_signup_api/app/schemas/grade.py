"""
Pydantic models for grades.

A grade is keyed by ``(memberId, signupSheetId)``; submitting it again
overwrites the stored value.
"""

from typing import Any

from pydantic import BaseModel, Field


class GradeSubmit(BaseModel):
    member_id: Any = Field(None, alias="memberId", examples=["12345678"])
    signup_sheet_id: Any = Field(None, alias="signupSheetId", examples=[1])
    grade: Any = Field(None, examples=[95])
    comment: Any = Field(None, examples=["Well presented"])

    model_config = {"populate_by_name": True}


class GradeRead(BaseModel):
    member_id: str = Field(..., alias="memberId")
    signup_sheet_id: int = Field(..., alias="signupSheetId")
    grade: int
    comment: str = ""
    graded_at: str | None = Field(None, alias="gradedAt")

    model_config = {"populate_by_name": True}


class GradeSaved(BaseModel):
    message: str
    grade: GradeRead
    # Set only when an existing grade was overwritten.
    original_grade: int | None = Field(None, alias="originalGrade")

    model_config = {"populate_by_name": True}
