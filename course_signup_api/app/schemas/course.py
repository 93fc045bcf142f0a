"""
Pydantic models for courses and their member rosters.

A course is identified by ``(termCode, section)``; a member by
``(termCode, section, memberId)``.  Request fields are typed ``Any``
because the service clamps and clips them instead of rejecting them.
"""

from typing import Any, List

from pydantic import BaseModel, Field


class CourseCreate(BaseModel):
    term_code: Any = Field(None, alias="termCode", examples=[1251])
    course_name: Any = Field(None, alias="courseName", examples=["Systems"])
    section: Any = Field(1, examples=[1])

    model_config = {"populate_by_name": True}


class CourseRead(BaseModel):
    term_code: int = Field(..., alias="termCode")
    section: int
    course_name: str = Field(..., alias="courseName")
    created_at: str | None = Field(None, alias="createdAt")

    model_config = {"populate_by_name": True}


class CourseCreated(BaseModel):
    message: str
    course: CourseRead


class MembersAdd(BaseModel):
    """Body of ``POST .../members``.

    Each entry is an object with ``memberId``, ``firstName``,
    ``lastName`` and an optional ``role`` (defaults to ``student``).
    """

    members: Any = Field(
        None,
        examples=[[{"memberId": "12345678", "firstName": "Ada", "lastName": "Lovelace", "role": "student"}]],
    )


class MembersDelete(BaseModel):
    member_ids: Any = Field(None, alias="memberIds", examples=[["12345678"]])

    model_config = {"populate_by_name": True}


class MemberRead(BaseModel):
    term_code: int = Field(..., alias="termCode")
    section: int
    member_id: str = Field(..., alias="memberId")
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    role: str = "student"
    added_at: str | None = Field(None, alias="addedAt")

    model_config = {"populate_by_name": True}


class MembersAdded(BaseModel):
    message: str
    added_count: int = Field(..., alias="addedCount")
    ignored_ids: List[Any] = Field(default_factory=list, alias="ignoredIds")

    model_config = {"populate_by_name": True}


class MembersDeleted(BaseModel):
    message: str
    deleted_count: int = Field(..., alias="deletedCount")

    model_config = {"populate_by_name": True}
