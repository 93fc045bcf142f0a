"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
The courses router goes first: its member routes must be matched
before any catch-all course path of the other routers.
"""

from fastapi import APIRouter

from .endpoints import courses, grades, signup_sheets, slots

router = APIRouter()

router.include_router(courses.router, prefix="/courses", tags=["courses"])
# The signup sheet router spans /signupsheets and /courses/.../signupsheets,
# so it defines full paths itself and takes no prefix.
router.include_router(signup_sheets.router, tags=["signupsheets"])
router.include_router(slots.router, prefix="/slots", tags=["slots"])
router.include_router(grades.router, prefix="/grades", tags=["grades"])
