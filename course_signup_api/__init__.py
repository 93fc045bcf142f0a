"""
Top‑level package for the Course Signup API.

This file makes ``course_signup_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``course_signup_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
