"""Schemas shared across domains."""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    message: str = Field(..., examples=["Course deleted successfully"])


class ErrorResponse(BaseModel):
    """Body returned for every 4xx/5xx response."""

    error: str = Field(..., examples=["Signup sheet not found"])
