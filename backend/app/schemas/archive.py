"""Pydantic v2 schemas for archive housekeeping endpoints."""

from pydantic import BaseModel, Field


class ArchiveRequest(BaseModel):
    """Age threshold in days; omitted means the configured default."""

    days: int | None = Field(None, ge=0, le=3650)


class ArchiveResult(BaseModel):
    count: int
    message: str
