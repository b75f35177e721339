"""Pydantic schemas for object operation endpoints."""

from pydantic import BaseModel


class DeleteObjectResponse(BaseModel):
    """Response model for object deletion."""
    name: str
    size: int
    length: int
