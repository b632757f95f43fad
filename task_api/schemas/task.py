from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class TaskCreate(BaseModel):
    """Schema for creating new tasks.

    ``status`` is passed through as-is; the store decides whether it is one
    of the allowed values.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class TaskUpdate(BaseModel):
    """Schema for updating existing tasks. Only the fields sent are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class Task(BaseModel):
    """Complete task schema with all fields."""
    id: str
    title: str
    description: str
    status: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
