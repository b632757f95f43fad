from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, Enum as SAEnum
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4
import enum


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


TASK_STATUSES = [status.value for status in TaskStatus]


class Task(SQLModel, table=True):
    """Task owned by exactly one user.

    ``status`` is stored through a string enum column that rejects any value
    outside ``TASK_STATUSES`` when the statement is bound, so an invalid
    status fails at write time rather than in the request handlers.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str
    description: str
    status: str = Field(
        default=TaskStatus.PENDING.value,
        sa_column=Column(
            SAEnum(
                *TASK_STATUSES,
                name="task_status",
                native_enum=False,
                create_constraint=True,
                validate_strings=True,
            ),
            nullable=False,
            default=TaskStatus.PENDING.value,
        ),
    )
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationship back to user
    user: Optional["User"] = Relationship(back_populates="tasks")
