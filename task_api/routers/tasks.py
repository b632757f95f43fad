import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_claim
from ..auth.tokens import TokenClaim
from ..database import get_db
from ..errors import AppError, InternalError, NotFoundError, ValidationError
from ..models import Task as TaskModel, TaskStatus
from ..responses import envelope
from ..schemas.task import Task as TaskSchema, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

# Every task route sits behind the bearer token check.
router = APIRouter(dependencies=[Depends(get_current_claim)])

TASK_NOT_FOUND = "Task not found"


def _parse_task_id(task_id: str) -> str:
    try:
        return str(uuid.UUID(task_id))
    except ValueError:
        raise ValidationError("Invalid task ID")


def _owned(db: Session, task_id: str, owner_id: str):
    """Query for one task, always scoped to its owner."""
    return db.query(TaskModel).filter(TaskModel.id == task_id, TaskModel.user_id == owner_id)


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _get_update_data(task_update: TaskUpdate) -> dict:
    data = task_update.model_dump(exclude_unset=True)
    return {field: value for field, value in data.items() if value is not None}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(
    task: Optional[TaskCreate] = None,
    claim: TokenClaim = Depends(get_current_claim),
    db: Session = Depends(get_db),
):
    """Create a new task owned by the caller."""
    task = task or TaskCreate()
    if _is_blank(task.title) or _is_blank(task.description):
        raise ValidationError("Please provide title and description")

    try:
        db_task = TaskModel(
            title=task.title,
            description=task.description,
            status=task.status or TaskStatus.PENDING.value,
            user_id=claim.user_id,
        )
        db.add(db_task)
        db.commit()
        db.refresh(db_task)
    except Exception as exc:
        db.rollback()
        logger.warning("Task creation failed for user %s: %s", claim.user_id, exc)
        raise InternalError("Error creating task", error=str(exc)) from exc

    logger.info("Created task %s for user %s", db_task.id, claim.user_id)
    return envelope(
        True,
        message="Task created successfully",
        data=TaskSchema.model_validate(db_task),
    )


@router.get("")
def get_tasks(
    claim: TokenClaim = Depends(get_current_claim),
    db: Session = Depends(get_db),
):
    """List the caller's tasks, newest first."""
    try:
        tasks = (
            db.query(TaskModel)
            .filter(TaskModel.user_id == claim.user_id)
            .order_by(TaskModel.created_at.desc())
            .all()
        )
    except Exception as exc:
        logger.exception("Listing tasks failed")
        raise InternalError("Error fetching tasks", error=str(exc)) from exc

    return envelope(
        True,
        count=len(tasks),
        data=[TaskSchema.model_validate(task) for task in tasks],
    )


@router.get("/{task_id}")
def get_task(
    task_id: str,
    claim: TokenClaim = Depends(get_current_claim),
    db: Session = Depends(get_db),
):
    """Get a specific task by ID."""
    task_id = _parse_task_id(task_id)

    try:
        task = _owned(db, task_id, claim.user_id).first()
    except Exception as exc:
        logger.exception("Fetching task %s failed", task_id)
        raise InternalError("Error fetching task", error=str(exc)) from exc

    if not task:
        raise NotFoundError(TASK_NOT_FOUND)
    return envelope(True, data=TaskSchema.model_validate(task))


@router.put("/{task_id}")
def update_task(
    task_id: str,
    task_update: Optional[TaskUpdate] = None,
    claim: TokenClaim = Depends(get_current_claim),
    db: Session = Depends(get_db),
):
    """Update a specific task.

    The owner filter is part of the UPDATE statement itself, so a task that
    belongs to someone else matches zero rows and reads as not found.
    """
    task_id = _parse_task_id(task_id)
    values = _get_update_data(task_update or TaskUpdate())
    for field in ("title", "description"):
        if field in values and _is_blank(values[field]):
            raise ValidationError("Title and description cannot be empty")

    try:
        values["updated_at"] = datetime.now(timezone.utc)
        matched = _owned(db, task_id, claim.user_id).update(values, synchronize_session=False)
        if not matched:
            db.rollback()
            raise NotFoundError(TASK_NOT_FOUND)
        db.commit()
        task = _owned(db, task_id, claim.user_id).first()
        if not task:
            raise NotFoundError(TASK_NOT_FOUND)
    except AppError:
        raise
    except Exception as exc:
        db.rollback()
        logger.warning("Updating task %s failed: %s", task_id, exc)
        raise InternalError("Error updating task", error=str(exc)) from exc

    logger.info("Updated task %s (%s)", task_id, ", ".join(sorted(values)))
    return envelope(
        True,
        message="Task updated successfully",
        data=TaskSchema.model_validate(task),
    )


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    claim: TokenClaim = Depends(get_current_claim),
    db: Session = Depends(get_db),
):
    """Delete a specific task."""
    task_id = _parse_task_id(task_id)

    try:
        deleted = _owned(db, task_id, claim.user_id).delete(synchronize_session=False)
        if not deleted:
            db.rollback()
            raise NotFoundError(TASK_NOT_FOUND)
        db.commit()
    except AppError:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Deleting task %s failed", task_id)
        raise InternalError("Error deleting task", error=str(exc)) from exc

    logger.info("Deleted task %s", task_id)
    return envelope(True, message="Task deleted successfully", data={})
