from .task import Task, TaskStatus, TASK_STATUSES
from .user import User

# Export all models for easy importing
__all__ = ["Task", "TaskStatus", "TASK_STATUSES", "User"]
