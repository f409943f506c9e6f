"""
Core infrastructure: errors, validation, logging, scheduling and database access.
"""

from .exceptions import (
    ErrorCode,
    AccessMenuException,
    ValidationRejectedError,
    SessionNotFoundError,
    CatalogUnavailableError,
    UnsupportedLanguageError,
)
from .scheduler import (
    ScheduledTask,
    SchedulerUnavailableError,
    TaskScheduler,
    AsyncioScheduler,
    ManualScheduler,
    default_scheduler,
)

__all__ = [
    "ErrorCode",
    "AccessMenuException",
    "ValidationRejectedError",
    "SessionNotFoundError",
    "CatalogUnavailableError",
    "UnsupportedLanguageError",
    "ScheduledTask",
    "TaskScheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "SchedulerUnavailableError",
    "default_scheduler",
]
