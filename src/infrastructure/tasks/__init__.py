"""
Deferred task scheduling.

Implements the TaskScheduler protocol from core.media.intake on top of
asyncio tasks.
"""

from .scheduler import DeferredTaskScheduler, TaskHandle, TaskState

__all__ = ["DeferredTaskScheduler", "TaskHandle", "TaskState"]
