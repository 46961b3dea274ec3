"""
In-process scheduler for delayed one-shot tasks.

Each submitted action runs as an asyncio task on the server's event loop
after a fixed delay. Unlike a bare timer, every task has a handle that
reports its state, and failures are retried and then recorded instead of
disappearing. The scheduler keeps a bounded history of failed tasks so the
readiness endpoint can surface them.

Tasks live only in memory. A restart before a task fires loses it; the
shutdown hook cancels pending tasks and logs each one so stuck records
can be found.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)


class TaskState(Enum):
    """Lifecycle of a scheduled task."""
    PENDING = "pending"      # Waiting for its delay to elapse
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"        # Every attempt raised
    CANCELLED = "cancelled"


@dataclass
class TaskHandle:
    """
    Observable reference to a scheduled task.

    Returned by DeferredTaskScheduler.submit. Callers can inspect it,
    cancel it, or await it; none of them have to.
    """
    name: str
    delay_seconds: float
    id: UUID = field(default_factory=uuid4)
    state: TaskState = TaskState.PENDING
    attempts: int = 0
    error: Optional[str] = None
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    _task: Optional[asyncio.Task] = field(default=None, repr=False, compare=False)

    @property
    def done(self) -> bool:
        return self.state in (TaskState.SUCCEEDED, TaskState.FAILED, TaskState.CANCELLED)

    def cancel(self) -> bool:
        """Cancel the task if it hasn't finished. Returns True if cancellation was requested."""
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    async def wait(self) -> TaskState:
        """Wait for the task to finish and return its final state."""
        if self._task is not None:
            try:
                await asyncio.shield(self._task)
            except asyncio.CancelledError:
                if not self._task.cancelled():
                    raise
        return self.state


class DeferredTaskScheduler:
    """
    Runs actions after a delay with retries and failure recording.

    Must be used from inside a running event loop (a FastAPI request
    handler or lifespan). There is no limit on pending tasks.
    """

    def __init__(
        self,
        max_attempts: int = 1,
        retry_delay_seconds: float = 1.0,
        failure_history: int = 100,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self._max_attempts = max_attempts
        self._retry_delay_seconds = retry_delay_seconds
        self._pending: dict[UUID, TaskHandle] = {}
        self._failures: deque[TaskHandle] = deque(maxlen=failure_history)

    def submit(
        self,
        name: str,
        delay_seconds: float,
        action: Callable[[], Awaitable[None]],
    ) -> TaskHandle:
        """
        Schedule action to run once after delay_seconds.

        Returns immediately. The action's outcome is recorded on the
        returned handle.
        """
        handle = TaskHandle(name=name, delay_seconds=delay_seconds)
        handle._task = asyncio.get_running_loop().create_task(
            self._run(handle, action), name=name
        )
        handle._task.add_done_callback(lambda _: self._finalize(handle))
        self._pending[handle.id] = handle

        logger.debug(
            "Scheduled deferred task",
            extra={"task": name, "delay_seconds": delay_seconds}
        )

        return handle

    async def _run(self, handle: TaskHandle, action: Callable[[], Awaitable[None]]) -> None:
        try:
            await asyncio.sleep(handle.delay_seconds)
            handle.state = TaskState.RUNNING

            while True:
                handle.attempts += 1
                try:
                    await action()
                    break
                except Exception as e:
                    handle.error = str(e)
                    if handle.attempts >= self._max_attempts:
                        raise

                    logger.warning(
                        "Deferred task attempt failed, retrying",
                        extra={
                            "task": handle.name,
                            "attempt": handle.attempts,
                            "error": str(e),
                        }
                    )
                    await asyncio.sleep(self._retry_delay_seconds)

        except asyncio.CancelledError:
            handle.state = TaskState.CANCELLED
            logger.warning("Deferred task cancelled", extra={"task": handle.name})
            raise

        except Exception as e:
            handle.state = TaskState.FAILED
            self._failures.append(handle)
            logger.error(
                "Deferred task failed",
                extra={
                    "task": handle.name,
                    "attempts": handle.attempts,
                    "error": str(e),
                },
                exc_info=e,
            )

        else:
            handle.state = TaskState.SUCCEEDED
            handle.error = None
            logger.debug("Deferred task finished", extra={"task": handle.name})

    def _finalize(self, handle: TaskHandle) -> None:
        # A task cancelled before its first step never enters _run.
        if not handle.done:
            handle.state = TaskState.CANCELLED
        handle.finished_at = datetime.now(timezone.utc)
        self._pending.pop(handle.id, None)

    @property
    def pending(self) -> list[TaskHandle]:
        return list(self._pending.values())

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def recent_failures(self) -> list[TaskHandle]:
        """Failed tasks, oldest first, bounded by failure_history."""
        return list(self._failures)

    async def shutdown(self) -> list[TaskHandle]:
        """
        Cancel every pending task and wait for them to unwind.

        Returns the handles that were cancelled. Records they target stay
        in their intermediate state.
        """
        cancelled = self.pending
        for handle in cancelled:
            logger.warning(
                "Cancelling deferred task at shutdown; its record will not be completed",
                extra={"task": handle.name}
            )
            handle.cancel()

        tasks = [h._task for h in cancelled if h._task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        return cancelled
