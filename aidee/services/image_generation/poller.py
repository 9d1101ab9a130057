"""
Create -> poll -> terminal-state driver for async image providers.

The wait loop blocks only the request that started the task. Status calls are
strictly sequential, and the loop is bounded by timeout: on expiry the remote task
is left alone (no cancel primitive) and the local handle is closed.
"""
import logging
import time
from typing import Callable

from aidee.services.image_generation.base import (
    AsyncImageProvider,
    GenerationTask,
    Image,
    ImageGenerationError,
    TaskStatus,
)
from aidee.services.providers.failure_types import ErrorKind, ProviderCallError
from aidee.utils.metrics import async_task_polls_total

logger = logging.getLogger(__name__)


class AsyncTaskPoller:
    def __init__(
        self,
        provider: AsyncImageProvider,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.provider = provider
        self._clock = clock
        self._sleep = sleep

    def start(self, prompt: str, count: int = 1) -> GenerationTask:
        """
        Issue the provider's creation call.

        Raises:
            ImageGenerationError: TASK_CREATION_FAILED; no task exists in that case.
        """
        name = self.provider.name
        try:
            snapshot = self.provider.create_task(prompt, count)
        except ProviderCallError as e:
            raise ImageGenerationError(
                ErrorKind.TASK_CREATION_FAILED, str(e), provider=name, detail=e.to_detail()
            ) from e
        except ValueError as e:
            raise ImageGenerationError(
                ErrorKind.TASK_CREATION_FAILED, f"{name} returned an unreadable body: {e}", provider=name
            ) from e
        if not snapshot.task_id:
            raise ImageGenerationError(
                ErrorKind.TASK_CREATION_FAILED, f"{name} returned no task id", provider=name
            )
        if snapshot.status in (TaskStatus.FAILED, TaskStatus.CANCELED):
            raise ImageGenerationError(
                ErrorKind.TASK_CREATION_FAILED,
                snapshot.error or f"{name} rejected the task",
                provider=name,
                detail={"task_id": snapshot.task_id},
            )

        # A task reported as already finished still needs one status call for its result.
        status = TaskStatus.PENDING if snapshot.status == TaskStatus.PENDING else TaskStatus.RUNNING
        task = GenerationTask(id=snapshot.task_id, provider=name, prompt=prompt, status=status)
        logger.info("async_task_started", extra={"provider": name, "task_id": task.id, "task_status": status.value})
        return task

    def await_completion(
        self,
        task: GenerationTask,
        poll_interval: float | None = None,
        timeout: float | None = None,
    ) -> list[Image]:
        """
        Poll until the task is terminal or timeout elapses.

        Raises:
            ImageGenerationError: TASK_FAILED (failed/canceled, carries the provider reason),
                TASK_TIMED_OUT, or PROVIDER_FAILURE when a status call itself fails.
            ValueError: the task was already awaited, or interval/timeout are invalid.
        """
        if task.closed:
            raise ValueError(f"task {task.id} was already awaited")
        interval = self.provider.config.poll_interval if poll_interval is None else poll_interval
        limit = self.provider.config.poll_timeout if timeout is None else timeout
        if interval <= 0 or limit < 0:
            raise ValueError("poll_interval must be > 0 and timeout >= 0")

        name = self.provider.name
        deadline = self._clock() + limit
        polls = 0
        try:
            while True:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    logger.warning(
                        "async_task_timed_out",
                        extra={"provider": name, "task_id": task.id, "task_status": task.status.value, "attempt": polls},
                    )
                    raise ImageGenerationError(
                        ErrorKind.TASK_TIMED_OUT,
                        f"{name} task {task.id} did not finish within {limit:g}s",
                        provider=name,
                        detail={"task_id": task.id, "polls": polls, "last_status": task.status.value},
                    )

                self._sleep(min(interval, remaining))
                try:
                    snapshot = self.provider.fetch_status(task.id)
                except ProviderCallError as e:
                    raise ImageGenerationError(
                        ErrorKind.PROVIDER_FAILURE,
                        str(e),
                        provider=name,
                        detail={"task_id": task.id, **e.to_detail()},
                    ) from e
                except ValueError as e:
                    raise ImageGenerationError(
                        ErrorKind.PROVIDER_FAILURE,
                        f"{name} returned an unreadable status body: {e}",
                        provider=name,
                        detail={"task_id": task.id},
                    ) from e
                polls += 1
                async_task_polls_total.labels(provider=name).inc()

                task.status = snapshot.status
                if snapshot.result_ref:
                    task.result_ref = snapshot.result_ref

                if snapshot.status == TaskStatus.SUCCEEDED:
                    images = self.provider.images_from(task, snapshot)
                    if not images:
                        raise ImageGenerationError(
                            ErrorKind.TASK_FAILED,
                            f"{name} task {task.id} succeeded without a usable result",
                            provider=name,
                            detail={"task_id": task.id},
                        )
                    logger.info(
                        "async_task_succeeded",
                        extra={"provider": name, "task_id": task.id, "attempt": polls, "delivered": len(images)},
                    )
                    return images

                if snapshot.status in (TaskStatus.FAILED, TaskStatus.CANCELED):
                    reason = snapshot.error or snapshot.status.value
                    logger.warning(
                        "async_task_failed",
                        extra={"provider": name, "task_id": task.id, "task_status": snapshot.status.value, "reason": reason},
                    )
                    raise ImageGenerationError(
                        ErrorKind.TASK_FAILED,
                        f"{name} task {task.id} {snapshot.status.value}: {reason}",
                        provider=name,
                        detail={"task_id": task.id, "status": snapshot.status.value, "reason": reason},
                    )
        finally:
            task.closed = True

    def run(self, prompt: str, count: int = 1) -> list[Image]:
        """start + await_completion with the provider's configured interval and timeout."""
        return self.await_completion(self.start(prompt, count))
