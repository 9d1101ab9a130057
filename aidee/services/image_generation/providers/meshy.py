"""
Meshy text-to-3D provider.
Creates a preview task and returns its rendered thumbnail as the single image.
"""
from typing import Any

from aidee.services.image_generation.base import (
    AsyncImageProvider,
    GenerationTask,
    Image,
    TaskSnapshot,
    TaskStatus,
)

_STATUSES = {
    "PENDING": TaskStatus.PENDING,
    "IN_PROGRESS": TaskStatus.RUNNING,
    "SUCCEEDED": TaskStatus.SUCCEEDED,
    "FAILED": TaskStatus.FAILED,
    "CANCELED": TaskStatus.CANCELED,
    "EXPIRED": TaskStatus.FAILED,
}


class MeshyProvider(AsyncImageProvider):
    """Meshy /text-to-3d preview mode. One result per task."""

    @property
    def max_batch_size(self) -> int:
        return 1

    def create_task(self, prompt: str, count: int) -> TaskSnapshot:
        payload = {
            "mode": "preview",
            "prompt": prompt,
            "art_style": self.config.options.get("art_style", "realistic"),
            "should_remesh": True,
        }
        raw = self.client.call(
            f"{self.config.base_url}/text-to-3d",
            payload,
            self.config.auth,
            self.config.timeout,
        )
        body = raw.json()
        if not isinstance(body, dict):
            body = {}
        return TaskSnapshot(status=TaskStatus.PENDING, task_id=body.get("result") or None, payload=body)

    def fetch_status(self, task_id: str) -> TaskSnapshot:
        raw = self.client.call(
            f"{self.config.base_url}/text-to-3d/{task_id}",
            auth=self.config.auth,
            timeout=self.config.timeout,
            method="GET",
        )
        body: Any = raw.json()
        if not isinstance(body, dict):
            return TaskSnapshot(status=TaskStatus.FAILED, task_id=task_id, error="unexpected status body")
        status = _STATUSES.get(str(body.get("status", "")).upper(), TaskStatus.RUNNING)
        task_error = body.get("task_error")
        error = task_error.get("message") if isinstance(task_error, dict) else None
        return TaskSnapshot(
            status=status,
            task_id=task_id,
            result_ref=body.get("thumbnail_url") or None,
            error=error or None,
            payload=body,
        )

    def images_from(self, task: GenerationTask, snapshot: TaskSnapshot) -> list[Image]:
        thumb = snapshot.result_ref
        if not thumb:
            return []
        return [
            Image(
                id=task.id,
                thumbnail_ref=thumb,
                full_ref=thumb,
                alt_text=task.prompt,
                source_provider=self.name,
            )
        ]
