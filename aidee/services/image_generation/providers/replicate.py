"""
Replicate API provider for image generation.
Supports FLUX and other models. Predictions are async: create, then poll.
"""
from typing import Any

from aidee.services.image_generation.base import (
    AsyncImageProvider,
    GenerationTask,
    Image,
    TaskSnapshot,
    TaskStatus,
    collect_images,
)

_STATUSES = {
    "starting": TaskStatus.PENDING,
    "processing": TaskStatus.RUNNING,
    "succeeded": TaskStatus.SUCCEEDED,
    "failed": TaskStatus.FAILED,
    "canceled": TaskStatus.CANCELED,
}


class ReplicateProvider(AsyncImageProvider):
    """Replicate predictions API provider."""

    def create_task(self, prompt: str, count: int) -> TaskSnapshot:
        model = self.config.model or "black-forest-labs/flux-schnell"
        payload = {"input": {"prompt": prompt, "num_outputs": count}}
        raw = self.client.call(
            f"{self.config.base_url}/models/{model}/predictions",
            payload,
            self.config.auth,
            self.config.timeout,
        )
        return self._snapshot(raw.json())

    def fetch_status(self, task_id: str) -> TaskSnapshot:
        raw = self.client.call(
            f"{self.config.base_url}/predictions/{task_id}",
            auth=self.config.auth,
            timeout=self.config.timeout,
            method="GET",
        )
        return self._snapshot(raw.json())

    def images_from(self, task: GenerationTask, snapshot: TaskSnapshot) -> list[Image]:
        output = snapshot.payload.get("output")
        # Output is a list of URLs for most models, a single URL for some.
        if isinstance(output, str):
            output = [output]
        if not isinstance(output, list):
            return []
        urls = [u for u in output if isinstance(u, str)]
        return collect_images(
            enumerate(urls),
            lambda item: Image(
                id=f"{task.id}-{item[0]}",
                thumbnail_ref=item[1],
                full_ref=item[1],
                alt_text=task.prompt,
                source_provider=self.name,
            ),
            self.name,
            len(urls),
        )

    def _snapshot(self, prediction: Any) -> TaskSnapshot:
        if not isinstance(prediction, dict):
            return TaskSnapshot(status=TaskStatus.FAILED, error="unexpected prediction body")
        status = _STATUSES.get(str(prediction.get("status", "")).lower(), TaskStatus.RUNNING)
        error = prediction.get("error")
        output = prediction.get("output")
        first = output[0] if isinstance(output, list) and output else output
        return TaskSnapshot(
            status=status,
            task_id=prediction.get("id"),
            result_ref=first if isinstance(first, str) else None,
            error=str(error) if error else None,
            payload=prediction,
        )
