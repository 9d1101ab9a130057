"""
Post-result notifications: side calls (persistence, metrics, email) issued after
the primary result exists. Each call is isolated; a failure is logged and counted,
never raised to the caller.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from aidee.utils.metrics import notification_failures_total

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    name: str
    func: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


class PostResultNotifications:
    def __init__(self) -> None:
        self._pending: list[Notification] = []

    def add(self, name: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self._pending.append(Notification(name, func, args, kwargs))

    def __len__(self) -> int:
        return len(self._pending)

    def dispatch(self) -> list[str]:
        """Run every queued call once, in order. Returns the names that failed."""
        pending, self._pending = self._pending, []
        failed: list[str] = []
        for notification in pending:
            try:
                notification.func(*notification.args, **notification.kwargs)
            except Exception as e:
                failed.append(notification.name)
                notification_failures_total.labels(notification=notification.name).inc()
                logger.exception(
                    "notification_failed",
                    extra={"notification": notification.name, "error": str(e)},
                )
        return failed
