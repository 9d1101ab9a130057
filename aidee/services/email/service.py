"""
Result summary email over the Resend HTTP API.
"""
import logging
from typing import Any

from aidee.core.providers import AuthConfig
from aidee.services.providers.client import ProviderClient
from aidee.services.providers.failure_types import ProviderCallError

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Aidee: your visual brief and process summary"
MAX_IMAGE_LINKS = 4


class EmailSender:
    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.resend.com",
        sender: str = "Aidee <onboarding@resend.dev>",
        client: ProviderClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.auth = AuthConfig(api_key)
        self.api_url = api_url.rstrip("/")
        self.sender = sender
        self.client = client or ProviderClient("resend")
        self.timeout = timeout

    def is_available(self) -> bool:
        return self.auth.is_configured

    def send(self, to: str, subject: str, body: str) -> str | None:
        """Send a plain-text email. Returns an error message, or None on success."""
        if not self.is_available():
            return "email is not configured (RESEND_API_KEY missing)"
        if not to or "@" not in to:
            return "recipient address is empty or invalid"
        try:
            raw = self.client.call(
                f"{self.api_url}/emails",
                {"from": self.sender, "to": [to], "subject": subject, "text": body},
                self.auth,
                self.timeout,
            )
        except ProviderCallError as e:
            logger.warning("email_send_failed", extra={"provider": "resend", "error": str(e)})
            return str(e)
        try:
            message_id = raw.json().get("id")
        except (ValueError, AttributeError):
            message_id = None
        logger.info("email_sent", extra={"provider": "resend", "record_id": message_id})
        return None


def _line(label: str, value: Any) -> str:
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value if v)
    return f"{label}: {value or ''}"


def _section(tree: Any, key: str) -> dict[str, Any]:
    value = tree.get(key) if isinstance(tree, dict) else None
    return value if isinstance(value, dict) else {}


def build_summary(brief: dict[str, Any] | None, images: list[dict[str, Any]] | None = None) -> str:
    """Plain-text summary of a brief and up to four image links."""
    if not brief:
        return "No brief was attached to this request. Please try again."

    target = _section(brief, "target_and_problem")
    rfp = _section(brief, "visual_rfp")
    budget = _section(_section(brief, "double_diamond"), "overall_budget_time")
    lines = [
        "Aidee: visual brief summary",
        "",
        "1. Target and problem",
        str(target.get("summary") or ""),
        str(target.get("details") or ""),
        "",
        "2. Key features",
    ]
    lines += [f"- {f.get('name', '')}: {f.get('description', '')}" for f in brief.get("key_features") or [] if isinstance(f, dict)]
    lines += ["", "3. Differentiation"]
    lines += [f"- {d.get('point', '')}: {d.get('strategy', '')}" for d in brief.get("differentiation") or [] if isinstance(d, dict)]
    lines += [
        "",
        "4. Brief",
        _line("Project", rfp.get("project_title")),
        _line("Background", rfp.get("background")),
        _line("Objective", rfp.get("objective")),
        _line("Target users", rfp.get("target_users")),
        _line("Core requirements", rfp.get("core_requirements")),
        _line("Design direction", rfp.get("design_direction")),
        _line("Deliverables", rfp.get("deliverables")),
    ]
    if budget:
        lines += [
            _line("Estimated budget", budget.get("total_budget_krw")),
            _line("Estimated duration", budget.get("total_time_weeks")),
        ]
    links = []
    for image in (images or [])[:MAX_IMAGE_LINKS]:
        if not isinstance(image, dict):
            continue
        url = image.get("full") or image.get("link")
        # data: URIs are not useful in a mail body.
        if url and not str(url).startswith("data:"):
            links.append(f"- {image.get('alt') or url}: {url}")
    if links:
        lines += ["", "5. Reference images"] + links
    return "\n".join(lines)
