from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx

from ..config import Settings, settings as default_settings
from ..models.base import utcnow
from ..utils.telegram import format_publish_report, send_telegram_message

logger = logging.getLogger(__name__)

REASON_PUBLISHED = "page_published"
REASON_UNPUBLISHED = "page_unpublished"
REASON_UPDATED = "page_updated"
REASON_DELETED = "page_deleted"

STEP_OK = "ok"
STEP_FAILED = "failed"
STEP_SKIPPED = "skipped"


@dataclass
class DispatchReport:
    reason: str
    slug: Optional[str] = None
    steps: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(v != STEP_FAILED for v in self.steps.values())


class RebuildNotifier:
    """Asks CI to rebuild the static site after a publish-state change.

    Meant to run detached from the request (FastAPI background task).
    Steps are independent and best-effort: the webhook, then an optional CDN
    purge, then an optional chat message. Failures are logged, never raised.
    """

    def __init__(self, config: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.config = config or default_settings
        self.transport = transport

    def dispatch(self, reason: str, slug: Optional[str] = None) -> DispatchReport:
        report = DispatchReport(reason=reason, slug=slug)
        try:
            with httpx.Client(timeout=self.config.REBUILD_TIMEOUT_SECONDS, transport=self.transport) as client:
                report.steps["webhook"] = self._trigger_webhook(client, reason, slug)
                report.steps["cdn_purge"] = self._purge_cdn(client, slug)
        except Exception:
            # best-effort, must not raise
            logger.exception("rebuild_dispatch_crashed reason=%s slug=%s", reason, slug)
            report.steps.setdefault("webhook", STEP_FAILED)
        report.steps["notify"] = self._notify(report)
        log = logger.info if report.ok else logger.warning
        log("rebuild_dispatch reason=%s slug=%s steps=%s", reason, slug, report.steps)
        return report

    def _trigger_webhook(self, client: httpx.Client, reason: str, slug: Optional[str]) -> str:
        url = self.config.REBUILD_WEBHOOK_URL
        if not url:
            return STEP_SKIPPED
        headers = {"Accept": "application/json"}
        if self.config.REBUILD_WEBHOOK_TOKEN:
            headers["Authorization"] = f"Bearer {self.config.REBUILD_WEBHOOK_TOKEN}"
        payload = {
            "event_type": self.config.REBUILD_EVENT_TYPE,
            "client_payload": {
                "reason": reason,
                "slug": slug,
                "requested_at": utcnow().isoformat() + "Z",
            },
        }
        try:
            resp = client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("rebuild_dispatch_failed url=%s err=%s", url, exc)
            return STEP_FAILED
        if resp.status_code >= 400:
            logger.warning("rebuild_dispatch_failed url=%s status=%s", url, resp.status_code)
            return STEP_FAILED
        return STEP_OK

    def purge_urls(self, slug: Optional[str]) -> List[str]:
        base = self.config.site_url
        urls = [f"{base}/", f"{base}/sitemap.xml"]
        if slug:
            urls.insert(0, f"{base}/{slug}")
        return urls

    def _purge_cdn(self, client: httpx.Client, slug: Optional[str]) -> str:
        url = self.config.CDN_PURGE_URL
        if not url or not self.config.CDN_PURGE_TOKEN:
            return STEP_SKIPPED
        try:
            resp = client.post(
                url,
                json={"files": self.purge_urls(slug)},
                headers={"Authorization": f"Bearer {self.config.CDN_PURGE_TOKEN}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("cdn_purge_failed err=%s", exc)
            return STEP_FAILED
        if resp.status_code >= 400:
            logger.warning("cdn_purge_failed status=%s", resp.status_code)
            return STEP_FAILED
        return STEP_OK

    def _notify(self, report: DispatchReport) -> str:
        token = self.config.TELEGRAM_BOT_TOKEN
        chat_id = self.config.TELEGRAM_CHAT_ID
        if not token or not chat_id:
            return STEP_SKIPPED
        text = format_publish_report(
            {
                "reason": report.reason,
                "slug": report.slug,
                "url": f"{self.config.site_url}/{report.slug}" if report.slug else None,
                "steps": dict(report.steps),
            }
        )
        return STEP_OK if send_telegram_message(token, chat_id, text, transport=self.transport) else STEP_FAILED


def get_rebuild_notifier() -> RebuildNotifier:
    return RebuildNotifier()


__all__ = [
    "RebuildNotifier",
    "DispatchReport",
    "get_rebuild_notifier",
    "REASON_PUBLISHED",
    "REASON_UNPUBLISHED",
    "REASON_UPDATED",
    "REASON_DELETED",
]
