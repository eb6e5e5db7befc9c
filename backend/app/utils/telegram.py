from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


def format_publish_report(payload: Dict[str, Any]) -> str:
    lines = [
        "KashPages site update",
        f"reason: {payload.get('reason', '-')}",
    ]
    slug = payload.get("slug")
    if slug:
        lines.append(f"page: {slug}")
    url = payload.get("url")
    if url:
        lines.append(f"url: {url}")
    steps = payload.get("steps") or {}
    if steps:
        parts = [f"{k}={v}" for k, v in steps.items()]
        lines.append("steps: " + ", ".join(parts))
    return "\n".join(lines)


def send_telegram_message(
    token: str,
    chat_id: str,
    text: str,
    transport: Optional[httpx.BaseTransport] = None,
) -> bool:
    url = f"https://api.telegram.org/bot{token}/sendMessage"
    try:
        with httpx.Client(timeout=10.0, transport=transport) as client:
            resp = client.post(url, json={"chat_id": chat_id, "text": text})
    except httpx.HTTPError as exc:
        logger.warning("telegram_send_failed err=%s", exc)
        return False
    if not 200 <= resp.status_code < 300:
        logger.warning("telegram_send_failed status=%s", resp.status_code)
        return False
    return True
