"""Public rendering of published landing pages.

Used both by the live public routes and by the static export script, so the
CDN copy and the origin render the same markup.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from jinja2 import Environment

from ..models import LandingPage
from ..models.base import utcnow

logger = logging.getLogger(__name__)

PAGE_CHANGE_FREQUENCY = "monthly"
PAGE_PRIORITY = 0.8

# path, change frequency, priority
STATIC_PAGES = (
    ("", "weekly", 1.0),
    ("/about", "monthly", 0.7),
    ("/privacy", "yearly", 0.5),
    ("/terms", "yearly", 0.5),
    ("/plans", "monthly", 0.7),
)

ROBOTS_DISALLOW = ("/admin", "/api")


@dataclass(frozen=True)
class SitemapEntry:
    url: str
    last_modified: datetime
    change_frequency: str
    priority: float

    @property
    def lastmod(self) -> str:
        return self.last_modified.strftime("%Y-%m-%dT%H:%M:%S+00:00")


def _json_ld(data: Dict[str, Any]) -> str:
    # keep "</script>" inside string values from closing the tag
    return json.dumps(data, ensure_ascii=False).replace("</", "<\\/")


class SiteRenderer:
    def __init__(self, env: Environment, site_url: str, site_name: str = "KashPages") -> None:
        self.env = env
        self.site_url = site_url.rstrip("/")
        self.site_name = site_name

    def page_url(self, slug: str) -> str:
        return f"{self.site_url}/{slug}"

    def page_metadata(self, page: LandingPage) -> Dict[str, Any]:
        url = self.page_url(page.slug)
        canonical = page.canonical_url or url
        title = page.meta_title or page.title or page.business_name
        description = page.meta_description or page.description
        business = {
            "@context": "https://schema.org",
            "@type": "LocalBusiness",
            "name": page.business_name,
            "description": description,
            "url": page.business_website or url,
            "image": page.og_image or None,
            "telephone": page.business_phone or None,
            "email": page.business_email or None,
            "address": {"@type": "PostalAddress", "addressLocality": page.business_location}
            if page.business_location
            else None,
            "additionalType": page.business_category or None,
        }
        return {
            "title": title,
            "description": description,
            "canonical": canonical,
            "og": {
                "type": "website",
                "url": url,
                "site_name": self.site_name,
                "title": page.og_title or title,
                "description": page.og_description or description,
                "image": page.og_image,
            },
            "twitter": {
                "card": page.twitter_card or "summary_large_image",
                "title": page.og_title or title,
                "description": page.og_description or description,
                "image": page.og_image,
            },
            "json_ld": _json_ld({k: v for k, v in business.items() if v is not None}),
        }

    def render_page(self, page: LandingPage) -> str:
        return self.env.get_template("site/landing_page.html").render(
            page=page, meta=self.page_metadata(page), site_name=self.site_name
        )

    def render_static(self, name: str) -> str:
        return self.env.get_template(f"site/{name}.html").render(
            site_url=self.site_url, site_name=self.site_name
        )

    def static_entries(self, now: Optional[datetime] = None) -> List[SitemapEntry]:
        now = now or utcnow()
        return [
            SitemapEntry(url=f"{self.site_url}{path}", last_modified=now, change_frequency=freq, priority=prio)
            for path, freq, prio in STATIC_PAGES
        ]

    def sitemap_entries(
        self,
        load_published: Callable[[], Iterable[LandingPage]],
        now: Optional[datetime] = None,
    ) -> List[SitemapEntry]:
        entries = self.static_entries(now)
        try:
            pages = list(load_published())
        except Exception:
            # store unreachable: static entries only
            logger.exception("sitemap_pages_unavailable")
            return entries
        for page in pages:
            entries.append(
                SitemapEntry(
                    url=self.page_url(page.slug),
                    last_modified=page.updated_at,
                    change_frequency=PAGE_CHANGE_FREQUENCY,
                    priority=PAGE_PRIORITY,
                )
            )
        return entries

    def render_sitemap(self, entries: Iterable[SitemapEntry]) -> str:
        return self.env.get_template("site/sitemap.xml").render(entries=list(entries))

    def render_robots(self) -> str:
        lines = ["User-agent: *", "Allow: /"]
        lines += [f"Disallow: {path}" for path in ROBOTS_DISALLOW]
        lines.append("Crawl-delay: 1")
        lines.append("")
        for agent in ("Googlebot", "Bingbot", "Slurp"):
            lines.append(f"User-agent: {agent}")
        lines.append("Allow: /")
        lines += [f"Disallow: {path}" for path in ROBOTS_DISALLOW]
        lines.append("")
        lines.append(f"Sitemap: {self.site_url}/sitemap.xml")
        return "\n".join(lines) + "\n"


__all__ = ["SiteRenderer", "SitemapEntry", "STATIC_PAGES"]
