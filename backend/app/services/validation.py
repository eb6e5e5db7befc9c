"""Field-level checks for landing page records.

Every ``validate_*`` function returns an error message or ``None``.
``validate_landing_page_form`` runs all of them and returns a mapping of
camelCase field name -> first violated rule, empty when the record is valid.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import urlparse

from ..config import settings
from ..models.landing_page import PAGE_STATUSES

SLUG_MIN_LENGTH = 2
SLUG_MAX_LENGTH = 50
META_DESCRIPTION_MIN = 20
META_DESCRIPTION_MAX = 160
HTML_MIN_LENGTH = 10
HTML_MAX_LENGTH = 1_000_000
REQUIRED_MAX_LENGTH = 500
PHONE_MIN_LENGTH = 7
PHONE_MAX_LENGTH = 20

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
TWITTER_CARDS = ("summary", "summary_large_image", "app", "player")

_SLUG_RE = re.compile(r"[a-z0-9-]+")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def validate_slug(slug: Optional[str]) -> Optional[str]:
    if not slug:
        return "Slug is required"
    if len(slug) < SLUG_MIN_LENGTH:
        return "Slug must be at least 2 characters"
    if len(slug) > SLUG_MAX_LENGTH:
        return "Slug must not exceed 50 characters"
    if not _SLUG_RE.fullmatch(slug):
        return "Slug must contain only lowercase letters, numbers, and hyphens"
    if slug.startswith("-") or slug.endswith("-"):
        return "Slug cannot start or end with a hyphen"
    return None


def generate_slug(title: str) -> str:
    """Suggest a slug for a title. The result still goes through validate_slug."""
    slug = unicodedata.normalize("NFKD", title or "").encode("ascii", "ignore").decode("ascii")
    slug = slug.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def validate_meta_description(description: Optional[str]) -> Optional[str]:
    if not description:
        return "Meta description is required"
    if len(description) < META_DESCRIPTION_MIN:
        return "Meta description must be at least 20 characters"
    if len(description) > META_DESCRIPTION_MAX:
        return "Meta description must not exceed 160 characters"
    return None


def _parse_http_url(url: str):
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return None
    return parsed


def validate_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None  # optional field
    if _parse_http_url(url) is None:
        return "Invalid URL format"
    return None


def _host_allowed(host: str, allowlist: Iterable[str]) -> bool:
    host = host.lower()
    return any(host == domain or host.endswith("." + domain) for domain in allowlist)


def validate_og_image(image_url: Optional[str], allowlist: Optional[Iterable[str]] = None) -> Optional[str]:
    if not image_url:
        return "Featured image URL is required"
    parsed = _parse_http_url(image_url)
    if parsed is None:
        return "Featured image URL must be valid"
    hosts = settings.image_hosts if allowlist is None else list(allowlist)
    if parsed.path.lower().endswith(IMAGE_EXTENSIONS) or _host_allowed(parsed.hostname, hosts):
        return None
    return "Image URL should be a direct image file (jpg, png, gif, webp) or hosted on an allowed image domain"


def validate_html_content(html: Optional[str]) -> Optional[str]:
    if not html:
        return "HTML content is required"
    trimmed = html.strip()
    if len(trimmed) < HTML_MIN_LENGTH:
        return "HTML content must be at least 10 characters"
    if len(trimmed) > HTML_MAX_LENGTH:
        return "HTML content exceeds maximum size"
    return None


def validate_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    if not _EMAIL_RE.fullmatch(email):
        return "Invalid email format"
    return None


def validate_phone(phone: Optional[str]) -> Optional[str]:
    if not phone:
        return None
    if len(phone) < PHONE_MIN_LENGTH:
        return "Phone number must be at least 7 digits"
    if len(phone) > PHONE_MAX_LENGTH:
        return "Phone number must not exceed 20 characters"
    return None


def validate_required(value: Optional[str], field_name: str = "Field") -> Optional[str]:
    if not value or not value.strip():
        return f"{field_name} is required"
    if len(value) > REQUIRED_MAX_LENGTH:
        return f"{field_name} must not exceed 500 characters"
    return None


def validate_status(status: Optional[str]) -> Optional[str]:
    if not status:
        return None
    if status not in PAGE_STATUSES:
        return "Status must be one of: " + ", ".join(PAGE_STATUSES)
    return None


def validate_twitter_card(card: Optional[str]) -> Optional[str]:
    if not card:
        return None
    if card not in TWITTER_CARDS:
        return "Twitter card must be one of: " + ", ".join(TWITTER_CARDS)
    return None


REQUIRED_FIELDS = {
    "businessName": "Business name",
    "metaTitle": "Meta title",
    "ogTitle": "OG title",
    "ogDescription": "OG description",
    "businessCategory": "Business category",
    "businessLocation": "Business location",
}


def validate_landing_page_form(data: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    def check(field: str, message: Optional[str]) -> None:
        if message:
            errors[field] = message

    for field, label in REQUIRED_FIELDS.items():
        check(field, validate_required(data.get(field), label))
    check("slug", validate_slug(data.get("slug")))
    check("metaDescription", validate_meta_description(data.get("metaDescription")))
    check("ogImage", validate_og_image(data.get("ogImage")))
    check("htmlContent", validate_html_content(data.get("htmlContent")))

    check("businessPhone", validate_phone(data.get("businessPhone")))
    check("businessEmail", validate_email(data.get("businessEmail")))
    check("businessWebsite", validate_url(data.get("businessWebsite")))
    check("canonicalUrl", validate_url(data.get("canonicalUrl")))
    check("status", validate_status(data.get("status")))
    check("twitterCard", validate_twitter_card(data.get("twitterCard")))
    return errors


__all__ = [
    "generate_slug",
    "validate_email",
    "validate_html_content",
    "validate_landing_page_form",
    "validate_meta_description",
    "validate_og_image",
    "validate_phone",
    "validate_required",
    "validate_slug",
    "validate_status",
    "validate_twitter_card",
    "validate_url",
]
