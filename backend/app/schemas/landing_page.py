from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LandingPageIn(BaseModel):
    """Editable fields of a landing page as sent by the admin UI (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    twitter_card: Optional[str] = None
    business_name: Optional[str] = None
    business_category: Optional[str] = None
    business_phone: Optional[str] = None
    business_email: Optional[str] = None
    business_website: Optional[str] = None
    business_location: Optional[str] = None
    html_content: Optional[str] = None
    status: Optional[str] = None

    def wire_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def store_dict(self) -> Dict[str, Any]:
        """Fields actually sent, keyed by column name, None dropped."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class LandingPageOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    title: str
    slug: str
    description: str
    meta_title: str
    meta_description: str
    canonical_url: str
    og_title: str
    og_description: str
    og_image: str
    twitter_card: str
    business_name: str
    business_category: str
    business_phone: str
    business_email: str
    business_website: str
    business_location: str
    html_content: str
    status: str
    is_published: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    created_by: str
    updated_at: datetime
    updated_by: str
    view_count: int = 0
    last_viewed_at: Optional[datetime] = None


def dump_page(page) -> Dict[str, Any]:
    return LandingPageOut.model_validate(page).model_dump(by_alias=True, mode="json")
