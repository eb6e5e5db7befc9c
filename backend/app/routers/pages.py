from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.landing_page import STATUS_PUBLISHED
from ..services.landing_page_service import LandingPageService
from ..services.renderer import SiteRenderer
from ..services.validation import validate_slug
from ..templating import get_site_renderer


router = APIRouter()

MARKETING_PAGES = {
    "about": "about",
    "plans": "plans",
    "privacy": "privacy",
    "terms": "terms",
}


def not_found(renderer: SiteRenderer) -> HTMLResponse:
    return HTMLResponse(renderer.render_static("not_found"), status_code=404)


@router.get("/", response_class=HTMLResponse)
def home(renderer: SiteRenderer = Depends(get_site_renderer)):
    return HTMLResponse(renderer.render_static("home"))


@router.get("/sitemap.xml")
def sitemap(renderer: SiteRenderer = Depends(get_site_renderer), db: Session = Depends(get_db)):
    entries = renderer.sitemap_entries(LandingPageService(db).list_published)
    return Response(renderer.render_sitemap(entries), media_type="application/xml")


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots(renderer: SiteRenderer = Depends(get_site_renderer)):
    return PlainTextResponse(renderer.render_robots())


@router.get("/{slug}", response_class=HTMLResponse)
def landing_page(
    slug: str,
    renderer: SiteRenderer = Depends(get_site_renderer),
    db: Session = Depends(get_db),
):
    if slug in MARKETING_PAGES:
        return HTMLResponse(renderer.render_static(MARKETING_PAGES[slug]))
    if validate_slug(slug) is not None:
        return not_found(renderer)
    service = LandingPageService(db)
    page = service.get_by_slug(slug)
    if page is None or page.status != STATUS_PUBLISHED:
        return not_found(renderer)
    html = renderer.render_page(page)
    service.increment_view_count(page.id)
    return HTMLResponse(html)
