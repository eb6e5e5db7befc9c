"""Static export of the public site.

Run by CI after a rebuild request:

    python -m backend.app.scripts.build_static_site --out dist

Writes one ``<slug>/index.html`` per published page, the marketing pages,
``404.html``, ``sitemap.xml`` and ``robots.txt``.
"""
from __future__ import annotations

import argparse
import logging
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List

from backend.app.config import settings
from backend.app.db import SessionLocal
from backend.app.models import LandingPage
from backend.app.services.landing_page_service import LandingPageService
from backend.app.services.renderer import SiteRenderer
from backend.app.templating import get_site_renderer

logger = logging.getLogger("build_static_site")

MARKETING_PAGES = ("about", "plans", "privacy", "terms")
STATIC_ASSETS = Path(__file__).resolve().parents[1] / "static"


@dataclass
class BuildResult:
    pages: List[str] = field(default_factory=list)
    sitemap_entries: int = 0
    store_available: bool = True


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def build_site(
    renderer: SiteRenderer,
    load_published: Callable[[], Iterable[LandingPage]],
    out_dir: Path,
) -> BuildResult:
    result = BuildResult()
    out_dir.mkdir(parents=True, exist_ok=True)

    try:
        published = list(load_published())
    except Exception:
        logger.exception("store_unavailable; exporting static pages only")
        published = []
        result.store_available = False

    for page in published:
        _write(out_dir / page.slug / "index.html", renderer.render_page(page))
        result.pages.append(page.slug)

    _write(out_dir / "index.html", renderer.render_static("home"))
    for name in MARKETING_PAGES:
        _write(out_dir / name / "index.html", renderer.render_static(name))
    _write(out_dir / "404.html", renderer.render_static("not_found"))

    entries = renderer.sitemap_entries(lambda: published)
    result.sitemap_entries = len(entries)
    _write(out_dir / "sitemap.xml", renderer.render_sitemap(entries))
    _write(out_dir / "robots.txt", renderer.render_robots())

    if STATIC_ASSETS.exists():
        shutil.copytree(STATIC_ASSETS, out_dir / "static", dirs_exist_ok=True)
    return result


def main() -> None:
    ap = argparse.ArgumentParser(description="Export published landing pages as static HTML.")
    ap.add_argument("--out", default=settings.STATIC_EXPORT_DIR, help="Output directory")
    ap.add_argument("--clean", action="store_true", help="Remove the output directory first")
    args = ap.parse_args()
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")

    out_dir = Path(args.out)
    if args.clean and out_dir.exists():
        shutil.rmtree(out_dir)

    started = time.time()
    with SessionLocal() as db:
        result = build_site(get_site_renderer(), LandingPageService(db).list_published, out_dir)
    logger.info(
        "build_done out=%s pages=%s sitemap_entries=%s store_available=%s elapsed=%.1fs",
        out_dir,
        len(result.pages),
        result.sitemap_entries,
        result.store_available,
        time.time() - started,
    )


if __name__ == "__main__":
    main()
