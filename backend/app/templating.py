from pathlib import Path

from fastapi.templating import Jinja2Templates

from .config import settings
from .services.renderer import SiteRenderer

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def get_site_renderer() -> SiteRenderer:
    return SiteRenderer(templates.env, settings.site_url, settings.SITE_NAME)
