from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from ..auth import AdminContext, get_admin_context, get_auth_service
from ..config import settings
from ..errors import IdentityProviderError, InvalidTokenError, NotAdminError
from ..models.landing_page import PAGE_STATUSES
from ..services.auth_service import AuthService
from ..services.validation import TWITTER_CARDS


router = APIRouter(prefix="/admin")

PAGE_FORM_FIELDS = [
    {"name": "businessName", "label": "Business name", "kind": "text", "required": True},
    {"name": "slug", "label": "URL slug", "kind": "text", "required": True},
    {"name": "title", "label": "Title", "kind": "text"},
    {"name": "description", "label": "Description", "kind": "textarea"},
    {"name": "businessCategory", "label": "Category", "kind": "text", "required": True},
    {"name": "businessLocation", "label": "Location", "kind": "text", "required": True},
    {"name": "businessPhone", "label": "Phone", "kind": "tel"},
    {"name": "businessEmail", "label": "Email", "kind": "email"},
    {"name": "businessWebsite", "label": "Website", "kind": "url"},
    {"name": "metaTitle", "label": "Meta title", "kind": "text", "required": True},
    {"name": "metaDescription", "label": "Meta description (20-160 chars)", "kind": "textarea", "required": True},
    {"name": "canonicalUrl", "label": "Canonical URL", "kind": "url"},
    {"name": "ogTitle", "label": "Share title", "kind": "text", "required": True},
    {"name": "ogDescription", "label": "Share description", "kind": "textarea", "required": True},
    {"name": "ogImage", "label": "Featured image URL", "kind": "url", "required": True},
    {"name": "twitterCard", "label": "Twitter card", "kind": "select", "options": sorted(TWITTER_CARDS, key=lambda c: c != "summary_large_image")},
    {"name": "htmlContent", "label": "HTML content", "kind": "textarea", "required": True, "rows": 16},
    {"name": "status", "label": "Status", "kind": "select", "options": list(PAGE_STATUSES)},
]


def _render(request: Request, name: str, context: dict, status_code: int = 200):
    templates = request.app.state.templates
    context = {"site_name": settings.SITE_NAME, **context}
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def _login_redirect() -> RedirectResponse:
    return RedirectResponse(url="/admin/login", status_code=302)


@router.get("/login")
def login_page(request: Request, ctx: AdminContext | None = Depends(get_admin_context)):
    if ctx:
        return RedirectResponse(url="/admin", status_code=302)
    return _render(request, "admin/login.html", {"admin": None, "error": None, "email": ""})


@router.post("/login")
def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    auth: AuthService = Depends(get_auth_service),
):
    error = None
    status_code = 400
    try:
        token, admin = auth.login_with_password(email, password)
    except InvalidTokenError:
        error = "Invalid email or password"
    except NotAdminError:
        error = "You do not have admin access"
        status_code = 403
    except IdentityProviderError:
        error = "Sign-in is temporarily unavailable"
        status_code = 503
    if error:
        return _render(
            request, "admin/login.html", {"admin": None, "error": error, "email": email}, status_code=status_code
        )
    auth.start_session(request.session, token, admin)
    return RedirectResponse(url="/admin", status_code=303)


@router.post("/logout")
def logout(request: Request):
    AuthService.end_session(request.session)
    return _login_redirect()


@router.get("")
def dashboard(request: Request, ctx: AdminContext | None = Depends(get_admin_context)):
    if ctx is None:
        return _login_redirect()
    return _render(request, "admin/dashboard.html", {"admin": ctx})


@router.get("/pages/new")
def new_page(request: Request, ctx: AdminContext | None = Depends(get_admin_context)):
    if ctx is None:
        return _login_redirect()
    return _render(request, "admin/page_form.html", {"admin": ctx, "page_id": None, "fields": PAGE_FORM_FIELDS})


@router.get("/pages/{page_id}/edit")
def edit_page(page_id: str, request: Request, ctx: AdminContext | None = Depends(get_admin_context)):
    if ctx is None:
        return _login_redirect()
    return _render(request, "admin/page_form.html", {"admin": ctx, "page_id": page_id, "fields": PAGE_FORM_FIELDS})
