from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..auth import AdminContext, require_admin, require_permission
from ..db import get_db
from ..errors import InvalidRequestError, PageNotFoundError, PageValidationError, SlugTakenError
from ..models.landing_page import STATUS_PUBLISHED
from ..schemas.landing_page import LandingPageIn, dump_page
from ..services.audit_service import (
    PAGE_CREATED,
    PAGE_DELETED,
    PAGE_UPDATED,
    TARGET_LANDING_PAGE,
    AuditLogService,
    snapshot_page,
)
from ..services.landing_page_service import LandingPageService
from ..services.publish_service import PublishService
from ..services.rebuild_service import (
    REASON_DELETED,
    REASON_PUBLISHED,
    REASON_UNPUBLISHED,
    REASON_UPDATED,
    RebuildNotifier,
    get_rebuild_notifier,
)
from ..services.validation import generate_slug, validate_landing_page_form, validate_slug


router = APIRouter(prefix="/api", tags=["landing-pages"])


# list after the auth dependency: dependencies resolve in declaration order
async def read_json_body(request: Request) -> Dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise InvalidRequestError() from exc
    if not isinstance(payload, dict):
        raise InvalidRequestError()
    return payload


def _parse_page(payload: Dict[str, Any]) -> LandingPageIn:
    try:
        data = LandingPageIn.model_validate(payload)
    except ValidationError as exc:
        errors = {}
        for err in exc.errors():
            field = str(err["loc"][0]) if err.get("loc") else "body"
            errors.setdefault(field, "Invalid value")
        raise PageValidationError(errors) from exc
    errors = validate_landing_page_form(data.wire_dict())
    if errors:
        raise PageValidationError(errors)
    return data


@router.get("/pages")
def list_pages(
    status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    ctx: AdminContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    pages = LandingPageService(db).list_pages(
        status=status or None,
        category=category or None,
        search=search or None,
    )
    return {"success": True, "data": [dump_page(p) for p in pages], "count": len(pages)}


@router.post("/pages", status_code=201)
def create_page(
    background_tasks: BackgroundTasks,
    ctx: AdminContext = Depends(require_permission("create_pages")),
    payload: Dict[str, Any] = Depends(read_json_body),
    db: Session = Depends(get_db),
    rebuild: RebuildNotifier = Depends(get_rebuild_notifier),
):
    data = _parse_page(payload)
    service = LandingPageService(db)
    if service.is_slug_taken(data.slug):
        raise SlugTakenError()
    page_id = service.create(data.store_dict(), ctx.uid)
    page = service.get_by_id(page_id)
    AuditLogService(db).log_event(
        PAGE_CREATED,
        ctx.uid,
        TARGET_LANDING_PAGE,
        page_id,
        after=snapshot_page(page),
        ip_address=ctx.ip_address,
    )
    if page.status == STATUS_PUBLISHED:
        background_tasks.add_task(rebuild.dispatch, REASON_PUBLISHED, page.slug)
    return {"success": True, "message": "Landing page created successfully", "pageId": page_id}


@router.get("/pages/{page_id}")
def get_page(
    page_id: str,
    ctx: AdminContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    page = LandingPageService(db).get_by_id(page_id)
    if page is None:
        raise PageNotFoundError()
    return {"success": True, "data": dump_page(page)}


@router.put("/pages/{page_id}")
def update_page(
    page_id: str,
    background_tasks: BackgroundTasks,
    ctx: AdminContext = Depends(require_permission("edit_pages")),
    payload: Dict[str, Any] = Depends(read_json_body),
    db: Session = Depends(get_db),
    rebuild: RebuildNotifier = Depends(get_rebuild_notifier),
):
    service = LandingPageService(db)
    old = service.get_by_id(page_id)
    if old is None:
        raise PageNotFoundError()
    data = _parse_page(payload)
    if data.slug != old.slug and service.is_slug_taken(data.slug, exclude_id=page_id):
        raise SlugTakenError()

    before = snapshot_page(old)
    old_slug = old.slug
    was_published = old.status == STATUS_PUBLISHED
    if not service.update(page_id, data.store_dict(), ctx.uid):
        raise PageNotFoundError()
    page = service.get_by_id(page_id)
    AuditLogService(db).log_event(
        PAGE_UPDATED,
        ctx.uid,
        TARGET_LANDING_PAGE,
        page_id,
        before=before,
        after=snapshot_page(page),
        ip_address=ctx.ip_address,
    )

    is_published = page.status == STATUS_PUBLISHED
    if was_published and not is_published:
        background_tasks.add_task(rebuild.dispatch, REASON_UNPUBLISHED, old_slug)
    elif is_published and not was_published:
        background_tasks.add_task(rebuild.dispatch, REASON_PUBLISHED, page.slug)
    elif is_published:
        background_tasks.add_task(rebuild.dispatch, REASON_UPDATED, page.slug)
    return {"success": True, "message": "Landing page updated successfully"}


@router.delete("/pages/{page_id}")
def delete_page(
    page_id: str,
    background_tasks: BackgroundTasks,
    ctx: AdminContext = Depends(require_permission("delete_pages")),
    db: Session = Depends(get_db),
    rebuild: RebuildNotifier = Depends(get_rebuild_notifier),
):
    service = LandingPageService(db)
    page = service.get_by_id(page_id)
    if page is None:
        raise PageNotFoundError()
    before = snapshot_page(page)
    if not service.delete(page_id):
        raise PageNotFoundError()
    AuditLogService(db).log_event(
        PAGE_DELETED,
        ctx.uid,
        TARGET_LANDING_PAGE,
        page_id,
        before=before,
        after=None,
        ip_address=ctx.ip_address,
    )
    if before["status"] == STATUS_PUBLISHED:
        background_tasks.add_task(rebuild.dispatch, REASON_DELETED, before["slug"])
    return {"success": True, "message": "Landing page deleted successfully"}


@router.post("/pages/{page_id}/publish")
def toggle_publish(
    page_id: str,
    background_tasks: BackgroundTasks,
    ctx: AdminContext = Depends(require_permission("publish_pages")),
    payload: Dict[str, Any] = Depends(read_json_body),
    db: Session = Depends(get_db),
    rebuild: RebuildNotifier = Depends(get_rebuild_notifier),
):
    publish = payload.get("publish")
    if not isinstance(publish, bool):
        raise InvalidRequestError("Invalid request: publish must be boolean")
    result = PublishService(db).toggle(page_id, publish, ctx)
    status = result.page.status
    if not result.changed:
        return {"success": True, "message": f"Page is already {status}", "page": dump_page(result.page)}
    reason = REASON_PUBLISHED if publish else REASON_UNPUBLISHED
    background_tasks.add_task(rebuild.dispatch, reason, result.page.slug)
    verb = "published" if publish else "unpublished"
    return {
        "success": True,
        "message": f"Page {verb} successfully. Rebuilding site...",
        "page": dump_page(result.page),
    }


@router.get("/pages/{page_id}/history")
def page_history(
    page_id: str,
    ctx: AdminContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    entries = AuditLogService(db).entries_for(page_id)
    data = [
        {
            "id": e.id,
            "action": e.action,
            "adminId": e.admin_id,
            "timestamp": e.timestamp.isoformat(),
            "ipAddress": e.ip_address,
        }
        for e in entries
    ]
    return {"success": True, "data": data, "count": len(data)}


@router.get("/slug-suggestion")
def slug_suggestion(
    title: str = Query(""),
    exclude_id: Optional[str] = Query(None, alias="excludeId"),
    ctx: AdminContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    slug = generate_slug(title)
    error = validate_slug(slug)
    available = error is None and not LandingPageService(db).is_slug_taken(slug, exclude_id=exclude_id)
    return {"success": True, "slug": slug, "valid": error is None, "available": available}
