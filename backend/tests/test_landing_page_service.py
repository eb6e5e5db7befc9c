import pytest
from sqlalchemy.exc import SQLAlchemyError

from backend.app.errors import SlugTakenError
from backend.app.models import AuditLog, LandingPage
from backend.app.schemas.landing_page import LandingPageIn, dump_page
from backend.app.services.audit_service import PAGE_CREATED, TARGET_LANDING_PAGE, AuditLogService
from backend.app.models.landing_page import PAGE_STATUSES
from backend.app.services.landing_page_service import EDITABLE_FIELDS, LandingPageService
from backend.app.services.validation import (
    META_DESCRIPTION_MAX,
    PHONE_MAX_LENGTH,
    REQUIRED_MAX_LENGTH,
    SLUG_MAX_LENGTH,
    TWITTER_CARDS,
)

from conftest import make_page_payload


def _store(**overrides):
    return LandingPageIn.model_validate(make_page_payload(**overrides)).store_dict()


def test_create_sets_bookkeeping_fields(db):
    service = LandingPageService(db)
    page_id = service.create(_store(title=None), "uid-1")
    page = service.get_by_id(page_id)
    assert page.slug == "cafe-noon"
    assert page.title == "Cafe Noon"  # falls back to business name
    assert page.status == "draft"
    assert page.is_published is False
    assert page.published_at is None
    assert page.created_by == "uid-1" and page.updated_by == "uid-1"
    assert page.view_count == 0
    assert page.created_at == page.updated_at


def test_create_published_sets_published_at(db):
    service = LandingPageService(db)
    page = service.get_by_id(service.create(_store(status="published"), "uid-1"))
    assert page.is_published is True
    assert page.published_at is not None


def test_slug_taken_checks(db):
    service = LandingPageService(db)
    page_id = service.create(_store(), "uid-1")
    assert service.is_slug_taken("cafe-noon") is True
    assert service.is_slug_taken("cafe-noon", exclude_id=page_id) is False
    assert service.is_slug_taken("cafe-noon", exclude_id="someone-else") is True
    assert service.is_slug_taken("bakery") is False
    assert service.is_slug_taken("admin") is True


def test_duplicate_slug_write_is_rejected_by_index(db):
    service = LandingPageService(db)
    service.create(_store(), "uid-1")
    with pytest.raises(SlugTakenError):
        service.create(_store(businessName="Other Cafe"), "uid-2")
    assert db.query(LandingPage).count() == 1


def test_update_tracks_publish_transitions(db):
    service = LandingPageService(db)
    page_id = service.create(_store(), "uid-1")

    assert service.update(page_id, {"status": "published", "id": "hijack"}, "uid-2") is True
    page = service.get_by_id(page_id)
    assert page.id == page_id
    assert page.is_published is True
    assert page.published_at is not None
    assert page.updated_by == "uid-2"
    assert page.created_by == "uid-1"

    service.update(page_id, {"status": "archived"}, "uid-2")
    page = service.get_by_id(page_id)
    assert page.is_published is False
    assert page.published_at is None


def test_update_and_delete_missing_page(db):
    service = LandingPageService(db)
    assert service.update("missing", {"title": "x"}, "uid-1") is False
    assert service.delete("missing") is False


def test_delete_removes_record(db):
    service = LandingPageService(db)
    page_id = service.create(_store(), "uid-1")
    assert service.delete(page_id) is True
    assert service.get_by_id(page_id) is None
    assert service.get_by_slug("cafe-noon") is None


def test_list_filters_and_search(db):
    service = LandingPageService(db)
    service.create(_store(), "uid-1")
    service.create(
        _store(slug="chinar-books", businessName="Chinar Books", title="Chinar Books", businessCategory="Books",
               status="published"),
        "uid-1",
    )
    assert [p.slug for p in service.list_pages(status="published")] == ["chinar-books"]
    assert [p.slug for p in service.list_pages(category="Cafe")] == ["cafe-noon"]
    assert [p.slug for p in service.list_pages(search="CHINAR")] == ["chinar-books"]
    assert len(service.list_pages()) == 2
    assert [p.slug for p in service.list_published()] == ["chinar-books"]


def test_increment_view_count(db):
    service = LandingPageService(db)
    page_id = service.create(_store(status="published"), "uid-1")
    service.increment_view_count(page_id)
    service.increment_view_count(page_id)
    db.expire_all()
    page = service.get_by_id(page_id)
    assert page.view_count == 2
    assert page.last_viewed_at is not None


def test_dump_page_uses_camel_case(db):
    service = LandingPageService(db)
    page = service.get_by_id(service.create(_store(), "uid-1"))
    data = dump_page(page)
    assert data["businessName"] == "Cafe Noon"
    assert data["metaDescription"].startswith("Noon chai")
    assert data["isPublished"] is False
    assert data["viewCount"] == 0
    assert "business_name" not in data


def test_audit_entries_are_recorded(db):
    audit = AuditLogService(db)
    entry = audit.log_event(PAGE_CREATED, "uid-1", TARGET_LANDING_PAGE, "page-1", after={"slug": "cafe-noon"})
    assert entry is not None
    assert entry.changes == {"before": None, "after": {"slug": "cafe-noon"}}
    assert [e.action for e in audit.entries_for("page-1")] == [PAGE_CREATED]


def test_audit_write_failure_is_swallowed(db, monkeypatch):
    def broken_commit():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db, "commit", broken_commit)
    entry = AuditLogService(db).log_event(PAGE_CREATED, "uid-1", TARGET_LANDING_PAGE, "page-1")
    assert entry is None
    monkeypatch.undo()
    assert db.query(AuditLog).count() == 0


def test_bounded_columns_match_validator_limits():
    limits = {
        "slug": SLUG_MAX_LENGTH,
        "meta_description": META_DESCRIPTION_MAX,
        "og_description": REQUIRED_MAX_LENGTH,
        "business_name": REQUIRED_MAX_LENGTH,
        "business_category": REQUIRED_MAX_LENGTH,
        "business_location": REQUIRED_MAX_LENGTH,
        "business_phone": PHONE_MAX_LENGTH,
        "twitter_card": max(len(c) for c in TWITTER_CARDS),
        "status": max(len(s) for s in PAGE_STATUSES),
    }
    for column in LandingPage.__table__.columns:
        length = getattr(column.type, "length", None)
        if column.key not in EDITABLE_FIELDS or length is None:
            continue
        assert column.key in limits, column.key
        assert length >= limits[column.key], column.key
