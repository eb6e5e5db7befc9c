import os

os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SITE_URL"] = "https://kashpages.in"
os.environ["IDENTITY_API_KEY"] = "test-key"
for _key in ("REBUILD_WEBHOOK_URL", "CDN_PURGE_URL", "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID", "TRUST_PROXY_HEADERS"):
    os.environ.pop(_key, None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.auth import get_identity_client
from backend.app.db import get_db
from backend.app.errors import InvalidTokenError
from backend.app.integrations.identity import IdentityClaims
from backend.app.main import app
from backend.app.models import Admin, Base
from backend.app.services.rebuild_service import DispatchReport, get_rebuild_notifier


class FakeIdentity:
    """In-memory stand-in for the identity provider: token -> claims."""

    def __init__(self):
        self.tokens = {}
        self.passwords = {}

    def add_user(self, uid, email, token, password=None):
        self.tokens[token] = IdentityClaims(uid=uid, email=email)
        if password:
            self.passwords[email] = (password, token)

    def revoke(self, token):
        self.tokens.pop(token, None)

    def verify_id_token(self, token):
        claims = self.tokens.get(token)
        if claims is None:
            raise InvalidTokenError()
        return claims

    def sign_in_with_password(self, email, password):
        stored = self.passwords.get(email)
        if stored is None or stored[0] != password:
            raise InvalidTokenError()
        return stored[1]


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def dispatch(self, reason, slug=None):
        self.calls.append((reason, slug))
        return DispatchReport(reason=reason, slug=slug)


def make_page_payload(**overrides):
    data = {
        "businessName": "Cafe Noon",
        "slug": "cafe-noon",
        "title": "Cafe Noon",
        "description": "Kashmiri tea and bakes in Srinagar",
        "businessCategory": "Cafe",
        "businessLocation": "Srinagar",
        "businessPhone": "+91 9000000000",
        "businessEmail": "hello@cafenoon.in",
        "metaTitle": "Cafe Noon - Srinagar",
        "metaDescription": "Noon chai, kulcha and fresh bakes in the heart of Srinagar.",
        "ogTitle": "Cafe Noon",
        "ogDescription": "Noon chai and bakes in Srinagar",
        "ogImage": "https://cdn.example.com/cafe-noon.jpg",
        "twitterCard": "summary_large_image",
        "htmlContent": "<h1>Welcome to Cafe Noon</h1>",
        "status": "draft",
    }
    data.update(overrides)
    return data


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def page_payload():
    return make_page_payload


@pytest.fixture
def client(session_factory, identity, notifier):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_client] = lambda: identity
    app.dependency_overrides[get_rebuild_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db, identity):
    admin = Admin(id="uid-owner", email="owner@kashpages.in", display_name="Owner")
    db.add(admin)
    db.commit()
    identity.add_user("uid-owner", "owner@kashpages.in", token="token-owner", password="s3cret")
    return admin


@pytest.fixture
def logged_in(client, admin):
    resp = client.post("/api/auth/login", json={"token": "token-owner"})
    assert resp.status_code == 200
    return client
