"""Shared pytest fixtures for server tests."""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Settings are read at import time, so the environment must be prepared first.
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="storefront-uploads-"))

import main  # noqa: E402
from storefront.api.dependencies import get_error_reporter, get_image_store  # noqa: E402
from storefront.core.observability import ErrorReporter  # noqa: E402
from storefront.db.base import Base  # noqa: E402
from storefront.db.session import get_db  # noqa: E402
from storefront.models import Category, Product, ProductType  # noqa: E402
from storefront.services.images import LocalImageStore  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00\x10JFIF" + b"\x00" * 64

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"

test_engine = create_engine(
    TEST_DATABASE_URL,
    future=True,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(test_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(
    bind=test_engine,
    autocommit=False,
    autoflush=False,
    future=True,
)

Base.metadata.create_all(bind=test_engine)


class SyncASGITestClient:
    """Synchronous facade over httpx's ASGI transport.

    A fresh AsyncClient is opened per request so each ``asyncio.run`` call
    owns everything it touches. Lifespan events are not triggered.
    """

    def __init__(self, app) -> None:
        self._app = app

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        transport = httpx.ASGITransport(app=self._app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            return await client.request(method, url, **kwargs)

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        return asyncio.run(self._send(method, url, **kwargs))

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", url, **kwargs)


class RecordingErrorReporter(ErrorReporter):
    """Error reporter that keeps every report for assertions."""

    def __init__(self) -> None:
        super().__init__(logging.getLogger("tests.errors"))
        self.reports: list[dict[str, Any]] = []

    def report(self, operation: str, exc: BaseException, **context: Any) -> None:
        self.reports.append({"operation": operation, "exc": exc, "context": context})
        super().report(operation, exc, **context)


@pytest.fixture(autouse=True)
def startup_tracker(monkeypatch: pytest.MonkeyPatch) -> Generator[dict[str, int], None, None]:
    """Replace the startup database hooks and count their calls."""

    tracker = {"verify": 0, "migrations": 0}

    def fake_verify_connection() -> None:
        tracker["verify"] += 1

    def fake_run_migrations() -> None:
        tracker["migrations"] += 1

    monkeypatch.setattr(main, "verify_connection", fake_verify_connection)
    monkeypatch.setattr(main, "run_migrations", fake_run_migrations)
    yield tracker


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    """Provide a clean database session for each test."""

    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    session: Session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def upload_root(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def image_store(upload_root: Path) -> LocalImageStore:
    return LocalImageStore(upload_root, url_prefix="/uploads", max_size=1024)


@pytest.fixture()
def error_reporter() -> RecordingErrorReporter:
    return RecordingErrorReporter()


@pytest.fixture(autouse=True)
def override_dependencies(
    db_session: Session,
    image_store: LocalImageStore,
    error_reporter: RecordingErrorReporter,
) -> Generator[None, None, None]:
    """Point the FastAPI dependencies at the test session, store and reporter."""

    def _get_db() -> Generator[Session, None, None]:
        yield db_session

    main.app.dependency_overrides[get_db] = _get_db
    main.app.dependency_overrides[get_image_store] = lambda: image_store
    main.app.dependency_overrides[get_error_reporter] = lambda: error_reporter
    yield
    main.app.dependency_overrides.clear()


@pytest.fixture()
def client() -> SyncASGITestClient:
    """Synchronous test client backed by httpx's ASGI transport."""

    return SyncASGITestClient(main.app)


@pytest.fixture()
def png_file() -> tuple[str, bytes, str]:
    """A multipart ``files`` entry carrying a small PNG."""

    return ("shoes.png", PNG_BYTES, "image/png")


@pytest.fixture()
def make_category(db_session: Session):
    """Insert a category (optionally with types and products) directly."""

    def _make(
        name: str,
        image: str | None = None,
        types: tuple[str, ...] = (),
        products: tuple[str, ...] = (),
    ) -> Category:
        category = Category(name=name, image=image)
        category.types = [ProductType(name=type_name) for type_name in types]
        category.products = [
            Product(name=product_name, price=10.0) for product_name in products
        ]
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _make


@pytest.fixture()
def cli_session(monkeypatch: pytest.MonkeyPatch, db_session: Session, image_store: LocalImageStore):
    """Run CLI commands against the test database and image store."""

    from storefront.cli import categories as categories_cli
    from storefront.db import session as session_module

    monkeypatch.setattr(session_module, "SessionLocal", lambda: db_session)
    monkeypatch.setattr(categories_cli, "get_image_store", lambda: image_store)
    return db_session
