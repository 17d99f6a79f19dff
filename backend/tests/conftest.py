"""Pytest fixtures for the access-code backend."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterator, Optional, Tuple

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.db import Base, build_engine, build_session_factory
from app.main import create_app

BOUNDARY = "profile-form-boundary"


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'test.db'}",
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "PUBLIC_BASE_URL": "http://testserver",
        "RESEND_API_KEY": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def encode_multipart(
    fields: Dict[str, str],
    files: Optional[Dict[str, Tuple[str, bytes, str]]] = None,
) -> Tuple[bytes, str]:
    parts = []
    for name, value in fields.items():
        header = f'--{BOUNDARY}\r\nContent-Disposition: form-data; name="{name}"\r\n\r\n'
        parts.append(header.encode() + value.encode() + b"\r\n")
    for name, (filename, content, content_type) in (files or {}).items():
        header = (
            f'--{BOUNDARY}\r\nContent-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
            f"Content-Type: {content_type}\r\n\r\n"
        )
        parts.append(header.encode() + content + b"\r\n")
    parts.append(f"--{BOUNDARY}--\r\n".encode())
    return b"".join(parts), f"multipart/form-data; boundary={BOUNDARY}"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def upload_dir(settings: Settings) -> Path:
    return Path(settings.UPLOAD_DIR)


@pytest.fixture
def test_app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def app_factory(tmp_path: Path) -> Callable[..., FastAPI]:
    """Build an app on the test database with some settings overridden."""

    def _factory(**overrides) -> FastAPI:
        return create_app(make_settings(tmp_path, **overrides))

    return _factory


@pytest.fixture
def client(test_app: FastAPI) -> Iterator[TestClient]:
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture
def db_session(settings: Settings) -> Iterator[Session]:
    """A session on a fresh schema, without going through the app."""
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def register(client: TestClient) -> Callable[[str], str]:
    """Register ``email`` and return the development code from the response."""

    def _register(email: str) -> str:
        response = client.post("/api/register", json={"email": email})
        assert response.status_code == 200, response.text
        return response.json()["dev_code"]

    return _register


@pytest.fixture
def put_profile(client: TestClient):
    def _put(code: str, fields: Dict[str, str], files=None):
        body, content_type = encode_multipart(fields, files)
        return client.put(f"/api/user/{code}", content=body, headers={"content-type": content_type})

    return _put


@pytest.fixture
def encode_form():
    return encode_multipart
