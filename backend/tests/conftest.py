"""Shared test fixtures - in-memory database, fake asset store, API client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and get_asset_store are overridden for route tests
    - FakeAssetStore records every upload/delete so ordering can be asserted
"""

import os

# Must be set before student_registry.database is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from student_registry.database import Base, get_db
from student_registry.errors import AssetStoreError
from student_registry.main import app
from student_registry.services.lifecycle import StudentLifecycle
from student_registry.storage.base import AssetStore, AssetStoreConfig
from student_registry.storage.factory import get_asset_store

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


class FakeAssetStore(AssetStore):
    """In-memory asset store with switchable failures."""

    def __init__(self):
        super().__init__(AssetStoreConfig(
            bucket="test-bucket",
            folder="students",
            public_base_url="http://assets.local-test",
        ))
        self.objects = {}
        self.uploads = []
        self.deletes = []
        self.calls = []
        self.fail_upload = False
        self.fail_delete = False
        self._counter = 0

    def upload(self, data, content_type):
        self.calls.append("upload")
        if self.fail_upload:
            raise AssetStoreError("upload refused")
        self._counter += 1
        ref = f"{self.config.folder}/obj{self._counter}"
        self.objects[ref] = (data, content_type)
        self.uploads.append(ref)
        return ref

    def delete(self, ref):
        self.calls.append("delete")
        self.deletes.append(ref)
        if self.fail_delete:
            raise AssetStoreError("delete refused")
        self.objects.pop(ref, None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def asset_store():
    return FakeAssetStore()


@pytest.fixture
def lifecycle(db_session, asset_store):
    return StudentLifecycle(db_session, asset_store)


@pytest.fixture
def client(db_session, asset_store):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_asset_store] = lambda: asset_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def student_data(**overrides):
    data = {
        "name": "Ada Lovelace",
        "email": "a@x.com",
        "phone": "1234567890",
        "studentId": "S1",
        "address": "12 Analytical Row",
        "subjects": ["Math", "Science"],
    }
    data.update(overrides)
    return data
