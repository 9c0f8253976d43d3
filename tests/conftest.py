import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chickenpick.main import app
from chickenpick.db import Base, get_db
from chickenpick.routes.menus import get_image_probe
from chickenpick.services.storage_client import get_storage_client
from tests.fakes import FakeBlobStore, FakeProbe


@pytest.fixture()
def storage():
    return FakeBlobStore()


@pytest.fixture()
def probe():
    return FakeProbe()


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client_session(db_session, storage, probe):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_client] = lambda: storage
    app.dependency_overrides[get_image_probe] = lambda: probe

    client = TestClient(app)
    try:
        yield client, db_session
    finally:
        app.dependency_overrides.clear()
