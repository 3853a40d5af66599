import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shalomhomes.auth.passwords import pwd_context  # noqa: E402
from shalomhomes.config import Settings, StorageBackend  # noqa: E402
from shalomhomes.main import create_app  # noqa: E402
from shalomhomes.models.models import User  # noqa: E402
from shalomhomes.storage import DbStorage, MemStorage, Storage  # noqa: E402

DEFAULT_PASSWORD = "changeme"


@pytest.fixture(scope="session", autouse=True)
def _fast_password_hashing():
    """Minimum bcrypt cost keeps the suite fast."""
    pwd_context.update(bcrypt__rounds=4)
    yield


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        storage_backend=StorageBackend.MEMORY,
        seed_sample_data=False,
        session_secret="test-secret",
    )


@pytest.fixture
def memory_storage() -> MemStorage:
    return MemStorage()


@pytest.fixture
def db_storage(tmp_path) -> Generator[DbStorage, None, None]:
    """Provide a fresh SQLite database for each test."""
    storage = DbStorage.from_url(f"sqlite:///{tmp_path / 'test.db'}")
    storage.init()
    try:
        yield storage
    finally:
        storage.dispose()


@pytest.fixture(params=["memory", "database"])
def storage(request, tmp_path) -> Generator[Storage, None, None]:
    """Run a test once per storage backend."""
    if request.param == "memory":
        yield MemStorage()
        return
    backend = DbStorage.from_url(f"sqlite:///{tmp_path / 'contract.db'}")
    backend.init()
    try:
        yield backend
    finally:
        backend.dispose()


@pytest.fixture
def app(settings, memory_storage):
    return create_app(settings, storage=memory_storage)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_user(memory_storage: MemStorage) -> Callable[..., User]:
    counter = {"value": 0}

    def _create(
        username: Optional[str] = None,
        role: str = "owner",
        email: Optional[str] = None,
        password: Optional[str] = DEFAULT_PASSWORD,
    ) -> User:
        counter["value"] += 1
        username = username or f"user{counter['value']}"
        return memory_storage.create_user(
            {
                "username": username,
                "email": email or f"{username}@example.com",
                "name": username.title(),
                "password": password,
                "role": role,
            }
        )

    return _create


@pytest.fixture
def login(client: TestClient) -> Callable[[User], None]:
    def _login(user: User, password: str = DEFAULT_PASSWORD) -> None:
        response = client.post("/api/auth/login", json={"email": user.email, "password": password})
        assert response.status_code == 200, response.text

    return _login
