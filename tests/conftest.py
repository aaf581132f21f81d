import json

import pytest

from crm_dashboard.api_client import CrmApiClient
from crm_dashboard.config import Settings
from crm_dashboard.session import SessionManager
from crm_dashboard.storage import MemoryStore

from helpers import ADMIN_USER, BASE_URL, FakeBackend


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def signed_in_store() -> MemoryStore:
    return MemoryStore(
        {
            "tokens": json.dumps({"access": "acc-1", "refresh": "ref-1"}),
            "user": json.dumps(ADMIN_USER),
        }
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(CRM_API_BASE_URL=BASE_URL, SESSION_STORE_PATH=None, LOG_LEVEL="DEBUG")


@pytest.fixture
def api_client(backend) -> CrmApiClient:
    return CrmApiClient(BASE_URL, timeout=5, transport=backend.transport())


@pytest.fixture
def session_manager(api_client, store) -> SessionManager:
    manager = SessionManager(api_client, store)
    manager.init()
    return manager


@pytest.fixture
def signed_in_manager(api_client, signed_in_store) -> SessionManager:
    manager = SessionManager(api_client, signed_in_store)
    manager.init()
    return manager
