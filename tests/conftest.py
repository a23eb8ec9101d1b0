"""
Test Configuration
==================

Pytest configuration with fixtures for settings, fake browser services and
render components.
"""

import os
import tempfile
from pathlib import Path

# Must be set before the application modules configure logging on import.
os.environ.setdefault("CARD_RENDER_ENVIRONMENT", "testing")
os.environ.setdefault(
    "CARD_RENDER_STORAGE_PATH", str(Path(tempfile.gettempdir()) / "card_render_test")
)

import pytest

from src.config.settings import Settings
from src.core.cache.store import CacheStore
from src.core.orchestrator import RenderOrchestrator
from src.core.rendering.executor import RenderExecutor
from src.models.schemas import RenderRequest

from tests.utils.mocks import FakeBrowserPool, FakeClock


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with render delays disabled."""
    return Settings(
        environment="testing",
        storage_path=tmp_path / "storage",
        font_settle_delay=0,
        retry_delay=0,
        log_level="DEBUG",
    )


@pytest.fixture
def fake_pool() -> FakeBrowserPool:
    return FakeBrowserPool()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> CacheStore:
    return CacheStore(ttl=600, max_bytes=50 * 1024 * 1024, max_entries=100, clock=clock)


@pytest.fixture
def executor(fake_pool: FakeBrowserPool, test_settings: Settings) -> RenderExecutor:
    return RenderExecutor(fake_pool, test_settings)


@pytest.fixture
def orchestrator(executor: RenderExecutor, cache: CacheStore, test_settings: Settings) -> RenderOrchestrator:
    return RenderOrchestrator.from_settings(executor, cache, test_settings)


@pytest.fixture
def sample_request() -> RenderRequest:
    """Request exercising every prepared field."""
    return RenderRequest.model_validate(
        {
            "title": "Daily quote",
            "temp": "default",
            "content": "**hi**",
            "translate": "<em>salut</em>",
            "icon": "https://example.com/icon.png",
            "switchConfig": {"showDate": True},
            "useLoadingFont": False,
        }
    )
